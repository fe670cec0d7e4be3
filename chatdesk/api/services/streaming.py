from __future__ import annotations

import json
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import aclosing

from fastapi.responses import StreamingResponse

from chatdesk.core.gateway import StreamEvent


def sse_headers() -> dict[str, str]:
    # Centralize the SSE header contract used by every streaming route.
    return {
        "Cache-Control": "no-cache",
        "Connection": "keep-alive",
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Headers": "*",
    }


def format_sse_event(event: StreamEvent) -> str:
    """Render one stream event as an SSE frame: `event: <type>` plus JSON data."""
    data = json.dumps(event.to_dict(), ensure_ascii=False)
    return f"event: {event.type.value}\ndata: {data}\n\n"


async def sse_frames(events: AsyncIterator[StreamEvent]) -> AsyncGenerator[str, None]:
    """Relay gateway events as SSE frames, closing the source when the client leaves."""
    async with aclosing(events) as source:
        async for event in source:
            yield format_sse_event(event)


def streaming_response(
    *,
    stream: AsyncGenerator[str, None],
    headers: dict[str, str] | None = None,
) -> StreamingResponse:
    return StreamingResponse(
        stream,
        media_type="text/event-stream",
        headers=headers or sse_headers(),
    )
