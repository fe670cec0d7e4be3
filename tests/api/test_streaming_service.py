import pytest

from chatdesk.api.services.streaming import format_sse_event, sse_frames, sse_headers, streaming_response
from chatdesk.core.gateway import StreamEvent


@pytest.mark.unit
def test_format_sse_event():
    assert format_sse_event(StreamEvent.chunk("héllo")) == 'event: chunk\ndata: {"text": "héllo"}\n\n'
    assert format_sse_event(StreamEvent.end()) == "event: end\ndata: {}\n\n"
    assert format_sse_event(StreamEvent.failure("boom")) == 'event: error\ndata: {"message": "boom"}\n\n'


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sse_frames_closes_source_when_consumer_stops():
    closed = []

    async def events():
        try:
            yield StreamEvent.chunk("a")
            yield StreamEvent.chunk("b")
            yield StreamEvent.end()
        finally:
            closed.append(True)

    frames = sse_frames(events())
    first = await frames.__anext__()
    await frames.aclose()

    assert first.startswith("event: chunk")
    assert closed == [True]


@pytest.mark.unit
def test_streaming_response_uses_sse_contract():
    async def gen():
        yield "event: end\ndata: {}\n\n"

    response = streaming_response(stream=gen())

    assert response.media_type == "text/event-stream"
    assert response.headers["cache-control"] == sse_headers()["Cache-Control"]
