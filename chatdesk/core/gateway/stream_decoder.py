"""Server-sent-event decoding for streamed chat completions.

Network reads do not line up with SSE frames: a chunk may end in the middle
of a JSON payload or even inside a multi-byte UTF-8 character. The decoder
keeps whatever is incomplete and only parses whole lines.
"""

from __future__ import annotations

import codecs
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from chatdesk.core.exceptions import ChatdeskError, DecodeError

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class StreamEventType(str, Enum):
    CHUNK = "chunk"
    END = "end"
    ERROR = "error"


@dataclass(frozen=True)
class StreamEvent:
    """One event relayed to the UI layer during a streamed response."""

    type: StreamEventType
    text: str = ""
    error: str | None = None

    @classmethod
    def chunk(cls, text: str) -> StreamEvent:
        return cls(StreamEventType.CHUNK, text=text)

    @classmethod
    def end(cls) -> StreamEvent:
        return cls(StreamEventType.END)

    @classmethod
    def failure(cls, message: str) -> StreamEvent:
        return cls(StreamEventType.ERROR, error=message)

    @property
    def is_terminal(self) -> bool:
        return self.type is not StreamEventType.CHUNK

    def to_dict(self) -> dict[str, Any]:
        if self.type is StreamEventType.CHUNK:
            return {"text": self.text}
        if self.type is StreamEventType.ERROR:
            return {"message": self.error}
        return {}


def extract_delta(payload: Any) -> str | None:
    """Return `choices[0].delta.content` if it is a non-empty string."""
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    delta = first.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    if isinstance(content, str) and content:
        return content
    return None


class SseDeltaDecoder:
    """Incremental SSE decoder producing text deltas.

    One instance per stream session; not reusable after `finish()`.

    Example:
        >>> decoder = SseDeltaDecoder()
        >>> decoder.feed(b'data: {"choices":[{"delta":{"content":"Hel')
        []
        >>> decoder.feed(b'lo"}}]}\\n')
        ['Hello']
    """

    def __init__(self) -> None:
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self.done_seen = False
        self.finished = False

    def feed(self, chunk: bytes) -> list[str]:
        """Consume one network chunk and return the deltas it completed."""
        if self.finished:
            raise RuntimeError("Decoder already finished")
        self._buffer += self._utf8.decode(chunk)
        return self._drain(final=False)

    def finish(self) -> list[str]:
        """Flush at end of stream; a last line without newline is still parsed."""
        if self.finished:
            return []
        self._buffer += self._utf8.decode(b"", final=True)
        self.finished = True
        return self._drain(final=True)

    def _drain(self, final: bool) -> list[str]:
        lines = self._buffer.split("\n")
        self._buffer = "" if final else lines.pop()

        deltas: list[str] = []
        for line in lines:
            try:
                delta = self.parse_line(line)
            except DecodeError as e:
                # Malformed server output must not abort a healthy stream
                logger.debug("Skipping stream line: %s", e.reason)
                continue
            if delta:
                deltas.append(delta)
        return deltas

    def parse_line(self, line: str) -> str | None:
        """Parse one complete SSE line.

        Returns:
            The delta text, or None for lines that carry no text

        Raises:
            DecodeError: If a data line's payload is not valid JSON
        """
        line = line.rstrip("\r")
        if not line.startswith(DATA_PREFIX):
            return None
        payload = line[len(DATA_PREFIX):]
        if payload == DONE_SENTINEL:
            self.done_seen = True
            return None
        try:
            parsed = json.loads(payload)
        except json.JSONDecodeError as e:
            raise DecodeError(line, str(e)) from e
        return extract_delta(parsed)


async def decode_stream(
    chunks: AsyncIterable[bytes],
    describe_error: Callable[[Exception], str] = str,
) -> AsyncIterator[StreamEvent]:
    """Turn a byte stream into chunk events followed by one terminal event.

    Args:
        chunks: Body chunks as delivered by the transport
        describe_error: Converts a transport failure into the error message

    Yields:
        CHUNK events in source order, then exactly one END or ERROR event
    """
    decoder = SseDeltaDecoder()
    try:
        async for chunk in chunks:
            for delta in decoder.feed(chunk):
                yield StreamEvent.chunk(delta)
    except (httpx.HTTPError, OSError, ChatdeskError) as e:
        logger.warning("Stream interrupted: %s: %s", type(e).__name__, e)
        yield StreamEvent.failure(describe_error(e))
        return

    for delta in decoder.finish():
        yield StreamEvent.chunk(delta)
    if not decoder.done_seen:
        logger.debug("Stream closed without a [DONE] sentinel")
    yield StreamEvent.end()
