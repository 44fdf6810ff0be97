"""
SSE Frame Decoder

Turns the engine's raw SSE byte stream into EngineEvent records.

Wire format (one frame):
    event: agent:response
    data: {"output": "Hello"}
    <blank line>

Decoding rules:
- Frames are separated by a blank line ("\\n\\n"). Network reads are not
  aligned to frames, so the trailing piece after the last separator is kept
  in the buffer unparsed until more bytes arrive.
- "event: " sets the name (default "message"), "data: " sets the payload
  text (default "{}").
- heartbeat / connected frames are control traffic and are filtered out.
- A frame whose data is not a JSON object is dropped. This is a tolerance
  policy: one bad frame must not end a goal's stream.
- A done frame ends the sequence. Nothing after it is emitted.
"""

import codecs
from collections.abc import AsyncGenerator, AsyncIterable

from loguru import logger

from .events import (
    CONNECTED_EVENT,
    DEFAULT_EVENT_NAME,
    DONE_EVENT,
    HEARTBEAT_EVENT,
    EngineEvent,
)
from .result import Error, Ok
from .utils import _parse_json_safely


FRAME_SEPARATOR = "\n\n"
EVENT_PREFIX = "event: "
DATA_PREFIX = "data: "

CONTROL_EVENTS: frozenset[str] = frozenset({HEARTBEAT_EVENT, CONNECTED_EVENT})

# Maximum length of frame text echoed into debug logs
LOG_FRAME_MAX_LENGTH = 100


def _parse_frame(frame: str) -> tuple[str, str]:
    """Split one frame into (event name, raw data text)."""
    event_name = DEFAULT_EVENT_NAME
    event_data = "{}"
    for line in frame.split("\n"):
        if line.startswith(EVENT_PREFIX):
            event_name = line[len(EVENT_PREFIX) :].strip()
        elif line.startswith(DATA_PREFIX):
            event_data = line[len(DATA_PREFIX) :]
    return event_name, event_data


class SseFrameDecoder:
    """
    Incremental SSE decoder.

    feed() may be called with arbitrarily split pieces of the stream; it
    returns the events completed by that piece. The decoder is reusable
    across goals only through a fresh instance per stream.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._done = False

    @property
    def done(self) -> bool:
        """True once a done frame has been decoded."""
        return self._done

    @property
    def pending(self) -> str:
        """Buffered text not yet terminated by a frame separator."""
        return self._buffer

    def feed(self, data: bytes | str) -> list[EngineEvent]:
        """
        Append data to the buffer and decode every complete frame.

        Args:
            data: Next piece of the stream. bytes may split a multibyte
                character; the remainder is held until the next call.

        Returns:
            Events completed by this piece, in arrival order
        """
        if self._done:
            return []

        text = self._utf8.decode(data) if isinstance(data, bytes) else data
        self._buffer += text

        frames = self._buffer.split(FRAME_SEPARATOR)
        # Last piece is possibly incomplete: keep it for the next read
        self._buffer = frames.pop()

        events: list[EngineEvent] = []
        for frame in frames:
            if not frame.strip():
                continue

            event_name, event_data = _parse_frame(frame)

            if event_name in CONTROL_EVENTS:
                continue

            if event_name == DONE_EVENT:
                logger.debug("[SSE] done frame received, closing stream")
                self._done = True
                self._buffer = ""
                break

            match _parse_json_safely(event_data):
                case Ok(payload) if isinstance(payload, dict):
                    events.append(EngineEvent(name=event_name, payload=payload))
                case Ok(payload):
                    logger.debug(
                        f"[SSE] Dropping {event_name} frame: payload is {type(payload).__name__}, not an object"
                    )
                case Error(reason):
                    logger.debug(
                        f"[SSE] Dropping malformed {event_name} frame ({reason}): "
                        f"{event_data[:LOG_FRAME_MAX_LENGTH]!r}"
                    )

        return events

    def flush(self) -> str:
        """
        Discard and return whatever is still buffered at end of stream.

        An unterminated trailing frame is never parsed.
        """
        tail = self._buffer + self._utf8.decode(b"", final=True)
        self._buffer = ""
        return tail


async def decode_sse_stream(chunks: AsyncIterable[bytes]) -> AsyncGenerator[EngineEvent]:
    """
    Decode an async byte stream into EngineEvents.

    Ends after a done frame, or when chunks is exhausted. Exceptions raised by
    chunks propagate unchanged so callers can tell a failed end from a
    normal one.

    Args:
        chunks: Response body pieces with arbitrary boundaries

    Yields:
        EngineEvent records in frame order
    """
    decoder = SseFrameDecoder()
    async for chunk in chunks:
        for event in decoder.feed(chunk):
            yield event
        if decoder.done:
            return

    tail = decoder.flush()
    if tail.strip():
        logger.debug(
            f"[SSE] Stream ended with unterminated frame, discarding: {tail[:LOG_FRAME_MAX_LENGTH]!r}"
        )
