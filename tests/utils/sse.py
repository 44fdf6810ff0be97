"""SSE (Server-Sent Events) test utilities.

Builders for engine-side SSE frames, byte streams with arbitrary read
boundaries, and a parser for the bridge's AI SDK v6 output frames.
"""

import itertools
import json
from collections.abc import AsyncIterator, Callable, Iterable
from typing import Any, TypeVar


def sse_frame(event: str | None, data: Any = None, raw_data: str | None = None) -> str:
    """Build one engine SSE frame.

    Args:
        event: Event name, or None to omit the event line
        data: JSON-serializable payload
        raw_data: Data text sent verbatim (for malformed frames)

    Examples:
        >>> sse_frame("agent:response", {"output": "Hi"})
        'event: agent:response\\ndata: {"output": "Hi"}\\n\\n'
    """
    lines = []
    if event is not None:
        lines.append(f"event: {event}")
    if raw_data is not None:
        lines.append(f"data: {raw_data}")
    elif data is not None:
        lines.append(f"data: {json.dumps(data)}")
    return "\n".join(lines) + "\n\n"


def split_at(data: bytes, offsets: Iterable[int]) -> list[bytes]:
    """Split data at the given byte offsets (sorted, duplicates ignored)."""
    pieces = []
    start = 0
    for offset in sorted(set(offsets)):
        if 0 < offset < len(data):
            pieces.append(data[start:offset])
            start = offset
    pieces.append(data[start:])
    return pieces


T = TypeVar("T")


async def async_iter(items: Iterable[T]) -> AsyncIterator[T]:
    for item in items:
        yield item


async def byte_stream(
    pieces: Iterable[bytes], error: Exception | None = None
) -> AsyncIterator[bytes]:
    """Yield pieces, then raise error if given (simulates a broken transport)."""
    for piece in pieces:
        yield piece
    if error is not None:
        raise error


def sequential_ids(prefix: str = "id") -> Callable[[], str]:
    """Deterministic span id factory: id-0, id-1, ..."""
    counter = itertools.count()
    return lambda: f"{prefix}-{next(counter)}"


def parse_sse_event(sse_string: str) -> dict[str, Any]:
    """Parse SSE format 'data: {json}\\n\\n' to dict.

    Raises:
        ValueError: If the string is not in valid SSE format

    Examples:
        >>> parse_sse_event('data: {"type": "finish"}\\n\\n')
        {'type': 'finish'}
        >>> parse_sse_event('data: [DONE]\\n\\n')
        {'type': 'DONE'}
    """
    if sse_string.startswith("data: "):
        data_part = sse_string[6:].strip()
        if data_part == "[DONE]":
            return {"type": "DONE"}
        return json.loads(data_part)
    msg = f"Invalid SSE format: {sse_string}"
    raise ValueError(msg)
