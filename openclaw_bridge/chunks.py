"""
AI SDK v6 UI message stream chunks emitted by the bridge.

Each chunk is a frozen pydantic model tagged by `type`. `to_wire()` returns
the JSON object the AI SDK v6 UI stream protocol expects, and
format_sse_event() frames it for an HTTP SSE response.

Reference:
- https://v6.ai-sdk.dev/docs/ai-sdk-ui/stream-protocol

Wire forms:
    {"type": "text-start", "id": "..."}
    {"type": "text-delta", "id": "...", "delta": "..."}
    {"type": "text-end", "id": "..."}
    {"type": "reasoning-start" | "reasoning-delta" | "reasoning-end", ...}
    {"type": "data-appendMessage", "data": "Task created: ..."}
    {"type": "finish", "finishReason": "stop"}
    {"type": "error", "errorText": "..."}
"""

import enum
import json
from typing import Annotated, Any, Literal, Protocol, TypeAlias

from pydantic import BaseModel, ConfigDict, Field


# Type alias for SSE-formatted strings
# Example: 'data: {"type": "text-delta", "id": "...", "delta": "Hello"}\n\n'
SseFormattedEvent: TypeAlias = str

SSE_DONE_MARKER: SseFormattedEvent = "data: [DONE]\n\n"

DEFAULT_ANNOTATION_LABEL = "appendMessage"


class FinishReason(str, enum.Enum):
    """AI SDK v6 finish reasons. The engine bridge only ever finishes with STOP."""

    STOP = "stop"
    ERROR = "error"
    OTHER = "other"


class _Chunk(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class TextStartChunk(_Chunk):
    type: Literal["text-start"] = "text-start"
    id: str


class TextDeltaChunk(_Chunk):
    type: Literal["text-delta"] = "text-delta"
    id: str
    delta: str


class TextEndChunk(_Chunk):
    type: Literal["text-end"] = "text-end"
    id: str


class ReasoningStartChunk(_Chunk):
    type: Literal["reasoning-start"] = "reasoning-start"
    id: str


class ReasoningDeltaChunk(_Chunk):
    type: Literal["reasoning-delta"] = "reasoning-delta"
    id: str
    delta: str


class ReasoningEndChunk(_Chunk):
    type: Literal["reasoning-end"] = "reasoning-end"
    id: str


class DataAnnotationChunk(_Chunk):
    """
    Out-of-band status line for the UI (task lifecycle).

    Sent on the wire as an AI SDK custom data part named after `label`.
    """

    type: Literal["data-annotation"] = "data-annotation"
    label: str = DEFAULT_ANNOTATION_LABEL
    content: str

    def to_wire(self) -> dict[str, Any]:
        return {"type": f"data-{self.label}", "data": self.content}


class FinishChunk(_Chunk):
    type: Literal["finish"] = "finish"
    reason: str = Field(default=FinishReason.STOP.value, alias="finishReason")


class ErrorChunk(_Chunk):
    type: Literal["error"] = "error"
    message: str = Field(alias="errorText")


OutputChunk = Annotated[
    TextStartChunk
    | TextDeltaChunk
    | TextEndChunk
    | ReasoningStartChunk
    | ReasoningDeltaChunk
    | ReasoningEndChunk
    | DataAnnotationChunk
    | FinishChunk
    | ErrorChunk,
    Field(discriminator="type"),
]


class ChunkSink(Protocol):
    """
    Receives chunks one at a time, in order.

    write() must not block; the bridge expects no return value and no
    backpressure.
    """

    def write(self, chunk: OutputChunk) -> None: ...


class ListChunkSink:
    """Sink that keeps every chunk in memory."""

    def __init__(self) -> None:
        self.chunks: list[OutputChunk] = []

    def write(self, chunk: OutputChunk) -> None:
        self.chunks.append(chunk)

    def types(self) -> list[str]:
        return [chunk.type for chunk in self.chunks]


def format_sse_event(chunk: OutputChunk) -> SseFormattedEvent:
    """
    Format a chunk as an SSE `data:` frame.

    Returns:
        SSE-formatted string: 'data: {...}\\n\\n'
    """
    return f"data: {json.dumps(chunk.to_wire(), ensure_ascii=False)}\n\n"
