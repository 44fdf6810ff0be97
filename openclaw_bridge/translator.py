"""
Engine events to AI SDK v6 UI message stream chunks.

The engine reports a goal as a flat sequence of lifecycle events. The UI
expects bracketed parts: agent responses are appended to one open text part,
agent thinking becomes a self-contained reasoning part, task lifecycle
becomes data annotations, and goal completion closes everything with a
finish chunk.

Event mapping:
    agent:thinking            -> close text, reasoning-start/delta/end
    agent:response            -> open text if needed, text-delta
    task:created|started|completed|failed -> data annotation
    goal:completed            -> open text if needed, summary delta, text-end, finish
    agent:error, loop:error   -> close text, error
    loop:started, loop:tick, loop:stopped, task:assigned, goal:created -> nothing
    anything else             -> nothing

Translation never raises on payload shape: missing or mistyped fields fall
back to the next candidate field and finally to a default.
"""

import uuid
from collections.abc import AsyncGenerator, AsyncIterable, Callable, Mapping
from contextlib import aclosing
from typing import Any, TypeAlias

from loguru import logger

from .chunk_logger import chunk_logger
from .chunks import (
    ChunkSink,
    DataAnnotationChunk,
    ErrorChunk,
    FinishChunk,
    FinishReason,
    OutputChunk,
    ReasoningDeltaChunk,
    ReasoningEndChunk,
    ReasoningStartChunk,
    TextDeltaChunk,
    TextEndChunk,
    TextStartChunk,
)
from .engine_client import EngineClient
from .events import EngineEvent
from .utils import as_mapping, coalesce, first_number, first_str


IdFactory: TypeAlias = Callable[[], str]

# Lifecycle noise the UI has no use for. Listed so it is not mistaken for
# an unhandled event.
SUPPRESSED_EVENTS: frozenset[str] = frozenset(
    {"loop:started", "loop:tick", "loop:stopped", "task:assigned", "goal:created"}
)

DEFAULT_ENGINE_ERROR = "Engine error"
DEFAULT_TASK_ERROR = "unknown error"
DEFAULT_AGENT_ID = "agent"


def generate_uuid() -> str:
    return str(uuid.uuid4())


class TextSpanState:
    """
    The single text part that may be open while a goal streams.

    open() and close() return the chunk the UI must receive for the
    transition, or None when the call changed nothing.
    """

    def __init__(self, id_factory: IdFactory = generate_uuid) -> None:
        self._id_factory = id_factory
        self.active_id: str | None = None

    @property
    def is_open(self) -> bool:
        return self.active_id is not None

    def open(self) -> tuple[str, TextStartChunk | None]:
        """Return the open span id, starting a new span if none is open."""
        if self.active_id is not None:
            return self.active_id, None
        self.active_id = self._id_factory()
        return self.active_id, TextStartChunk(id=self.active_id)

    def close(self) -> TextEndChunk | None:
        if self.active_id is None:
            return None
        chunk = TextEndChunk(id=self.active_id)
        self.active_id = None
        return chunk


class EventTranslator:
    """
    Maps EngineEvents to OutputChunks for one goal's stream.

    Create one per goal. Call finalize() when the stream ends, by any path,
    to close a still-open text part.
    """

    def __init__(self, id_factory: IdFactory = generate_uuid) -> None:
        self._id_factory = id_factory
        self.text = TextSpanState(id_factory)
        self._handlers: dict[str, Callable[[Mapping[str, Any]], list[OutputChunk]]] = {
            "agent:thinking": self._on_agent_thinking,
            "agent:response": self._on_agent_response,
            "task:created": self._on_task_created,
            "task:started": self._on_task_started,
            "task:completed": self._on_task_completed,
            "task:failed": self._on_task_failed,
            "goal:completed": self._on_goal_completed,
            "agent:error": self._on_engine_error,
            "loop:error": self._on_engine_error,
        }

    def translate(self, event: EngineEvent) -> list[OutputChunk]:
        """Return the chunks for one event, in emission order."""
        if event.name in SUPPRESSED_EVENTS:
            return []

        handler = self._handlers.get(event.name)
        if handler is None:
            # Unknown events are ignored so new engine events never break the UI
            logger.debug(f"[TRANSLATOR] Ignoring unknown event: {event.name}")
            return []

        return handler(as_mapping(event.payload))

    def finalize(self) -> list[OutputChunk]:
        """Close the open text part, if any."""
        end = self.text.close()
        return [end] if end is not None else []

    def _open_text(self, chunks: list[OutputChunk]) -> str:
        text_id, start = self.text.open()
        if start is not None:
            chunks.append(start)
        return text_id

    def _close_text(self, chunks: list[OutputChunk]) -> None:
        end = self.text.close()
        if end is not None:
            chunks.append(end)

    def _on_agent_thinking(self, data: Mapping[str, Any]) -> list[OutputChunk]:
        chunks: list[OutputChunk] = []
        self._close_text(chunks)

        agent_id = first_str(data, "agentId", default=DEFAULT_AGENT_ID)
        content = first_str(data, "text", "content", default=f"{agent_id} is thinking...")

        reasoning_id = self._id_factory()
        chunks.append(ReasoningStartChunk(id=reasoning_id))
        chunks.append(ReasoningDeltaChunk(id=reasoning_id, delta=content))
        chunks.append(ReasoningEndChunk(id=reasoning_id))
        return chunks

    def _on_agent_response(self, data: Mapping[str, Any]) -> list[OutputChunk]:
        content = first_str(data, "output", "text", "content", default="")
        if not content:
            return []

        chunks: list[OutputChunk] = []
        text_id = self._open_text(chunks)
        chunks.append(TextDeltaChunk(id=text_id, delta=f"{content}\n\n"))
        return chunks

    def _on_task_created(self, data: Mapping[str, Any]) -> list[OutputChunk]:
        task = as_mapping(data.get("task"))
        title = coalesce(
            first_str(task, "title"),
            first_str(data, "description"),
            first_str(task, "id"),
        )
        return [DataAnnotationChunk(content=f"Task created: {title}")]

    def _on_task_started(self, data: Mapping[str, Any]) -> list[OutputChunk]:
        task_id = coalesce(first_str(data, "taskId"), first_str(as_mapping(data.get("task")), "id"))
        agent_id = first_str(data, "agentId")
        summary = f"Task {task_id} assigned to agent"
        if agent_id:
            summary = f"{summary} {agent_id}"
        return [DataAnnotationChunk(content=summary)]

    def _on_task_completed(self, data: Mapping[str, Any]) -> list[OutputChunk]:
        # Nested: {"task": {"id", "title", "result"}, "result": {"output"}}
        task = as_mapping(data.get("task"))
        title = first_str(task, "title", "id", default="")
        return [DataAnnotationChunk(content=f"Task completed: {title}")]

    def _on_task_failed(self, data: Mapping[str, Any]) -> list[OutputChunk]:
        error = first_str(data, "error", default=DEFAULT_TASK_ERROR)
        return [DataAnnotationChunk(content=f"Task failed: {error}")]

    def _on_goal_completed(self, data: Mapping[str, Any]) -> list[OutputChunk]:
        tasks = first_number(data, "tasks")
        completed = first_number(data, "completed")
        failed = first_number(data, "failed")

        chunks: list[OutputChunk] = []
        text_id = self._open_text(chunks)
        chunks.append(
            TextDeltaChunk(
                id=text_id,
                delta=f"\n\n---\nGoal completed ({completed}/{tasks} tasks, {failed} failed)\n",
            )
        )
        self._close_text(chunks)
        chunks.append(FinishChunk(reason=FinishReason.STOP.value))
        return chunks

    def _on_engine_error(self, data: Mapping[str, Any]) -> list[OutputChunk]:
        chunks: list[OutputChunk] = []
        self._close_text(chunks)
        error_text = first_str(data, "error", "message", default=DEFAULT_ENGINE_ERROR)
        logger.warning(f"[TRANSLATOR] Engine reported error: {error_text}")
        chunks.append(ErrorChunk(message=error_text))
        return chunks


def _log_out(chunk: OutputChunk) -> None:
    chunk_logger.log_chunk(location="ui-chunk", direction="out", chunk=chunk.to_wire())


async def translate_events(
    events: AsyncIterable[EngineEvent],
    id_factory: IdFactory = generate_uuid,
) -> AsyncGenerator[OutputChunk]:
    """
    Lazily translate an event stream into chunks.

    When events ends, normally or by raising, the open text part is closed
    before this generator ends or re-raises. If the consumer stops iterating,
    the translator state is dropped without emitting.

    Args:
        events: Decoded engine events for one goal
        id_factory: Span id generator

    Yields:
        OutputChunk in emission order
    """
    translator = EventTranslator(id_factory)
    try:
        async for event in events:
            for chunk in translator.translate(event):
                _log_out(chunk)
                yield chunk
    except GeneratorExit:
        translator.finalize()
        raise
    except Exception:
        for chunk in translator.finalize():
            _log_out(chunk)
            yield chunk
        raise
    for chunk in translator.finalize():
        _log_out(chunk)
        yield chunk


async def pipe_events_to_sink(
    events: AsyncIterable[EngineEvent],
    sink: ChunkSink,
    id_factory: IdFactory = generate_uuid,
) -> None:
    """
    Translate events and write every chunk to sink.

    The open text part is closed in a finally block, so sink receives its
    text-end on every exit path: end of stream, transport error, or
    cancellation of the calling task.
    """
    translator = EventTranslator(id_factory)
    try:
        async for event in events:
            for chunk in translator.translate(event):
                _log_out(chunk)
                sink.write(chunk)
    finally:
        for chunk in translator.finalize():
            _log_out(chunk)
            sink.write(chunk)


async def stream_goal_to_sink(
    goal_id: str,
    sink: ChunkSink,
    client: EngineClient | None = None,
    id_factory: IdFactory = generate_uuid,
) -> None:
    """
    Stream one goal's events from the engine into sink.

    Returns when the engine sends done or closes the stream.

    Raises:
        ConfigurationError: If no base URL is configured
        EngineConnectionError: If the stream cannot be opened or breaks
    """
    client = client or EngineClient()
    async with aclosing(client.stream_goal_events(goal_id)) as events:
        await pipe_events_to_sink(events, sink, id_factory)
