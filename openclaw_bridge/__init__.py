"""
OpenClaw Engine Bridge

Streams the progress of an OpenClaw engine goal to a chat UI as AI SDK v6
UI message stream chunks.

Components:
    - EngineClient: Goal submission and SSE stream transport (aiohttp)
    - SseFrameDecoder / decode_sse_stream: SSE bytes -> EngineEvent
    - EventTranslator / translate_events / pipe_events_to_sink: EngineEvent -> OutputChunk
"""

from .chunk_logger import ChunkLogger, chunk_logger
from .chunks import (
    SSE_DONE_MARKER,
    ChunkSink,
    DataAnnotationChunk,
    ErrorChunk,
    FinishChunk,
    FinishReason,
    ListChunkSink,
    OutputChunk,
    ReasoningDeltaChunk,
    ReasoningEndChunk,
    ReasoningStartChunk,
    TextDeltaChunk,
    TextEndChunk,
    TextStartChunk,
    format_sse_event,
)
from .config import EngineConfig
from .engine_client import EngineClient
from .errors import (
    ConfigurationError,
    EngineBridgeError,
    EngineConnectionError,
    EngineResponseError,
)
from .events import EngineEvent
from .models import (
    CHAT_MODELS,
    DEFAULT_CHAT_MODEL,
    ChatModel,
    get_chat_model,
    is_engine_model,
    models_by_provider,
)
from .sse_decoder import SseFrameDecoder, decode_sse_stream
from .translator import (
    EventTranslator,
    TextSpanState,
    pipe_events_to_sink,
    stream_goal_to_sink,
    translate_events,
)


__all__ = [
    "CHAT_MODELS",
    "DEFAULT_CHAT_MODEL",
    "SSE_DONE_MARKER",
    "ChatModel",
    "ChunkLogger",
    "ChunkSink",
    "ConfigurationError",
    "DataAnnotationChunk",
    "EngineBridgeError",
    "EngineClient",
    "EngineConfig",
    "EngineConnectionError",
    "EngineEvent",
    "EngineResponseError",
    "ErrorChunk",
    "EventTranslator",
    "FinishChunk",
    "FinishReason",
    "ListChunkSink",
    "OutputChunk",
    "ReasoningDeltaChunk",
    "ReasoningEndChunk",
    "ReasoningStartChunk",
    "SseFrameDecoder",
    "TextDeltaChunk",
    "TextEndChunk",
    "TextSpanState",
    "TextStartChunk",
    "chunk_logger",
    "decode_sse_stream",
    "format_sse_event",
    "get_chat_model",
    "is_engine_model",
    "models_by_provider",
    "pipe_events_to_sink",
    "stream_goal_to_sink",
    "translate_events",
]
