"""
OpenClaw Engine Bridge Server with FastAPI

Chat UI backend for the `openclaw/` models. A chat message is submitted to
the OpenClaw engine as a goal, and the goal's SSE progress stream is
re-emitted in AI SDK v6 Data Stream Protocol format.
"""

import os
from contextlib import aclosing
from datetime import datetime, timedelta, timezone
from pathlib import Path

from dotenv import load_dotenv


# Load environment variables from .env.local BEFORE any local imports
# so EngineConfig and ChunkLogger read the right values
load_dotenv(".env.local")

from fastapi import Depends, FastAPI, HTTPException  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from fastapi.responses import StreamingResponse  # noqa: E402
from loguru import logger  # noqa: E402
from pydantic import BaseModel  # noqa: E402

from openclaw_bridge import (  # noqa: E402
    DEFAULT_CHAT_MODEL,
    SSE_DONE_MARKER,
    EngineBridgeError,
    EngineClient,
    EngineConfig,
    ErrorChunk,
    chunk_logger,
    format_sse_event,
    is_engine_model,
    models_by_provider,
    translate_events,
)
from openclaw_bridge.logging_config import configure_logging  # noqa: E402


ENGINE_CHAT_MODEL = "openclaw/multi-agent"

configure_logging()

# Configure file logging
log_dir = Path(os.getenv("LOG_DIR", "logs"))
log_dir.mkdir(exist_ok=True)
jst_format = "%Y%m%d_%H%M%S"
jst_time_str = datetime.now(timezone(timedelta(hours=9))).strftime(jst_format)
log_file = log_dir / f"server_{os.getenv('CHUNK_LOGGER_SESSION_ID', jst_time_str)}.log"
logger.add(
    log_file,
    rotation="100 MB",
    retention="7 days",
    level="DEBUG",
    format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
)

logger.info("OpenClaw Engine Bridge starting up...")
logger.info(f"Logging to: {log_file}")

chunk_info = chunk_logger.get_info()
logger.info(f"Chunk Logger: enabled={chunk_info['enabled']}")
if chunk_info["enabled"]:
    logger.info(f"Chunk Logger: session_id={chunk_info['session_id']}")
    logger.info(f"Chunk Logger: output_path={chunk_info['output_path']}")


app = FastAPI(
    title="OpenClaw Engine Bridge",
    description="OpenClaw engine goals streamed as AI SDK v6 UI message chunks",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:3001",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class StreamRequest(BaseModel):
    """Chat request for an engine model"""

    message: str
    model: str | None = None


def get_engine_client() -> EngineClient:
    """Engine client built from the current environment."""
    return EngineClient(EngineConfig.from_env())


SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "OpenClaw Engine Bridge",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy"}


@app.get("/models")
async def models():
    """Chat model catalogue grouped by provider"""
    return {
        "default": DEFAULT_CHAT_MODEL,
        "providers": {
            provider: [model.model_dump() for model in entries]
            for provider, entries in models_by_provider().items()
        },
    }


def _create_error_sse_response(error_message: str) -> StreamingResponse:
    """SSE response carrying a single error chunk followed by [DONE]."""

    async def error_stream():
        yield format_sse_event(ErrorChunk(message=error_message))
        yield SSE_DONE_MARKER

    return StreamingResponse(error_stream(), media_type="text/event-stream", headers=SSE_HEADERS)


@app.post("/stream")
async def stream(request: StreamRequest, client: EngineClient = Depends(get_engine_client)):
    """
    SSE streaming endpoint

    1. Validate model and message
    2. Submit the message to the engine as a goal
    3. Stream the goal's events translated to AI SDK v6 chunks
    4. Always end with [DONE]

    Once streaming has begun, bridge failures (missing configuration,
    engine unreachable, stream broken) are reported as an error chunk.
    """
    model_id = request.model or ENGINE_CHAT_MODEL
    if not is_engine_model(model_id):
        raise HTTPException(
            status_code=400,
            detail=f"Model {model_id} is not served by the OpenClaw engine bridge",
        )

    message = request.message.strip()
    if not message:
        return _create_error_sse_response("No message provided")

    logger.info(f"[/stream] model={model_id} message='{message[:50]}'")

    async def generate_sse_stream():
        try:
            goal_id = await client.submit_goal(message)
            async with (
                aclosing(client.stream_goal_events(goal_id)) as events,
                aclosing(translate_events(events)) as chunks,
            ):
                async for chunk in chunks:
                    yield format_sse_event(chunk)
        except EngineBridgeError as e:
            logger.error(f"[/stream] {type(e).__name__}: {e!s}")
            yield format_sse_event(ErrorChunk(message=str(e)))
        yield SSE_DONE_MARKER

    return StreamingResponse(
        generate_sse_stream(), media_type="text/event-stream", headers=SSE_HEADERS
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")  # noqa: S104
