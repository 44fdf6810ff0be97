"""
OpenClaw engine HTTP client.

Talks to the OpenClaw gateway's engine endpoints:
    POST {base}/api/engine/chat                 -> {"goalId": "...", "status": "..."}
    GET  {base}/api/engine/chat/stream?goalId=  -> text/event-stream

No retries happen here. A caller that wants a retry policy or a deadline
wraps these calls (or abandons the event stream) itself.
"""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import aclosing, asynccontextmanager
from typing import Any

import aiohttp
from loguru import logger

from .chunk_logger import chunk_logger
from .config import EngineConfig
from .errors import EngineConnectionError, EngineResponseError
from .events import EngineEvent
from .sse_decoder import decode_sse_stream


CHAT_PATH = "/api/engine/chat"
STREAM_PATH = "/api/engine/chat/stream"


async def _read_error_body(response: aiohttp.ClientResponse) -> str:
    """Best-effort read of an error response body."""
    try:  # nosemgrep: forbid-try-except
        return await response.text()
    except (aiohttp.ClientError, UnicodeDecodeError):
        return ""


class EngineClient:
    """
    Client for one OpenClaw engine endpoint.

    Example:
        >>> client = EngineClient()
        >>> goal_id = await client.submit_goal("Summarize the open issues")
        >>> async for event in client.stream_goal_events(goal_id):
        ...     print(event.name)
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        http_session: aiohttp.ClientSession | None = None,
    ) -> None:
        """
        Args:
            config: Endpoint settings (default: EngineConfig.from_env())
            http_session: Optional aiohttp session. When omitted a session is
                created per call and closed afterwards; an injected session is
                left open.
        """
        self._config = config or EngineConfig.from_env()
        self._http_session = http_session

    @property
    def config(self) -> EngineConfig:
        return self._config

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[aiohttp.ClientSession]:
        if self._http_session is not None:
            yield self._http_session
            return
        session = aiohttp.ClientSession()
        try:
            yield session
        finally:
            await session.close()

    async def submit_goal(self, message: str) -> str:
        """
        Submit a chat message as a new engine goal.

        Args:
            message: User message text

        Returns:
            Opaque goal identifier

        Raises:
            ConfigurationError: If no base URL is configured
            EngineConnectionError: On transport failure or non-success status
            EngineResponseError: If the response carries no goalId
        """
        url = f"{self._config.require_base_url()}{CHAT_PATH}"
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)

        async with self._session() as session:
            try:
                async with session.post(
                    url,
                    json={"message": message},
                    headers=self._config.headers(),
                    timeout=timeout,
                ) as response:
                    if not response.ok:
                        text = await _read_error_body(response)
                        msg = f"Engine chat failed ({response.status}): {text or response.reason}"
                        raise EngineConnectionError(msg, status=response.status)
                    try:  # nosemgrep: forbid-try-except
                        data: Any = await response.json(content_type=None)
                    except ValueError as e:
                        msg = f"Engine chat returned invalid JSON: {e!s}"
                        raise EngineResponseError(msg) from e
            except (aiohttp.ClientError, TimeoutError) as e:
                logger.error(f"[ENGINE] Goal submission failed: {e!s}")
                msg = f"Engine chat failed: {e!s}"
                raise EngineConnectionError(msg) from e

        goal_id = data.get("goalId") if isinstance(data, dict) else None
        if not isinstance(goal_id, str) or not goal_id:
            msg = f"Engine chat response has no goalId: {data!r}"
            raise EngineResponseError(msg)

        logger.info(f"[ENGINE] Submitted goal {goal_id} (status={data.get('status')})")
        return goal_id

    def stream_goal_events(self, goal_id: str) -> AsyncGenerator[EngineEvent]:
        """
        Open the SSE stream for a goal.

        Configuration is checked here, before the generator is returned, so a
        missing base URL fails at call time rather than on first iteration.

        Args:
            goal_id: Identifier returned by submit_goal()

        Returns:
            Async generator of decoded EngineEvents. It raises
            EngineConnectionError when the stream cannot be opened or breaks
            mid-way, and ends normally on a done frame or end of body. Closing
            it early releases the HTTP response.

        Raises:
            ConfigurationError: If no base URL is configured
        """
        url = f"{self._config.require_base_url()}{STREAM_PATH}"
        return self._iter_goal_events(url, goal_id)

    async def _iter_goal_events(self, url: str, goal_id: str) -> AsyncGenerator[EngineEvent]:
        headers = {**self._config.headers(), "Accept": "text/event-stream"}
        # No total/read timeout: a goal may legitimately run for a long time
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=self._config.request_timeout)

        async with self._session() as session:
            try:
                response = await session.get(
                    url, params={"goalId": goal_id}, headers=headers, timeout=timeout
                )
            except (aiohttp.ClientError, TimeoutError) as e:
                logger.error(f"[ENGINE] Failed to connect to stream for goal {goal_id}: {e!s}")
                msg = f"Failed to connect to engine stream: {e!s}"
                raise EngineConnectionError(msg) from e

            async with response:
                if not response.ok:
                    text = await _read_error_body(response)
                    msg = f"Engine stream failed ({response.status}): {text or response.reason}"
                    raise EngineConnectionError(msg, status=response.status)

                logger.info(f"[ENGINE] Streaming events for goal {goal_id}")
                try:
                    async with aclosing(decode_sse_stream(response.content.iter_any())) as events:
                        async for event in events:
                            chunk_logger.log_chunk(
                                location="engine-sse-event",
                                direction="in",
                                chunk=event.to_log_dict(),
                                metadata={"goal_id": goal_id},
                            )
                            yield event
                except (aiohttp.ClientError, TimeoutError) as e:
                    logger.error(f"[ENGINE] Stream for goal {goal_id} interrupted: {e!s}")
                    msg = f"Engine stream interrupted: {e!s}"
                    raise EngineConnectionError(msg) from e

                logger.info(f"[ENGINE] Stream for goal {goal_id} closed")
