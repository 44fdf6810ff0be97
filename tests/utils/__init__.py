"""Shared test utilities for unit and integration tests."""

from tests.utils.sse import (
    async_iter,
    byte_stream,
    parse_sse_event,
    sequential_ids,
    split_at,
    sse_frame,
)

__all__ = [
    "async_iter",
    "byte_stream",
    "parse_sse_event",
    "sequential_ids",
    "split_at",
    "sse_frame",
]
