"""Decoded engine events."""

from dataclasses import dataclass, field
from typing import Any


# SSE control event names. Never reach the translator.
HEARTBEAT_EVENT = "heartbeat"
CONNECTED_EVENT = "connected"
DONE_EVENT = "done"

DEFAULT_EVENT_NAME = "message"


@dataclass(frozen=True)
class EngineEvent:
    """
    One decoded SSE frame from the engine.

    Attributes:
        name: Event category, e.g. "agent:thinking" or "goal:completed"
        payload: JSON object sent with the event. Every field is optional.
    """

    name: str
    payload: dict[str, Any] = field(default_factory=dict)

    def to_log_dict(self) -> dict[str, Any]:
        return {"event": self.name, "data": self.payload}
