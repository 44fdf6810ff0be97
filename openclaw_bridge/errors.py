"""
Error types for the OpenClaw engine bridge.

Only transport and configuration problems are raised as exceptions.
Malformed frames are dropped by the decoder and engine-reported errors are
translated into `error` chunks, so neither shows up here.
"""


class EngineBridgeError(Exception):
    """Base class for all bridge errors."""


class ConfigurationError(EngineBridgeError):
    """Required engine configuration is missing (raised before any network call)."""


class EngineConnectionError(EngineBridgeError, ConnectionError):
    """
    Transport failure while opening or reading from the engine.

    Attributes:
        status: HTTP status code when the engine answered with a non-success
            response, None when the failure happened below HTTP.
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class EngineResponseError(EngineBridgeError):
    """The engine answered successfully but the body is unusable."""
