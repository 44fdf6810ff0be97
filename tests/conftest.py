"""Pytest configuration and shared fixtures for tests.

Fixtures shared across unit and integration tests.
"""

from collections.abc import Callable

import pytest

from openclaw_bridge import EngineConfig, EventTranslator, ListChunkSink
from tests.utils import sequential_ids


# ============================================================
# Translator Fixtures
# ============================================================


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Deterministic span ids (id-0, id-1, ...)."""
    return sequential_ids()


@pytest.fixture
def translator(id_factory: Callable[[], str]) -> EventTranslator:
    """Fresh translator with deterministic ids."""
    return EventTranslator(id_factory)


@pytest.fixture
def sink() -> ListChunkSink:
    return ListChunkSink()


# ============================================================
# Configuration Fixtures
# ============================================================


@pytest.fixture
def engine_config() -> EngineConfig:
    return EngineConfig(base_url="http://engine.test", api_key="secret-key")


@pytest.fixture
def clean_engine_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove every OPENCLAW_* variable from the environment."""
    for name in ("OPENCLAW_ENGINE_URL", "OPENCLAW_API_KEY", "OPENCLAW_REQUEST_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
