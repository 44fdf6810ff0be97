"""
Chat model catalogue.

Static list of the model ids the chat UI offers. Only `openclaw/` models are
served through the engine bridge; the rest are invoked elsewhere.
"""

from pydantic import BaseModel, ConfigDict


ENGINE_MODEL_PREFIX = "openclaw/"

DEFAULT_CHAT_MODEL = "anthropic/claude-haiku-4-5-20251001"


class ChatModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    provider: str
    description: str


CHAT_MODELS: tuple[ChatModel, ...] = (
    # Anthropic
    ChatModel(
        id="anthropic/claude-haiku-4-5-20251001",
        name="Claude Haiku 4.5",
        provider="anthropic",
        description="Fast and affordable, great for everyday tasks",
    ),
    ChatModel(
        id="anthropic/claude-sonnet-4-5-20250929",
        name="Claude Sonnet 4.5",
        provider="anthropic",
        description="Best balance of speed, intelligence, and cost",
    ),
    ChatModel(
        id="anthropic/claude-opus-4-6",
        name="Claude Opus 4.6",
        provider="anthropic",
        description="Most capable Anthropic model",
    ),
    # OpenAI
    ChatModel(
        id="openai/gpt-4.1-mini",
        name="GPT-4.1 Mini",
        provider="openai",
        description="Fast and cost-effective for simple tasks",
    ),
    ChatModel(
        id="openai/gpt-4.1",
        name="GPT-4.1",
        provider="openai",
        description="Capable OpenAI model",
    ),
    # Reasoning models (extended thinking)
    ChatModel(
        id="anthropic/claude-sonnet-4-5-20250929-thinking",
        name="Claude Sonnet 4.5 (Thinking)",
        provider="reasoning",
        description="Extended thinking for complex problems",
    ),
    # OpenClaw engine
    ChatModel(
        id="openclaw/multi-agent",
        name="OpenClaw Agents",
        provider="openclaw",
        description="Multi-agent system (Researcher, Coder, Reviewer, Writer)",
    ),
)


def models_by_provider() -> dict[str, list[ChatModel]]:
    """Group the catalogue by provider, preserving catalogue order."""
    grouped: dict[str, list[ChatModel]] = {}
    for model in CHAT_MODELS:
        grouped.setdefault(model.provider, []).append(model)
    return grouped


def get_chat_model(model_id: str) -> ChatModel | None:
    for model in CHAT_MODELS:
        if model.id == model_id:
            return model
    return None


def is_engine_model(model_id: str) -> bool:
    """True for models handled by the engine bridge rather than a model provider."""
    return model_id.startswith(ENGINE_MODEL_PREFIX)
