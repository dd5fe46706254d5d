"""Model construction for ViRA Match and the assistant.

The provider is picked by ``VIRA_MATCH_PROVIDER`` (``anthropic`` or
``openai``). When the preferred provider has no API key the other one is
used if it has a key. Without any key no model is built and callers use
their deterministic fallbacks.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic_ai.models.anthropic import AnthropicModel
from pydantic_ai.models.openai import OpenAIResponsesModel
from pydantic_ai.providers.anthropic import AnthropicProvider
from pydantic_ai.providers.openai import OpenAIProvider

from vira.core.logging_config import get_logger
from vira.server.core.config import Settings, settings

logger = get_logger(__name__)

SUPPORTED_PROVIDERS = ("anthropic", "openai")


def _secret(value) -> Optional[str]:
    return value.get_secret_value() if value is not None else None


def resolve_provider(config: Settings = settings) -> Optional[str]:
    """Provider to use, honoring the preference and falling back to whichever has a key."""
    available = {
        "anthropic": bool(_secret(config.anthropic.api_key)),
        "openai": bool(_secret(config.openai.api_key)),
    }
    preferred = config.matching.provider.lower().strip()
    if preferred not in SUPPORTED_PROVIDERS:
        logger.warning(f"Unsupported VIRA_MATCH_PROVIDER '{preferred}', using anthropic")
        preferred = "anthropic"
    if available[preferred]:
        return preferred
    for name in SUPPORTED_PROVIDERS:
        if available[name]:
            logger.info(f"{preferred} is not configured, using {name} for ViRA Match")
            return name
    return None


def build_match_model(config: Settings = settings) -> Optional[Any]:
    """Build the pydantic-ai model, or None when no provider key is configured."""
    provider = resolve_provider(config)
    if provider == "anthropic":
        logger.debug(f"Creating Anthropic model: {config.anthropic.model}")
        return AnthropicModel(
            config.anthropic.model,
            provider=AnthropicProvider(api_key=_secret(config.anthropic.api_key)),
        )
    if provider == "openai":
        logger.debug(f"Creating OpenAI model: {config.openai.model}")
        return OpenAIResponsesModel(
            config.openai.model,
            provider=OpenAIProvider(api_key=_secret(config.openai.api_key), base_url=config.openai.base_url),
        )
    return None


def model_name(model: Any) -> str:
    return str(getattr(model, "model_name", type(model).__name__))
