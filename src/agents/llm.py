"""
LLM initialization and configuration for Calendar Assistant.

This module provides centralized LLM instance creation and model selection
for event extraction. Uses Anthropic Claude as the provider.
"""

from langchain_anthropic import ChatAnthropic

from src.config import get_settings

# Model constants for Anthropic Claude
SONNET_MODEL = "claude-sonnet-4-20250514"
HAIKU_MODEL = "claude-3-5-haiku-20241022"

# Priority order tried by the extraction adapter
DEFAULT_EXTRACTION_MODELS = (SONNET_MODEL, HAIKU_MODEL)


def get_llm(
    model: str | None = None,
    temperature: float | None = None,
    max_tokens: int = 4096,
    timeout: float | None = None,
) -> ChatAnthropic:
    """
    Get configured Anthropic Claude LLM instance.

    Args:
        model: Model name. If None, uses the first configured extraction model.
        temperature: Sampling temperature (0.0-1.0). If None, uses
                    settings.extraction_temperature.
        max_tokens: Maximum tokens in the response.
        timeout: Request timeout in seconds. If None, uses
                settings.external_call_timeout.

    Returns:
        Configured ChatAnthropic instance ready for use with LangChain

    Raises:
        ValueError: If ANTHROPIC_API_KEY is not configured in environment

    Examples:
        >>> llm = get_llm()
        >>> fast_llm = get_llm(model=HAIKU_MODEL, temperature=0.0)
    """
    settings = get_settings()
    api_key = settings.get_llm_api_key()  # Validates key exists

    return ChatAnthropic(
        model=model or settings.extraction_models[0],
        anthropic_api_key=api_key,
        temperature=(
            settings.extraction_temperature if temperature is None else temperature
        ),
        max_tokens=max_tokens,
        timeout=settings.external_call_timeout if timeout is None else timeout,
        max_retries=0,
    )
