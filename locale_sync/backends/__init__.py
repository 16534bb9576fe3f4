"""Translation backends."""

from typing import Dict, Type

from ..core.errors import BackendError
from ..utils.config import TranslationConfig
from .base import BaseBackend
from .openai import OpenAIBackend
from .anthropic import AnthropicBackend

BACKENDS: Dict[str, Type[BaseBackend]] = {
    'openai': OpenAIBackend,
    'anthropic': AnthropicBackend,
}


def create_backend(config: TranslationConfig) -> BaseBackend:
    """
    Create the backend selected by ``config.provider``.

    Raises:
        BackendError: Unknown provider or missing API key
    """
    backend_class = BACKENDS.get(config.provider)
    if backend_class is None:
        raise BackendError(
            f"Unsupported AI provider: {config.provider}. "
            f"Supported providers: {', '.join(BACKENDS)}"
        )

    if not config.api_key:
        raise BackendError(f"API key required for provider: {config.provider}")

    return backend_class(
        api_key=config.api_key,
        model=config.model,
        temperature=config.temperature,
        timeout=config.timeout,
    )


__all__ = [
    'BaseBackend',
    'OpenAIBackend',
    'AnthropicBackend',
    'BACKENDS',
    'create_backend',
]
