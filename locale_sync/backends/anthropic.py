"""Anthropic Messages API backend."""

from anthropic import Anthropic, APIError, APITimeoutError

from ..core.errors import BackendError
from .base import BaseBackend


class AnthropicBackend(BaseBackend):
    """Translation through the Anthropic Messages API."""

    name = 'anthropic'
    default_model = 'claude-3-haiku-20240307'
    MAX_TOKENS = 4096

    def _create_client(self) -> Anthropic:
        return Anthropic(api_key=self.api_key, timeout=self.timeout, max_retries=0)

    def complete(self, system_prompt: str, user_payload: str) -> str:
        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.MAX_TOKENS,
                temperature=self.temperature,
                system=system_prompt,
                messages=[
                    {'role': 'user', 'content': user_payload},
                ],
            )
        except APITimeoutError as e:
            raise BackendError(f"Request timed out after {self.timeout}s", self.name) from e
        except APIError as e:
            raise self._api_error(e) from e

        try:
            text = ''.join(
                block.text for block in response.content
                if getattr(block, 'type', None) == 'text'
            )
        except (AttributeError, TypeError) as e:
            raise BackendError('Invalid API response format', self.name) from e

        if not text:
            raise BackendError('Empty response content', self.name)

        return text
