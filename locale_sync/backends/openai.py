"""OpenAI Chat Completions backend."""

from openai import OpenAI, APIError, APITimeoutError

from ..core.errors import BackendError
from .base import BaseBackend


class OpenAIBackend(BaseBackend):
    """Translation through the OpenAI Chat Completions API.

    The system prompt goes in as a ``system`` message, the JSON payload as
    the ``user`` message.
    """

    name = 'openai'
    default_model = 'gpt-4'

    def _create_client(self) -> OpenAI:
        return OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)

    def complete(self, system_prompt: str, user_payload: str) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                messages=[
                    {'role': 'system', 'content': system_prompt},
                    {'role': 'user', 'content': user_payload},
                ],
            )
        except APITimeoutError as e:
            raise BackendError(f"Request timed out after {self.timeout}s", self.name) from e
        except APIError as e:
            raise self._api_error(e) from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise BackendError('Invalid API response format', self.name) from e

        if not content:
            raise BackendError('Empty response content', self.name)

        return content
