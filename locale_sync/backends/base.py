"""Base class for translation backends."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..core.errors import BackendError


class BaseBackend(ABC):
    """
    A chat-style language model used as a translation service.

    Subclasses send one system prompt and one user message through the
    provider's SDK client and return the raw text of the model's reply.
    """

    name: str = ''
    default_model: str = ''

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        temperature: float = 0.0,
        timeout: float = 120.0,
        client: Optional[Any] = None
    ):
        """
        Initialize the backend.

        Args:
            api_key: Provider API key
            model: Model name (default: provider default)
            temperature: Sampling temperature, 0 for stable translations
            timeout: Timeout per request in seconds
            client: Ready-made SDK client (default: built from api_key/timeout)
        """
        self.api_key = api_key
        self.model = model or self.default_model
        self.temperature = temperature
        self.timeout = timeout
        self.client = client if client is not None else self._create_client()

    @abstractmethod
    def _create_client(self) -> Any:
        """Build the provider SDK client. Requests are never retried."""
        pass

    @abstractmethod
    def complete(self, system_prompt: str, user_payload: str) -> str:
        """
        Send a prompt and return the model's reply text.

        Raises:
            BackendError: Request failed or the reply has an unexpected shape
        """
        pass

    def _api_error(self, error: Exception) -> BackendError:
        """Convert an SDK exception into a BackendError."""
        status_code = getattr(error, 'status_code', None)
        if status_code is not None:
            message = getattr(error, 'message', None) or str(error)
            return BackendError(f"HTTP {status_code}: {message}", self.name)
        return BackendError(f"{type(error).__name__}: {error}", self.name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model!r})"
