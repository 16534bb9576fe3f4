"""Configuration management for locale-sync."""

import os
import yaml
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Any, Tuple
from dataclasses import dataclass, field

CONFIG_FILENAME = '.locale-sync.yml'

DEFAULT_BATCH_SIZE = 25

# provider -> default model
PROVIDER_MODELS = {
    'openai': 'gpt-4',
    'anthropic': 'claude-3-haiku-20240307',
}

PROVIDER_ALIASES = {
    'openai-direct': 'openai',
}

# provider -> environment variable checked when AI_API_KEY is not set
PROVIDER_KEY_VARS = {
    'openai': 'OPENAI_API_KEY',
    'anthropic': 'ANTHROPIC_API_KEY',
}


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Configuration validation failed: {'; '.join(errors)}")


class ConfigValidationWarning:
    """Represents a configuration warning (non-fatal)."""

    def __init__(self, message: str):
        self.message = message

    def __str__(self):
        return self.message


@dataclass
class LocalesConfig:
    """Locale files configuration."""
    directory: str = "locales"
    source_language: str = "en"
    source_file: str = "en.json"


@dataclass
class TranslationConfig:
    """Translation backend configuration."""
    provider: str = "openai"  # openai | anthropic
    model: Optional[str] = None  # None -> provider default
    batch_size: int = DEFAULT_BATCH_SIZE
    temperature: float = 0.0
    timeout: float = 120.0
    test_mode: bool = False
    # Never read from or written to the YAML file
    api_key: Optional[str] = field(default=None, repr=False)

    @property
    def effective_model(self) -> str:
        """Configured model, or the provider's default model."""
        return self.model or PROVIDER_MODELS.get(self.provider, '')


@dataclass
class HistoryConfig:
    """Revision history configuration."""
    revision: str = "HEAD^"


@dataclass
class SyncConfig:
    """Sync behaviour configuration."""
    backup: bool = False


@dataclass
class Config:
    """Main configuration class."""
    locales: LocalesConfig = field(default_factory=LocalesConfig)
    translation: TranslationConfig = field(default_factory=TranslationConfig)
    history: HistoryConfig = field(default_factory=HistoryConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)

    @classmethod
    def from_file(cls, config_path: Optional[Path] = None) -> 'Config':
        """Load configuration from YAML file."""
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILENAME

            if not config_path.exists():
                return cls()

        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        translation = dict(data.get('translation') or {})
        translation.pop('api_key', None)

        return cls(
            locales=LocalesConfig(**(data.get('locales') or {})),
            translation=TranslationConfig(**translation),
            history=HistoryConfig(**(data.get('history') or {})),
            sync=SyncConfig(**(data.get('sync') or {})),
        )

    def apply_environment(
        self,
        environ: Optional[Mapping[str, str]] = None,
        provider: Optional[str] = None
    ) -> 'Config':
        """
        Override translation settings from environment variables.

        Reads ``AI_PROVIDER``, ``AI_MODEL`` and ``AI_API_KEY``; when no
        ``AI_API_KEY`` is set, the provider's own key variable
        (``OPENAI_API_KEY`` or ``ANTHROPIC_API_KEY``) is used.

        Args:
            environ: Mapping to read from (default: ``os.environ``)
            provider: Explicit provider (command line), wins over ``AI_PROVIDER``

        Returns:
            self
        """
        if environ is None:
            environ = os.environ

        provider = provider or environ.get('AI_PROVIDER')
        if provider:
            self.translation.provider = provider

        provider = self.translation.provider.lower()
        self.translation.provider = PROVIDER_ALIASES.get(provider, provider)

        if environ.get('AI_MODEL'):
            self.translation.model = environ['AI_MODEL']

        key_var = PROVIDER_KEY_VARS.get(self.translation.provider)
        api_key = environ.get('AI_API_KEY') or (environ.get(key_var) if key_var else None)
        if api_key:
            self.translation.api_key = api_key

        return self

    @property
    def locale_dir(self) -> Path:
        """Locale directory as a Path."""
        return Path(self.locales.directory)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary (without secrets)."""
        return {
            'locales': {
                'directory': self.locales.directory,
                'source_language': self.locales.source_language,
                'source_file': self.locales.source_file,
            },
            'translation': {
                'provider': self.translation.provider,
                'model': self.translation.model,
                'batch_size': self.translation.batch_size,
                'temperature': self.translation.temperature,
                'timeout': self.translation.timeout,
                'test_mode': self.translation.test_mode,
            },
            'history': {
                'revision': self.history.revision,
            },
            'sync': {
                'backup': self.sync.backup,
            },
        }

    def save(self, config_path: Optional[Path] = None):
        """Save configuration to YAML file."""
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILENAME

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def validate(self, raise_on_error: bool = False) -> Tuple[List[str], List[ConfigValidationWarning]]:
        """
        Validate configuration and return errors and warnings.

        Args:
            raise_on_error: If True, raise ConfigValidationError on validation errors

        Returns:
            Tuple of (errors, warnings) lists
        """
        errors = []
        warnings = []

        if self.translation.provider not in PROVIDER_MODELS:
            errors.append(
                f"Invalid provider '{self.translation.provider}'. "
                f"Valid options: {', '.join(PROVIDER_MODELS)}"
            )

        if not isinstance(self.translation.batch_size, int) or self.translation.batch_size < 1:
            errors.append(
                f"translation.batch_size must be a positive integer, got {self.translation.batch_size!r}"
            )

        if not 0 <= self.translation.temperature <= 2:
            errors.append(
                f"translation.temperature must be between 0 and 2, got {self.translation.temperature}"
            )

        if self.translation.timeout <= 0:
            errors.append(
                f"translation.timeout must be positive, got {self.translation.timeout}"
            )

        if not self._is_valid_lang_code(self.locales.source_language):
            errors.append(
                f"Invalid source language code: '{self.locales.source_language}'. "
                f"Use ISO 639-1 format (e.g., 'en', 'tr', 'de')"
            )

        if not self.locales.source_file.endswith('.json'):
            errors.append(
                f"locales.source_file must be a .json file, got '{self.locales.source_file}'"
            )

        if not self.history.revision:
            errors.append("history.revision cannot be empty")

        if not self.locale_dir.is_dir():
            warnings.append(ConfigValidationWarning(
                f"Locale directory does not exist: {self.locales.directory}"
            ))

        if raise_on_error and errors:
            raise ConfigValidationError(errors)

        return errors, warnings

    @staticmethod
    def _is_valid_lang_code(code: str) -> bool:
        """
        Check if a language code is valid (ISO 639-1 or common variants).

        Args:
            code: Language code to validate

        Returns:
            True if valid, False otherwise
        """
        if not code or not isinstance(code, str):
            return False

        if len(code) == 2 and code.isalpha():
            return True

        # en-US, pt-BR, zh-Hans
        if '-' in code:
            parts = code.split('-')
            if len(parts) == 2:
                base, region = parts
                if len(base) == 2 and base.isalpha() and 2 <= len(region) <= 4:
                    return True

        return False


def create_default_config(provider: str = 'openai') -> Config:
    """Create default configuration for a provider."""
    config = Config()
    config.translation.provider = provider
    return config
