"""Feature modules."""

from .translator import (
    BatchTranslator,
    build_system_prompt,
    chunk_key_map,
    dummy_translations,
    parse_translation_response,
)
from .sync import LocaleSync, SyncResult, SyncSummary

__all__ = [
    'BatchTranslator',
    'build_system_prompt',
    'chunk_key_map',
    'dummy_translations',
    'parse_translation_response',
    'LocaleSync',
    'SyncResult',
    'SyncSummary',
]
