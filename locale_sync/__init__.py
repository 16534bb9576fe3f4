"""
Locale Sync
===========

Keeps per-language JSON locale files in sync with a base-language file.
Keys that changed or disappeared since the previous git revision, and keys
a locale is missing, are translated in batches and merged back without
touching the rest of the file.

Usage:
    from locale_sync import LocaleSync, LocaleStore, GitHistory, BatchTranslator
    from locale_sync.utils.config import TranslationConfig

    translator = BatchTranslator(TranslationConfig(test_mode=True))
    syncer = LocaleSync(LocaleStore('locales'), GitHistory(), translator)
    summary = syncer.sync_all()

CLI:
    locale-sync init
    locale-sync sync --dir locales --source-language en --test
"""

from .__version__ import __version__, __author__, __description__

# Core exports
from .core.documents import LocaleStore
from .core.history import GitHistory
from .core.errors import LocaleSyncError, LoadError, HistoryError, BackendError

# Features
from .features.translator import BatchTranslator
from .features.sync import LocaleSync, SyncResult, SyncSummary

__all__ = [
    '__version__',
    '__author__',
    '__description__',
    'LocaleStore',
    'GitHistory',
    'LocaleSyncError',
    'LoadError',
    'HistoryError',
    'BackendError',
    'BatchTranslator',
    'LocaleSync',
    'SyncResult',
    'SyncSummary',
]
