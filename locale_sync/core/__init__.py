"""Core modules for locale synchronization."""

from .errors import LocaleSyncError, LoadError, HistoryError, BackendError
from .keys import (
    ConflictPolicy,
    is_container,
    flatten,
    changed_keys,
    deleted_keys,
    missing_keys,
    merge_update_keys,
    remove_keys,
    apply_translations,
)
from .documents import LocaleStore
from .history import GitHistory

__all__ = [
    'LocaleSyncError',
    'LoadError',
    'HistoryError',
    'BackendError',
    'ConflictPolicy',
    'is_container',
    'flatten',
    'changed_keys',
    'deleted_keys',
    'missing_keys',
    'merge_update_keys',
    'remove_keys',
    'apply_translations',
    'LocaleStore',
    'GitHistory',
]
