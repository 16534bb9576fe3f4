"""Flat-key operations on nested locale documents.

A locale document is a tree of ``dict`` containers whose leaves are anything
else: strings, numbers, booleans, ``None`` and lists. Lists are leaves and are
never walked into. Every leaf is addressed by a dotted path such as
``"settings.profile.title"``.

All tree walks in this module decide "container or leaf" through
:func:`is_container` and nothing else.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List

SEPARATOR = '.'

FlatKeyMap = Dict[str, Any]


class ConflictPolicy(Enum):
    """What to do when a leaf sits where a dotted path needs a container."""
    OVERWRITE = "overwrite-on-type-conflict"
    SKIP = "skip-on-type-conflict"


def is_container(value: Any) -> bool:
    """Return True if ``value`` is a container node (a JSON object)."""
    return isinstance(value, dict)


def flatten(document: Dict[str, Any], prefix: str = '') -> FlatKeyMap:
    """
    Flatten a nested document into ``{dotted_path: leaf_value}``.

    Empty containers produce no keys.

    Args:
        document: Nested locale document
        prefix: Dotted path of ``document`` inside its parent

    Returns:
        Flat key map in traversal order
    """
    flat: FlatKeyMap = {}

    for key, value in document.items():
        path = f"{prefix}{SEPARATOR}{key}" if prefix else key

        if is_container(value):
            flat.update(flatten(value, path))
        else:
            flat[path] = value

    return flat


def _same_value(a: Any, b: Any) -> bool:
    # 1, 1.0 and True compare equal in Python but are different JSON values
    return type(a) is type(b) and a == b


def changed_keys(current: Dict[str, Any], previous: Dict[str, Any]) -> FlatKeyMap:
    """
    Keys present in both snapshots whose values differ.

    Keys that only exist in ``current`` are new, not changed.

    Returns:
        ``{dotted_path: current_value}``
    """
    current_keys = flatten(current)
    previous_keys = flatten(previous)

    return {
        key: value
        for key, value in current_keys.items()
        if key in previous_keys and not _same_value(value, previous_keys[key])
    }


def deleted_keys(current: Dict[str, Any], previous: Dict[str, Any]) -> List[str]:
    """Keys of ``previous`` that no longer exist in ``current``, in ``previous`` order."""
    current_keys = flatten(current)

    return [key for key in flatten(previous) if key not in current_keys]


def missing_keys(base_keys: FlatKeyMap, target_keys: FlatKeyMap) -> FlatKeyMap:
    """Base keys (with base values) that the target flattening does not have."""
    return {key: value for key, value in base_keys.items() if key not in target_keys}


def merge_update_keys(
    changed: FlatKeyMap,
    missing: FlatKeyMap,
    deleted: Iterable[str]
) -> FlatKeyMap:
    """
    Combine changed and missing keys, never including a deleted key.

    Args:
        changed: Change set of the base document
        missing: Missing key map of one target document
        deleted: Deleted key list of the base document

    Returns:
        Keys to send for translation
    """
    to_update = {**changed, **missing}

    for key in deleted:
        to_update.pop(key, None)

    return to_update


def remove_keys(document: Dict[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    """
    Delete dotted-path keys from ``document`` in place.

    A path whose intermediate segment is missing or is not a container is
    already absent and is skipped. After a deletion every ancestor container
    left empty is removed, up to (but excluding) the root.

    Returns:
        The same ``document`` object
    """
    for key in keys:
        segments = key.split(SEPARATOR)

        # chain[i] is the container reached after walking segments[:i]
        chain = [document]
        for segment in segments[:-1]:
            child = chain[-1].get(segment)
            if not is_container(child):
                break
            chain.append(child)
        else:
            parent = chain[-1]
            if segments[-1] not in parent:
                continue

            del parent[segments[-1]]

            for depth in range(len(chain) - 1, 0, -1):
                if chain[depth]:
                    break
                del chain[depth - 1][segments[depth - 1]]

    return document


def apply_translations(
    document: Dict[str, Any],
    translations: FlatKeyMap,
    policy: ConflictPolicy = ConflictPolicy.OVERWRITE
) -> List[str]:
    """
    Write translated dotted-path values into ``document`` in place.

    Missing intermediate containers are created. The final segment always
    receives the translated value, replacing whatever was there.

    Args:
        document: Target locale document
        translations: ``{dotted_path: translated_value}``, applied in order
        policy: Handling of a leaf found where a container is needed.
            ``OVERWRITE`` replaces the leaf with a new container,
            ``SKIP`` leaves the document untouched for that key.

    Returns:
        Dotted paths that hit a type conflict
    """
    conflicts: List[str] = []

    for key, value in translations.items():
        segments = key.split(SEPARATOR)
        node = document
        skipped = False

        for segment in segments[:-1]:
            child = node.get(segment)

            if not is_container(child):
                if segment in node:
                    conflicts.append(key)
                    if policy is ConflictPolicy.SKIP:
                        skipped = True
                        break
                child = {}
                node[segment] = child

            node = child

        if not skipped:
            node[segments[-1]] = value

    return conflicts
