"""
Hashtag normalization.

Projects store hashtags in two shapes: a flat list and a category map. For
counting and matching, every categorized hashtag ``t`` under category ``C``
is represented both as the bare ``t`` and as the composite ``C:t``; flat
hashtags contribute only the bare form.

Stored documents are not trusted here. Missing fields, wrong types and blank
entries are skipped rather than raised.
"""

from collections.abc import Iterable, Mapping
from typing import Any

CATEGORY_SEPARATOR = ":"


def normalize_hashtag(raw: Any) -> str | None:
    """
    Canonical form of a single hashtag.

    Strips whitespace and a leading ``#`` and case-folds.

    Returns:
        The canonical string, or None for non-strings and blank values
    """
    if not isinstance(raw, str):
        return None
    cleaned = raw.strip()
    if cleaned.startswith("#"):
        cleaned = cleaned[1:].strip()
    cleaned = cleaned.casefold()
    return cleaned or None


def _iter_raw_hashtags(value: Any) -> Iterable[Any]:
    # Legacy rows hold "a, b, c" instead of a list
    if isinstance(value, str):
        return value.split(",")
    if isinstance(value, (list, tuple, set)):
        return value
    return ()


def iter_flat_hashtags(hashtags: Any) -> Iterable[str]:
    """Canonical hashtags of a flat list, in stored order."""
    for raw in _iter_raw_hashtags(hashtags):
        tag = normalize_hashtag(raw)
        if tag:
            yield tag


def iter_categorized_hashtags(categorized_hashtags: Any) -> Iterable[tuple[str | None, str]]:
    """
    Yield ``(category, hashtag)`` pairs of a category map.

    The category is None when its name is blank; such entries only
    contribute their bare hashtag.
    """
    if not isinstance(categorized_hashtags, Mapping):
        return
    for category, hashtags in categorized_hashtags.items():
        category_name = normalize_hashtag(category)
        for raw in _iter_raw_hashtags(hashtags):
            tag = normalize_hashtag(raw)
            if tag:
                yield category_name, tag


def get_all_representations(hashtags: Any = None, categorized_hashtags: Any = None) -> set[str]:
    """
    Every countable representation of a project's hashtags.

    Example:
        >>> sorted(get_all_representations(["VIP"], {"sponsor": ["Acme"]}))
        ['acme', 'sponsor:acme', 'vip']
    """
    representations = set(iter_flat_hashtags(hashtags))
    for category, tag in iter_categorized_hashtags(categorized_hashtags):
        representations.add(tag)
        if category:
            representations.add(f"{category}{CATEGORY_SEPARATOR}{tag}")
    return representations


def parse_hashtag_query(query: str) -> tuple[str | None, str]:
    """
    Split a query into ``(category, hashtag)``.

    ``"period:summer"`` gives ``("period", "summer")``; ``"summer"`` and
    malformed prefixes such as ``":summer"`` give ``(None, ...)``.
    """
    cleaned = normalize_hashtag(query) or ""
    category, sep, tag = cleaned.partition(CATEGORY_SEPARATOR)
    if sep and category.strip() and tag.strip():
        return category.strip(), tag.strip()
    return None, cleaned


def matches_hashtag(hashtags: Any, categorized_hashtags: Any, query: str) -> bool:
    """True if a document's hashtags contain the query (plain or ``category:hashtag``)."""
    category, tag = parse_hashtag_query(query)
    if not tag:
        return False
    wanted = f"{category}{CATEGORY_SEPARATOR}{tag}" if category else tag
    return wanted in get_all_representations(hashtags, categorized_hashtags)


def remove_hashtag(hashtags: Any, categorized_hashtags: Any, hashtag: str) -> tuple[list[str], dict[str, list[str]], bool]:
    """
    Drop a canonical hashtag from both storage shapes.

    Returns:
        Tuple of (new flat list, new category map, whether anything changed).
        Empty categories are removed from the map.
    """
    changed = False
    flat: list[str] = []
    for raw in _iter_raw_hashtags(hashtags):
        if normalize_hashtag(raw) == hashtag:
            changed = True
        elif isinstance(raw, str) and raw.strip():
            flat.append(raw)

    categorized: dict[str, list[str]] = {}
    if isinstance(categorized_hashtags, Mapping):
        for category, values in categorized_hashtags.items():
            kept = []
            for raw in _iter_raw_hashtags(values):
                if normalize_hashtag(raw) == hashtag:
                    changed = True
                elif isinstance(raw, str) and raw.strip():
                    kept.append(raw)
            if kept:
                categorized[str(category)] = kept
    return flat, categorized, changed
