"""
Embedded relation shapes returned by the store.

PostgREST returns an embedded relation either as a nested object or as an
array, and the same logical many-to-one join (e.g. a workout exercise's
`exercise`) can come back as `{...}` or as `[{...}]` depending on how the
foreign key is detected. Every reader goes through `classify()` once instead
of checking shapes at each call site.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class Single:
    """An embedded relation returned as one object."""

    row: Dict[str, Any]


@dataclass(frozen=True)
class Collection:
    """An embedded relation returned as an array of objects."""

    rows: List[Dict[str, Any]] = field(default_factory=list)


RelatedRows = Union[Single, Collection]


def classify(value: Any) -> Optional[RelatedRows]:
    """
    Tag an embedded relation value.

    Returns None when the relation is absent (null or missing key).

    Raises:
        TypeError: If the value is neither an object nor an array.

    Examples:
        >>> classify({"name": "Squat"})
        Single(row={'name': 'Squat'})
        >>> classify([{"name": "Squat"}])
        Collection(rows=[{'name': 'Squat'}])
    """
    if value is None:
        return None
    if isinstance(value, dict):
        return Single(value)
    if isinstance(value, (list, tuple)):
        return Collection([row for row in value if isinstance(row, dict)])
    raise TypeError(f"Unexpected embedded relation shape: {type(value).__name__}")


def one(value: Any) -> Optional[Dict[str, Any]]:
    """The single related row; the first one when an array came back."""
    related = classify(value)
    if related is None:
        return None
    if isinstance(related, Single):
        return related.row
    return related.rows[0] if related.rows else None


def many(value: Any) -> List[Dict[str, Any]]:
    """All related rows; an object counts as a one-element list."""
    related = classify(value)
    if related is None:
        return []
    if isinstance(related, Single):
        return [related.row]
    return list(related.rows)
