"""Sorting service for project listings.

Storage enumerates records in no particular order; the service performs
multi-key sorting with per-key ascending/descending ordering and tolerates
missing values without mutating the projects.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from core.models import Project

DEFAULT_SORT: list[tuple[str, bool]] = [("updated_at", False), ("created_at", False)]


class SortService:
    """Provides sorting utilities for `Project` lists."""

    def sort(self, projects: Iterable[Project], sort_keys: list[tuple[str, bool]]) -> list[Project]:
        """Return projects ordered by the provided keys.

        Args:
            projects: Projects to sort.
            sort_keys: List of tuples (field_name, ascending).
        """
        items = list(projects)
        if not sort_keys:
            return items

        decorated: list[tuple[tuple[Any, ...], Project]] = []
        for item in items:
            row: list[Any] = []
            for field_name, ascending in sort_keys:
                value = getattr(item, field_name, None)
                if isinstance(value, (int, float)) and not isinstance(value, bool):
                    row.append(value if ascending else -value)
                else:
                    # Strings sort case-insensitively; None sorts as empty
                    text = "" if value is None else str(value).lower()
                    row.append(text if ascending else _Reversed(text))
            decorated.append((tuple(row), item))

        decorated.sort(key=lambda x: x[0])
        return [it for _, it in decorated]


class _Reversed:
    """Wraps a string so that comparisons run in descending order."""

    __slots__ = ("value",)

    def __init__(self, value: str) -> None:
        self.value = value

    def __lt__(self, other: _Reversed) -> bool:
        return self.value > other.value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _Reversed) and self.value == other.value
