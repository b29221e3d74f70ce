# pm_core/parts/records.py
from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Any, Iterator, Union

from pm_core.parts.columns import PART_COLUMN_NAMES, resolve_column

PartValue = Union[str, int, Decimal, date, None]


class PartRecord(Mapping):
    """
    Read-only view of one part, keyed by PartColumn values.

    Built at the data-access boundary so the evaluator never sees model
    instances or raw CSV rows. Keys outside PartColumn are dropped.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, PartValue] | None = None):
        self._data: dict[str, PartValue] = {}
        for key, value in (data or {}).items():
            column = resolve_column(key)
            if column is not None:
                self._data[column] = value

    @classmethod
    def from_part(cls, part: Any) -> "PartRecord":
        return cls({name: getattr(part, name, None) for name in PART_COLUMN_NAMES})

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PartRecord":
        return cls(data)

    def __getitem__(self, key: str) -> PartValue:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"PartRecord({self._data!r})"
