"""Datasets, accessors and numeric coercion shared by the stacking engine."""

from __future__ import annotations

import math
import numbers
from decimal import Decimal
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Sequence

Accessor = Callable[[Any, int, "Dataset"], Any]
StackOffsetMap = dict["Dataset", dict[str, float]]


@dataclass(eq=False)
class Dataset:
    """An ordered sequence of caller-owned records plus opaque metadata.

    Datasets compare and hash by identity, so two datasets holding equal
    records are still two separate stacking layers.
    """

    data: Sequence[Any] = field(default_factory=tuple)
    metadata: Any = None

    def records(self) -> Iterator[tuple[int, Any]]:
        """Yield ``(index, record)`` pairs in dataset order."""
        return enumerate(self.data)


def field_accessor(name: str) -> Accessor:
    """Return an accessor reading ``record[name]``."""

    def _read(record: Any, index: int, dataset: Dataset) -> Any:
        del index, dataset
        return record[name]

    _read.__name__ = f"field_accessor_{name}"
    return _read


def key_string(key: Any) -> str:
    """Normalize a key accessor result to its stacking category."""
    return str(key)


def as_number(value: Any) -> float:
    """Coerce an accessor result to float; non-numeric input becomes NaN."""
    if isinstance(value, (numbers.Real, Decimal)):
        return float(value)
    if value is None:
        return math.nan
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def is_zero_like(value: float) -> bool:
    """True for values that carry no sign: zero and NaN."""
    return value == 0.0 or math.isnan(value)
