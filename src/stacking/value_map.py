"""Per-dataset key/value maps and their sign partition."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from stacking.dataset import Accessor, Dataset, as_number, key_string

ValueMap = dict[str, "StackedDatum"]


@dataclass
class StackedDatum:
    """One dataset's contribution at one key; ``offset`` is set while stacking."""

    key: str
    value: float
    offset: float | None = None


def build_value_map(
    dataset: Dataset,
    key_accessor: Accessor,
    value_accessor: Accessor,
    domain: Sequence[str],
) -> ValueMap:
    """Map every domain key to the dataset's value there, 0.0 when absent.

    A key repeated inside the dataset keeps the value of its last record.
    """
    value_map = {key: StackedDatum(key=key, value=0.0) for key in domain}
    for index, record in dataset.records():
        key = key_string(key_accessor(record, index, dataset))
        value_map[key] = StackedDatum(key=key, value=as_number(value_accessor(record, index, dataset)))
    return value_map


def _clip(value: float, keep_positive: bool) -> float:
    if math.isnan(value):
        return 0.0
    return max(0.0, value) if keep_positive else min(0.0, value)


def partition_by_sign(value_map: ValueMap) -> tuple[ValueMap, ValueMap]:
    """Split a value map into ``(positive, negative)`` maps of identical shape.

    Positive holds ``max(0, value)``, negative holds ``min(0, value)``. NaN
    becomes 0.0 on both sides.
    """
    positive = {key: StackedDatum(key=key, value=_clip(datum.value, True)) for key, datum in value_map.items()}
    negative = {key: StackedDatum(key=key, value=_clip(datum.value, False)) for key, datum in value_map.items()}
    return positive, negative
