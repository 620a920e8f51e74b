"""Value extent spanning stacked datasets."""

from __future__ import annotations

from typing import Any, Callable, Sequence

import numpy as np

from stacking.dataset import Accessor, Dataset, StackOffsetMap, as_number, key_string

RecordFilter = Callable[[Any, int, Dataset], bool]


def stacked_values(
    dataset: Dataset,
    key_accessor: Accessor,
    value_accessor: Accessor,
    stack_offsets: StackOffsetMap,
    filter: RecordFilter | None = None,
) -> np.ndarray:
    """Return ``value + offset`` for the dataset's records that pass ``filter``."""
    offsets = stack_offsets[dataset]
    totals = [
        as_number(value_accessor(record, index, dataset)) + offsets[key_string(key_accessor(record, index, dataset))]
        for index, record in dataset.records()
        if filter is None or filter(record, index, dataset)
    ]
    return np.asarray(totals, dtype=np.float64)


def compute_stack_extent(
    datasets: Sequence[Dataset],
    key_accessor: Accessor,
    value_accessor: Accessor,
    stack_offsets: StackOffsetMap,
    filter: RecordFilter | None = None,
) -> tuple[float, float]:
    """Return the ``(min, max)`` range covered by the stacked values.

    ``stack_offsets`` may come from an earlier ``compute_stack_offsets`` call;
    it is only read. NaN totals are ignored. The baseline 0 is always inside
    the returned range.
    """
    low = 0.0
    high = 0.0
    for dataset in datasets:
        totals = stacked_values(dataset, key_accessor, value_accessor, stack_offsets, filter)
        totals = totals[~np.isnan(totals)]
        if totals.size:
            low = min(low, float(totals.min()))
            high = max(high, float(totals.max()))
    return low, high
