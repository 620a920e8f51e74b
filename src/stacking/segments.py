"""Per-record stacked segments in value space."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Sequence

from stacking.dataset import Accessor, Dataset, StackOffsetMap, as_number, key_string

StackOrientation = Literal["vertical", "horizontal"]

_VALUE_AXES: dict[str, str] = {"vertical": "y", "horizontal": "x"}


def value_axis(orientation: StackOrientation) -> str:
    """Return the axis values stack along: ``y`` for vertical stacks, ``x`` for horizontal."""
    try:
        return _VALUE_AXES[orientation]
    except KeyError as exc:
        raise ValueError(f"Unknown stack orientation: {orientation!r}") from exc


@dataclass(frozen=True)
class StackSegment:
    """Where one record's value sits inside its stack."""

    key: str
    index: int
    value: float
    offset: float

    @property
    def start(self) -> float:
        return self.offset

    @property
    def end(self) -> float:
        return self.offset + self.value

    @property
    def lower(self) -> float:
        """Edge closest to negative infinity, whatever the value's sign."""
        return min(self.start, self.end)

    @property
    def upper(self) -> float:
        return max(self.start, self.end)


def compute_stack_segments(
    datasets: Sequence[Dataset],
    key_accessor: Accessor,
    value_accessor: Accessor,
    stack_offsets: StackOffsetMap,
) -> dict[Dataset, list[StackSegment]]:
    """Build one segment per record of every dataset, in record order."""
    segments: dict[Dataset, list[StackSegment]] = {}
    for dataset in datasets:
        offsets = stack_offsets[dataset]
        dataset_segments: list[StackSegment] = []
        for index, record in dataset.records():
            key = key_string(key_accessor(record, index, dataset))
            value = as_number(value_accessor(record, index, dataset))
            dataset_segments.append(StackSegment(key=key, index=index, value=value, offset=offsets[key]))
        segments[dataset] = dataset_segments
    return segments
