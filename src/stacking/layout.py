"""Stacking for any object exposing datasets and key/value accessors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence, runtime_checkable

from core.logging import get_logger
from stacking.dataset import Accessor, Dataset, StackOffsetMap
from stacking.extent import RecordFilter, compute_stack_extent
from stacking.offsets import compute_stack_offsets

LOGGER = get_logger(__name__)


@runtime_checkable
class SupportsStacking(Protocol):
    """Capability of plots (or anything else) whose datasets stack."""

    def datasets(self) -> Sequence[Dataset]: ...

    def key_accessor(self) -> Accessor: ...

    def value_accessor(self) -> Accessor: ...


@dataclass(frozen=True)
class StackedLayout:
    """Offsets and value extent of one stacking pass."""

    offsets: StackOffsetMap
    extent: tuple[float, float]


def compute_stacked_layout(source: SupportsStacking, filter: RecordFilter | None = None) -> StackedLayout:
    """Run offsets then extent for ``source``; ``filter`` only narrows the extent."""
    datasets = list(source.datasets())
    key_accessor = source.key_accessor()
    value_accessor = source.value_accessor()

    offsets = compute_stack_offsets(datasets, key_accessor, value_accessor)
    extent = compute_stack_extent(datasets, key_accessor, value_accessor, offsets, filter)
    key_count = len(next(iter(offsets.values()))) if offsets else 0
    LOGGER.debug(
        "Stacked layout | datasets=%d keys=%d extent=(%s, %s)", len(datasets), key_count, extent[0], extent[1]
    )
    return StackedLayout(offsets=offsets, extent=extent)
