"""Stack offsets and extents for stacked bar and area charts."""

from .dataset import Accessor, Dataset, StackOffsetMap, field_accessor
from .domain import domain_keys, find_duplicate_keys
from .extent import compute_stack_extent
from .layout import StackedLayout, SupportsStacking, compute_stacked_layout
from .offsets import compute_stack_offsets
from .segments import StackSegment, compute_stack_segments, value_axis

__all__ = [
    "Accessor",
    "Dataset",
    "StackOffsetMap",
    "StackSegment",
    "StackedLayout",
    "SupportsStacking",
    "compute_stack_extent",
    "compute_stack_offsets",
    "compute_stack_segments",
    "compute_stacked_layout",
    "domain_keys",
    "field_accessor",
    "find_duplicate_keys",
    "value_axis",
]
