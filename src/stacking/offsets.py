"""Stack offset computation for multi-dataset stacked charts."""

from __future__ import annotations

from typing import Sequence

from core.logging import get_logger
from stacking.cumulative import stack_cumulative
from stacking.dataset import Accessor, Dataset, StackOffsetMap, as_number, is_zero_like, key_string
from stacking.domain import domain_keys
from stacking.value_map import ValueMap, build_value_map, partition_by_sign

LOGGER = get_logger(__name__)


def _all_non_positive(dataset: Dataset, value_accessor: Accessor) -> bool:
    """True when no record holds a strictly positive value; missing values count as zero."""
    return not any(as_number(value_accessor(record, index, dataset)) > 0 for index, record in dataset.records())


def resolve_offsets(
    datasets: Sequence[Dataset],
    key_accessor: Accessor,
    value_accessor: Accessor,
    positive_maps: Sequence[ValueMap],
    negative_maps: Sequence[ValueMap],
) -> StackOffsetMap:
    """Pick, per dataset and key, the positive or negative stack offset.

    Strictly positive values take the positive stack offset and strictly
    negative ones the negative stack offset. Zero and non-numeric values, as
    well as domain keys the dataset has no record for, take the negative
    stack offset only when every value of the dataset is <= 0.
    """
    stack_offsets: StackOffsetMap = {}
    for dataset, positive_map, negative_map in zip(datasets, positive_maps, negative_maps):
        zero_map = negative_map if _all_non_positive(dataset, value_accessor) else positive_map
        dataset_offsets = {key: float(datum.offset) for key, datum in zero_map.items()}

        for index, record in dataset.records():
            key = key_string(key_accessor(record, index, dataset))
            value = as_number(value_accessor(record, index, dataset))
            if is_zero_like(value):
                source = zero_map
            elif value > 0:
                source = positive_map
            else:
                source = negative_map
            dataset_offsets[key] = float(source[key].offset)

        stack_offsets[dataset] = dataset_offsets
    return stack_offsets


def compute_stack_offsets(
    datasets: Sequence[Dataset],
    key_accessor: Accessor,
    value_accessor: Accessor,
) -> StackOffsetMap:
    """Compute the offset of every key in every dataset relative to the baseline.

    Dataset order is stacking order: the first dataset is the bottom layer.
    Positive and negative contributions are stacked separately, so a negative
    datum extends the stack below zero instead of overlapping positive ones.

    Returns a mapping from each dataset to ``{key: offset}`` covering every key
    seen in any dataset. Inputs are never mutated.
    """
    domain = domain_keys(datasets, key_accessor)
    value_maps = [build_value_map(dataset, key_accessor, value_accessor, domain) for dataset in datasets]

    positive_maps: list[ValueMap] = []
    negative_maps: list[ValueMap] = []
    for value_map in value_maps:
        positive, negative = partition_by_sign(value_map)
        positive_maps.append(positive)
        negative_maps.append(negative)

    stack_cumulative(positive_maps, domain)
    stack_cumulative(negative_maps, domain)

    LOGGER.debug("Computed stack offsets | datasets=%d keys=%d", len(datasets), len(domain))
    return resolve_offsets(datasets, key_accessor, value_accessor, positive_maps, negative_maps)
