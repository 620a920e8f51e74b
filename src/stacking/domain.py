"""Key domain resolution across stacked datasets."""

from __future__ import annotations

from typing import Sequence

from stacking.dataset import Accessor, Dataset, key_string


def domain_keys(datasets: Sequence[Dataset], key_accessor: Accessor) -> list[str]:
    """Return the distinct string keys of all datasets in first-occurrence order.

    Datasets are walked in order, then records in order. Keys are not sorted.
    """
    seen: dict[str, None] = {}
    for dataset in datasets:
        for index, record in dataset.records():
            seen.setdefault(key_string(key_accessor(record, index, dataset)), None)
    return list(seen)


def find_duplicate_keys(datasets: Sequence[Dataset], key_accessor: Accessor) -> dict[Dataset, list[str]]:
    """Return keys occurring more than once inside a single dataset.

    Only datasets with at least one duplicate appear in the result. The
    stacking engine itself keeps the last record for a duplicated key.
    """
    duplicates: dict[Dataset, list[str]] = {}
    for dataset in datasets:
        counts: dict[str, int] = {}
        for index, record in dataset.records():
            key = key_string(key_accessor(record, index, dataset))
            counts[key] = counts.get(key, 0) + 1
        repeated = [key for key, count in counts.items() if count > 1]
        if repeated:
            duplicates[dataset] = repeated
    return duplicates
