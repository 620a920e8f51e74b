"""Cumulative stacking of same-sign value maps."""

from __future__ import annotations

from typing import Sequence

from stacking.value_map import ValueMap


def stack_cumulative(value_maps: Sequence[ValueMap], domain: Sequence[str]) -> Sequence[ValueMap]:
    """Set each datum's ``offset`` to the sum of earlier datasets' values at its key.

    ``value_maps`` is ordered bottom layer first and is updated in place. The
    first dataset always sits on offset 0.0. NaN values propagate into the
    offsets of every later dataset at that key.
    """
    for key in domain:
        running = 0.0
        for value_map in value_maps:
            datum = value_map[key]
            datum.offset = running
            running += datum.value
    return value_maps
