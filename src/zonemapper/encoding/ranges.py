"""Interval run-length compression of pincode sets."""

from typing import Iterable, List

from zonemapper.domain.exceptions import ParameterValidationError
from zonemapper.domain.models import PincodeRange, CompressedPincodes

DEFAULT_RANGE_THRESHOLD = 3


def compress(values: Iterable[int], threshold: int = DEFAULT_RANGE_THRESHOLD) -> CompressedPincodes:
    """
    Compress integers into maximal consecutive runs plus singles.

    A run of length L is stored as a range only when L >= threshold,
    otherwise its members go to `singles`. Input is deduplicated and
    sorted first; `singles` comes back sorted.
    """
    if threshold < 1:
        raise ParameterValidationError("threshold", threshold, expected=">= 1")

    ordered = sorted(set(int(v) for v in values))
    if not ordered:
        return CompressedPincodes()

    ranges: List[PincodeRange] = []
    singles: List[int] = []

    def _close(start: int, end: int) -> None:
        if end - start + 1 >= threshold:
            ranges.append(PincodeRange(start, end))
        else:
            singles.extend(range(start, end + 1))

    start = end = ordered[0]
    for pin in ordered[1:]:
        if pin == end + 1:
            end = pin
            continue
        _close(start, end)
        start = end = pin
    _close(start, end)

    return CompressedPincodes(ranges=tuple(ranges), singles=tuple(singles))


def expand(ranges: Iterable[PincodeRange], singles: Iterable[int]) -> List[int]:
    """Union of every range (inclusive) and every single, sorted and unique."""
    result = set()
    for r in ranges:
        result.update(range(r.start, r.end + 1))
    result.update(int(p) for p in singles)
    return sorted(result)


def expand_compressed(compressed: CompressedPincodes) -> List[int]:
    return expand(compressed.ranges, compressed.singles)
