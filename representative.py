"""
First-occurrence ("representative element") scanning.

A representative element of a sequence is the first position at which
each distinct value appears. The LCA engine uses the same idea keyed on
vertex id: the representative of a vertex is the first Euler tour
position at which it is visited.

All entry points share `first_occurrences`, which keeps the earliest
pair for every key and silently drops later ones.
"""

from itertools import islice
from typing import Dict, Hashable, Iterable, Iterator, Tuple, TypeVar

K = TypeVar('K', bound=Hashable)
V = TypeVar('V')


def first_occurrences(pairs: Iterable[Tuple[K, V]]) -> Iterator[Tuple[K, V]]:
    """
    Yield each (key, value) pair whose key has not been seen before.

    Every pair is read exactly once, with one membership test and at most
    one insert per pair. Output order is input order.
    """
    seen = set()
    for key, value in pairs:
        if key not in seen:
            seen.add(key)
            yield key, value


def first_occurrence_map(pairs: Iterable[Tuple[K, V]]) -> Dict[K, V]:
    """
    Build a key -> value mapping with insert-if-absent semantics.

    Args:
        pairs: (key, value) pairs, e.g. (vertex, tour position)

    Returns:
        Dict holding, for every key, the value of its earliest pair
    """
    return dict(first_occurrences(pairs))


def representative_element(values: Iterable[Hashable]) -> Iterator[int]:
    """Yield the position of the first appearance of each distinct value."""
    pairs = ((value, position) for position, value in enumerate(values))
    for _, position in first_occurrences(pairs):
        yield position


def representative_element_n(values: Iterable[Hashable], count: int) -> Iterator[int]:
    """Like `representative_element`, but reads only the first `count` values."""
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    return representative_element(islice(values, count))
