"""
Sparse Table Implementation for O(1) Range Minimum Queries (RMQ)

This module provides:
- O(n log n) preprocessing of a static sequence into a table of minimum indices
- Two storage layouts behind one construction algorithm:
    * indexed: a (levels + 1) x n buffer addressed as M[level][position]
    * flat: all levels >= 1 appended into one arena, addressed through
      `translate_sparse_table`
- O(1) queries returning the lowest index holding the range minimum

Level 0 is never stored: M[0][i] == i. Level j holds, for every start
position i in [0, n - 2^j], the index of the minimum of values[i:i + 2^j].
Ties always go to the lower index.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, MutableSequence, Sequence, Tuple

import numpy as np

from log_pow import lower_log2, pow2

logger = logging.getLogger(__name__)

FLAT = 'flat'
INDEXED = 'indexed'
LAYOUTS = (FLAT, INDEXED)


class InvalidRangeError(IndexError):
    """Raised when a query range violates 0 <= i <= j < n."""

    def __init__(self, i: int, j: int, n: int):
        super().__init__(f"Invalid range [{i}, {j}] for a sequence of length {n}")
        self.i = i
        self.j = j
        self.n = n


class IndexedStorage:
    """Storage strategy writing into a caller-owned 2-D table."""

    def __init__(self, table):
        self.table = table

    def begin_level(self, level: int):
        pass

    def put(self, level: int, i: int, index: int):
        self.table[level][i] = index

    def get(self, level: int, i: int) -> int:
        return int(self.table[level][i])


class FlatStorage:
    """
    Storage strategy appending every level into one flat arena.

    Each level is shorter than the one before it, so the start of the
    previous level is tracked with a running offset recorded when a new
    level begins.
    """

    def __init__(self, arena: MutableSequence[int]):
        if len(arena):
            raise ValueError("Flat sparse table storage must start empty")
        self.arena = arena
        self._offsets = {}

    def begin_level(self, level: int):
        self._offsets[level] = len(self.arena)

    def put(self, level: int, i: int, index: int):
        # Positions arrive in order, so appending is enough
        self.arena.append(index)

    def get(self, level: int, i: int) -> int:
        return self.arena[self._offsets[level] + i]


def _build_levels(values: Sequence, storage) -> int:
    """
    Fill `storage` with levels 1..floor(log2 n) of the sparse table.

    Returns:
        Number of levels written (0 when n <= 2)
    """
    n = len(values)
    if n <= 2:
        return 0

    storage.begin_level(1)
    for i in range(n - 1):
        storage.put(1, i, i if values[i] <= values[i + 1] else i + 1)

    top = lower_log2(n)
    half = 2
    for level in range(2, top + 1):
        storage.begin_level(level)
        block = pow2(level)
        for i in range(n - block + 1):
            m1 = storage.get(level - 1, i)
            m2 = storage.get(level - 1, i + half)
            # Strict comparison keeps the left child on ties
            storage.put(level, i, m2 if values[m2] < values[m1] else m1)
        half = block

    return top


def allocate_index_table(n: int) -> np.ndarray:
    """Allocate a zeroed (floor(log2 n) + 1) x n table for indexed preprocessing."""
    levels = lower_log2(n) if n else 0
    return np.zeros((levels + 1, n), dtype=np.intp)


def index_preprocess_sparse_table(values: Sequence, table):
    """
    Build an index-addressed sparse table in place.

    Args:
        values: Read-only random-access sequence of ordered values
        table: Mutable 2-D array supporting table[level][position] = index,
            sized at least (floor(log2 n) + 1) x n (see `allocate_index_table`)

    Returns:
        The same table, filled. Left untouched when len(values) <= 2.
    """
    n = len(values)
    if n > 2 and len(table) < lower_log2(n) + 1:
        raise ValueError(
            f"Sparse table has {len(table)} rows, needs {lower_log2(n) + 1} for n={n}"
        )
    levels = _build_levels(values, IndexedStorage(table))
    logger.debug(f"Indexed sparse table: n={n}, levels={levels}")
    return table


def preprocess_sparse_table(values: Sequence, arena: MutableSequence[int]):
    """
    Build a flat sparse table by appending to an empty container.

    Args:
        values: Read-only random-access sequence of ordered values
        arena: Empty container supporting append and random-access reads

    Returns:
        The same container. Left empty when len(values) <= 2.
    """
    levels = _build_levels(values, FlatStorage(arena))
    logger.debug(f"Flat sparse table: n={len(values)}, levels={levels}, entries={len(arena)}")
    return arena


def translate_sparse_table(i: int, level: int, n: int) -> int:
    """
    Offset of entry (level, i) in a flat sparse table built over n values.

    Level l holds n - 2^l + 1 entries, so the offset is
    i + sum(n - 2^l + 1 for l in 1..level-1), which collapses to
    i + (level - 1)(n + 1) - 2^level + 2.
    """
    if level < 1:
        raise ValueError(f"Level 0 is not stored, got level={level}")
    return i + (level - 1) * (n + 1) - pow2(level) + 2


def _check_range(i: int, j: int, n: int):
    if not 0 <= i <= j < n:
        raise InvalidRangeError(i, j, n)


def _range_minimum(i: int, j: int, values: Sequence,
                   lookup: Callable[[int, int], int]) -> int:
    """Answer RMQ on [i, j] given a (level, position) -> index lookup."""
    _check_range(i, j, len(values))

    if i == j:
        return i
    if j == i + 1:
        return i if values[i] <= values[j] else j

    # Two overlapping blocks of length 2^k cover [i, j]
    k = lower_log2(j - i + 1)
    left = lookup(k, i)
    right = lookup(k, j - pow2(k) + 1)
    return right if values[right] < values[left] else left


def index_query_sparse_table(i: int, j: int, values: Sequence, table) -> int:
    """
    Query an index-addressed sparse table.

    Args:
        i: Left index (inclusive)
        j: Right index (inclusive)
        values: The sequence the table was built from
        table: Table filled by `index_preprocess_sparse_table`

    Returns:
        Lowest index in [i, j] holding the minimum value

    Raises:
        InvalidRangeError: unless 0 <= i <= j < len(values)
    """
    return _range_minimum(i, j, values, lambda level, p: int(table[level][p]))


def query_sparse_table(i: int, j: int, values: Sequence, arena: Sequence[int]) -> int:
    """Query a flat sparse table built by `preprocess_sparse_table`."""
    n = len(values)
    return _range_minimum(
        i, j, values, lambda level, p: int(arena[translate_sparse_table(p, level, n)])
    )


@dataclass(frozen=True, eq=False)
class SparseTable:
    """
    Immutable Sparse Table for Range Minimum Query.

    Build instances with `SparseTable.build`. The dataclass constructor is
    internal: it stores whatever it is given and does not check that
    `table` was built from `values`. A built table keeps its value tuple
    and read-only table unchanged, so it can be shared between threads
    and queried concurrently.

    Preprocessing: O(n log n)
    Query: O(1)
    """
    values: Tuple[Any, ...]
    layout: str
    levels: int
    table: np.ndarray = field(repr=False)

    @classmethod
    def build(cls, values: Sequence, layout: str = FLAT) -> 'SparseTable':
        """
        Build a sparse table over `values`.

        Args:
            values: Ordered values (anything supporting <= and <)
            layout: 'flat' or 'indexed'

        Returns:
            Built SparseTable
        """
        if layout not in LAYOUTS:
            raise ValueError(f"Unknown sparse table layout '{layout}', expected one of {LAYOUTS}")

        values = tuple(values)
        n = len(values)

        if layout == INDEXED:
            table = index_preprocess_sparse_table(values, allocate_index_table(n))
        else:
            table = np.asarray(preprocess_sparse_table(values, []), dtype=np.intp)
        table.setflags(write=False)

        levels = lower_log2(n) if n > 2 else 0
        return cls(values=values, layout=layout, levels=levels, table=table)

    def __len__(self) -> int:
        return len(self.values)

    def query(self, i: int, j: int) -> int:
        """
        Query the lowest index of the minimum value in range [i, j].

        Args:
            i: Left index (inclusive)
            j: Right index (inclusive)

        Returns:
            Index into `values`
        """
        if self.layout == INDEXED:
            return index_query_sparse_table(i, j, self.values, self.table)
        return query_sparse_table(i, j, self.values, self.table)

    def min_value(self, i: int, j: int):
        """Minimum value in range [i, j]."""
        return self.values[self.query(i, j)]


def make_sparse_table(values: Sequence, layout: str = FLAT) -> SparseTable:
    """Build a SparseTable; shorthand for `SparseTable.build`."""
    return SparseTable.build(values, layout)
