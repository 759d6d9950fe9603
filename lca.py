"""
Lowest Common Ancestor via Euler Tour + Sparse Table RMQ

Berkman and Vishkin's reduction (see Bender et al., "Lowest common
ancestors in trees and directed acyclic graphs", J. Algorithms 57 (2005)):

1. Record an Euler tour E of the tree and the depth L[p] of every visit
2. Map each vertex to its first tour position R[v]
3. Build a sparse table over L
4. lca(u, v) = E[argmin L[R[u]..R[v]]]

Features:
- O(n log n) preprocessing
- O(1) LCA queries
- Built structures are immutable and safe to query from many threads
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Hashable, List, Mapping, Optional, Tuple

from representative import first_occurrence_map
from sparse_table import FLAT, SparseTable
from traversal import EulerPathVisitor, Traversal, Tree, VertexDepthVisitor, make_tree_traversal

logger = logging.getLogger(__name__)


def lca_preprocess(traverse: Traversal, euler_tour: List, depths: List[int],
                   representatives: Dict, layout: str = FLAT) -> SparseTable:
    """
    Preprocess a tree for LCA querying.

    Args:
        traverse: Callable replaying the tree's Euler tour into a visitor
        euler_tour: Empty list, filled with the visited vertex per event (E)
        depths: Empty list, filled with the depth per event (L)
        representatives: Empty dict, filled with vertex -> first tour position (R)
        layout: Sparse table layout ('flat' or 'indexed')

    Returns:
        Sparse table over `depths`

    Time complexity: Θ(n lg n)
    """
    if euler_tour or depths or representatives:
        raise ValueError("lca_preprocess expects empty output containers")

    traverse(EulerPathVisitor(euler_tour))  # Θ(n)
    traverse(VertexDepthVisitor(depths))  # Θ(n)

    if len(euler_tour) != len(depths):
        raise ValueError(
            f"Traversal emitted {len(euler_tour)} vertices but {len(depths)} depths"
        )

    # Insert-if-absent keeps the first visit of every vertex
    representatives.update(
        first_occurrence_map((vertex, position) for position, vertex in enumerate(euler_tour))
    )  # Θ(n)

    return SparseTable.build(depths, layout)  # Θ(n lg n)


def lca_query(u: Hashable, v: Hashable, euler_tour, representatives: Mapping,
              table: SparseTable) -> Hashable:
    """
    Query the lowest common ancestor of two vertices.

    u and v may be given in either order: lca_query(u, v, ...) == lca_query(v, u, ...).

    Raises:
        KeyError: if either vertex is not in the tree

    Time complexity: Θ(1)
    """
    i = _tour_position(u, representatives)
    j = _tour_position(v, representatives)
    if j < i:
        i, j = j, i
    return euler_tour[table.query(i, j)]


def _tour_position(vertex: Hashable, representatives: Mapping) -> int:
    try:
        return representatives[vertex]
    except KeyError:
        raise KeyError(f"Vertex {vertex!r} is not in the tree") from None


@dataclass(frozen=True, eq=False)
class EulerTourLCA:
    """
    Lowest Common Ancestor using Euler Tour + Sparse Table.

    Build with `from_tree` or `from_traversal`; the tour, the
    representative map and the sparse table never change afterwards.
    """
    euler_tour: Tuple[Hashable, ...]
    representatives: Mapping[Hashable, int]
    sparse_table: SparseTable

    @classmethod
    def from_traversal(cls, traverse: Traversal, layout: str = FLAT) -> 'EulerTourLCA':
        """Build from a traversal callable (see `traversal.make_tree_traversal`)."""
        euler_tour: List = []
        depths: List[int] = []
        representatives: Dict = {}
        table = lca_preprocess(traverse, euler_tour, depths, representatives, layout)

        logger.info(f"LCA structure built: {len(representatives)} vertices, "
                    f"tour length {len(euler_tour)}, {table.levels} table levels")

        return cls(
            euler_tour=tuple(euler_tour),
            representatives=MappingProxyType(representatives),
            sparse_table=table,
        )

    @classmethod
    def from_tree(cls, tree: Tree, root: Optional[Hashable] = None,
                  layout: str = FLAT) -> 'EulerTourLCA':
        """
        Build from an adjacency mapping.

        Args:
            tree: Adjacency list {parent_id: [child_ids]}
            root: Root vertex (inferred when omitted)
            layout: Sparse table layout
        """
        return cls.from_traversal(make_tree_traversal(tree, root), layout)

    @property
    def depths(self) -> Tuple[int, ...]:
        """Depth of every tour position (L)."""
        return self.sparse_table.values

    def __contains__(self, vertex: Hashable) -> bool:
        return vertex in self.representatives

    def __len__(self) -> int:
        return len(self.representatives)

    def lca(self, u: Hashable, v: Hashable) -> Hashable:
        """
        Find Lowest Common Ancestor of vertices u and v in O(1) time.

        Args:
            u: First vertex
            v: Second vertex

        Returns:
            LCA vertex
        """
        return lca_query(u, v, self.euler_tour, self.representatives, self.sparse_table)

    def depth(self, vertex: Hashable) -> int:
        """Depth of a vertex (root is 0)."""
        return self.depths[_tour_position(vertex, self.representatives)]

    def distance(self, u: Hashable, v: Hashable) -> int:
        """
        Number of edges on the tree path between u and v.

        distance = depth(u) + depth(v) - 2 * depth(lca(u, v))
        """
        return self.depth(u) + self.depth(v) - 2 * self.depth(self.lca(u, v))

    def is_ancestor(self, ancestor: Hashable, vertex: Hashable) -> bool:
        """True if `ancestor` lies on the path from the root to `vertex` (inclusive)."""
        return self.lca(ancestor, vertex) == ancestor

    def stats(self) -> Dict:
        """Get statistics about the LCA structure."""
        return {
            'num_vertices': len(self.representatives),
            'euler_tour_length': len(self.euler_tour),
            'table_levels': self.sparse_table.levels,
            'max_depth': max(self.depths) if self.depths else 0,
        }
