"""
Euler tour traversal of rooted trees.

The LCA engine does not walk graphs itself. It asks a traversal callable
to replay the tour into a visitor, once for vertices and once for depths:

    traverse(visitor)  # calls visitor.visit(vertex, depth) per visit event

`make_tree_traversal` provides such a callable for adjacency mappings
{parent: [children]}. A vertex is visited on entry and again after
returning from each of its children, so an n-vertex tree yields a tour of
length 2n - 1.
"""

from typing import Callable, Hashable, Iterable, Iterator, List, Mapping, Optional, Protocol, Tuple


class TourVisitor(Protocol):
    """Receives one call per Euler tour visit event."""

    def visit(self, vertex: Hashable, depth: int) -> None:
        ...


class EulerPathVisitor:
    """Records the visited vertex of every visit event."""

    def __init__(self, out: List):
        self.out = out

    def visit(self, vertex: Hashable, depth: int) -> None:
        self.out.append(vertex)


class VertexDepthVisitor:
    """Records the depth of every visit event."""

    def __init__(self, out: List[int]):
        self.out = out

    def visit(self, vertex: Hashable, depth: int) -> None:
        self.out.append(depth)


Tree = Mapping[Hashable, Iterable[Hashable]]
Traversal = Callable[[TourVisitor], None]

_DONE = object()


def _vertices(tree: Tree) -> Iterator[Hashable]:
    """Every parent and child named in the adjacency mapping."""
    for parent, kids in tree.items():
        yield parent
        yield from kids


def find_root(tree: Tree) -> Optional[Hashable]:
    """
    Find the root of a tree given as {parent: [children]}.

    Returns:
        The only vertex that is not a child of another vertex, or None
        for an empty tree

    Raises:
        ValueError: if there is no such vertex or more than one
    """
    if not tree:
        return None

    children = {child for kids in tree.values() for child in kids}
    roots = [vertex for vertex in tree if vertex not in children]

    if len(roots) != 1:
        raise ValueError(f"Expected exactly one root, found {len(roots)}: {roots[:5]}")
    return roots[0]


def depth_first_tour(tree: Tree, root: Hashable) -> Iterator[Tuple[Hashable, int]]:
    """
    Yield (vertex, depth) for every Euler tour visit event.

    Iterative, so deep trees are fine.

    Raises:
        ValueError: if a vertex is reached twice, or if some vertex of the
            tree is not reachable from `root` (input is not a tree)
    """
    discovered = {root}
    yield root, 0
    stack = [(root, iter(tree.get(root, ())))]

    while stack:
        vertex, children = stack[-1]
        child = next(children, _DONE)

        if child is _DONE:
            stack.pop()
            if stack:
                # Back at the parent after finishing this subtree
                yield stack[-1][0], len(stack) - 1
            continue

        if child in discovered:
            raise ValueError(f"Vertex {child!r} reached twice; input is not a tree")
        discovered.add(child)

        yield child, len(stack)
        stack.append((child, iter(tree.get(child, ()))))

    unreached = [v for v in dict.fromkeys(_vertices(tree)) if v not in discovered]
    if unreached:
        raise ValueError(f"{len(unreached)} vertices not reachable from {root!r}: {unreached[:5]}")


def make_tree_traversal(tree: Tree, root: Optional[Hashable] = None) -> Traversal:
    """
    Package a tree as a traversal callable for `lca.lca_preprocess`.

    Args:
        tree: Adjacency mapping {parent: [children]}
        root: Root vertex; inferred with `find_root` when omitted. Must match
            the inferred root when the tree is non-empty

    Returns:
        Callable replaying the Euler tour into a visitor
    """
    found = find_root(tree)
    if root is None:
        root = found
    elif found is not None and root != found:
        raise ValueError(f"Root {root!r} is not the root of the tree, expected {found!r}")

    def traverse(visitor: TourVisitor) -> None:
        if root is None:
            return
        for vertex, depth in depth_first_tour(tree, root):
            visitor.visit(vertex, depth)

    return traverse
