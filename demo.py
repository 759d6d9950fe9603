"""
Demo - Range Minimum and Lowest Common Ancestor queries from the command line

Usage:
    python demo.py --mode demo
    python demo.py --mode rmq --values 2 5 1 4 3 --range 0 4 --range 3 4
    python demo.py --mode lca --tree tree.yaml --pair 3 2 --pair 3 1

A tree file is YAML (or JSON) holding either an adjacency mapping
{parent: [children]} or {root: r, tree: {parent: [children]}}.
"""

import argparse
import logging
import time
from typing import Dict, List, Optional, Tuple

import yaml

from config import DEFAULT_CONFIG_PATH, configure_logging, load_config
from lca import EulerTourLCA
from sparse_table import LAYOUTS, InvalidRangeError, SparseTable

logger = logging.getLogger(__name__)

SAMPLE_VALUES = [2, 5, 1, 4, 3]
SAMPLE_RANGES = [(0, 4), (1, 3), (3, 4)]

#       0
#      / \
#     1   2
#     |
#     3
SAMPLE_TREE = {0: [1, 2], 1: [3]}
SAMPLE_PAIRS = [(3, 2), (3, 1), (2, 2)]


def parse_vertex(token: str):
    """Parse a vertex id the way YAML would ('3' -> 3, 'a' -> 'a')."""
    vertex = yaml.safe_load(token)
    if vertex is None or isinstance(vertex, (list, dict)):
        return token
    return vertex


def _normalise_vertex(vertex):
    # JSON object keys are always strings
    return parse_vertex(vertex) if isinstance(vertex, str) else vertex


def load_tree(path: str) -> Tuple[Dict, Optional[object]]:
    """
    Load (tree, root) from a YAML/JSON file; root is None when not given.

    Parents, children and the root all go through `parse_vertex`, so a JSON
    file {"0": [1, 2]} gives the same tree as the YAML {0: [1, 2]}.
    """
    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Tree file {path} must contain a mapping")

    if 'tree' in data:
        tree, root = data['tree'] or {}, data.get('root')
    else:
        tree, root = data, None

    if not isinstance(tree, dict):
        raise ValueError(f"Tree in {path} must be a mapping of parent to children")

    tree = {
        _normalise_vertex(parent): [_normalise_vertex(child) for child in children or []]
        for parent, children in tree.items()
    }
    if root is not None:
        root = _normalise_vertex(root)
    return tree, root


def run_rmq(values: List, ranges: List[Tuple[int, int]], layout: str):
    start_time = time.time()
    table = SparseTable.build(values, layout)
    build_time = time.time() - start_time

    print(f"Values: {list(table.values)}")
    print(f"Layout: {table.layout}, levels: {table.levels}, build time: {build_time*1000:.2f}ms")
    for i, j in ranges:
        index = table.query(i, j)
        print(f"  RMQ({i}, {j}) = index {index} (value {table.values[index]})")


def run_lca(tree: Dict, root, pairs: List[Tuple], layout: str):
    start_time = time.time()
    solver = EulerTourLCA.from_tree(tree, root, layout)
    build_time = time.time() - start_time

    print(f"Euler tour: {list(solver.euler_tour)}")
    print(f"Depths:     {list(solver.depths)}")
    print(f"Build time: {build_time*1000:.2f}ms")
    for u, v in pairs:
        ancestor = solver.lca(u, v)
        print(f"  LCA({u}, {v}) = {ancestor} (depth {solver.depth(ancestor)}, "
              f"distance {solver.distance(u, v)})")
    print(f"Statistics: {solver.stats()}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Sparse table RMQ and Euler tour LCA queries')
    parser.add_argument('--mode', type=str, default='demo', choices=['rmq', 'lca', 'demo'],
                        help='Which queries to run')
    parser.add_argument('--config', type=str, default=DEFAULT_CONFIG_PATH,
                        help='Path to config.yaml')
    parser.add_argument('--layout', type=str, choices=list(LAYOUTS),
                        help='Sparse table layout (overrides config)')
    parser.add_argument('--values', type=int, nargs='+',
                        help='Input sequence (for rmq mode)')
    parser.add_argument('--range', type=int, nargs=2, action='append', dest='ranges',
                        metavar=('I', 'J'), help='Inclusive query range (repeatable)')
    parser.add_argument('--tree', type=str,
                        help='Path to tree YAML/JSON (for lca mode)')
    parser.add_argument('--root', type=str,
                        help='Root vertex (inferred when omitted)')
    parser.add_argument('--pair', type=str, nargs=2, action='append', dest='pairs',
                        metavar=('U', 'V'), help='Vertex pair to query (repeatable)')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    configure_logging(config)
    layout = args.layout or config['sparse_table']['layout']
    if layout not in LAYOUTS:
        parser.error(f"Unknown layout '{layout}' in config, expected one of {LAYOUTS}")

    try:
        if args.mode == 'rmq':
            if not args.values:
                parser.error("--values required for rmq mode")
            ranges = [tuple(r) for r in args.ranges] if args.ranges else [(0, len(args.values) - 1)]
            run_rmq(args.values, ranges, layout)

        elif args.mode == 'lca':
            if not args.tree:
                parser.error("--tree required for lca mode")
            tree, root = load_tree(args.tree)
            if args.root is not None:
                root = parse_vertex(args.root)
            pairs = [(parse_vertex(u), parse_vertex(v)) for u, v in args.pairs or []]
            run_lca(tree, root, pairs, layout)

        else:
            print("=" * 60)
            print("DEMO 1: Range Minimum Query")
            print("=" * 60)
            run_rmq(SAMPLE_VALUES, SAMPLE_RANGES, layout)
            print("\n" + "=" * 60)
            print("DEMO 2: Lowest Common Ancestor")
            print("=" * 60)
            run_lca(SAMPLE_TREE, 0, SAMPLE_PAIRS, layout)

    except (InvalidRangeError, KeyError, ValueError, OSError, yaml.YAMLError) as e:
        logger.error(f"Query failed: {e}")
        parser.error(str(e))

    return 0


if __name__ == "__main__":
    main()
