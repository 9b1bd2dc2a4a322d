"""
Unit tests for connected component extraction.
"""

import random

import numpy as np

from clusters import adjacency_lists, connected_components
from term_matrix import symmetric_sparse_matrix


def graph(size, edges):
    matrix = symmetric_sparse_matrix(size, dtype=np.float64)
    for a, b in edges:
        matrix.set(a, b, 1.0)
    return matrix


class TestConnectedComponents:
    def test_components_in_root_order(self):
        matrix = graph(7, [(0, 4), (4, 6), (1, 2), (3, 5)])
        assert connected_components(matrix) == [{0, 4, 6}, {1, 2}, {3, 5}]

    def test_isolated_terms_are_singletons(self):
        matrix = graph(4, [(1, 3)])
        assert connected_components(matrix) == [{0}, {1, 3}, {2}]

    def test_empty_graph(self):
        assert connected_components(graph(3, [])) == [{0}, {1}, {2}]
        assert connected_components(graph(0, [])) == []

    def test_long_chain_without_recursion(self):
        size = 5000
        matrix = graph(size, [(i, i + 1) for i in range(size - 1)])
        components = connected_components(matrix)
        assert len(components) == 1
        assert components[0] == set(range(size))

    def test_partition_of_all_ids(self):
        rng = random.Random(9)
        size = 60
        edges = [(rng.randrange(size), rng.randrange(size)) for _ in range(40)]
        matrix = graph(size, [(a, b) for a, b in edges if a != b])
        components = connected_components(matrix)
        members = [t for component in components for t in component]
        assert sorted(members) == list(range(size))
        for a, b, _ in matrix.non_zero_entries():
            assert any(a in c and b in c for c in components)

    def test_adjacency_is_undirected(self):
        assert adjacency_lists(graph(4, [(2, 0), (2, 3)])) == {0: [2], 2: [0, 3], 3: [2]}
