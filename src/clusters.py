from collections import defaultdict
from typing import Dict, List, Set

from term_matrix import Matrix


def adjacency_lists(matrix: Matrix) -> Dict[int, List[int]]:
    adjacency: Dict[int, Set[int]] = defaultdict(set)
    for x, y, value in matrix.non_zero_entries():
        if value > 0 and x != y:
            adjacency[x].add(y)
            adjacency[y].add(x)
    return {node: sorted(nbrs) for node, nbrs in adjacency.items()}


def connected_components(matrix: Matrix) -> List[Set[int]]:
    """
    Connected components of the graph whose edges are the positive entries.

    Nodes are tried as roots in ascending order and every traversal uses an
    explicit stack, so deep chains do not hit the recursion limit. Isolated
    nodes come out as singleton components.
    """
    size = matrix.row_count
    adjacency = adjacency_lists(matrix)
    visited = [False] * size
    components: List[Set[int]] = []
    for root in range(size):
        if visited[root]:
            continue
        component: Set[int] = set()
        stack = [root]
        while stack:
            node = stack.pop()
            if visited[node]:
                continue
            visited[node] = True
            component.add(node)
            stack.extend(n for n in adjacency.get(node, ()) if not visited[n])
        components.append(component)
    return components
