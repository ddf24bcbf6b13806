"""Graph algorithms: strongly connected components and bounded reachability."""

from collections import deque
from typing import Callable, Iterable, Mapping, Optional, Sequence


def tarjan_scc(adjacency: Mapping[str, Sequence[str]], nodes: Iterable[str]) -> list[list[str]]:
    """Tarjan's algorithm for strongly connected components (iterative).

    Uses an explicit call stack to avoid Python recursion limits on deep
    dependency chains. Roots are visited in sorted order and each component
    is returned sorted, so the output is stable across runs.
    """
    all_nodes = set(nodes)
    counter = 0
    scc_stack: list[str] = []
    on_stack: set[str] = set()
    index: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    result: list[list[str]] = []

    def neighbors_of(node: str) -> list[str]:
        return [w for w in adjacency.get(node, ()) if w in all_nodes]

    for root in sorted(all_nodes):
        if root in index:
            continue

        index[root] = lowlink[root] = counter
        counter += 1
        scc_stack.append(root)
        on_stack.add(root)
        call_stack: list[tuple[str, Iterable[str]]] = [(root, iter(neighbors_of(root)))]

        while call_stack:
            v, it = call_stack[-1]
            pushed = False
            for w in it:
                if w not in index:
                    index[w] = lowlink[w] = counter
                    counter += 1
                    scc_stack.append(w)
                    on_stack.add(w)
                    call_stack.append((w, iter(neighbors_of(w))))
                    pushed = True
                    break
                elif w in on_stack:
                    lowlink[v] = min(lowlink[v], index[w])

            if not pushed:
                call_stack.pop()
                if call_stack:
                    caller = call_stack[-1][0]
                    lowlink[caller] = min(lowlink[caller], lowlink[v])

                if lowlink[v] == index[v]:
                    component: list[str] = []
                    while True:
                        w = scc_stack.pop()
                        on_stack.discard(w)
                        component.append(w)
                        if w == v:
                            break
                    result.append(sorted(component))

    return result


def internal_edges(adjacency: Mapping[str, Sequence[str]], members: Iterable[str]) -> list[tuple[str, str]]:
    """Every edge of ``adjacency`` with both ends in ``members``, sorted."""
    member_set = set(members)
    return sorted(
        (source, target)
        for source in member_set
        for target in adjacency.get(source, ())
        if target in member_set
    )


def reachable(
    adjacency: Mapping[str, Sequence[str]],
    start: str,
    allowed: Optional[Callable[[str], bool]] = None,
) -> set[str]:
    """BFS closure from ``start`` (inclusive).

    When ``allowed`` is given, nodes failing it are neither included nor
    expanded, so the walk stops at that boundary.
    """
    visited: set[str] = {start}
    queue: deque[str] = deque([start])
    while queue:
        node = queue.popleft()
        for neighbor in adjacency.get(node, ()):
            if neighbor in visited:
                continue
            if allowed is not None and not allowed(neighbor):
                continue
            visited.add(neighbor)
            queue.append(neighbor)
    return visited
