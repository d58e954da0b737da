"""Breadth-first traversal of a finished layout grid.

Traversals follow the ``(column, layer)`` pairs stored on the nodes and never
modify the grid. Each node is visited at most once.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterator, Sequence

from dgraph_layout.node import GraphNode

GridRows = Sequence[Sequence[GraphNode | None]]


class NodeQueue:
    """First-in, first-out queue of grid nodes."""

    def __init__(self, nodes: Sequence[GraphNode] = ()) -> None:
        self._items: deque[GraphNode] = deque(nodes)

    def push(self, node: GraphNode) -> None:
        self._items.append(node)

    def pop(self) -> GraphNode:
        """Remove and return the oldest node. Raises IndexError when empty."""
        return self._items.popleft()

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[GraphNode]:
        return iter(self._items)


def _cell(grid: GridRows, coord: tuple[int, int]) -> GraphNode:
    column, layer = coord
    node = grid[layer][column]
    if node is None:
        raise LookupError(f"no node at column {column}, layer {layer}")
    return node


def search_by_targets(node: GraphNode, grid: GridRows, visit: Callable[[GraphNode], None]) -> None:
    """Visit every node reachable from ``node`` along ``targets``, nearest first."""
    seen = {node.coord}
    queue = NodeQueue([node])
    while queue:
        current = queue.pop()
        for coord in current.targets:
            if coord in seen:
                continue
            seen.add(coord)
            nxt = _cell(grid, coord)
            visit(nxt)
            queue.push(nxt)


def search_by_sources(
    node: GraphNode,
    grid: GridRows,
    visit: Callable[[GraphNode, GraphNode], None],
) -> None:
    """Walk ``sources`` upwards from ``node``.

    ``visit(child, source)`` is called once per traversed physical edge,
    which lets a caller pick out the edge among ``source.targets``.
    """
    seen = {node.coord}
    queue = NodeQueue([node])
    while queue:
        current = queue.pop()
        for coord in current.sources:
            src = _cell(grid, coord)
            visit(current, src)
            if coord not in seen:
                seen.add(coord)
                queue.push(src)


def reachable_real_nodes(node: GraphNode, grid: GridRows) -> list[GraphNode]:
    """Real nodes reachable from ``node``; virtual nodes are passed through."""
    found: list[GraphNode] = []

    def collect(reached: GraphNode) -> None:
        if not reached.is_virtual:
            found.append(reached)

    search_by_targets(node, grid, collect)
    return found
