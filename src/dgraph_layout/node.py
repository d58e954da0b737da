"""Node and edge-chain types shared by the layout pipeline and its consumers."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class GraphNode:
    """One cell of the layout grid, real or virtual.

    ``targets`` and ``sources`` hold ``(column, layer)`` pairs of the physical
    (single-layer) edges leaving and entering this node, so a neighbour is
    looked up as ``grid[layer][column]``.

    ``drawn_element`` and ``drawn_edges`` are opaque handles owned by the
    renderer. ``drawn_edges[i]`` belongs to ``targets[i]``. The engine never
    reads them; collaborators may also attach further attributes of their own.
    """

    id: int
    label: str
    layer: int
    column: int = 0
    is_virtual: bool = False
    index: int | None = None
    targets: list[tuple[int, int]] = field(default_factory=list)
    sources: list[tuple[int, int]] = field(default_factory=list)
    drawn_element: object = None
    drawn_edges: list[object] = field(default_factory=list)

    @property
    def coord(self) -> tuple[int, int]:
        """The node's own ``(column, layer)`` pair."""
        return (self.column, self.layer)


@dataclass(frozen=True)
class EdgeChain:
    """Routing of one logical edge through its virtual nodes.

    An edge spanning ``k`` layers owns exactly ``k - 1`` virtual nodes; edges
    between adjacent layers have an empty ``virtual_ids``.
    """

    source: int
    target: int
    virtual_ids: tuple[int, ...] = ()

    @property
    def span(self) -> int:
        return len(self.virtual_ids) + 1

    @property
    def node_ids(self) -> tuple[int, ...]:
        """All node ids along the chain, endpoints included."""
        return (self.source, *self.virtual_ids, self.target)
