"""GraphIndex — public facade over the layout pipeline."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from dgraph_layout.config import LayoutConfig
from dgraph_layout.graph import GraphData, GraphModel
from dgraph_layout.layout import Grid, GridLayout, full_layout
from dgraph_layout.node import EdgeChain, GraphNode

logger = logging.getLogger(__name__)


class GraphIndex:
    """Lays out a layered directed graph into a ``[layer][column]`` grid.

    The configuration is fixed at construction. Each ``render`` call builds a
    whole new layout and swaps it in with a single assignment, so readers see
    either the previous grid or the new one. A failed ``render`` leaves the
    previous grid in place.

    Example:
        >>> index = GraphIndex(LayoutConfig(num_layer=2, compacted=True))
        >>> index.render({"nodeList": [{"label": "a", "layer": 0}, {"label": "b", "layer": 1}],
        ...               "adjList": [[1], []]}).get_graph_width()
        1
    """

    def __init__(self, config: LayoutConfig) -> None:
        self._config = config
        self._layout: GridLayout | None = None

    @property
    def config(self) -> LayoutConfig:
        return self._config

    @property
    def num_layer(self) -> int:
        return self._config.num_layer

    @property
    def compacted(self) -> bool:
        return self._config.compacted

    def render(self, graph_data: GraphData | Mapping[str, Any]) -> GraphIndex:
        """Validate ``graph_data`` and lay it out, replacing any previous grid.

        Raises:
            ValidationError: if the data cannot be laid out.
        """
        if not isinstance(graph_data, GraphData):
            graph_data = GraphData.from_mapping(graph_data)
        model = GraphModel.build(graph_data, self._config.num_layer)
        layout = full_layout(model, self._config.compacted)
        self._layout = layout
        logger.debug("rendered %d nodes into %d layers", len(layout.nodes_by_id), self.num_layer)
        return self

    # ─── Read API ─────────────────────────────────────────────────────────────

    @property
    def nodes(self) -> Grid:
        """The layer-major grid; ``nodes[layer][column]`` is a node or ``None``."""
        if self._layout is None:
            return []
        return self._layout.grid

    @property
    def chains(self) -> list[EdgeChain]:
        if self._layout is None:
            return []
        return list(self._layout.chains)

    def get_graph_width(self) -> int:
        """Maximum column count across all layers (0 before the first render)."""
        if self._layout is None:
            return 0
        return self._layout.width

    def node_at(self, column: int, layer: int) -> GraphNode | None:
        """Return the node at ``(column, layer)``; ``None`` for an empty gap.

        Raises:
            KeyError: if the cell lies outside the grid.
        """
        grid = self.nodes
        if not 0 <= layer < len(grid) or not 0 <= column < len(grid[layer]):
            raise KeyError((column, layer))
        return grid[layer][column]

    def node_for_index(self, index: int) -> GraphNode:
        """Return the grid node of the caller's node ``index``."""
        if self._layout is None or index not in self._layout.nodes_by_id:
            raise KeyError(index)
        node = self._layout.nodes_by_id[index]
        if node.is_virtual:
            raise KeyError(index)
        return node

    def real_nodes(self) -> list[GraphNode]:
        """All non-virtual nodes, in the caller's input order."""
        if self._layout is None:
            return []
        return sorted(
            (n for n in self._layout.nodes_by_id.values() if not n.is_virtual),
            key=lambda n: n.index,
        )

    def edge_path(self, source_index: int, target_index: int) -> list[tuple[int, int]]:
        """Grid cells a logical edge runs through, both endpoints included.

        Raises:
            KeyError: if the caller's data has no such edge.
        """
        if self._layout is not None:
            for chain in self._layout.chains:
                if chain.source == source_index and chain.target == target_index:
                    by_id = self._layout.nodes_by_id
                    return [by_id[node_id].coord for node_id in chain.node_ids]
        raise KeyError((source_index, target_index))
