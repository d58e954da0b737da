"""Graph model — caller input, validation and the logical (pre-expansion) graph.

The caller supplies nodes already assigned to layers plus an adjacency list
indexed parallel to the node list. ``GraphModel.build`` checks everything up
front so that layout never starts on input it cannot honour.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import networkx as nx

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Raised when graph data cannot be laid out.

    ``node_index`` names the offending node and ``edge`` the offending
    ``(source_index, target_index)`` pair, whichever applies.
    """

    def __init__(
        self,
        message: str,
        node_index: int | None = None,
        edge: tuple[int, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.node_index = node_index
        self.edge = edge


# ─── Caller Input ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class NodeSpec:
    """A caller-supplied node: its label and the layer it must be drawn in."""

    label: str
    layer: int


@dataclass(frozen=True)
class GraphData:
    """Input of a single ``render`` call.

    ``adj_list[i]`` lists the indices of the nodes that node ``i`` points to.
    ``max_per_layer`` only matters for non-compacted layouts.
    """

    node_list: tuple[NodeSpec, ...] = ()
    adj_list: tuple[tuple[int, ...], ...] = ()
    num_layer: int | None = None
    max_per_layer: int = 1

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> GraphData:
        """Build from the JSON-like shape ``{numLayer, maxPerLayer, nodeList, adjList}``.

        snake_case keys (``num_layer``, ``node_list``, ...) are accepted too.
        Node entries may be mappings with ``label``/``layer`` or ``NodeSpec``.
        """

        def pick(snake: str, camel: str, default: Any = None) -> Any:
            if snake in data:
                return data[snake]
            return data.get(camel, default)

        raw_nodes = pick("node_list", "nodeList", ())
        if not _is_sequence(raw_nodes):
            raise ValidationError(f"node list must be a sequence of nodes, got {raw_nodes!r}")
        nodes: list[NodeSpec] = []
        for i, raw in enumerate(raw_nodes):
            if isinstance(raw, NodeSpec):
                nodes.append(raw)
            elif isinstance(raw, Mapping):
                nodes.append(NodeSpec(label=raw.get("label", ""), layer=raw.get("layer")))
            else:
                raise ValidationError(f"node {i} must be a mapping with label and layer, got {raw!r}", node_index=i)

        raw_adj = pick("adj_list", "adjList", ())
        if not _is_sequence(raw_adj):
            raise ValidationError(f"adjacency list must be a sequence of target lists, got {raw_adj!r}")
        adj: list[tuple[int, ...]] = []
        for i, targets in enumerate(raw_adj):
            if not _is_sequence(targets):
                raise ValidationError(f"adjacency entry {i} must be a sequence of node indices", node_index=i)
            adj.append(tuple(targets))

        return cls(
            node_list=tuple(nodes),
            adj_list=tuple(adj),
            num_layer=pick("num_layer", "numLayer"),
            max_per_layer=pick("max_per_layer", "maxPerLayer", 1),
        )


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


# ─── Graph Model ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GraphModel:
    """Validated, read-only view of the caller's graph.

    ``graph`` is a DiGraph whose node ids are the input indices; every node
    carries ``label`` and ``layer`` attributes. Successors keep the order in
    which the caller listed them.
    """

    graph: nx.DiGraph
    num_layer: int
    max_per_layer: int
    edges: tuple[tuple[int, int], ...] = field(default_factory=tuple)

    @property
    def node_count(self) -> int:
        return self.graph.number_of_nodes()

    def layer_of(self, index: int) -> int:
        return self.graph.nodes[index]["layer"]

    def label_of(self, index: int) -> str:
        return self.graph.nodes[index]["label"]

    @classmethod
    def build(cls, data: GraphData, num_layer: int) -> GraphModel:
        """Validate ``data`` against ``num_layer`` and build the logical graph.

        Edges must point strictly downwards (target layer > source layer).
        Same-layer, self and upward edges are rejected.

        Raises:
            ValidationError: on the first problem found; nothing is built.
        """
        if data.num_layer is not None:
            if not _is_int(data.num_layer) or data.num_layer <= 0:
                raise ValidationError(f"num_layer must be a positive integer, got {data.num_layer!r}")
            if data.num_layer != num_layer:
                raise ValidationError(
                    f"graph data declares {data.num_layer} layers but the engine is configured for {num_layer}"
                )
        if not _is_int(data.max_per_layer) or data.max_per_layer <= 0:
            raise ValidationError(f"max_per_layer must be a positive integer, got {data.max_per_layer!r}")
        if len(data.adj_list) != len(data.node_list):
            raise ValidationError(
                f"adjacency list has {len(data.adj_list)} entries for {len(data.node_list)} nodes"
            )

        for i, item in enumerate(data.node_list):
            if not isinstance(item.label, str):
                raise ValidationError(f"node {i} label must be a string, got {item.label!r}", node_index=i)
            if not _is_int(item.layer):
                raise ValidationError(f"node {i} ({item.label!r}) has non-integer layer {item.layer!r}", node_index=i)
            if not 0 <= item.layer < num_layer:
                raise ValidationError(
                    f"node {i} ({item.label!r}) has layer {item.layer}, expected 0 <= layer < {num_layer}",
                    node_index=i,
                )

        node_count = len(data.node_list)
        edges: list[tuple[int, int]] = []
        for src, targets in enumerate(data.adj_list):
            seen: set[int] = set()
            for tgt in targets:
                if not _is_int(tgt) or not 0 <= tgt < node_count:
                    raise ValidationError(
                        f"node {src} points to {tgt!r}, which is not a node index",
                        node_index=src,
                        edge=(src, tgt),
                    )
                src_layer = data.node_list[src].layer
                tgt_layer = data.node_list[tgt].layer
                if tgt_layer <= src_layer:
                    raise ValidationError(
                        f"edge {src} -> {tgt} goes from layer {src_layer} to layer {tgt_layer}; "
                        "edges must point to a later layer",
                        node_index=src,
                        edge=(src, tgt),
                    )
                if tgt in seen:
                    logger.warning("duplicate edge %d -> %d collapsed into one", src, tgt)
                    continue
                seen.add(tgt)
                edges.append((src, tgt))

        graph: nx.DiGraph = nx.DiGraph()
        for i, item in enumerate(data.node_list):
            graph.add_node(i, label=item.label, layer=item.layer)
        graph.add_edges_from(edges)

        logger.debug("graph model: %d nodes, %d edges, %d layers", node_count, len(edges), num_layer)
        return cls(graph=graph, num_layer=num_layer, max_per_layer=data.max_per_layer, edges=tuple(edges))
