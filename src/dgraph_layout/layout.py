"""Layout module — layered graph layout pipeline.

Phases:
  1. Virtual node insertion (every physical edge spans exactly one layer)
  2. Layer ordering (barycenter heuristic)
  3. Column assignment (compacted or parent-aligned with gaps)
  4. Grid construction ((column, layer) adjacency on every node)

Layer assignment is not a phase here: layers come with the caller's data and
are only validated (see ``graph.GraphModel.build``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import networkx as nx

from dgraph_layout.graph import GraphModel
from dgraph_layout.node import EdgeChain, GraphNode

logger = logging.getLogger(__name__)

# Upper bound on top-down + bottom-up barycenter sweeps.
MAX_PASSES: int = 24

Grid = list[list[GraphNode | None]]

# ─── Virtual Node Insertion ───────────────────────────────────────────────────


@dataclass
class ExpandedGraph:
    """The graph after virtual node insertion.

    Node ids ``0 .. real_count - 1`` are the caller's node indices; virtual
    nodes are numbered from ``real_count`` upwards in creation order. Every
    node carries ``label``, ``layer`` and ``virtual`` attributes, and every
    edge connects nodes in adjacent layers.
    """

    graph: nx.DiGraph
    layer_count: int
    real_count: int
    chains: list[EdgeChain] = field(default_factory=list)

    def layer_of(self, node_id: int) -> int:
        return self.graph.nodes[node_id]["layer"]

    @property
    def virtual_count(self) -> int:
        return self.graph.number_of_nodes() - self.real_count


def insert_virtual_nodes(model: GraphModel) -> ExpandedGraph:
    """Replace every multi-layer edge with a chain through virtual nodes.

    For each logical edge (s → t) spanning ``k = layer[t] - layer[s]`` layers,
    ``k - 1`` fresh virtual nodes are created, one per intermediate layer,
    and linked as
        s → v₁ → v₂ → … → vₖ₋₁ → t
    Virtual nodes are never shared between logical edges, so each logical
    edge maps to exactly one ``EdgeChain``.
    """
    g: nx.DiGraph = nx.DiGraph()
    for node_id in model.graph.nodes:
        g.add_node(node_id, label=model.label_of(node_id), layer=model.layer_of(node_id), virtual=False)

    next_id = model.node_count
    chains: list[EdgeChain] = []

    for src, tgt in model.edges:
        src_layer = model.layer_of(src)
        tgt_layer = model.layer_of(tgt)

        virtual_ids: list[int] = []
        chain_prev = src
        for layer in range(src_layer + 1, tgt_layer):
            g.add_node(next_id, label="", layer=layer, virtual=True)
            g.add_edge(chain_prev, next_id)
            virtual_ids.append(next_id)
            chain_prev = next_id
            next_id += 1

        g.add_edge(chain_prev, tgt)
        chains.append(EdgeChain(source=src, target=tgt, virtual_ids=tuple(virtual_ids)))

    expanded = ExpandedGraph(graph=g, layer_count=model.num_layer, real_count=model.node_count, chains=chains)
    logger.debug(
        "virtual node insertion: %d logical edges, %d virtual nodes, %d physical edges",
        len(chains),
        expanded.virtual_count,
        g.number_of_edges(),
    )
    return expanded


# ─── Layer Ordering (Barycenter) ──────────────────────────────────────────────


def order_layers(expanded: ExpandedGraph) -> list[list[int]]:
    """Order the nodes of every layer to reduce edge crossings.

    The initial order lists real nodes by input index, then virtual nodes by
    creation. Top-down and bottom-up barycenter sweeps follow until a pass no
    longer lowers the crossing count; the best ordering seen is returned.
    Sorting is stable, so the result depends on the input alone.

    Returns a list[list[int]] — one inner list per layer, even for empty layers.
    """
    graph = expanded.graph
    layer_count = expanded.layer_count

    ordering: list[list[int]] = [[] for _ in range(layer_count)]
    for node_id in sorted(graph.nodes):
        ordering[expanded.layer_of(node_id)].append(node_id)

    best = count_crossings(ordering, graph)
    best_ordering = [list(layer) for layer in ordering]

    for pass_idx in range(MAX_PASSES):
        if best == 0:
            break

        # Top-down sweep: use predecessor positions as barycenter weights.
        for layer_idx in range(1, layer_count):
            prev: dict[int, float] = {nid: float(i) for i, nid in enumerate(ordering[layer_idx - 1])}
            ordering[layer_idx].sort(key=lambda a, p=prev: _barycenter(a, graph, p, "incoming"))

        # Bottom-up sweep: use successor positions as barycenter weights.
        for layer_idx in range(layer_count - 2, -1, -1):
            nxt: dict[int, float] = {nid: float(i) for i, nid in enumerate(ordering[layer_idx + 1])}
            ordering[layer_idx].sort(key=lambda a, n=nxt: _barycenter(a, graph, n, "outgoing"))

        crossings = count_crossings(ordering, graph)
        logger.debug("ordering pass %d: %d crossings (best %d)", pass_idx, crossings, best)
        if crossings >= best:
            break
        best = crossings
        best_ordering = [list(layer) for layer in ordering]

    return best_ordering


def _barycenter(
    node_id: int,
    graph: nx.DiGraph,
    neighbor_pos: dict[int, float],
    direction: str,
) -> float:
    """Average position of a node's neighbours in the adjacent layer.

    direction: "incoming" to look at predecessors, "outgoing" for successors.
    Returns float('inf') if the node has no neighbours in the adjacent layer.
    """
    neighbors = graph.predecessors(node_id) if direction == "incoming" else graph.successors(node_id)
    positions = [neighbor_pos[nb] for nb in neighbors if nb in neighbor_pos]
    if not positions:
        return float("inf")
    return sum(positions) / len(positions)


def count_crossings(ordering: list[list[int]], graph: nx.DiGraph) -> int:
    """Count crossings of the expanded graph's physical edges between consecutive layers (inversion count)."""
    total = 0
    for l_idx in range(len(ordering) - 1):
        tgt_pos: dict[int, int] = {nid: i for i, nid in enumerate(ordering[l_idx + 1])}
        edges: list[tuple[int, int]] = []
        for sp, src_id in enumerate(ordering[l_idx]):
            for nb in graph.successors(src_id):
                if nb in tgt_pos:
                    edges.append((sp, tgt_pos[nb]))
        for i in range(len(edges)):
            for j in range(i + 1, len(edges)):
                ei, ej = edges[i], edges[j]
                if (ei[0] < ej[0] and ei[1] > ej[1]) or (ei[0] > ej[0] and ei[1] < ej[1]):
                    total += 1
    return total


# ─── Column Assignment ────────────────────────────────────────────────────────


def assign_columns(
    ordering: list[list[int]],
    expanded: ExpandedGraph,
    compacted: bool,
    max_per_layer: int,
) -> dict[int, int]:
    """Map every node id to its column, keeping each layer's order.

    Compacted layers take columns ``0 .. n - 1``.

    Otherwise a node prefers the rounded mean column of its predecessors (or
    its position in the layer when it has none), so chains and children stay
    under their parents. Columns are pushed right until they strictly
    increase, then pulled left into the layer capacity
    ``max(min(max_per_layer, densest), n)``, where ``densest`` is the node
    count of the fullest layer. Gaps may remain between nodes, but no row
    grows wider than the densest layer, which has no gaps. Nothing wraps
    into another layer.
    """
    columns: dict[int, int] = {}
    graph = expanded.graph
    densest = max((len(layer) for layer in ordering), default=0)

    for layer_nodes in ordering:
        if compacted:
            for pos, node_id in enumerate(layer_nodes):
                columns[node_id] = pos
            continue

        preferred: list[int] = []
        for pos, node_id in enumerate(layer_nodes):
            parents = [columns[p] for p in graph.predecessors(node_id) if p in columns]
            preferred.append(int(sum(parents) / len(parents) + 0.5) if parents else pos)

        cols: list[int] = []
        for want in preferred:
            cols.append(want if not cols else max(want, cols[-1] + 1))

        # Right-to-left clamp into capacity; keeps columns strictly increasing.
        limit = max(min(max_per_layer, densest), len(layer_nodes))
        for i in range(len(cols) - 1, -1, -1):
            cols[i] = min(cols[i], limit - 1)
            limit = cols[i]

        for node_id, col in zip(layer_nodes, cols):
            columns[node_id] = col

    return columns


# ─── Grid Construction ────────────────────────────────────────────────────────


def build_grid(
    ordering: list[list[int]],
    columns: dict[int, int],
    expanded: ExpandedGraph,
) -> tuple[Grid, dict[int, GraphNode]]:
    """Place nodes into a ``grid[layer][column]`` and resolve their adjacency.

    Each row is as long as its highest column + 1; unused cells are ``None``.
    ``targets`` follow the order the caller listed the edges in, and every
    entry in a node's ``targets`` has its mirror in the target's ``sources``.

    Returns the grid and a node id → GraphNode lookup.
    """
    graph = expanded.graph
    by_id: dict[int, GraphNode] = {}
    grid: Grid = []

    for layer_idx, layer_nodes in enumerate(ordering):
        row: list[GraphNode | None] = [None] * (max((columns[n] for n in layer_nodes), default=-1) + 1)
        for node_id in layer_nodes:
            attrs = graph.nodes[node_id]
            node = GraphNode(
                id=node_id,
                label=attrs["label"],
                layer=layer_idx,
                column=columns[node_id],
                is_virtual=attrs["virtual"],
                index=None if attrs["virtual"] else node_id,
            )
            row[node.column] = node
            by_id[node_id] = node
        grid.append(row)

    for src, tgt in graph.edges():
        source, target = by_id[src], by_id[tgt]
        source.targets.append(target.coord)
        target.sources.append(source.coord)

    return grid, by_id


def graph_width(grid: Grid) -> int:
    """Maximum column count over all rows of the grid."""
    return max((len(row) for row in grid), default=0)


# ─── Full Layout Pipeline ─────────────────────────────────────────────────────


@dataclass
class GridLayout:
    """Everything one ``render`` call produces."""

    grid: Grid
    nodes_by_id: dict[int, GraphNode]
    chains: list[EdgeChain]
    width: int


def full_layout(model: GraphModel, compacted: bool) -> GridLayout:
    """Run the full pipeline on a validated model."""
    expanded = insert_virtual_nodes(model)
    ordering = order_layers(expanded)
    columns = assign_columns(ordering, expanded, compacted, model.max_per_layer)
    grid, by_id = build_grid(ordering, columns, expanded)
    width = graph_width(grid)
    logger.debug("layout done: %d layers, width %d, compacted=%s", len(grid), width, compacted)
    return GridLayout(grid=grid, nodes_by_id=by_id, chains=expanded.chains, width=width)
