"""Tests for graph.py — input parsing and validation."""

from __future__ import annotations

import logging

import pytest

from dgraph_layout.graph import GraphData, GraphModel, NodeSpec, ValidationError

# ─── Helpers ──────────────────────────────────────────────────────────────────


def make_data(layers: list, adj: list, **kwargs) -> GraphData:
    return GraphData(
        node_list=tuple(NodeSpec(label=f"n{i}", layer=layer) for i, layer in enumerate(layers)),
        adj_list=tuple(tuple(t) for t in adj),
        **kwargs,
    )


SAMPLE = {
    "numLayer": 4,
    "maxPerLayer": 2,
    "nodeList": [
        {"label": "Rubecula", "layer": 0},
        {"label": "Turdus", "layer": 3},
        {"label": "Corvus", "layer": 1},
        {"label": "Falco", "layer": 1},
        {"label": "Cathartes", "layer": 2},
        {"label": "Parus", "layer": 0},
    ],
    "adjList": [[2, 3, 4], [], [1], [], [], [2]],
}


# ─── GraphData Tests ──────────────────────────────────────────────────────────


class TestGraphDataFromMapping:
    def test_camel_case_keys(self):
        data = GraphData.from_mapping(SAMPLE)
        assert data.num_layer == 4
        assert data.max_per_layer == 2
        assert data.node_list[0] == NodeSpec(label="Rubecula", layer=0)
        assert data.adj_list[0] == (2, 3, 4)

    def test_snake_case_keys(self):
        data = GraphData.from_mapping({"node_list": [{"label": "a", "layer": 0}], "adj_list": [[]], "max_per_layer": 3})
        assert data.node_list == (NodeSpec(label="a", layer=0),)
        assert data.max_per_layer == 3
        assert data.num_layer is None

    def test_defaults(self):
        data = GraphData.from_mapping({})
        assert data.node_list == ()
        assert data.adj_list == ()
        assert data.max_per_layer == 1

    def test_accepts_node_specs(self):
        data = GraphData.from_mapping({"nodeList": [NodeSpec("a", 0)], "adjList": [[]]})
        assert data.node_list == (NodeSpec("a", 0),)

    def test_rejects_non_mapping_node(self):
        with pytest.raises(ValidationError) as exc:
            GraphData.from_mapping({"nodeList": ["a"], "adjList": [[]]})
        assert exc.value.node_index == 0

    def test_rejects_non_sequence_adjacency(self):
        with pytest.raises(ValidationError):
            GraphData.from_mapping({"nodeList": [{"label": "a", "layer": 0}], "adjList": [5]})

    @pytest.mark.parametrize("field,value", [("nodeList", None), ("nodeList", "ab"), ("adjList", 5), ("adjList", None)])
    def test_rejects_non_sequence_fields(self, field, value):
        data = {"nodeList": [{"label": "a", "layer": 0}], "adjList": [[]], field: value}
        with pytest.raises(ValidationError):
            GraphData.from_mapping(data)


# ─── GraphModel.build Tests ───────────────────────────────────────────────────


class TestGraphModelBuild:
    def test_sample_model(self):
        model = GraphModel.build(GraphData.from_mapping(SAMPLE), 4)
        assert model.node_count == 6
        assert model.edges == ((0, 2), (0, 3), (0, 4), (2, 1), (5, 2))
        assert model.label_of(4) == "Cathartes"
        assert model.layer_of(1) == 3
        assert model.max_per_layer == 2

    def test_empty_graph(self):
        model = GraphModel.build(GraphData(), 3)
        assert model.node_count == 0
        assert model.edges == ()

    def test_isolated_node(self):
        model = GraphModel.build(make_data([2], [[]]), 3)
        assert model.node_count == 1
        assert model.edges == ()

    @pytest.mark.parametrize("layer", [-1, 4, 10])
    def test_layer_out_of_range(self, layer):
        with pytest.raises(ValidationError) as exc:
            GraphModel.build(make_data([0, layer], [[], []]), 4)
        assert exc.value.node_index == 1

    @pytest.mark.parametrize("layer", [None, "1", 1.0, True])
    def test_layer_not_an_integer(self, layer):
        with pytest.raises(ValidationError) as exc:
            GraphModel.build(make_data([layer], [[]]), 4)
        assert exc.value.node_index == 0

    def test_label_not_a_string(self):
        data = GraphData(node_list=(NodeSpec(label=7, layer=0),), adj_list=((),))
        with pytest.raises(ValidationError):
            GraphModel.build(data, 1)

    @pytest.mark.parametrize("target", [2, -1, "1", None])
    def test_unknown_target(self, target):
        with pytest.raises(ValidationError) as exc:
            GraphModel.build(make_data([0, 1], [[target], []]), 2)
        assert exc.value.edge == (0, target)
        assert exc.value.node_index == 0

    def test_adjacency_length_mismatch(self):
        with pytest.raises(ValidationError):
            GraphModel.build(make_data([0, 1], [[1]]), 2)

    def test_same_layer_edge_rejected(self):
        with pytest.raises(ValidationError) as exc:
            GraphModel.build(make_data([1, 1], [[1], []]), 2)
        assert exc.value.edge == (0, 1)

    def test_self_loop_rejected(self):
        with pytest.raises(ValidationError) as exc:
            GraphModel.build(make_data([0], [[0]]), 1)
        assert exc.value.edge == (0, 0)

    def test_reverse_edge_rejected(self):
        with pytest.raises(ValidationError) as exc:
            GraphModel.build(make_data([0, 2], [[], [0]]), 3)
        assert exc.value.edge == (1, 0)

    def test_declared_layer_count_must_match(self):
        with pytest.raises(ValidationError):
            GraphModel.build(make_data([0], [[]], num_layer=5), 4)

    @pytest.mark.parametrize("num_layer", [0, -2, "4"])
    def test_declared_layer_count_must_be_positive_int(self, num_layer):
        with pytest.raises(ValidationError):
            GraphModel.build(make_data([0], [[]], num_layer=num_layer), 4)

    @pytest.mark.parametrize("max_per_layer", [0, -1, 1.5])
    def test_max_per_layer_must_be_positive_int(self, max_per_layer):
        with pytest.raises(ValidationError):
            GraphModel.build(make_data([0], [[]], max_per_layer=max_per_layer), 1)

    def test_duplicate_edge_collapsed(self, caplog):
        with caplog.at_level(logging.WARNING, logger="dgraph_layout.graph"):
            model = GraphModel.build(make_data([0, 1, 1], [[2, 1, 2], [], []]), 2)
        assert model.edges == ((0, 2), (0, 1))
        assert "duplicate edge 0 -> 2" in caplog.text

    def test_successors_keep_input_order(self):
        model = GraphModel.build(make_data([0, 1, 1, 1], [[3, 1, 2], [], [], []]), 2)
        assert list(model.graph.successors(0)) == [3, 1, 2]

    def test_validation_error_is_value_error(self):
        assert issubclass(ValidationError, ValueError)
