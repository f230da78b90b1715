"""Tests for graph import/export."""

import json

import pytest
from py_ncg.core.alea_prng import AleaPRNG
from py_ncg.core.coloring import color_last_vertex
from py_ncg.core.errors import MalformedImportError, Rejection
from py_ncg.core.geometry import Point
from py_ncg.core.graph import Bounds, start_graph
from py_ncg.core.insertion import insert_random
from py_ncg.core.serialization import (
    dumps, graph_from_dict, graph_to_dict, load_graph_file, loads, save_graph_file
)


@pytest.fixture
def graph():
    bounds = Bounds(800, 600)
    rng = AleaPRNG("serialization")
    graph = start_graph(bounds)
    for _ in range(6):
        graph = insert_random(graph, bounds, rng=rng).graph
    return color_last_vertex(graph).graph


class TestExport:
    """Test the exchange format."""

    def test_format(self, graph):
        data = graph_to_dict(graph)
        assert set(data) == {"vertices", "edges", "colors"}
        assert data["colors"] == [1, 2, 3, 4]
        first = data["vertices"][0]
        assert set(first) == {"id", "color", "pos"}
        assert set(first["pos"]) == {"x", "y"}
        assert all(len(edge) == 2 for edge in data["edges"])

    def test_round_trip(self, graph):
        """Test that ids, colors, positions and edges survive exactly."""
        assert graph_from_dict(graph_to_dict(graph)) == graph
        assert loads(dumps(graph)) == graph

    def test_file_round_trip(self, graph, tmp_path):
        path = save_graph_file(graph, tmp_path / "nested" / "graph.json")
        assert path.exists()
        assert json.loads(path.read_text())["edges"] == [list(e) for e in graph.edges]
        assert load_graph_file(path) == graph

    def test_pretty_printed(self, graph):
        assert dumps(graph).startswith('{\n  "vertices"')


class TestImport:
    """Test validation and defaults on import."""

    @pytest.mark.parametrize("data", [
        [],
        {},
        {"vertices": []},
        {"edges": []},
        {"vertices": {}, "edges": []},
        {"vertices": [], "edges": "0-1"},
        {"vertices": [{}, {}], "edges": [[0, 2]]},
        {"vertices": [{}, {}], "edges": [[0]]},
        {"vertices": [{}, {}], "edges": [[1, 1]]},
        {"vertices": [{}, {}], "edges": [["a", 1]]},
    ])
    def test_malformed(self, data):
        with pytest.raises(MalformedImportError) as excinfo:
            graph_from_dict(data)
        assert excinfo.value.reason == Rejection.MALFORMED_IMPORT

    def test_defaults(self):
        """Test that optional fields fall back to defaults."""
        graph = graph_from_dict({
            "vertices": [{"pos": {"x": 1, "y": 2}}, {"id": 7, "color": "red"}],
            "edges": [[1, 0], [0, 1]],
        })
        assert [v.id for v in graph.vertices] == [1, 7]
        assert graph.vertices[0].pos == Point(1.0, 2.0)
        assert graph.vertices[1].pos == Point(0.0, 0.0)
        assert graph.vertices[1].color is None
        assert graph.edges == ((0, 1),)
        assert graph.palette == (1, 2, 3, 4)

    def test_custom_palette(self):
        graph = graph_from_dict({"vertices": [], "edges": [], "colors": [1, 2, 3]})
        assert graph.palette == (1, 2, 3)

    def test_invalid_json(self):
        with pytest.raises(MalformedImportError):
            loads("{not json")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_graph_file(tmp_path / "missing.json")
