"""Tests for vertex insertion and the random driver."""

import itertools

import pytest
from py_ncg.core.alea_prng import AleaPRNG
from py_ncg.core.errors import Rejection
from py_ncg.core.geometry import segments_intersect
from py_ncg.core.graph import Bounds, build_graph, start_graph
from py_ncg.core.insertion import (
    insert_by_command, insert_random, insert_vertex, interior_repair
)


def assert_planar(graph):
    """No two edges without a shared endpoint properly cross."""
    positions = graph.positions
    for (a, b), (c, d) in itertools.combinations(graph.edges, 2):
        if {a, b} & {c, d}:
            continue
        assert not segments_intersect(positions[a], positions[b], positions[c], positions[d]), \
            f"edges {(a, b)} and {(c, d)} cross"


@pytest.fixture
def bounds():
    return Bounds(800, 600)


@pytest.fixture
def seed(bounds):
    return start_graph(bounds)


class TestStartGraph:
    """Test the seed triangle."""

    def test_seed_triangle(self, seed):
        """Test ids, edges and palette of a fresh graph."""
        assert [v.id for v in seed.vertices] == [1, 2, 3]
        assert seed.edge_set() == {(0, 1), (1, 2), (0, 2)}
        assert seed.palette == (1, 2, 3, 4)
        assert all(v.color is None for v in seed.vertices)

    def test_seed_geometry(self, seed):
        """Test the apex-up triangle centred in the bounds."""
        apex, right, left = seed.positions
        assert apex == pytest.approx((400, 240))
        assert right.y == pytest.approx(330)
        assert left.y == pytest.approx(330)
        assert right.x + left.x == pytest.approx(800)


class TestInsertVertex:
    """Test committing a vertex to a segment."""

    def test_edge_insertion(self, seed, bounds):
        """Test inserting on a two-vertex segment."""
        result = insert_vertex(seed, [0, 1], bounds)
        assert result.ok
        graph = result.graph
        assert len(graph.vertices) == 4
        assert graph.vertices[3].id == 4
        assert result.vertex_index == 3
        assert graph.edge_set() == {(0, 1), (1, 2), (0, 2), (0, 3), (1, 3)}
        assert result.message == "Added V4 connected to 1, 2."
        assert_planar(graph)

    def test_input_is_not_mutated(self, seed, bounds):
        before = (seed.vertices, seed.edges)
        insert_vertex(seed, [0, 1], bounds)
        assert (seed.vertices, seed.edges) == before

    def test_full_triangle_encloses_vertex(self, seed, bounds):
        """Test attaching to all three seed vertices yields K4 with an enclosed vertex."""
        result = insert_vertex(seed, [0, 1, 2], bounds)
        assert result.ok
        assert result.graph.vertices[3].pos == pytest.approx((400, 180))
        assert len(result.graph.edges) == 6
        assert_planar(result.graph)

    def test_not_fully_connected(self, seed, bounds):
        """Test that a segment that is not a clique leaves the graph untouched."""
        graph = insert_vertex(seed, [0, 1], bounds).graph
        result = insert_vertex(graph, [2, 3], bounds)
        assert result.reason == Rejection.INVALID_SEGMENT
        assert result.is_error
        assert result.graph is graph

    @pytest.mark.parametrize("segment", [[0], [0, 0], [0, 7], []])
    def test_malformed_segment(self, seed, bounds, segment):
        result = insert_vertex(seed, segment, bounds)
        assert result.reason == Rejection.INVALID_SEGMENT
        assert result.graph is seed

    def test_insufficient_vertices(self, bounds):
        graph = build_graph([(100, 100), (200, 100)], [(0, 1)])
        result = insert_vertex(graph, [0, 1], bounds)
        assert result.reason == Rejection.INSUFFICIENT_VERTICES
        assert result.graph is graph

    def test_no_placement(self):
        """Test that a drawing area with no room reports no placement."""
        bounds = Bounds(100, 100)
        graph = start_graph(bounds)
        result = insert_vertex(graph, [0, 1], bounds)
        assert result.reason == Rejection.NO_PLACEMENT_FOUND
        assert result.graph is graph


class TestInteriorRepair:
    """Test wiring of vertices enclosed by a new triangle."""

    def test_enclosed_vertex_is_connected(self):
        graph = build_graph([(0, 0), (100, 0), (50, 100), (50, 30)], [(0, 1), (0, 2), (1, 2)])
        repaired = interior_repair(graph, [0, 1], 2)
        assert {(0, 3), (1, 3), (2, 3)} <= repaired.edge_set()

    def test_crossing_repair_edge_is_skipped(self):
        """Test that a repair edge crossing an existing edge is left out."""
        graph = build_graph(
            [(0, 0), (100, 0), (50, 100), (50, 30), (-20, 30), (40, -20)],
            [(0, 1), (0, 2), (1, 2), (4, 5)],
        )
        repaired = interior_repair(graph, [0, 1], 2)
        assert (0, 3) not in repaired.edge_set()
        assert {(1, 3), (2, 3)} <= repaired.edge_set()

    def test_nothing_enclosed(self, seed):
        assert interior_repair(seed, [0, 1], 2) is seed


class TestInsertByCommand:
    """Test insertion through periphery-rank commands."""

    def test_command(self, seed, bounds):
        result = insert_by_command(seed, "A, 1-2", bounds)
        assert result.ok
        assert result.graph.has_edge(0, 3) and result.graph.has_edge(1, 3)

    def test_wraparound_command(self, seed, bounds):
        """Test a command that wraps past the end of the periphery."""
        graph = insert_by_command(seed, "A, 1-2", bounds).graph  # periphery is now [2, 0, 3, 1]
        result = insert_by_command(graph, "A, 4,1", bounds)
        assert result.ok
        assert result.graph.has_edge(1, 4) and result.graph.has_edge(2, 4)
        assert_planar(result.graph)

    @pytest.mark.parametrize("command", ["A, 1,3", "A, 1-999999999999", "A, 9", "hello"])
    def test_bad_command(self, seed, bounds, command):
        graph = insert_by_command(seed, "A, 1-2", bounds).graph
        result = insert_by_command(graph, command, bounds)
        assert result.reason == Rejection.INVALID_SEGMENT
        assert result.graph is graph

    def test_ranks_beyond_periphery_are_dropped(self, seed, bounds):
        """Test that "A, 3-5" on a 4-vertex periphery uses ranks 3 and 4."""
        graph = insert_by_command(seed, "A, 1-2", bounds).graph  # periphery is now [2, 0, 3, 1]
        result = insert_by_command(graph, "A, 3-5", bounds)
        assert result.ok
        assert result.vertex_index == 4
        assert result.graph.has_edge(3, 4) and result.graph.has_edge(1, 4)
        assert not result.graph.has_edge(0, 4) and not result.graph.has_edge(2, 4)
        assert_planar(result.graph)

    def test_consecutive_but_not_clique(self, seed, bounds):
        graph = insert_by_command(seed, "A, 1-2", bounds).graph
        result = insert_by_command(graph, "A, 1-3", bounds)
        assert result.reason == Rejection.INVALID_SEGMENT


class TestInsertRandom:
    """Test the random insertion driver."""

    def grow(self, seed, bounds, steps, rng):
        graph = seed
        for _ in range(steps):
            result = insert_random(graph, bounds, rng=rng)
            if not result.ok:
                assert result.reason == Rejection.NO_PLACEMENT_FOUND
                assert result.graph is graph
                break
            graph = result.graph
        return graph

    def test_first_insertion_always_succeeds(self, seed, bounds):
        result = insert_random(seed, bounds, rng=AleaPRNG("first"))
        assert result.ok
        assert len(result.graph.vertices) == 4

    def test_growth_stays_planar(self, seed, bounds):
        """Test that repeated random insertions never create crossings."""
        graph = self.grow(seed, bounds, 25, AleaPRNG("planar"))
        assert len(graph.vertices) > 5
        assert_planar(graph)
        assert len(graph.edges) <= 3 * len(graph.vertices) - 6
        assert [v.id for v in graph.vertices] == list(range(1, len(graph.vertices) + 1))

    def test_reproducible_with_seed(self, seed, bounds):
        first = self.grow(seed, bounds, 10, AleaPRNG("same"))
        second = self.grow(seed, bounds, 10, AleaPRNG("same"))
        assert first == second

    def test_no_room(self):
        bounds = Bounds(100, 100)
        graph = start_graph(bounds)
        result = insert_random(graph, bounds, rng=AleaPRNG("tiny"))
        assert result.reason == Rejection.NO_PLACEMENT_FOUND
        assert result.graph is graph

    def test_insufficient_vertices(self, bounds):
        graph = build_graph([(100, 100)], [])
        assert insert_random(graph, bounds).reason == Rejection.INSUFFICIENT_VERTICES
