"""Tests for the placement search."""

import math

import pytest
from py_ncg.config.engine_settings import EngineSettings
from py_ncg.core.geometry import Point, centroid
from py_ncg.core.graph import Bounds, build_graph, start_graph
from py_ncg.core.placement import (
    candidate_positions, find_position, in_bounds, outward_direction, would_cross
)

COS30 = math.cos(math.pi / 6)


class TestOutwardDirection:
    """Test the direction a new vertex is pushed in."""

    def setup_method(self):
        self.bounds = Bounds(800, 600)
        self.graph = start_graph(self.bounds)
        self.cfg = EngineSettings()

    def test_edge_points_away_from_rest(self):
        """Test that a two-vertex segment picks the normal facing away from the graph."""
        segment = [0, 1]
        seg_centroid = centroid(self.graph.positions[i] for i in segment)
        direction = outward_direction(self.graph, segment, seg_centroid, self.cfg)
        assert direction == pytest.approx((COS30, -0.5))

    def test_bottom_edge_points_down(self):
        segment = [1, 2]
        seg_centroid = centroid(self.graph.positions[i] for i in segment)
        direction = outward_direction(self.graph, segment, seg_centroid, self.cfg)
        assert direction == pytest.approx((0.0, 1.0))

    def test_coincident_centroids_use_default(self):
        """Test the fallback when the segment centroid equals the graph centroid."""
        segment = [0, 1, 2]
        seg_centroid = centroid(self.graph.positions)
        direction = outward_direction(self.graph, segment, seg_centroid, self.cfg)
        assert direction == pytest.approx((0.0, -1.0))


class TestFindPosition:
    """Test the trial-distance search."""

    def setup_method(self):
        self.bounds = Bounds(800, 600)
        self.graph = start_graph(self.bounds)

    def test_first_trial_wins(self):
        """Test that the 60-unit trial is used when it is valid."""
        position = find_position(self.graph, [0, 1], self.bounds)
        assert position == pytest.approx((400 + 30 * COS30 + 60 * COS30, 255))

    def test_crowded_trials_are_skipped(self):
        """Test that trials too close to a vertex are skipped until 120."""
        position = find_position(self.graph, [0, 1, 2], self.bounds)
        assert position == pytest.approx((400, 180))

    def test_candidates_follow_trial_order(self):
        candidates = candidate_positions(self.graph, [0, 1, 2])
        assert [round(300 - c.y) for c in candidates] == [60, 40, 80, 100, 120, 140, 160, 180, 200]

    def test_out_of_bounds(self):
        """Test that a tiny drawing area leaves no room."""
        bounds = Bounds(100, 100)
        graph = start_graph(bounds)
        assert find_position(graph, [0, 1], bounds) is None
        assert find_position(graph, [0, 1, 2], bounds) is None

    def test_needs_two_vertices(self):
        assert find_position(self.graph, [0], self.bounds) is None

    def test_custom_settings(self):
        """Test that a larger minimum distance pushes the vertex further out."""
        cfg = EngineSettings(min_vertex_distance=100)
        position = find_position(self.graph, [1, 2], self.bounds, cfg)
        # 60, 40 and 80 all sit closer than 100 to the bottom corners
        assert position == pytest.approx((400, 330 + 100))


class TestChecks:
    """Test bounds and crossing predicates."""

    def test_in_bounds(self):
        bounds = Bounds(200, 100)
        assert in_bounds(Point(30, 30), bounds, 30)
        assert in_bounds(Point(170, 70), bounds, 30)
        assert not in_bounds(Point(171, 50), bounds, 30)
        assert not in_bounds(Point(100, 29), bounds, 30)

    def test_would_cross(self):
        """Test that a spoke across an unrelated edge is detected."""
        graph = build_graph(
            [(0, 0), (100, 0), (50, -50), (50, 50)],
            [(0, 1), (2, 3)],
        )
        assert not would_cross(graph, [0], Point(-50, 50))
        assert would_cross(graph, [0], Point(150, -25))

    def test_edges_at_anchor_are_exempt(self):
        """Test that edges sharing the segment vertex never count as crossings."""
        graph = build_graph([(0, 0), (100, 0), (0, 100)], [(0, 1), (0, 2)])
        assert not would_cross(graph, [0], Point(50, 50))
