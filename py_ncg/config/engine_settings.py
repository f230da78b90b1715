"""
Tunable constants for the construction engine.

This module gathers every numeric knob used by placement, insertion,
relayout and coloring so callers can adjust them per call without
touching the algorithms.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Tuple


class EngineSettings(BaseModel):
    """Settings for the planar construction engine."""

    # Geometry
    triangle_tolerance: float = Field(
        default=0.01,
        description="Absolute area tolerance for the point-in-triangle test"
    )

    # Placement search
    bounds_margin: float = Field(default=30.0, description="Keep new vertices this far from the drawing edge")
    min_vertex_distance: float = Field(default=44.0, description="Minimum distance between two vertices")
    probe_distance: float = Field(
        default=50.0,
        description="Length of the probe used to pick the outward side of a two-vertex segment"
    )
    trial_distances: List[float] = Field(
        default=[60.0, 40.0, 80.0, 100.0, 120.0, 140.0, 160.0, 180.0, 200.0],
        description="Distances from the segment centroid tried in order"
    )
    default_direction: Tuple[float, float] = Field(
        default=(0.0, -1.0),
        description="Outward direction used when the segment centroid equals the graph centroid"
    )

    # Random insertion
    max_random_segment_length: int = Field(default=5, ge=2, description="Longest segment tried by random insertion")

    # Seed / relayout
    seed_radius_fraction: float = Field(
        default=0.1, gt=0, description="Seed triangle radius as a fraction of min(width, height)"
    )
    relayout_random_samples: int = Field(
        default=200, ge=0, description="Random positions sampled before the relayout last resort"
    )
    relayout_jitter: float = Field(default=20.0, ge=0, description="Jitter around the centre for the last resort")

    # Coloring
    default_palette: List[int] = Field(default=[1, 2, 3, 4], description="Palette used by new graphs")


DEFAULT_ENGINE_SETTINGS = EngineSettings()


def resolve_settings(engine_settings: Optional[EngineSettings]) -> EngineSettings:
    """Return the given settings or the shared defaults."""
    return engine_settings if engine_settings is not None else DEFAULT_ENGINE_SETTINGS
