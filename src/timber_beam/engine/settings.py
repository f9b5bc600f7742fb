from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AnalysisSettings:
    # superposition sampling
    sample_points: int = 101
    min_sample_points: int = 11
    partial_segments: int = 20          # point-load pieces for partial-uniform deflection

    # Hardy Cross
    max_iterations: int = 50
    tolerance_ftlb: float = 0.1
    carry_over: float = 0.5
    pinned_stiffness_factor: float = 0.75

    # checks / geometry guards
    deflection_limit_ratio: float = 240.0
    max_span_ft: float = 60.0


DEFAULT_SETTINGS = AnalysisSettings()
