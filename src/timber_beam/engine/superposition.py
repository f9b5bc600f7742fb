from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np

from timber_beam.domain.loads import AppliedMoment, PointLoad, SingleLoad, UniformPartial
from timber_beam.domain.results import AnalysisResults
from timber_beam.engine import single_load as sl
from timber_beam.engine.settings import DEFAULT_SETTINGS


@dataclass
class BeamAnalysis:
    """
    Simply supported span analysed by superposition of single loads.

    Units: span ft, E psi, I in4. Results in lb / ft-lb / in.
    """
    span_ft: float
    e_psi: float
    i_in4: float
    loads: List[SingleLoad] = field(default_factory=list)
    sample_points: int = DEFAULT_SETTINGS.sample_points
    partial_segments: int = DEFAULT_SETTINGS.partial_segments

    def __post_init__(self):
        self.loads = list(self.loads)
        self.sample_points = max(DEFAULT_SETTINGS.min_sample_points, int(self.sample_points))

    def add_load(self, load: SingleLoad) -> "BeamAnalysis":
        self.loads.append(load)
        return self

    def with_sample_points(self, n: int) -> "BeamAnalysis":
        self.sample_points = max(DEFAULT_SETTINGS.min_sample_points, int(n))
        return self

    # -------------------------
    # Superposed responses
    # -------------------------
    def total_reaction_left(self) -> float:
        return float(sum(sl.reaction_left(ld, self.span_ft) for ld in self.loads))

    def total_reaction_right(self) -> float:
        return float(sum(sl.reaction_right(ld, self.span_ft) for ld in self.loads))

    def shear_at(self, x_ft: float) -> float:
        return float(sum(sl.shear_at(ld, x_ft, self.span_ft) for ld in self.loads))

    def moment_at(self, x_ft: float) -> float:
        return float(sum(sl.moment_at(ld, x_ft, self.span_ft) for ld in self.loads))

    def deflection_at(self, x_ft: float) -> float:
        return float(sum(
            sl.deflection_at(ld, x_ft, self.span_ft, self.e_psi, self.i_in4, self.partial_segments)
            for ld in self.loads
        ))

    # -------------------------
    # Sampling
    # -------------------------
    def sample_positions(self) -> List[float]:
        """Uniform grid plus x-eps / x / x+eps around every discontinuity."""
        L = float(self.span_ft)
        if L <= 0:
            return [0.0]

        xs = list(np.linspace(0.0, L, int(self.sample_points), dtype=float))
        eps = 0.001 * L

        crit: List[float] = []
        for ld in self.loads:
            if isinstance(ld, (PointLoad, AppliedMoment)):
                crit.append(float(ld.position_ft))
            elif isinstance(ld, UniformPartial):
                crit.append(float(ld.start_ft))
                crit.append(float(ld.end_ft))

        for c in crit:
            if eps < c < L - eps:
                xs += [c - eps, c, c + eps]

        xs.sort()
        out: List[float] = []
        for x in xs:
            if out and abs(x - out[-1]) < eps / 2.0:
                continue
            out.append(float(x))
        return out

    def analyze(self) -> AnalysisResults:
        positions = self.sample_positions()
        if not self.loads:
            return AnalysisResults.empty(positions)

        shear_d = []
        moment_d = []
        defl_d = []

        v_max = 0.0
        v_pos = 0.0
        m_max = 0.0
        m_pos = 0.0
        d_max = 0.0
        d_pos = 0.0

        for x in positions:
            v = self.shear_at(x)
            m = self.moment_at(x)
            d = self.deflection_at(x)
            shear_d.append((x, v))
            moment_d.append((x, m))
            defl_d.append((x, d))

            if abs(v) > abs(v_max):
                v_max, v_pos = v, x
            if m > m_max:
                m_max, m_pos = m, x
            if d > d_max:
                d_max, d_pos = d, x

        return AnalysisResults(
            reaction_left_lb=self.total_reaction_left(),
            reaction_right_lb=self.total_reaction_right(),
            max_moment_ftlb=m_max,
            max_moment_position_ft=m_pos,
            max_shear_lb=v_max,
            max_shear_position_ft=v_pos,
            max_deflection_in=d_max,
            max_deflection_position_ft=d_pos,
            shear_diagram=shear_d,
            moment_diagram=moment_d,
            deflection_diagram=defl_d,
        )
