from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from timber_beam.domain.beam import ContinuousBeam
from timber_beam.domain.loads import LoadType, SingleLoad
from timber_beam.domain.results import DistributionResult
from timber_beam.domain.supports import SupportType
from timber_beam.engine.fixed_end import fem_for_load
from timber_beam.engine.normalize import span_loads
from timber_beam.engine.settings import DEFAULT_SETTINGS, AnalysisSettings

log = logging.getLogger(__name__)

_NO_MOMENT = (SupportType.PINNED, SupportType.ROLLER, SupportType.FREE)


@dataclass
class SpanData:
    length_ft: float
    ei: float                 # lb-in2
    k: float                  # EI / L_in
    fem_left: float = 0.0
    fem_right: float = 0.0
    moment_left: float = 0.0
    moment_right: float = 0.0


@dataclass
class JointData:
    support_type: SupportType
    connected_spans: List[int] = field(default_factory=list)
    is_left_end: List[bool] = field(default_factory=list)     # joint is the span's left end
    distribution_factors: List[float] = field(default_factory=list)


class MomentDistribution:
    """
    Hardy Cross moment distribution over a row of prismatic spans.

    End moments follow the fixed-end-moment convention (a downward load gives
    negative left / positive right). Solver state lives only for one analysis.
    """

    def __init__(
        self,
        spans: Sequence[Tuple[float, float]],
        supports: Sequence[SupportType],
        settings: AnalysisSettings = DEFAULT_SETTINGS,
    ):
        """spans: [(length_ft, EI lb-in2), ...]; supports: one per node."""
        self.settings = settings
        self.iterations = 0

        self.spans: List[SpanData] = []
        for length_ft, ei in spans:
            l_in = float(length_ft) * 12.0
            k = float(ei) / l_in if l_in > 0 else 0.0
            self.spans.append(SpanData(length_ft=float(length_ft), ei=float(ei), k=k))

        self.joints: List[JointData] = [self._build_joint(j, list(supports)) for j in range(len(supports))]

    @classmethod
    def from_input(cls, beam: ContinuousBeam, settings: AnalysisSettings = DEFAULT_SETTINGS) -> "MomentDistribution":
        return cls([(s.length_ft, s.ei) for s in beam.spans], beam.supports, settings)

    @property
    def n_spans(self) -> int:
        return len(self.spans)

    def _far_stiffness(self, span_idx: int, far_support: SupportType) -> float:
        k = self.spans[span_idx].k
        if far_support.is_pin_like:
            return k * self.settings.pinned_stiffness_factor
        return k

    def _build_joint(self, j: int, supports: List[SupportType]) -> JointData:
        joint = JointData(support_type=supports[j])
        stiffness: List[float] = []

        if j > 0:
            joint.connected_spans.append(j - 1)
            joint.is_left_end.append(False)
            stiffness.append(self._far_stiffness(j - 1, supports[j - 1]))

        if j < self.n_spans:
            joint.connected_spans.append(j)
            joint.is_left_end.append(True)
            stiffness.append(self._far_stiffness(j, supports[j + 1]))

        total = sum(stiffness)
        if total > 0 and joint.support_type is not SupportType.FIXED:
            joint.distribution_factors = [k / total for k in stiffness]
        else:
            joint.distribution_factors = [0.0] * len(stiffness)
        return joint

    # -------------------------
    # Loads
    # -------------------------
    def add_span_loads(self, per_span: Sequence[Sequence[SingleLoad]]) -> None:
        for sp in self.spans:
            sp.fem_left = 0.0
            sp.fem_right = 0.0

        for sp, loads in zip(self.spans, per_span):
            for ld in loads:
                fl, fr = fem_for_load(ld, sp.length_ft)
                sp.fem_left += fl
                sp.fem_right += fr

    def add_loads(self, beam: ContinuousBeam, load_factors: Sequence[Tuple[LoadType, float]]) -> None:
        self.add_span_loads(span_loads(beam, load_factors).per_span)

    # -------------------------
    # Solve
    # -------------------------
    def solve(self) -> bool:
        for sp in self.spans:
            sp.moment_left = sp.fem_left
            sp.moment_right = sp.fem_right
        self.iterations = 0

        if self.n_spans == 0:
            return True
        if self.n_spans == 1:
            self._solve_single_span()
            return True

        co = self.settings.carry_over

        first = self.joints[0]
        if first.support_type in _NO_MOMENT:
            sp = self.spans[0]
            release = -sp.moment_left
            sp.moment_left = 0.0
            if first.support_type is not SupportType.FREE:
                sp.moment_right += release * co

        last = self.joints[-1]
        if last.support_type in _NO_MOMENT:
            sp = self.spans[-1]
            release = -sp.moment_right
            sp.moment_right = 0.0
            if last.support_type is not SupportType.FREE:
                sp.moment_left += release * co

        for _ in range(self.settings.max_iterations):
            self.iterations += 1
            if self._distribution_round() < self.settings.tolerance_ftlb:
                return True

        log.warning(
            "Moment distribution did not converge after %d rounds (tolerance %.3g ft-lb)",
            self.iterations, self.settings.tolerance_ftlb,
        )
        return False

    def _solve_single_span(self) -> None:
        sp = self.spans[0]
        left = self.joints[0].support_type
        right = self.joints[1].support_type
        co = self.settings.carry_over

        if left is SupportType.FIXED and right is SupportType.FIXED:
            return
        if left.is_pin_like and right.is_pin_like:
            sp.moment_left = 0.0
            sp.moment_right = 0.0
            return
        if left is SupportType.FIXED and right.is_pin_like:
            release = -sp.moment_right
            sp.moment_right = 0.0
            sp.moment_left += release * co
            return
        if left.is_pin_like and right is SupportType.FIXED:
            release = -sp.moment_left
            sp.moment_left = 0.0
            sp.moment_right += release * co
            return

        # cantilevers and leftovers (free-pinned): zero whatever end cannot hold moment
        if left in _NO_MOMENT:
            sp.moment_left = 0.0
        if right in _NO_MOMENT:
            sp.moment_right = 0.0

    def _distribution_round(self) -> float:
        """One pass over the interior joints. Returns the largest unbalance seen."""
        tol = self.settings.tolerance_ftlb
        co = self.settings.carry_over
        max_unbalance = 0.0

        for j in range(1, len(self.joints) - 1):
            joint = self.joints[j]
            if joint.support_type is SupportType.FIXED:
                continue

            unbalanced = 0.0
            for span_idx, is_left in zip(joint.connected_spans, joint.is_left_end):
                sp = self.spans[span_idx]
                unbalanced += sp.moment_left if is_left else sp.moment_right

            max_unbalance = max(max_unbalance, abs(unbalanced))
            if abs(unbalanced) < tol:
                continue

            for span_idx, is_left, df in zip(joint.connected_spans, joint.is_left_end, joint.distribution_factors):
                sp = self.spans[span_idx]
                distributed = -unbalanced * df

                far_joint = span_idx + 1 if is_left else span_idx
                far_support = self.joints[far_joint].support_type
                carry = 0.0 if far_support in _NO_MOMENT else co

                if is_left:
                    sp.moment_left += distributed
                    sp.moment_right += distributed * carry
                else:
                    sp.moment_right += distributed
                    sp.moment_left += distributed * carry

        return max_unbalance

    # -------------------------
    # Results
    # -------------------------
    def get_end_moments(self) -> List[Tuple[float, float]]:
        return [(sp.moment_left, sp.moment_right) for sp in self.spans]

    def get_support_moments(self) -> List[float]:
        out: List[float] = []
        for joint in self.joints:
            if not joint.connected_spans:
                out.append(0.0)
            elif len(joint.connected_spans) == 1:
                sp = self.spans[joint.connected_spans[0]]
                out.append(sp.moment_left if joint.is_left_end[0] else sp.moment_right)
            else:
                # interior: right end of the span on the left
                out.append(self.spans[joint.connected_spans[0]].moment_right)
        return out

    def result(self, converged: bool) -> DistributionResult:
        ends = self.get_end_moments()
        return DistributionResult(
            span_moments_left=[m for m, _ in ends],
            span_moments_right=[m for _, m in ends],
            support_moments=self.get_support_moments(),
            converged=converged,
            iterations=self.iterations,
        )


def analyze_moment_distribution(
    beam: ContinuousBeam,
    load_factors: Sequence[Tuple[LoadType, float]],
    settings: Optional[AnalysisSettings] = None,
) -> DistributionResult:
    solver = MomentDistribution.from_input(beam, settings or DEFAULT_SETTINGS)
    solver.add_loads(beam, load_factors)
    return solver.result(solver.solve())


def distribute_span_loads(
    beam: ContinuousBeam,
    per_span: Sequence[Sequence[SingleLoad]],
    settings: Optional[AnalysisSettings] = None,
) -> DistributionResult:
    """Same as analyze_moment_distribution for loads already mapped onto the spans."""
    solver = MomentDistribution.from_input(beam, settings or DEFAULT_SETTINGS)
    solver.add_span_loads(per_span)
    return solver.result(solver.solve())
