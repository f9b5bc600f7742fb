from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from timber_beam.domain.beam import ContinuousBeam
from timber_beam.domain.loads import (
    AppliedMoment,
    DiscreteLoad,
    LoadType,
    Moment,
    PartialUniform,
    Point,
    PointLoad,
    SingleLoad,
    Trapezoidal,
    Uniform,
    UniformFull,
    UniformPartial,
)

ZERO_FACTOR = 1e-10


@dataclass
class SpanLoads:
    """Factored loads per span, in span-local coordinates."""
    per_span: List[List[SingleLoad]]
    notes: List[str]

    def is_empty(self) -> bool:
        return all(not loads for loads in self.per_span)


def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def factor_for(
    load_factors: Sequence[Tuple[LoadType, float]],
    load_type: LoadType,
    default: float = 0.0,
) -> float:
    for lt, f in load_factors:
        if lt is load_type:
            return float(f)
    return float(default)


def _span_index_at(nodes: List[float], x: float) -> Optional[int]:
    for i in range(len(nodes) - 1):
        if nodes[i] <= x <= nodes[i + 1]:
            return i
    return None


def _place(
    load: DiscreteLoad,
    magnitude: float,
    nodes: List[float],
    lengths: List[float],
    per_span: List[List[SingleLoad]],
    notes: List[str],
) -> None:
    dist = load.distribution
    tag = load.note or load.load_type.code

    if isinstance(dist, Uniform):
        for loads in per_span:
            loads.append(UniformFull(magnitude))
        return

    if isinstance(dist, (Point, Moment)):
        x = float(dist.position_ft)
        i = _span_index_at(nodes, x)
        if i is None:
            notes.append(f'Load "{tag}" at x={x:g} ft lies outside the beam: ignored.')
            return
        local = x - nodes[i]
        if isinstance(dist, Point):
            per_span[i].append(PointLoad(magnitude, local))
        else:
            per_span[i].append(AppliedMoment(magnitude, local))
        return

    if isinstance(dist, (PartialUniform, Trapezoidal)):
        x1 = float(dist.start_ft)
        x2 = float(dist.end_ft)
        if x2 <= x1:
            notes.append(f'Distributed load "{tag}" has end <= start ([{x1:g},{x2:g}] ft): ignored.')
            return

        placed = False
        for i, L in enumerate(lengths):
            s0, s1 = nodes[i], nodes[i + 1]
            if not (x1 < s1 and x2 > s0):
                continue
            a = _clamp(x1 - s0, 0.0, L)
            b = _clamp(x2 - s0, 0.0, L)
            if b > a:
                per_span[i].append(UniformPartial(magnitude, a, b))
                placed = True

        if not placed:
            notes.append(f'Distributed load "{tag}" [{x1:g},{x2:g}] ft is off the beam: ignored.')
        elif x1 < nodes[0] or x2 > nodes[-1]:
            notes.append(
                f'Distributed load "{tag}" clipped from [{x1:g},{x2:g}] ft '
                f'to [{_clamp(x1, nodes[0], nodes[-1]):g},{_clamp(x2, nodes[0], nodes[-1]):g}] ft.'
            )
        if isinstance(dist, Trapezoidal):
            notes.append(f'Trapezoidal load "{tag}" taken as uniform {magnitude:g} plf (average).')
        return

    raise TypeError(f"Unsupported load distribution: {type(dist).__name__}")


def span_loads(
    beam: ContinuousBeam,
    load_factors: Sequence[Tuple[LoadType, float]],
) -> SpanLoads:
    """
    Factored discrete loads mapped onto the spans.

    - Loads whose factor is zero are skipped.
    - Uniform loads go on every span; point loads and moments on the first
      span whose closed range holds them; partial and trapezoidal loads are
      clipped to each span they overlap.
    - Self-weight is added per span as dead load.
    """
    nodes = beam.node_positions()
    lengths = [float(s.length_ft) for s in beam.spans]
    per_span: List[List[SingleLoad]] = [[] for _ in beam.spans]
    notes: List[str] = []

    for ld in beam.load_case.loads:
        f = factor_for(load_factors, ld.load_type)
        if abs(f) < ZERO_FACTOR:
            continue
        _place(ld, ld.effective_magnitude * f, nodes, lengths, per_span, notes)

    if beam.load_case.include_self_weight:
        dead = factor_for(load_factors, LoadType.DEAD, default=1.0)
        if abs(dead) >= ZERO_FACTOR:
            for i, s in enumerate(beam.spans):
                sw = s.self_weight_plf * dead
                if sw != 0.0:
                    per_span[i].append(UniformFull(sw))

    return SpanLoads(per_span=per_span, notes=notes)
