from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from timber_beam.domain.beam import ContinuousBeam
from timber_beam.domain.combinations import DesignMethod, LoadCombination, load_factors
from timber_beam.domain.loads import AppliedMoment, SingleLoad
from timber_beam.domain.results import AnalysisResults, BeamResult, Diagram, SpanResult
from timber_beam.engine.moment_distribution import distribute_span_loads
from timber_beam.engine.normalize import SpanLoads, span_loads
from timber_beam.engine.settings import DEFAULT_SETTINGS, AnalysisSettings
from timber_beam.engine.superposition import BeamAnalysis
from timber_beam.sections.rect_section import RectSection
from timber_beam.sections.wood_check import compute_wood_checks

log = logging.getLogger(__name__)


@dataclass
class _ComboRun:
    """One load combination worked through every span."""
    name: str
    spans: List[AnalysisResults]
    end_moments: List[Tuple[float, float]]      # beam (sagging+) moment at each span end
    support_moments: List[float]
    reactions: List[float]
    converged: bool = True
    notes: List[str] = field(default_factory=list)

    @property
    def max_positive_moment(self) -> float:
        return max((max((m for _, m in r.moment_diagram), default=0.0) for r in self.spans), default=0.0)


def _extreme(diagram: Diagram, *, signed_abs: bool) -> Tuple[float, float]:
    """(value, x): largest magnitude keeping its sign, or the most negative value."""
    best, pos = 0.0, 0.0
    for x, v in diagram:
        if signed_abs:
            if abs(v) > abs(best):
                best, pos = v, x
        elif v < best:
            best, pos = v, x
    return best, pos


def _analyze_span(
    length_ft: float,
    e_psi: float,
    i_in4: float,
    loads: Sequence[SingleLoad],
    settings: AnalysisSettings,
) -> AnalysisResults:
    return BeamAnalysis(
        length_ft, e_psi, i_in4, list(loads),
        sample_points=settings.sample_points,
        partial_segments=settings.partial_segments,
    ).analyze()


def _run_combination(
    beam: ContinuousBeam,
    name: str,
    mapped: SpanLoads,
    settings: AnalysisSettings,
) -> _ComboRun:
    n_nodes = beam.node_count

    if beam.is_simply_supported:
        s = beam.spans[0]
        res = _analyze_span(s.length_ft, s.material.e_psi, s.moment_of_inertia_in4, mapped.per_span[0], settings)
        return _ComboRun(
            name=name,
            spans=[res],
            end_moments=[(0.0, 0.0)],
            support_moments=[0.0, 0.0],
            reactions=[res.reaction_left_lb, res.reaction_right_lb],
            notes=list(mapped.notes),
        )

    dist = distribute_span_loads(beam, mapped.per_span, settings)
    reactions = [0.0] * n_nodes
    spans: List[AnalysisResults] = []
    end_moments: List[Tuple[float, float]] = []

    for i, s in enumerate(beam.spans):
        m_left = dist.span_moments_left[i]
        m_right = dist.span_moments_right[i]
        L = s.length_ft

        # end moments enter as couples: M(0) = m_left, M(L) = -m_right
        loads = list(mapped.per_span[i])
        if m_left != 0.0:
            loads.append(AppliedMoment(m_left, 0.0))
        if m_right != 0.0:
            loads.append(AppliedMoment(m_right, L))

        res = _analyze_span(L, s.material.e_psi, s.moment_of_inertia_in4, loads, settings)
        spans.append(res)
        end_moments.append((m_left, -m_right))
        reactions[i] += res.reaction_left_lb
        reactions[i + 1] += res.reaction_right_lb

    return _ComboRun(
        name=name,
        spans=spans,
        end_moments=end_moments,
        support_moments=list(dist.support_moments),
        reactions=reactions,
        converged=dist.converged,
        notes=list(mapped.notes),
    )


def _build_result(
    beam: ContinuousBeam,
    run: _ComboRun,
    settings: AnalysisSettings,
    adjustment: float,
) -> BeamResult:
    nodes = beam.node_positions()

    span_results: List[SpanResult] = []
    shear_d: Diagram = []
    moment_d: Diagram = []
    defl_d: Diagram = []

    pos_m, pos_m_loc = 0.0, (0, 0.0)
    neg_m, neg_m_loc = 0.0, (0, 0.0)
    max_v, max_v_loc = 0.0, (0, 0.0)
    max_d, max_d_loc = 0.0, (0, 0.0)
    gov_unity, gov_span, gov_cond = 0.0, 0, "Bending"

    for i, (s, res) in enumerate(zip(beam.spans, run.spans)):
        x0 = nodes[i]
        shear_d += [(x0 + x, v) for x, v in res.shear_diagram]
        moment_d += [(x0 + x, m) for x, m in res.moment_diagram]
        defl_d += [(x0 + x, d) for x, d in res.deflection_diagram]

        m_neg, m_neg_x = _extreme(res.moment_diagram, signed_abs=False)
        v_ext, v_x = _extreme(res.shear_diagram, signed_abs=True)
        d_ext, d_x = _extreme(res.deflection_diagram, signed_abs=True)

        design_m = max(res.max_moment_ftlb, abs(m_neg))
        chk = compute_wood_checks(
            section=RectSection(s.width_in, s.depth_in),
            material=s.material,
            moment_ftlb=design_m,
            shear_lb=v_ext,
            deflection_in=d_ext,
            span_ft=s.length_ft,
            adjustment=adjustment,
            deflection_limit=settings.deflection_limit_ratio,
        )

        m_left, m_right = run.end_moments[i]
        span_results.append(SpanResult(
            span_index=i,
            length_ft=s.length_ft,
            moment_left_ftlb=m_left,
            moment_right_ftlb=m_right,
            shear_left_lb=res.shear_diagram[0][1] if res.shear_diagram else 0.0,
            shear_right_lb=res.shear_diagram[-1][1] if res.shear_diagram else 0.0,
            max_positive_moment_ftlb=res.max_moment_ftlb,
            max_positive_moment_position_ft=res.max_moment_position_ft,
            max_negative_moment_ftlb=m_neg,
            max_shear_lb=v_ext,
            max_shear_position_ft=v_x,
            max_deflection_in=d_ext,
            max_deflection_position_ft=d_x,
            fb_psi=chk.fb_psi,
            fb_allow_psi=chk.fb_allow_psi,
            bending_unity=chk.bending_unity,
            fv_psi=chk.fv_psi,
            fv_allow_psi=chk.fv_allow_psi,
            shear_unity=chk.shear_unity,
            deflection_ratio=chk.deflection_ratio,
            deflection_unity=chk.deflection_unity,
        ))

        if res.max_moment_ftlb > pos_m:
            pos_m, pos_m_loc = res.max_moment_ftlb, (i, res.max_moment_position_ft)
        if m_neg < neg_m:
            neg_m, neg_m_loc = m_neg, (i, m_neg_x)
        if abs(v_ext) > abs(max_v):
            max_v, max_v_loc = v_ext, (i, v_x)
        if abs(d_ext) > abs(max_d):
            max_d, max_d_loc = d_ext, (i, d_x)
        if chk.max_unity > gov_unity:
            gov_unity, gov_span, gov_cond = chk.max_unity, i, chk.governing

    warnings: List[str] = []
    for note in run.notes:
        if note not in warnings:
            warnings.append(note)
    if not run.converged:
        warnings.append(
            f"Moment distribution did not converge for {run.name} "
            f"within {settings.max_iterations} rounds; results are approximate."
        )

    return BeamResult(
        label=beam.label,
        spans=span_results,
        reactions_lb=list(run.reactions),
        support_moments_ftlb=list(run.support_moments),
        max_positive_moment_ftlb=pos_m,
        max_positive_moment_location=pos_m_loc,
        max_negative_moment_ftlb=neg_m,
        max_negative_moment_location=neg_m_loc,
        max_shear_lb=max_v,
        max_shear_location=max_v_loc,
        max_deflection_in=max_d,
        max_deflection_location=max_d_loc,
        governing_unity=gov_unity,
        governing_span=gov_span,
        governing_condition=gov_cond,
        shear_diagram=shear_d,
        moment_diagram=moment_d,
        deflection_diagram=defl_d,
        governing_combination=run.name,
        converged=run.converged,
        warnings=warnings,
    )


def calculate(
    beam: ContinuousBeam,
    method: DesignMethod = DesignMethod.ASD,
    *,
    combinations: Optional[Sequence[LoadCombination]] = None,
    settings: Optional[AnalysisSettings] = None,
    adjustment: float = 1.0,
) -> BeamResult:
    """
    Analyse the beam under every load combination and report the one with
    the largest positive moment, with stress checks on that combination.

    Raises InvalidInputError before any analysis when the beam is malformed.
    """
    settings = settings or DEFAULT_SETTINGS
    beam.validate(max_span_ft=settings.max_span_ft)

    combos = list(combinations) if combinations is not None else method.combinations()
    log.info("Analysing '%s': %d span(s), %d combination(s)", beam.label, beam.span_count, len(combos))

    governing: Optional[_ComboRun] = None
    min_run: Optional[_ComboRun] = None

    for combo in combos:
        mapped = span_loads(beam, load_factors(combo))
        if mapped.is_empty():
            log.debug("%s: no loads, skipped", combo.name)
            continue

        run = _run_combination(beam, combo.name, mapped, settings)
        log.debug("%s: max +M = %.1f ft-lb", combo.name, run.max_positive_moment)

        if governing is None or run.max_positive_moment > governing.max_positive_moment:
            governing = run
        if min_run is None or sum(run.reactions) < sum(min_run.reactions):
            min_run = run

    if governing is None:
        log.info("'%s': no loads in any combination, zero-load result", beam.label)
        governing = _run_combination(beam, "None", SpanLoads([[] for _ in beam.spans], []), settings)
        min_run = governing

    result = _build_result(beam, governing, settings, adjustment)
    result.min_reaction_combination = min_run.name
    result.min_reactions_lb = list(min_run.reactions)

    if not governing.converged:
        log.warning("'%s': governing combination %s did not converge", beam.label, governing.name)
    log.info(
        "'%s': governing %s, unity %.3f (%s, span %d) -> %s",
        beam.label, result.governing_combination, result.governing_unity,
        result.governing_condition, result.governing_span + 1, result.status(),
    )
    return result
