import math

import pytest

from timber_beam.domain.combinations import DesignMethod
from timber_beam.domain.errors import InvalidInputError
from timber_beam.domain.loads import DiscreteLoad, LoadType
from timber_beam.domain.supports import SupportType
from timber_beam.engine.beam import calculate
from timber_beam.engine.settings import AnalysisSettings

P = SupportType.PINNED
R = SupportType.ROLLER
X = SupportType.FIXED
F = SupportType.FREE

E = 1_600_000.0
I = 1.5 * 9.25 ** 3 / 12.0


def test_simple_span_dead_only(make_beam):
    beam = make_beam([10.0], [P, R], loads=[DiscreteLoad.uniform(LoadType.DEAD, 100.0)])
    res = calculate(beam)
    assert res.governing_combination == "ASD-1"
    assert res.reactions_lb == pytest.approx([500.0, 500.0])
    assert res.max_positive_moment_ftlb == pytest.approx(1250.0)
    assert res.max_positive_moment_location == (0, pytest.approx(5.0))
    assert res.support_moments_ftlb == [0.0, 0.0]
    assert res.converged
    assert res.min_reaction_combination == "ASD-8"
    assert res.min_reactions_lb == pytest.approx([300.0, 300.0])


def test_point_load_scenario(make_beam):
    beam = make_beam([10.0], [P, P], loads=[DiscreteLoad.point(LoadType.DEAD, 1000.0, 3.0)])
    res = calculate(beam)
    assert res.reactions_lb == pytest.approx([700.0, 300.0])
    assert res.max_positive_moment_ftlb == pytest.approx(2100.0)
    assert res.max_positive_moment_location[1] == pytest.approx(3.0)


def test_live_load_combination_governs(make_beam):
    loads = [DiscreteLoad.uniform(LoadType.DEAD, 100.0), DiscreteLoad.uniform(LoadType.LIVE, 100.0)]
    beam = make_beam([10.0], [P, R], loads=loads)

    asd = calculate(beam, DesignMethod.ASD)
    assert asd.governing_combination == "ASD-2"
    assert asd.max_positive_moment_ftlb == pytest.approx(2500.0)

    lrfd = calculate(beam, DesignMethod.LRFD)
    assert lrfd.governing_combination == "LRFD-2a"
    assert lrfd.max_positive_moment_ftlb == pytest.approx(280.0 * 100.0 / 8.0)


def test_combinations_without_loads_are_skipped(make_beam):
    beam = make_beam([10.0], [P, R], loads=[DiscreteLoad.point(LoadType.WIND, 1000.0, 5.0)])
    res = calculate(beam)
    assert res.governing_combination == "ASD-5a"
    assert res.max_positive_moment_ftlb == pytest.approx(0.6 * 1000.0 * 10.0 / 4.0)


def test_two_equal_spans_reactions_and_support_moment(make_beam):
    beam = make_beam([10.0, 10.0], [P, P, P], loads=[DiscreteLoad.uniform(LoadType.DEAD, 100.0)])
    res = calculate(beam)

    assert [abs(r) for r in res.reactions_lb] == pytest.approx([375.0, 1250.0, 375.0])
    assert abs(res.support_moments_ftlb[1]) == pytest.approx(1250.0)
    assert res.max_negative_moment_ftlb == pytest.approx(-1250.0)
    assert res.max_negative_moment_location[1] == pytest.approx(10.0)
    # 375x - 50x^2 peaks at 703.1 ft-lb, x = 3.75
    assert res.max_positive_moment_ftlb == pytest.approx(703.125, abs=1.0)

    s0, s1 = res.spans
    assert s0.moment_left_ftlb == pytest.approx(0.0, abs=1e-9)
    assert s0.moment_right_ftlb == pytest.approx(-1250.0)
    assert s1.moment_left_ftlb == pytest.approx(-1250.0)
    assert s0.shear_left_lb == pytest.approx(375.0)
    assert s0.shear_right_lb == pytest.approx(-625.0)


def test_two_span_diagram_is_continuous_over_the_support(make_beam):
    beam = make_beam([10.0, 10.0], [P, P, P], loads=[DiscreteLoad.uniform(LoadType.DEAD, 100.0)])
    res = calculate(beam)
    at_support = [m for x, m in res.moment_diagram if abs(x - 10.0) < 1e-9]
    assert len(at_support) == 2
    assert at_support[0] == pytest.approx(at_support[1])
    assert res.moment_diagram[0] == (0.0, pytest.approx(0.0, abs=1e-9))
    assert res.moment_diagram[-1][0] == pytest.approx(20.0)
    assert res.moment_diagram[-1][1] == pytest.approx(0.0, abs=1e-6)


def test_fixed_fixed_span_matches_closed_form(make_beam):
    w = 100.0
    beam = make_beam([10.0], [X, X], loads=[DiscreteLoad.uniform(LoadType.DEAD, w)])
    res = calculate(beam)

    assert res.reactions_lb == pytest.approx([500.0, 500.0])
    assert res.spans[0].moment_left_ftlb == pytest.approx(-833.333, rel=1e-5)
    assert res.spans[0].moment_right_ftlb == pytest.approx(-833.333, rel=1e-5)
    assert res.max_positive_moment_ftlb == pytest.approx(w * 100.0 / 24.0)
    L_in = 120.0
    assert res.max_deflection_in == pytest.approx((w / 12.0) * L_in ** 4 / (384.0 * E * I), rel=1e-3)
    assert res.max_deflection_location == (0, pytest.approx(5.0))


def test_propped_cantilever(make_beam):
    beam = make_beam([10.0], [X, R], loads=[DiscreteLoad.uniform(LoadType.DEAD, 100.0)])
    res = calculate(beam)
    assert res.reactions_lb == pytest.approx([625.0, 375.0])
    assert res.spans[0].moment_left_ftlb == pytest.approx(-1250.0)
    assert res.spans[0].moment_right_ftlb == pytest.approx(0.0, abs=1e-9)


def test_cantilever_runs_with_free_end_unloaded(make_beam):
    beam = make_beam([6.0], [X, F], loads=[DiscreteLoad.uniform(LoadType.DEAD, 50.0)])
    res = calculate(beam)
    assert res.spans[0].moment_right_ftlb == pytest.approx(0.0, abs=1e-9)
    assert res.governing_combination == "ASD-1"


def test_pinned_roller_swap_gives_same_result(make_beam):
    loads = [DiscreteLoad.uniform(LoadType.DEAD, 60.0), DiscreteLoad.point(LoadType.LIVE, 800.0, 15.0)]
    a = calculate(make_beam([10.0, 12.0], [P, P, P], loads=loads))
    b = calculate(make_beam([10.0, 12.0], [R, R, P], loads=loads))
    assert a.governing_combination == b.governing_combination
    assert a.reactions_lb == pytest.approx(b.reactions_lb)
    assert a.max_positive_moment_ftlb == pytest.approx(b.max_positive_moment_ftlb)


def test_trapezoidal_load_uses_average_magnitude(make_beam):
    trap = DiscreteLoad.trapezoidal(LoadType.DEAD, 0.0, 10.0, 0.0, 200.0)
    res = calculate(make_beam([10.0], [P, R], loads=[trap]))
    assert res.max_positive_moment_ftlb == pytest.approx(1250.0)
    assert any("Trapezoidal" in w for w in res.warnings)


def test_tributary_width_scales_area_loads(make_beam):
    load = DiscreteLoad.uniform(LoadType.DEAD, 10.0, tributary_width_ft=10.0)
    res = calculate(make_beam([10.0], [P, R], loads=[load]))
    assert res.reactions_lb == pytest.approx([500.0, 500.0])


def test_self_weight_only(make_beam):
    beam = make_beam([10.0], [P, R], self_weight=True)
    sw = 1.5 * 9.25 * 35.0 / 144.0
    res = calculate(beam)
    assert res.governing_combination == "ASD-1"
    assert res.reactions_lb == pytest.approx([sw * 5.0, sw * 5.0])


def test_empty_load_case_falls_back_to_zero_result(make_beam):
    res = calculate(make_beam([10.0, 10.0], [P, P, P]))
    assert res.governing_combination == "None"
    assert res.reactions_lb == [0.0, 0.0, 0.0]
    assert res.max_positive_moment_ftlb == 0.0
    assert res.governing_unity == 0.0
    assert res.status() == "PASS"
    assert math.isinf(res.spans[0].deflection_ratio)


def test_stress_checks_on_governing_combination(make_beam):
    beam = make_beam([10.0], [P, R], loads=[DiscreteLoad.uniform(LoadType.DEAD, 100.0)])
    res = calculate(beam)
    s = res.spans[0]
    S = 1.5 * 9.25 ** 2 / 6.0
    A = 1.5 * 9.25
    assert s.fb_psi == pytest.approx(1250.0 * 12.0 / S)
    assert s.fv_psi == pytest.approx(1.5 * 500.0 / A)
    assert s.bending_unity == pytest.approx(s.fb_psi / 900.0)
    assert s.shear_unity == pytest.approx(s.fv_psi / 180.0)
    assert s.deflection_ratio == pytest.approx(120.0 / s.max_deflection_in)
    assert res.governing_condition == "Bending"
    assert res.passes()

    reduced = calculate(beam, adjustment=0.5)
    assert reduced.spans[0].bending_unity == pytest.approx(2.0 * s.bending_unity)
    assert reduced.status() == "FAIL"


def test_non_convergence_is_reported_not_raised(make_beam):
    beam = make_beam([10.0] * 3, [P, P, P, P], loads=[DiscreteLoad.uniform(LoadType.DEAD, 100.0)])
    res = calculate(beam, settings=AnalysisSettings(max_iterations=1))
    assert res.converged is False
    assert any("did not converge" in w for w in res.warnings)


def test_custom_combination_list(make_beam):
    from timber_beam.domain.combinations import LoadCombination

    beam = make_beam([10.0], [P, R], loads=[DiscreteLoad.uniform(LoadType.SNOW, 100.0)])
    combo = LoadCombination("S only", "1.0S", {LoadType.SNOW: 1.0})
    res = calculate(beam, combinations=[combo])
    assert res.governing_combination == "S only"
    assert res.max_positive_moment_ftlb == pytest.approx(1250.0)


def test_invalid_beam_is_rejected_before_analysis(make_beam):
    with pytest.raises(InvalidInputError) as ei:
        calculate(make_beam([10.0], [P]))
    assert ei.value.field == "supports"
    with pytest.raises(ValueError):
        calculate(make_beam([70.0], [P, P]))
