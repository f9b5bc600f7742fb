import logging

import pytest

from timber_beam.domain.combinations import asce7_asd_combinations, load_factors
from timber_beam.domain.loads import DiscreteLoad, LoadType
from timber_beam.domain.supports import SupportType
from timber_beam.engine.moment_distribution import MomentDistribution, analyze_moment_distribution
from timber_beam.engine.settings import AnalysisSettings

P = SupportType.PINNED
R = SupportType.ROLLER
X = SupportType.FIXED
F = SupportType.FREE

DEAD = [(LoadType.DEAD, 1.0)]
W = 100.0
FEM = W * 10.0 ** 2 / 12.0     # 833.33


def _uniform_beam(make_beam, supports):
    return make_beam([10.0] * (len(supports) - 1), supports, loads=[DiscreteLoad.uniform(LoadType.DEAD, W)])


def test_two_equal_spans_uniform(make_beam):
    res = analyze_moment_distribution(_uniform_beam(make_beam, [P, P, P]), DEAD)
    assert res.converged
    assert abs(res.support_moments[1]) == pytest.approx(W * 100.0 / 8.0, abs=100.0)
    assert abs(res.support_moments[1]) == pytest.approx(1250.0, rel=1e-6)
    assert res.span_moments_left[0] == pytest.approx(0.0, abs=50.0)
    assert res.span_moments_right[1] == pytest.approx(0.0, abs=50.0)
    assert res.support_moments[0] == pytest.approx(0.0, abs=1e-9)
    assert res.support_moments[2] == pytest.approx(0.0, abs=1e-9)


def test_interior_support_moment_is_negative_of_right_span_left_end(make_beam):
    beam = make_beam(
        [10.0, 14.0, 8.0],
        [P, P, P, P],
        loads=[
            DiscreteLoad.uniform(LoadType.DEAD, 80.0),
            DiscreteLoad.point(LoadType.DEAD, 600.0, 17.0),
        ],
    )
    res = analyze_moment_distribution(beam, DEAD)
    assert res.converged
    for j in (1, 2):
        assert res.support_moments[j] == pytest.approx(-res.span_moments_left[j], abs=0.5)


def test_single_span_fixed_fixed_keeps_fem_without_iterating(make_beam):
    res = analyze_moment_distribution(_uniform_beam(make_beam, [X, X]), DEAD)
    assert res.converged
    assert res.iterations == 0
    assert res.span_moments_left[0] == pytest.approx(-FEM)
    assert res.span_moments_right[0] == pytest.approx(FEM)
    assert abs(res.span_moments_left[0]) == pytest.approx(833.33, abs=50.0)


def test_single_span_pinned_pinned_has_no_end_moments(make_beam):
    res = analyze_moment_distribution(_uniform_beam(make_beam, [P, R]), DEAD)
    assert res.converged
    assert res.iterations == 0
    assert res.span_moments_left[0] == 0.0
    assert res.span_moments_right[0] == 0.0


def test_propped_cantilevers_carry_half_to_fixed_end(make_beam):
    res = analyze_moment_distribution(_uniform_beam(make_beam, [X, P]), DEAD)
    assert res.span_moments_right[0] == 0.0
    assert res.span_moments_left[0] == pytest.approx(-W * 100.0 / 8.0)

    res = analyze_moment_distribution(_uniform_beam(make_beam, [R, X]), DEAD)
    assert res.span_moments_left[0] == 0.0
    assert res.span_moments_right[0] == pytest.approx(W * 100.0 / 8.0)


def test_single_span_free_end_takes_no_moment(make_beam):
    res = analyze_moment_distribution(_uniform_beam(make_beam, [X, F]), DEAD)
    assert res.converged
    assert res.span_moments_right[0] == 0.0
    assert res.span_moments_left[0] == pytest.approx(-FEM)

    res = analyze_moment_distribution(_uniform_beam(make_beam, [F, X]), DEAD)
    assert res.span_moments_left[0] == 0.0
    assert res.span_moments_right[0] == pytest.approx(FEM)


def test_pinned_and_roller_are_interchangeable(make_beam):
    loads = [DiscreteLoad.uniform(LoadType.DEAD, 75.0), DiscreteLoad.point(LoadType.DEAD, 900.0, 13.0)]
    a = analyze_moment_distribution(make_beam([10.0, 12.0], [P, P, P], loads=loads), DEAD)
    b = analyze_moment_distribution(make_beam([10.0, 12.0], [R, P, R], loads=loads), DEAD)
    c = analyze_moment_distribution(make_beam([10.0, 12.0], [P, R, R], loads=loads), DEAD)
    for other in (b, c):
        assert other.span_moments_left == pytest.approx(a.span_moments_left)
        assert other.span_moments_right == pytest.approx(a.span_moments_right)
        assert other.support_moments == pytest.approx(a.support_moments)


def test_fixed_pin_pin_two_spans(make_beam):
    res = analyze_moment_distribution(_uniform_beam(make_beam, [X, P, P]), DEAD)
    assert res.converged
    assert abs(res.span_moments_left[0]) > 100.0
    assert abs(res.span_moments_right[1]) < 50.0
    assert abs(res.support_moments[1]) > 100.0


def test_free_pin_pin_two_spans_no_carry_over_from_free_end(make_beam):
    res = analyze_moment_distribution(_uniform_beam(make_beam, [F, P, P]), DEAD)
    assert res.converged
    assert res.span_moments_left[0] == 0.0
    assert abs(res.span_moments_right[1]) < 50.0
    # released FEM at the free end is not carried: joint starts from 833.33 / -1250
    # and splits the unbalance 1 : 0.75
    expected = FEM + (1250.0 - FEM) / 1.75
    assert res.support_moments[1] == pytest.approx(expected, rel=1e-3)
    assert abs(res.support_moments[1]) > 1000.0


def test_three_equal_spans_close_to_wl2_over_10(make_beam):
    res = analyze_moment_distribution(_uniform_beam(make_beam, [P, P, P, P]), DEAD)
    assert res.converged
    assert res.support_moments[1] == pytest.approx(-res.span_moments_left[1])
    assert abs(res.support_moments[1]) == pytest.approx(abs(res.support_moments[2]), rel=1e-6)
    assert abs(res.support_moments[1]) == pytest.approx(W * 100.0 / 10.0, abs=60.0)


def test_distribution_factors(make_beam):
    solver = MomentDistribution.from_input(_uniform_beam(make_beam, [X, P, P]))
    assert solver.joints[0].distribution_factors == [0.0]
    # left span: far end fixed (k), right span: far end pinned (0.75k)
    assert solver.joints[1].distribution_factors == pytest.approx([1.0 / 1.75, 0.75 / 1.75])
    assert sum(solver.joints[2].distribution_factors) == pytest.approx(1.0)

    solver = MomentDistribution([(10.0, 1.0e8), (10.0, 1.0e8)], [P, X, P])
    assert solver.joints[1].distribution_factors == [0.0, 0.0]


def test_stiffness_uses_span_in_inches():
    solver = MomentDistribution([(10.0, 1.2e8)], [P, P])
    assert solver.spans[0].k == pytest.approx(1.2e8 / 120.0)


def test_zero_factor_loads_are_ignored(make_beam):
    beam = make_beam([10.0, 10.0], [P, P, P], loads=[DiscreteLoad.uniform(LoadType.WIND, 100.0)])
    asd1 = asce7_asd_combinations()[0]
    res = analyze_moment_distribution(beam, load_factors(asd1))
    assert res.support_moments == [0.0, 0.0, 0.0]


def test_self_weight_uses_dead_factor(make_beam):
    beam = make_beam([10.0, 10.0], [P, P, P], self_weight=True)
    sw = beam.spans[0].self_weight_plf
    full = analyze_moment_distribution(beam, DEAD)
    assert full.support_moments[1] == pytest.approx(sw * 100.0 / 8.0, rel=1e-6)
    reduced = analyze_moment_distribution(beam, [(LoadType.DEAD, 0.6)])
    assert reduced.support_moments[1] == pytest.approx(0.6 * full.support_moments[1])
    # no dead entry in the list: self-weight taken at 1.0
    other = analyze_moment_distribution(beam, [(LoadType.LIVE, 1.0)])
    assert other.support_moments[1] == pytest.approx(full.support_moments[1])


def test_applied_moment_loads_add_no_fixed_end_moment(make_beam):
    beam = make_beam([10.0, 10.0], [P, P, P], loads=[DiscreteLoad.moment(LoadType.DEAD, 1000.0, 5.0)])
    res = analyze_moment_distribution(beam, DEAD)
    assert res.span_moments_left == [0.0, 0.0]
    assert res.span_moments_right == [0.0, 0.0]


def test_not_converging_reports_false_and_logs(make_beam, caplog):
    beam = _uniform_beam(make_beam, [P, P, P, P])
    with caplog.at_level(logging.WARNING, logger="timber_beam"):
        res = analyze_moment_distribution(beam, DEAD, AnalysisSettings(max_iterations=1))
    assert res.converged is False
    assert res.iterations == 1
    assert any("did not converge" in r.getMessage() for r in caplog.records)


def test_no_spans_is_trivially_converged():
    solver = MomentDistribution([], [P])
    assert solver.solve() is True
    assert solver.get_end_moments() == []
    assert solver.get_support_moments() == [0.0]
