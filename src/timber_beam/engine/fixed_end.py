from __future__ import annotations

from typing import Tuple

from timber_beam.domain.loads import (
    AppliedMoment,
    PointLoad,
    SingleLoad,
    UniformFull,
    UniformPartial,
)

# Fixed-end moments (ft-lb) for a prismatic span with both ends fixed.
# Convention: a downward load gives a negative left-end and a positive right-end value.

FEM = Tuple[float, float]


def fem_uniform_full(w_plf: float, span_ft: float) -> FEM:
    L = float(span_ft)
    if L <= 0:
        return 0.0, 0.0
    m = w_plf * L * L / 12.0
    return -m, m


def fem_point_load(p_lb: float, a_ft: float, span_ft: float) -> FEM:
    L = float(span_ft)
    if L <= 0:
        return 0.0, 0.0
    a = float(a_ft)
    b = L - a
    return -p_lb * a * b * b / (L * L), p_lb * a * a * b / (L * L)


def fem_partial_uniform(w_plf: float, start_ft: float, end_ft: float, span_ft: float) -> FEM:
    """
    Closed form: the point-load kernel integrated over [a, b].

      FEM_L = -w/L^2 * [L^2 x^2/2 - 2 L x^3/3 + x^4/4]_a^b
      FEM_R = +w/L^2 * [L x^3/3 - x^4/4]_a^b
    """
    L = float(span_ft)
    if L <= 0:
        return 0.0, 0.0
    a = float(start_ft)
    b = float(end_ft)

    def f_left(x: float) -> float:
        return L * L * x ** 2 / 2.0 - 2.0 * L * x ** 3 / 3.0 + x ** 4 / 4.0

    def f_right(x: float) -> float:
        return L * x ** 3 / 3.0 - x ** 4 / 4.0

    k = w_plf / (L * L)
    return -k * (f_left(b) - f_left(a)), k * (f_right(b) - f_right(a))


def fem_for_load(load: SingleLoad, span_ft: float) -> FEM:
    if isinstance(load, PointLoad):
        return fem_point_load(load.magnitude_lb, load.position_ft, span_ft)
    if isinstance(load, UniformFull):
        return fem_uniform_full(load.magnitude_plf, span_ft)
    if isinstance(load, UniformPartial):
        return fem_partial_uniform(load.magnitude_plf, load.start_ft, load.end_ft, span_ft)
    if isinstance(load, AppliedMoment):
        # TODO: fixed-end moments for a couple inside the span, M0*b*(2a-b)/L^2 and M0*a*(2b-a)/L^2
        return 0.0, 0.0
    raise TypeError(f"Unsupported load type: {type(load).__name__}")
