from __future__ import annotations

from timber_beam.domain.loads import (
    AppliedMoment,
    PointLoad,
    SingleLoad,
    UniformFull,
    UniformPartial,
)

PARTIAL_SEGMENTS = 20


def _unknown(load) -> TypeError:
    return TypeError(f"Unsupported load type: {type(load).__name__}")


# -------------------------
# Reactions (simply supported, lb, up+)
# -------------------------
def reaction_left(load: SingleLoad, span_ft: float) -> float:
    L = float(span_ft)
    if L <= 0:
        return 0.0

    if isinstance(load, PointLoad):
        return load.magnitude_lb * (L - load.position_ft) / L
    if isinstance(load, UniformFull):
        return load.magnitude_plf * L / 2.0
    if isinstance(load, UniformPartial):
        total = load.magnitude_plf * (load.end_ft - load.start_ft)
        centroid = 0.5 * (load.start_ft + load.end_ft)
        return total * (L - centroid) / L
    if isinstance(load, AppliedMoment):
        return -load.magnitude_ftlb / L
    raise _unknown(load)


def reaction_right(load: SingleLoad, span_ft: float) -> float:
    L = float(span_ft)
    if L <= 0:
        return 0.0

    if isinstance(load, PointLoad):
        return load.magnitude_lb * load.position_ft / L
    if isinstance(load, UniformFull):
        return load.magnitude_plf * L / 2.0
    if isinstance(load, UniformPartial):
        total = load.magnitude_plf * (load.end_ft - load.start_ft)
        centroid = 0.5 * (load.start_ft + load.end_ft)
        return total * centroid / L
    if isinstance(load, AppliedMoment):
        return load.magnitude_ftlb / L
    raise _unknown(load)


# -------------------------
# Internal forces
# -------------------------
def shear_at(load: SingleLoad, x_ft: float, span_ft: float) -> float:
    r1 = reaction_left(load, span_ft)
    x = float(x_ft)

    if isinstance(load, PointLoad):
        return r1 if x < load.position_ft else r1 - load.magnitude_lb
    if isinstance(load, UniformFull):
        return r1 - load.magnitude_plf * x
    if isinstance(load, UniformPartial):
        w, a, b = load.magnitude_plf, load.start_ft, load.end_ft
        if x <= a:
            return r1
        if x >= b:
            return r1 - w * (b - a)
        return r1 - w * (x - a)
    if isinstance(load, AppliedMoment):
        # a couple only changes the reactions
        return r1
    raise _unknown(load)


def moment_at(load: SingleLoad, x_ft: float, span_ft: float) -> float:
    """ft-lb, sagging+."""
    r1 = reaction_left(load, span_ft)
    x = float(x_ft)

    if isinstance(load, PointLoad):
        if x < load.position_ft:
            return r1 * x
        return r1 * x - load.magnitude_lb * (x - load.position_ft)
    if isinstance(load, UniformFull):
        return r1 * x - load.magnitude_plf * x * x / 2.0
    if isinstance(load, UniformPartial):
        w, a, b = load.magnitude_plf, load.start_ft, load.end_ft
        if x <= a:
            return r1 * x
        if x >= b:
            centroid = 0.5 * (a + b)
            return r1 * x - w * (b - a) * (x - centroid)
        return r1 * x - w * (x - a) ** 2 / 2.0
    if isinstance(load, AppliedMoment):
        # a couple sitting on the right support is taken by the support
        if x < load.position_ft or load.position_ft >= span_ft:
            return r1 * x
        return r1 * x + load.magnitude_ftlb
    raise _unknown(load)


# -------------------------
# Deflection (in, down+)
# -------------------------
def deflection_at(
    load: SingleLoad,
    x_ft: float,
    span_ft: float,
    e_psi: float,
    i_in4: float,
    partial_segments: int = PARTIAL_SEGMENTS,
) -> float:
    L = float(span_ft) * 12.0
    x = float(x_ft) * 12.0
    ei = float(e_psi) * float(i_in4)
    if L <= 0 or ei <= 0:
        return 0.0

    if isinstance(load, PointLoad):
        # Roark, simply supported, P at a
        P = load.magnitude_lb
        a = load.position_ft * 12.0
        b = L - a
        if x <= a:
            return P * b * x * (L * L - b * b - x * x) / (6.0 * ei * L)
        return P * a * (L - x) * (2.0 * L * x - x * x - a * a) / (6.0 * ei * L)

    if isinstance(load, UniformFull):
        w = load.magnitude_plf / 12.0  # lb/in
        return w * x * (L ** 3 - 2.0 * L * x * x + x ** 3) / (24.0 * ei)

    if isinstance(load, UniformPartial):
        return _deflection_partial(load, x_ft, span_ft, e_psi, i_in4, partial_segments)

    if isinstance(load, AppliedMoment):
        m0 = load.magnitude_ftlb * 12.0  # in-lb
        a = load.position_ft * 12.0
        if x <= a:
            return m0 * x * (x * x + 2.0 * L * L - 6.0 * a * L + 3.0 * a * a) / (6.0 * ei * L)
        u = L - x
        return m0 * u * (L * L - 3.0 * a * a - u * u) / (6.0 * ei * L)

    raise _unknown(load)


def _deflection_partial(
    load: UniformPartial,
    x_ft: float,
    span_ft: float,
    e_psi: float,
    i_in4: float,
    segments: int,
) -> float:
    """Partial load split into equal pieces, each lumped at its midpoint."""
    n = max(1, int(segments))
    seg = (load.end_ft - load.start_ft) / n
    p = load.magnitude_plf * seg

    total = 0.0
    for i in range(n):
        pos = load.start_ft + (i + 0.5) * seg
        total += deflection_at(PointLoad(p, pos), x_ft, span_ft, e_psi, i_in4)
    return total
