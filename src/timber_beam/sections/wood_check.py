from __future__ import annotations

from dataclasses import dataclass

from timber_beam.domain.beam import WoodMaterial
from timber_beam.sections.rect_section import RectSection

INF = float("inf")


@dataclass(frozen=True)
class WoodCheck:
    # demands
    fb_psi: float
    fv_psi: float
    deflection_in: float

    # adjusted allowables
    fb_allow_psi: float
    fv_allow_psi: float
    deflection_allow_in: float

    # unities (demand / capacity)
    bending_unity: float
    shear_unity: float
    deflection_unity: float

    deflection_ratio: float        # L / delta
    governing: str = ""            # "Bending" / "Shear" / "Deflection"

    @property
    def max_unity(self) -> float:
        return max(self.bending_unity, self.shear_unity, self.deflection_unity)


def _unity(demand: float, capacity: float) -> float:
    if capacity <= 1e-12:
        return 0.0 if abs(demand) <= 1e-12 else INF
    return abs(demand) / capacity


def compute_wood_checks(
    *,
    section: RectSection,
    material: WoodMaterial,
    moment_ftlb: float,
    shear_lb: float,
    deflection_in: float,
    span_ft: float,
    adjustment: float = 1.0,
    deflection_limit: float = 240.0,
) -> WoodCheck:
    """
    fb = M*12/S, fv = 3V/(2A), deflection against L/limit.

    `adjustment` stands in for the product of the NDS factors (C_D, C_M, ...)
    and scales Fb and Fv alike.
    """
    p = section.props_in()
    S = float(p["S_in3"])
    A = float(p["area_in2"])

    fb = abs(moment_ftlb) * 12.0 / S if S > 0 else 0.0
    fv = 1.5 * abs(shear_lb) / A if A > 0 else 0.0

    fb_allow = float(material.fb_psi) * float(adjustment)
    fv_allow = float(material.fv_psi) * float(adjustment)

    span_in = float(span_ft) * 12.0
    defl = abs(float(deflection_in))
    defl_allow = span_in / float(deflection_limit) if deflection_limit > 0 else INF
    ratio = INF if defl <= 0.0 else span_in / defl

    ub = _unity(fb, fb_allow)
    uv = _unity(fv, fv_allow)
    ud = _unity(defl, defl_allow) if defl_allow != INF else 0.0

    governing = max((("Bending", ub), ("Shear", uv), ("Deflection", ud)), key=lambda t: t[1])[0]

    return WoodCheck(
        fb_psi=fb,
        fv_psi=fv,
        deflection_in=defl,
        fb_allow_psi=fb_allow,
        fv_allow_psi=fv_allow,
        deflection_allow_in=defl_allow,
        bending_unity=ub,
        shear_unity=uv,
        deflection_unity=ud,
        deflection_ratio=ratio,
        governing=governing,
    )
