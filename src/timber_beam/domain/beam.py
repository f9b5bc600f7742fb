from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from timber_beam.domain.errors import InvalidInputError
from timber_beam.domain.loads import LoadCase
from timber_beam.domain.supports import SupportType

MAX_SPAN_FT = 60.0


@dataclass(frozen=True)
class WoodMaterial:
    """
    Sawn lumber reference design values (psi) for one species/grade.

    Only fb, fv and E take part in the beam checks; the rest are carried for
    traceability of the material table.
    """
    name: str
    fb_psi: float
    fv_psi: float
    e_psi: float
    e_min_psi: float = 0.0
    ft_psi: float = 0.0
    fc_perp_psi: float = 0.0
    fc_psi: float = 0.0
    specific_gravity: float = 0.0
    species: str = ""
    grade: str = ""
    density_pcf: float = 35.0


@dataclass(frozen=True)
class SpanSegment:
    length_ft: float
    width_in: float
    depth_in: float
    material: WoodMaterial
    label: str = ""

    @property
    def area_in2(self) -> float:
        return float(self.width_in * self.depth_in)

    @property
    def moment_of_inertia_in4(self) -> float:
        return float(self.width_in * self.depth_in ** 3 / 12.0)

    @property
    def section_modulus_in3(self) -> float:
        return float(self.width_in * self.depth_in ** 2 / 6.0)

    @property
    def ei(self) -> float:
        """lb-in²"""
        return float(self.material.e_psi) * self.moment_of_inertia_in4

    @property
    def stiffness_k(self) -> float:
        """EI / L with L in inches (far end fixed)."""
        length_in = self.length_ft * 12.0
        if length_in <= 0:
            return 0.0
        return self.ei / length_in

    @property
    def self_weight_plf(self) -> float:
        return self.area_in2 * float(self.material.density_pcf) / 144.0


@dataclass(frozen=True)
class ContinuousBeam:
    """
    Prismatic spans in a row with one support per node.

    supports[i] sits at the left end of spans[i]; supports[-1] at the far right.
    """
    label: str
    spans: List[SpanSegment]
    supports: List[SupportType]
    load_case: LoadCase = field(default_factory=LoadCase)

    @classmethod
    def simple_span(cls, label: str, span: SpanSegment, load_case: LoadCase) -> "ContinuousBeam":
        return cls(label, [span], [SupportType.PINNED, SupportType.ROLLER], load_case)

    @classmethod
    def cantilever(cls, label: str, span: SpanSegment, load_case: LoadCase) -> "ContinuousBeam":
        return cls(label, [span], [SupportType.FIXED, SupportType.FREE], load_case)

    @classmethod
    def fixed_fixed(cls, label: str, span: SpanSegment, load_case: LoadCase) -> "ContinuousBeam":
        return cls(label, [span], [SupportType.FIXED, SupportType.FIXED], load_case)

    @property
    def span_count(self) -> int:
        return len(self.spans)

    @property
    def node_count(self) -> int:
        return len(self.supports)

    @property
    def total_length_ft(self) -> float:
        return float(sum(s.length_ft for s in self.spans))

    @property
    def is_single_span(self) -> bool:
        return len(self.spans) == 1

    @property
    def is_simply_supported(self) -> bool:
        return (
            self.is_single_span
            and len(self.supports) == 2
            and self.supports[0].is_pin_like
            and self.supports[1].is_pin_like
        )

    def node_positions(self) -> List[float]:
        xs = [0.0]
        for s in self.spans:
            xs.append(xs[-1] + float(s.length_ft))
        return xs

    def validate(self, max_span_ft: float = MAX_SPAN_FT) -> None:
        if not self.spans:
            raise InvalidInputError("spans", 0, "beam needs at least one span")

        if len(self.supports) != len(self.spans) + 1:
            raise InvalidInputError(
                "supports",
                len(self.supports),
                f"expected {len(self.spans) + 1} supports for {len(self.spans)} spans",
            )

        for i, s in enumerate(self.spans):
            if s.length_ft <= 0:
                raise InvalidInputError(f"spans[{i}].length_ft", s.length_ft, "span length must be positive")
            if s.length_ft > max_span_ft:
                raise InvalidInputError(
                    f"spans[{i}].length_ft", s.length_ft, f"span exceeds {max_span_ft:g} ft"
                )
            if s.width_in <= 0:
                raise InvalidInputError(f"spans[{i}].width_in", s.width_in, "width must be positive")
            if s.depth_in <= 0:
                raise InvalidInputError(f"spans[{i}].depth_in", s.depth_in, "depth must be positive")

        n_vertical = sum(1 for sp in self.supports if sp.restrains_vertical)
        if n_vertical == 0:
            raise InvalidInputError("supports", [sp.value for sp in self.supports], "no vertical support")

        has_free = any(sp is SupportType.FREE for sp in self.supports)
        has_fixed = any(sp is SupportType.FIXED for sp in self.supports)
        if has_free and not has_fixed and n_vertical < 2:
            raise InvalidInputError(
                "supports",
                [sp.value for sp in self.supports],
                "free end needs a fixed support or at least two vertical supports",
            )
