from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple, Union


# -------------------------
# Span-local loads (consumed by the mechanics)
# -------------------------
@dataclass(frozen=True)
class PointLoad:
    magnitude_lb: float
    position_ft: float       # from the span's left end


@dataclass(frozen=True)
class UniformFull:
    magnitude_plf: float


@dataclass(frozen=True)
class UniformPartial:
    magnitude_plf: float
    start_ft: float
    end_ft: float


@dataclass(frozen=True)
class AppliedMoment:
    magnitude_ftlb: float    # sagging+ jump in M(x) at the position
    position_ft: float


SingleLoad = Union[PointLoad, UniformFull, UniformPartial, AppliedMoment]


# -------------------------
# Load model as entered by the user (global coordinates)
# -------------------------
class LoadType(Enum):
    """ASCE 7 load sources."""
    DEAD = "D"
    LIVE = "L"
    ROOF_LIVE = "Lr"
    SNOW = "S"
    RAIN = "R"
    WIND = "W"
    SEISMIC = "E"
    SOIL = "H"
    FLUID = "F"
    THERMAL = "T"

    @property
    def code(self) -> str:
        return self.value

    @classmethod
    def from_code(cls, code: str) -> "LoadType":
        for lt in cls:
            if lt.value == (code or "").strip():
                return lt
        raise ValueError(f"Unknown load type code: {code!r}")


ALL_LOAD_TYPES: Tuple[LoadType, ...] = tuple(LoadType)


@dataclass(frozen=True)
class Point:
    position_ft: float


@dataclass(frozen=True)
class Uniform:
    """Full length of the beam (every span)."""


@dataclass(frozen=True)
class PartialUniform:
    start_ft: float
    end_ft: float


@dataclass(frozen=True)
class Trapezoidal:
    start_ft: float
    end_ft: float
    start_magnitude: float
    end_magnitude: float

    @property
    def average_magnitude(self) -> float:
        return 0.5 * (self.start_magnitude + self.end_magnitude)


@dataclass(frozen=True)
class Moment:
    position_ft: float


LoadDistribution = Union[Point, Uniform, PartialUniform, Trapezoidal, Moment]


@dataclass(frozen=True)
class DiscreteLoad:
    """
    Load of a single type placed on the whole beam.

    Positions are measured in feet from the left end of the beam.
    magnitude: lb (Point), plf (Uniform/PartialUniform), ft-lb (Moment), or psf
    when tributary_width_ft is given. Trapezoidal loads carry their own end
    magnitudes and ignore `magnitude`.
    """
    load_type: LoadType
    distribution: LoadDistribution
    magnitude: float = 0.0
    tributary_width_ft: Optional[float] = None
    note: str = ""

    @property
    def effective_magnitude(self) -> float:
        tw = 1.0 if self.tributary_width_ft is None else float(self.tributary_width_ft)
        if isinstance(self.distribution, Trapezoidal):
            return self.distribution.average_magnitude * tw
        return float(self.magnitude) * tw

    @classmethod
    def uniform(cls, load_type: LoadType, plf: float, **kw) -> "DiscreteLoad":
        return cls(load_type, Uniform(), plf, **kw)

    @classmethod
    def point(cls, load_type: LoadType, lb: float, position_ft: float, **kw) -> "DiscreteLoad":
        return cls(load_type, Point(position_ft), lb, **kw)

    @classmethod
    def partial_uniform(cls, load_type: LoadType, plf: float, start_ft: float, end_ft: float, **kw) -> "DiscreteLoad":
        return cls(load_type, PartialUniform(start_ft, end_ft), plf, **kw)

    @classmethod
    def trapezoidal(
        cls,
        load_type: LoadType,
        start_ft: float,
        end_ft: float,
        start_plf: float,
        end_plf: float,
        **kw,
    ) -> "DiscreteLoad":
        return cls(load_type, Trapezoidal(start_ft, end_ft, start_plf, end_plf), 0.0, **kw)

    @classmethod
    def moment(cls, load_type: LoadType, ftlb: float, position_ft: float, **kw) -> "DiscreteLoad":
        return cls(load_type, Moment(position_ft), ftlb, **kw)


@dataclass(frozen=True)
class LoadCase:
    label: str = "Loads"
    loads: List[DiscreteLoad] = field(default_factory=list)
    include_self_weight: bool = True

    def with_load(self, load: DiscreteLoad) -> "LoadCase":
        return replace(self, loads=list(self.loads) + [load])

    def without_self_weight(self) -> "LoadCase":
        return replace(self, include_self_weight=False)

    def of_type(self, load_type: LoadType) -> List[DiscreteLoad]:
        return [ld for ld in self.loads if ld.load_type is load_type]
