from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Tuple

from timber_beam.domain.loads import ALL_LOAD_TYPES, LoadType

D = LoadType.DEAD
L = LoadType.LIVE
LR = LoadType.ROOF_LIVE
S = LoadType.SNOW
R = LoadType.RAIN
W = LoadType.WIND
E = LoadType.SEISMIC

LoadFactors = List[Tuple[LoadType, float]]


@dataclass(frozen=True)
class LoadCombination:
    name: str
    equation: str
    factors: Dict[LoadType, float] = field(default_factory=dict)

    def factor(self, load_type: LoadType) -> float:
        return float(self.factors.get(load_type, 0.0))


def _combo(name: str, equation: str, **factors: float) -> LoadCombination:
    by_code = {lt.code: lt for lt in ALL_LOAD_TYPES}
    return LoadCombination(name, equation, {by_code[k]: float(v) for k, v in factors.items()})


def asce7_asd_combinations() -> List[LoadCombination]:
    """ASCE 7-22 section 2.4.1 (allowable stress design)."""
    return [
        _combo("ASD-1", "D", D=1.0),
        _combo("ASD-2", "D + L", D=1.0, L=1.0),
        _combo("ASD-3a", "D + Lr", D=1.0, Lr=1.0),
        _combo("ASD-3b", "D + S", D=1.0, S=1.0),
        _combo("ASD-3c", "D + R", D=1.0, R=1.0),
        _combo("ASD-4a", "D + 0.75L + 0.75Lr", D=1.0, L=0.75, Lr=0.75),
        _combo("ASD-4b", "D + 0.75L + 0.75S", D=1.0, L=0.75, S=0.75),
        _combo("ASD-4c", "D + 0.75L + 0.75R", D=1.0, L=0.75, R=0.75),
        _combo("ASD-5a", "D + 0.6W", D=1.0, W=0.6),
        _combo("ASD-5b", "D + 0.7E", D=1.0, E=0.7),
        _combo("ASD-6a", "D + 0.75L + 0.45W + 0.75Lr", D=1.0, L=0.75, W=0.45, Lr=0.75),
        _combo("ASD-6b", "D + 0.75L + 0.45W + 0.75S", D=1.0, L=0.75, W=0.45, S=0.75),
        _combo("ASD-6c", "D + 0.75L + 0.45W + 0.75R", D=1.0, L=0.75, W=0.45, R=0.75),
        _combo("ASD-7", "D + 0.75L + 0.525E + 0.75S", D=1.0, L=0.75, E=0.525, S=0.75),
        _combo("ASD-8", "0.6D + 0.6W", D=0.6, W=0.6),
        _combo("ASD-9", "0.6D + 0.7E", D=0.6, E=0.7),
    ]


def asce7_lrfd_combinations() -> List[LoadCombination]:
    """ASCE 7-22 section 2.3.1 (strength design)."""
    return [
        _combo("LRFD-1", "1.4D", D=1.4),
        _combo("LRFD-2a", "1.2D + 1.6L + 0.5Lr", D=1.2, L=1.6, Lr=0.5),
        _combo("LRFD-2b", "1.2D + 1.6L + 0.5S", D=1.2, L=1.6, S=0.5),
        _combo("LRFD-2c", "1.2D + 1.6L + 0.5R", D=1.2, L=1.6, R=0.5),
        _combo("LRFD-3a", "1.2D + 1.6Lr + L", D=1.2, Lr=1.6, L=1.0),
        _combo("LRFD-3b", "1.2D + 1.6Lr + 0.5W", D=1.2, Lr=1.6, W=0.5),
        _combo("LRFD-3c", "1.2D + 1.6S + L", D=1.2, S=1.6, L=1.0),
        _combo("LRFD-3d", "1.2D + 1.6S + 0.5W", D=1.2, S=1.6, W=0.5),
        _combo("LRFD-3e", "1.2D + 1.6R + L", D=1.2, R=1.6, L=1.0),
        _combo("LRFD-3f", "1.2D + 1.6R + 0.5W", D=1.2, R=1.6, W=0.5),
        _combo("LRFD-4a", "1.2D + 1.0W + L + 0.5Lr", D=1.2, W=1.0, L=1.0, Lr=0.5),
        _combo("LRFD-4b", "1.2D + 1.0W + L + 0.5S", D=1.2, W=1.0, L=1.0, S=0.5),
        _combo("LRFD-4c", "1.2D + 1.0W + L + 0.5R", D=1.2, W=1.0, L=1.0, R=0.5),
        _combo("LRFD-5", "1.2D + 1.0E + L + 0.2S", D=1.2, E=1.0, L=1.0, S=0.2),
        _combo("LRFD-6", "0.9D + 1.0W", D=0.9, W=1.0),
        _combo("LRFD-7", "0.9D + 1.0E", D=0.9, E=1.0),
    ]


class DesignMethod(Enum):
    ASD = "ASD"
    LRFD = "LRFD"

    def combinations(self) -> List[LoadCombination]:
        if self is DesignMethod.LRFD:
            return asce7_lrfd_combinations()
        return asce7_asd_combinations()


def load_factors(combination: LoadCombination) -> LoadFactors:
    """Factor for every load type, in LoadType order (0.0 where absent)."""
    return [(lt, combination.factor(lt)) for lt in ALL_LOAD_TYPES]
