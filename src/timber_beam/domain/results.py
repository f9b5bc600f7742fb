from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

Diagram = List[Tuple[float, float]]   # [(x_ft, value), ...]


@dataclass(frozen=True)
class AnalysisResults:
    """Simply-supported superposition output for one span."""
    reaction_left_lb: float = 0.0
    reaction_right_lb: float = 0.0

    max_moment_ftlb: float = 0.0
    max_moment_position_ft: float = 0.0

    max_shear_lb: float = 0.0            # signed, largest magnitude
    max_shear_position_ft: float = 0.0

    max_deflection_in: float = 0.0
    max_deflection_position_ft: float = 0.0

    shear_diagram: Diagram = field(default_factory=list)
    moment_diagram: Diagram = field(default_factory=list)
    deflection_diagram: Diagram = field(default_factory=list)

    @classmethod
    def empty(cls, positions: Optional[List[float]] = None) -> "AnalysisResults":
        xs = list(positions or [])
        zeros = [(float(x), 0.0) for x in xs]
        return cls(shear_diagram=list(zeros), moment_diagram=list(zeros), deflection_diagram=list(zeros))


@dataclass(frozen=True)
class DistributionResult:
    span_moments_left: List[float]
    span_moments_right: List[float]
    support_moments: List[float]
    converged: bool
    iterations: int = 0


@dataclass(frozen=True)
class SpanResult:
    span_index: int
    length_ft: float

    moment_left_ftlb: float           # beam (sagging+) moment at the ends
    moment_right_ftlb: float
    shear_left_lb: float
    shear_right_lb: float

    max_positive_moment_ftlb: float
    max_positive_moment_position_ft: float
    max_negative_moment_ftlb: float
    max_shear_lb: float
    max_shear_position_ft: float
    max_deflection_in: float
    max_deflection_position_ft: float

    # stress checks
    fb_psi: float = 0.0
    fb_allow_psi: float = 0.0
    bending_unity: float = 0.0
    fv_psi: float = 0.0
    fv_allow_psi: float = 0.0
    shear_unity: float = 0.0
    deflection_ratio: float = float("inf")
    deflection_unity: float = 0.0


@dataclass
class BeamResult:
    label: str
    spans: List[SpanResult]
    reactions_lb: List[float]
    support_moments_ftlb: List[float]

    max_positive_moment_ftlb: float
    max_positive_moment_location: Tuple[int, float]    # (span, x_ft local)
    max_negative_moment_ftlb: float
    max_negative_moment_location: Tuple[int, float]
    max_shear_lb: float
    max_shear_location: Tuple[int, float]
    max_deflection_in: float
    max_deflection_location: Tuple[int, float]

    governing_unity: float
    governing_span: int
    governing_condition: str

    # diagrams over the full beam (x from the left end)
    shear_diagram: List[Tuple[float, float]]
    moment_diagram: List[Tuple[float, float]]
    deflection_diagram: List[Tuple[float, float]]

    governing_combination: str = "None"
    min_reaction_combination: str = "None"
    min_reactions_lb: List[float] = field(default_factory=list)
    converged: bool = True
    warnings: List[str] = field(default_factory=list)

    def passes(self) -> bool:
        return self.governing_unity <= 1.0

    def status(self) -> str:
        return "PASS" if self.passes() else "FAIL"
