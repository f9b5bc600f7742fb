from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class RectSection:
    """
    Solid rectangular sawn section, dimensions in inches (actual, not nominal).
    """
    width_in: float     # b
    depth_in: float     # d

    def props_in(self) -> Dict[str, float]:
        """
        Geometric properties (in / in^2 / in^4 / in^3):
          - depth_in, area_in2
          - I_in4 (strong axis)
          - S_in3 (elastic section modulus)
        """
        b = float(self.width_in)
        d = float(self.depth_in)
        return {
            "depth_in": d,
            "area_in2": b * d,
            "I_in4": b * d ** 3 / 12.0,
            "S_in3": b * d ** 2 / 6.0,
        }
