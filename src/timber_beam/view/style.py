from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class DiagramStyle:
    line_lw: float = 1.4
    axis_lw: float = 1.0
    fill_alpha: float = 0.15
    grid_alpha: float = 0.25

    y_pad: float = 1.15
    marker_size: float = 18.0
    font_size: int = 8

    # labels closer than this fraction of the plot width are dropped
    min_label_dx_frac: float = 0.03
