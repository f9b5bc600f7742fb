from __future__ import annotations

import os
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
from matplotlib.figure import Figure

from timber_beam.view.style import DiagramStyle

DEFAULT_STYLE = DiagramStyle()


def _fmt_plain(v: float, dec: int) -> str:
    s = f"{float(v):,.{dec}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s


def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def _xy(diagram: Sequence[Tuple[float, float]]) -> Tuple[np.ndarray, np.ndarray]:
    if not diagram:
        return np.zeros(0, dtype=float), np.zeros(0, dtype=float)
    arr = np.asarray(diagram, dtype=float)
    return arr[:, 0], arr[:, 1]


def _span_breaks(x: np.ndarray) -> List[float]:
    """Interior node positions (x repeated where two span diagrams meet)."""
    if x.size < 2:
        return []
    dup = np.isclose(np.diff(x), 0.0)
    return [float(x[i]) for i in np.nonzero(dup)[0]]


def _setup_axes(ax, x: np.ndarray, y: np.ndarray, style: DiagramStyle):
    if x.size:
        ax.set_xlim(float(x.min()), float(x.max()))
    ymax = float(np.max(np.abs(y))) if y.size else 1.0
    ymax = max(ymax, 1e-9)
    ax.set_ylim(-ymax * style.y_pad, ymax * style.y_pad)
    ax.axhline(0.0, linewidth=style.axis_lw, color="black")
    for xb in _span_breaks(x):
        ax.axvline(xb, linewidth=0.6, linestyle=":", color="grey")
    ax.grid(True, alpha=style.grid_alpha)


def _annotate_extrema(ax, x: np.ndarray, y: np.ndarray, unit: str, style: DiagramStyle, dec: int = 0):
    """Mark the global max and min (skipped when they sit on the baseline)."""
    if x.size == 0:
        return
    max_abs = max(float(np.max(np.abs(y))), 1e-9)
    y_abs_min = 0.01 * max_abs

    picks = []
    for i in (int(np.argmax(y)), int(np.argmin(y))):
        if abs(float(y[i])) < y_abs_min or i in [p for p, _ in picks]:
            continue
        picks.append((i, "bottom" if y[i] >= 0 else "top"))

    x_min, x_max = ax.get_xlim()
    y_min, y_max = ax.get_ylim()
    mx = 0.03 * (x_max - x_min)
    my = 0.03 * (y_max - y_min)

    placed: List[float] = []
    min_dx = style.min_label_dx_frac * (x_max - x_min)
    for i, va in picks:
        xi, yi = float(x[i]), float(y[i])
        if any(abs(xi - xp) < min_dx for xp in placed):
            continue
        placed.append(xi)
        ax.scatter([xi], [yi], s=style.marker_size, zorder=6)
        ty = yi + my if va == "bottom" else yi - my
        ax.text(
            _clamp(xi, x_min + mx, x_max - mx),
            _clamp(ty, y_min + my, y_max - my),
            f"{_fmt_plain(yi, dec)} {unit}",
            ha="center", va=va, fontsize=style.font_size, zorder=7,
        )


# -------------------------
# Render
# -------------------------
def render_shear(ax, result, style: DiagramStyle = DEFAULT_STYLE):
    """result: BeamResult or AnalysisResults."""
    ax.clear()
    x, V = _xy(result.shear_diagram)
    ax.plot(x, V, linewidth=style.line_lw)
    if x.size:
        ax.fill_between(x, V, 0.0, alpha=style.fill_alpha)
    _setup_axes(ax, x, V, style)
    _annotate_extrema(ax, x, V, "lb", style)

    ax.set_ylabel("V [lb]")
    ax.set_title("Shear V(x)")


def render_moment(ax, result, style: DiagramStyle = DEFAULT_STYLE):
    ax.clear()
    x, M = _xy(result.moment_diagram)
    ax.plot(x, M, linewidth=style.line_lw)
    if x.size:
        ax.fill_between(x, M, 0.0, alpha=style.fill_alpha)
    _setup_axes(ax, x, M, style)
    _annotate_extrema(ax, x, M, "ft-lb", style)

    ax.set_ylabel("M [ft-lb]")
    ax.set_title("Moment M(x) (sagging +)")


def render_deflection(ax, result, style: DiagramStyle = DEFAULT_STYLE):
    ax.clear()
    x, d = _xy(result.deflection_diagram)
    # plotted downward, like the deformed shape
    ax.plot(x, -d, linewidth=style.line_lw)
    _setup_axes(ax, x, -d, style)
    _annotate_extrema(ax, x, -d, "in", style, dec=3)

    ax.set_ylabel("deflection [in] (down -)")
    ax.set_xlabel("x [ft]")
    ax.set_title("Deflection")


def save_diagrams(
    result,
    out_dir: str,
    style: DiagramStyle = DEFAULT_STYLE,
    dpi: int = 150,
    size_in: Tuple[float, float] = (8.0, 3.0),
) -> Dict[str, str]:
    """Writes v.png, m.png and d.png; returns {"v": path, "m": path, "d": path}."""
    os.makedirs(out_dir, exist_ok=True)
    out: Dict[str, str] = {}
    for key, fn in (("v", render_shear), ("m", render_moment), ("d", render_deflection)):
        fig = Figure(figsize=size_in)
        ax = fig.add_subplot(111)
        fn(ax, result, style)
        fig.tight_layout()
        path = os.path.join(out_dir, f"{key}.png")
        fig.savefig(path, dpi=dpi)
        out[key] = path
    return out


def render_all(fig: Optional[Figure], result, style: DiagramStyle = DEFAULT_STYLE) -> Figure:
    """Three stacked axes (V, M, deflection) on one figure."""
    fig = fig or Figure(figsize=(8.0, 9.0))
    fig.clear()
    axes = fig.subplots(3, 1, sharex=True)
    render_shear(axes[0], result, style)
    render_moment(axes[1], result, style)
    render_deflection(axes[2], result, style)
    fig.tight_layout()
    return fig
