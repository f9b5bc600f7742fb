from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from reportlab.lib import colors, pagesizes
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Image, PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from timber_beam.domain.beam import ContinuousBeam
from timber_beam.domain.loads import Moment, PartialUniform, Point, Trapezoidal, Uniform
from timber_beam.domain.results import BeamResult

# Takes diagram images already written to disk (see view.renderer_diagrams.save_diagrams).


@dataclass(frozen=True)
class ReportHeader:
    title: str
    project: str = ""
    engineer: str = ""
    date: Optional[datetime] = None
    revision: str = "A"


def export_calc_report(
    out_pdf_path: str,
    header: ReportHeader,
    beam: ContinuousBeam,
    result: BeamResult,
    images: Optional[Dict[str, str]] = None,
    page_size=pagesizes.LETTER,
) -> None:
    """Writes a calculation report for one beam (inputs, governing results, span checks, figures)."""
    imgs = {(k or "").strip().lower(): (v or "").strip() for k, v in (images or {}).items() if k and v}

    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(name="H1c", parent=styles["Heading1"], alignment=TA_CENTER))
    styles.add(ParagraphStyle(name="Small", parent=styles["BodyText"], fontSize=9, leading=11))

    doc = SimpleDocTemplate(
        out_pdf_path,
        pagesize=page_size,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=12 * mm,
        bottomMargin=12 * mm,
        title=header.title,
    )

    story: List[object] = []

    story.append(Paragraph(header.title, styles["H1c"]))
    story.append(Spacer(1, 4 * mm))

    date = header.date or datetime.now()
    meta_rows = [
        ["Project:", header.project or "-"],
        ["Engineer:", header.engineer or "-"],
        ["Date:", date.strftime("%Y-%m-%d %H:%M")],
        ["Revision:", header.revision],
        ["Member:", beam.label],
    ]
    t = Table(meta_rows, colWidths=[40 * mm, 140 * mm])
    t.setStyle(_kv_table_style())
    story.append(t)
    story.append(Spacer(1, 6 * mm))

    # ----------------- Inputs -----------------
    story.append(Paragraph("Geometry", styles["Heading2"]))
    rows = [["Span", "L [ft]", "b x d [in]", "Material", "E [psi]", "Left support"]]
    for i, s in enumerate(beam.spans):
        rows.append([
            s.label or str(i + 1),
            _f(s.length_ft, 2),
            f"{_f(s.width_in, 2)} x {_f(s.depth_in, 2)}",
            s.material.name,
            _f(s.material.e_psi, 0),
            beam.supports[i].value,
        ])
    rows.append(["", "", "", "", "Right support", beam.supports[-1].value])
    t = Table(rows, repeatRows=1)
    t.setStyle(_grid_table_style(header_rows=1))
    story.append(t)
    story.append(Spacer(1, 3 * mm))

    story.append(Paragraph("Loads", styles["Heading2"]))
    lrows = [["Type", "Distribution", "Magnitude", "Note"]]
    for ld in beam.load_case.loads:
        lrows.append([ld.load_type.code, _describe(ld.distribution), _f(ld.effective_magnitude, 2), ld.note or "-"])
    if beam.load_case.include_self_weight:
        lrows.append(["D", "Self-weight (35 pcf)", "per span", "-"])
    t = Table(lrows, repeatRows=1)
    t.setStyle(_grid_table_style(header_rows=1))
    story.append(t)
    story.append(Spacer(1, 4 * mm))

    # ----------------- Results -----------------
    story.append(Paragraph("Results", styles["Heading2"]))
    rrows = [
        ["Governing combination", result.governing_combination],
        ["Max +M [ft-lb]", f"{_f(result.max_positive_moment_ftlb, 1)} (span {result.max_positive_moment_location[0] + 1})"],
        ["Max -M [ft-lb]", _f(result.max_negative_moment_ftlb, 1)],
        ["Max V [lb]", _f(result.max_shear_lb, 1)],
        ["Max deflection [in]", _f(result.max_deflection_in, 3)],
        ["Reactions [lb]", ", ".join(_f(r, 1) for r in result.reactions_lb)],
        ["Min reactions [lb]", f"{', '.join(_f(r, 1) for r in result.min_reactions_lb)} ({result.min_reaction_combination})"],
        ["Governing unity", f"{_f(result.governing_unity, 3)} ({result.governing_condition}, span {result.governing_span + 1})"],
        ["Status", result.status()],
    ]
    t = Table(rrows, colWidths=[60 * mm, 120 * mm])
    t.setStyle(_kv_table_style())
    story.append(t)
    story.append(Spacer(1, 3 * mm))

    story.append(Paragraph("Span checks", styles["Heading3"]))
    srows = [["Span", "fb / Fb'", "fv / Fv'", "L/delta", "Unity b / v / d"]]
    for sr in result.spans:
        srows.append([
            str(sr.span_index + 1),
            f"{_f(sr.fb_psi, 0)} / {_f(sr.fb_allow_psi, 0)}",
            f"{_f(sr.fv_psi, 0)} / {_f(sr.fv_allow_psi, 0)}",
            "inf" if sr.deflection_ratio == float("inf") else _f(sr.deflection_ratio, 0),
            f"{_f(sr.bending_unity, 2)} / {_f(sr.shear_unity, 2)} / {_f(sr.deflection_unity, 2)}",
        ])
    t = Table(srows, repeatRows=1)
    t.setStyle(_grid_table_style(header_rows=1))
    story.append(t)

    if result.warnings:
        story.append(Spacer(1, 3 * mm))
        story.append(Paragraph("Notes", styles["Heading3"]))
        for w in result.warnings:
            story.append(Paragraph(f"• {w}", styles["Small"]))

    # ----------------- Figures -----------------
    story.append(PageBreak())
    story.append(Paragraph("Diagrams", styles["Heading2"]))
    _append_figure(story, styles, "v", "Shear V(x)", imgs, max_w=180 * mm, max_h=70 * mm)
    _append_figure(story, styles, "m", "Moment M(x)", imgs, max_w=180 * mm, max_h=70 * mm)
    _append_figure(story, styles, "d", "Deflection", imgs, max_w=180 * mm, max_h=70 * mm)

    doc.build(story)


# ----------------- helpers -----------------

def _describe(dist) -> str:
    if isinstance(dist, Uniform):
        return "Uniform (full length)"
    if isinstance(dist, Point):
        return f"Point @ {_f(dist.position_ft, 2)} ft"
    if isinstance(dist, PartialUniform):
        return f"Partial {_f(dist.start_ft, 2)}-{_f(dist.end_ft, 2)} ft"
    if isinstance(dist, Trapezoidal):
        return (
            f"Trapezoid {_f(dist.start_ft, 2)}-{_f(dist.end_ft, 2)} ft "
            f"({_f(dist.start_magnitude, 1)} to {_f(dist.end_magnitude, 1)})"
        )
    if isinstance(dist, Moment):
        return f"Moment @ {_f(dist.position_ft, 2)} ft"
    return type(dist).__name__


def _append_figure(story: List[object], styles, key: str, title: str, imgs: Dict[str, str], *, max_w: float, max_h: float):
    story.append(Paragraph(title, styles["Heading3"]))
    path = imgs.get(key, "")
    if path and os.path.exists(path):
        story.append(_img(path, max_w=max_w, max_h=max_h))
    else:
        story.append(Paragraph(f"(No image: '{key}' not provided or missing on disk)", styles["Small"]))
    story.append(Spacer(1, 3 * mm))


def _f(v: float, dec: int) -> str:
    s = f"{float(v):.{dec}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s


def _kv_table_style():
    return TableStyle(
        [
            ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
            ("BACKGROUND", (0, 0), (0, -1), colors.whitesmoke),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LEFTPADDING", (0, 0), (-1, -1), 6),
            ("RIGHTPADDING", (0, 0), (-1, -1), 6),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ]
    )


def _grid_table_style(header_rows: int = 1, font_size: int = 9):
    ts = [
        ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 0), (-1, -1), font_size),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("LEFTPADDING", (0, 0), (-1, -1), 4),
        ("RIGHTPADDING", (0, 0), (-1, -1), 4),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]
    if header_rows > 0:
        ts += [
            ("BACKGROUND", (0, 0), (-1, header_rows - 1), colors.lightgrey),
            ("FONTNAME", (0, 0), (-1, header_rows - 1), "Helvetica-Bold"),
        ]
    return TableStyle(ts)


def _img(path: str, *, max_w: float, max_h: float):
    img = Image(path)
    iw, ih = img.imageWidth, img.imageHeight
    if iw <= 0 or ih <= 0:
        return img
    scale = min(max_w / iw, max_h / ih, 1.0)
    img.drawWidth = iw * scale
    img.drawHeight = ih * scale
    return img
