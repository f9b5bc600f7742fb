import os
import sys

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from timber_beam.domain.beam import ContinuousBeam, SpanSegment
from timber_beam.domain.combinations import DesignMethod
from timber_beam.domain.loads import DiscreteLoad, LoadCase, LoadType
from timber_beam.domain.supports import SupportType
from timber_beam.engine.beam import calculate
from timber_beam.materials.material_db import load_default
from timber_beam.services.calc_report_pdf import ReportHeader, export_calc_report
from timber_beam.services.logging_setup import setup_logging
from timber_beam.view.renderer_diagrams import save_diagrams

setup_logging(log_dir=os.path.join(ROOT, "logs"))

mat = load_default().require("DF-L No.2")

loads = LoadCase("Floor joist", [
    DiscreteLoad.uniform(LoadType.DEAD, 15.0, tributary_width_ft=1.333, note="floor DL"),
    DiscreteLoad.uniform(LoadType.LIVE, 40.0, tributary_width_ft=1.333, note="floor LL"),
    DiscreteLoad.point(LoadType.LIVE, 300.0, 18.0, note="partition"),
])

beam = ContinuousBeam(
    "J-1",
    spans=[SpanSegment(12.0, 1.5, 9.25, mat), SpanSegment(14.0, 1.5, 9.25, mat)],
    supports=[SupportType.PINNED, SupportType.PINNED, SupportType.ROLLER],
    load_case=loads,
)

res = calculate(beam, DesignMethod.ASD, adjustment=1.0)

print("governing:", res.governing_combination)
print("reactions [lb]:", [round(r, 1) for r in res.reactions_lb])
print("support moments [ft-lb]:", [round(m, 1) for m in res.support_moments_ftlb])
print("max +M = %.1f ft-lb @ span %d x=%.2f ft" % (res.max_positive_moment_ftlb, *res.max_positive_moment_location))
print("unity = %.3f (%s) -> %s" % (res.governing_unity, res.governing_condition, res.status()))

out_dir = os.path.join(ROOT, "out")
imgs = save_diagrams(res, out_dir)
export_calc_report(os.path.join(out_dir, "J-1.pdf"), ReportHeader(title="Joist J-1"), beam, res, images=imgs)
print("report:", os.path.join(out_dir, "J-1.pdf"))
