import pytest

from timber_beam.domain.beam import ContinuousBeam, SpanSegment, WoodMaterial
from timber_beam.domain.loads import DiscreteLoad, LoadCase, LoadType


@pytest.fixture
def material():
    return WoodMaterial(name="DF-L No.2", fb_psi=900.0, fv_psi=180.0, e_psi=1_600_000.0, e_min_psi=580_000.0)


@pytest.fixture
def make_beam(material):
    """make_beam([10, 10], [P, P, P], loads=[...], self_weight=False)"""
    def _make(lengths, supports, loads=(), self_weight=False, width=1.5, depth=9.25):
        spans = [SpanSegment(float(L), width, depth, material) for L in lengths]
        case = LoadCase("test", list(loads), include_self_weight=self_weight)
        return ContinuousBeam("B-1", spans, list(supports), case)
    return _make


@pytest.fixture
def dead_uniform():
    def _load(plf=100.0):
        return DiscreteLoad.uniform(LoadType.DEAD, plf)
    return _load
