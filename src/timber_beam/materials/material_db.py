from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from timber_beam.domain.beam import WoodMaterial

HEADER_KEYS = {"id", "material", "species", "grade", "fb_psi"}


class MaterialDB:
    def __init__(self, materials: List[WoodMaterial]):
        self.materials: List[WoodMaterial] = list(materials)
        self.by_id: Dict[str, WoodMaterial] = {m.name.strip(): m for m in self.materials if m.name.strip()}

    def ids(self) -> List[str]:
        return [m.name for m in self.materials]

    def get(self, mat_id: str) -> Optional[WoodMaterial]:
        return self.by_id.get((mat_id or "").strip())

    def require(self, mat_id: str) -> WoodMaterial:
        m = self.get(mat_id)
        if m is None:
            raise KeyError(f"Unknown material: {mat_id!r}")
        return m

    @staticmethod
    def _norm(s: str) -> str:
        return (s or "").strip()

    @classmethod
    def from_txt(cls, path: str | Path) -> "MaterialDB":
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Material file not found: {p}")

        rows: List[List[str]] = []
        for ln in p.read_text(encoding="utf-8", errors="replace").splitlines():
            t = ln.strip()
            if not t or t.startswith("#") or t.startswith("//"):
                continue
            rows.append([c.strip() for c in t.split(";")])

        if not rows:
            raise ValueError("Material file is empty or has no valid rows.")

        header = [h.strip().lower() for h in rows[0]]
        has_header = any(h in HEADER_KEYS for h in header)
        data_rows = rows[1:] if has_header else rows
        if not has_header:
            header = [
                "id", "species", "grade", "fb_psi", "ft_psi", "fv_psi",
                "fc_perp_psi", "fc_psi", "e_psi", "e_min_psi", "specific_gravity",
            ]

        def idx(name: str) -> Optional[int]:
            return header.index(name) if name in header else None

        i_id = idx("id")
        if i_id is None:
            i_id = idx("material")

        def get_cell(row: List[str], i: Optional[int]) -> str:
            if i is None:
                return ""
            return row[i] if i < len(row) else ""

        def try_float(s: str) -> Optional[float]:
            t = (s or "").strip().replace(",", ".")
            if t == "":
                return None
            try:
                return float(t)
            except ValueError:
                return None

        def num(row: List[str], name: str, default: float = 0.0) -> float:
            v = try_float(get_cell(row, idx(name)))
            return default if v is None else v

        mats: List[WoodMaterial] = []
        for r in data_rows:
            mid = cls._norm(get_cell(r, i_id)) if i_id is not None else cls._norm(r[0] if r else "")
            if not mid:
                continue

            fb = try_float(get_cell(r, idx("fb_psi")))
            fv = try_float(get_cell(r, idx("fv_psi")))
            e = try_float(get_cell(r, idx("e_psi")))
            if fb is None or fv is None or e is None:
                # without Fb, Fv and E the row cannot be checked
                continue

            mats.append(WoodMaterial(
                name=mid,
                fb_psi=fb,
                fv_psi=fv,
                e_psi=e,
                e_min_psi=num(r, "e_min_psi"),
                ft_psi=num(r, "ft_psi"),
                fc_perp_psi=num(r, "fc_perp_psi"),
                fc_psi=num(r, "fc_psi"),
                specific_gravity=num(r, "specific_gravity"),
                species=cls._norm(get_cell(r, idx("species"))),
                grade=cls._norm(get_cell(r, idx("grade"))),
                density_pcf=num(r, "density_pcf", 35.0),
            ))

        if not mats:
            raise ValueError("No materials loaded: missing columns or Fb/Fv/E values.")

        mats.sort(key=lambda m: m.name.upper())
        return cls(mats)


def default_materials_path() -> Path:
    """src/timber_beam/data/wood_materials.txt"""
    here = Path(__file__).resolve()
    return here.parents[1] / "data" / "wood_materials.txt"


def load_default() -> MaterialDB:
    return MaterialDB.from_txt(default_materials_path())
