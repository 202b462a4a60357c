# cutlist.py — CabinetCut ver1.0
#
# Derives the flat panels (carcass, shelves, back, fronts, drawer boxes) and
# the edge-banding runs for cabinet modules.
#
# Extraction is permissive: malformed configuration never raises, it falls
# back to the documented defaults instead.

import math
import re
from typing import Dict, Iterable, List, Optional

from catalog import (
    BACK_PANEL_MODES, BASE, DEFAULT_BACK_PANEL, DEFAULT_BOARD_TYPE,
    DEFAULT_EDGE_BANDING, DEFAULT_EDGE_MATERIAL, DEFAULT_FRONT_TYPE,
    default_shelf_count, variant_counts,
)
from models import (
    BANDED_PANELS, EDGE_NAMES, CutItem, EdgeBanding, EdgeItem, FamilyConfig,
    Gaps, ModuleConfig, ModuleCutlist, ModuleSpec,
)


# ------------------------------
# Constants (mm)
# ------------------------------

MIN_PART_MM = 50
DEFAULT_THICKNESS_MM = 18
BACK_THICKNESS_MM = 3
BACK_GROOVE_TOL = 10
ASSEMBLY_TOL = 1
CORNER_FILLER_MM = 70
SLIDE_CLEARANCE = 26
DRAWER_BOX_HEIGHT = 110
DRAWER_DEPTH_SETBACK = 50

_THICKNESS_RE = re.compile(r"(\d+)(?=\s*mm)", re.IGNORECASE)
_UNBANDED_RE = re.compile(r"front|blenda|cokół|hdf", re.IGNORECASE)

EDGE_LABELS = {
    "front": "przód",
    "back": "tył",
    "left": "lewa krawędź",
    "right": "prawa krawędź",
    "top": "górna krawędź",
    "bottom": "dolna krawędź",
}


# ------------------------------
# Helpers
# ------------------------------

def parse_thickness(board_type: Optional[str]) -> int:
    """First integer directly followed by 'mm' in a material label, else 18."""
    m = _THICKNESS_RE.search(board_type or "")
    return int(m.group(1)) if m else DEFAULT_THICKNESS_MM


def round_mm(value: float) -> int:
    """Round half up to whole millimetres."""
    return int(math.floor(value + 0.5))


def clamp_mm(value: float) -> int:
    return max(MIN_PART_MM, round_mm(value))


def is_bandable(material: str) -> bool:
    """Fronts, infill strips, plinths and HDF are never edge-banded."""
    return not _UNBANDED_RE.search(material or "")


def _as_float(value, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_count(value) -> Optional[int]:
    if value is None:
        return None
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return None


# ------------------------------
# Configuration resolution
# ------------------------------

def _resolve_gaps(*layers: Optional[Dict[str, float]]) -> Gaps:
    defaults = Gaps()
    values = {name: getattr(defaults, name) for name in ("left", "right", "top", "bottom", "between")}
    for layer in layers:
        if not layer:
            continue
        for name in values:
            if layer.get(name) is not None:
                values[name] = _as_float(layer[name], values[name])
    return Gaps(**values)


def _resolve_banding(*layers: Optional[Dict[str, Dict[str, bool]]]) -> Dict[str, EdgeBanding]:
    resolved = {}
    for panel in BANDED_PANELS:
        base = DEFAULT_EDGE_BANDING.get(panel, EdgeBanding())
        flags = {edge: getattr(base, edge) for edge in EDGE_NAMES}
        for layer in layers:
            panel_flags = (layer or {}).get(panel) or {}
            for edge in EDGE_NAMES:
                if panel_flags.get(edge) is not None:
                    flags[edge] = panel_flags[edge] is True
        resolved[panel] = EdgeBanding(**flags)
    return resolved


def resolve_config(module: ModuleSpec, families: Optional[Dict[str, FamilyConfig]] = None) -> ModuleConfig:
    """
    Merges family defaults with the module's own overrides, field by field.
    A None value in either layer means "not set"; the module wins over the
    family, the family wins over the built-in default.
    """
    base = (families or {}).get(module.family) or FamilyConfig()
    adv = module.overrides or FamilyConfig()

    def pick(name: str, default):
        value = getattr(adv, name)
        if value is None:
            value = getattr(base, name)
        return default if value is None else value

    back_panel = str(pick("back_panel", DEFAULT_BACK_PANEL)).strip().lower()
    if back_panel not in BACK_PANEL_MODES:
        back_panel = DEFAULT_BACK_PANEL

    fronts = tuple(_as_float(v, 0.0) for v in (module.drawer_fronts or ()))

    return ModuleConfig(
        board_type=pick("board_type", DEFAULT_BOARD_TYPE),
        front_type=pick("front_type", DEFAULT_FRONT_TYPE),
        gaps=_resolve_gaps(base.gaps, adv.gaps),
        shelves=_as_count(pick("shelves", None)),
        back_panel=back_panel,
        edge_banding=_resolve_banding(base.edge_banding, adv.edge_banding),
        edge_material=pick("edge_material", DEFAULT_EDGE_MATERIAL),
        drawer_fronts=fronts,
    )


# ------------------------------
# Extraction
# ------------------------------

class _Builder:
    """Collects items and edges for one module."""

    def __init__(self, module: ModuleSpec, cfg: ModuleConfig):
        self.module = module
        self.cfg = cfg
        self.result = ModuleCutlist()

    def add(self, material: str, part: str, qty: int, w: float, h: float) -> CutItem:
        item = CutItem(
            module_id=self.module.id,
            module_label=self.module.label,
            material=material,
            part=part,
            quantity=qty,
            width_mm=clamp_mm(w),
            height_mm=clamp_mm(h),
        )
        self.result.items.append(item)
        return item

    def band(self, panel: str, material: str, label: str,
             along: float, across: float, qty: int = 1) -> None:
        """
        Emits one run per flagged edge. Front/back edges measure `along`,
        the remaining four measure `across`; runs are summed over `qty`.
        """
        if not is_bandable(material):
            return
        for edge in self.cfg.banding(panel).flagged():
            length = along if edge in ("front", "back") else across
            total = max(0, round_mm(length * qty))
            if total == 0:
                continue
            self.result.edges.append(EdgeItem(
                material=self.cfg.edge_material,
                length_mm=total,
                part=f"{label}: {EDGE_LABELS[edge]}",
            ))


def _door_drawer_counts(module: ModuleSpec):
    doors, drawers = variant_counts(module.family, module.variant)
    if module.doors is not None:
        doors = _as_count(module.doors) or 0
    if module.drawers is not None:
        drawers = _as_count(module.drawers) or 0
    return doors, drawers


def _drawer_front_heights(cfg: ModuleConfig, drawers: int, avail_h: float, over_doors: bool) -> List[float]:
    fronts = list(cfg.drawer_fronts)
    if over_doors:
        if fronts:
            return [fronts[0]]
        return [min(180, max(120, math.floor(avail_h * 0.25)))]
    if len(fronts) == drawers:
        return fronts
    base_h = math.floor(avail_h / drawers)
    rem = avail_h - base_h * drawers
    return [base_h + (rem if i == drawers - 1 else 0) for i in range(drawers)]


def extract_module_cutlist(module: ModuleSpec,
                           families: Optional[Dict[str, FamilyConfig]] = None) -> ModuleCutlist:
    cfg = resolve_config(module, families)
    b = _Builder(module, cfg)

    t = parse_thickness(cfg.board_type)
    board = cfg.board_type
    front = f"Front {cfg.front_type}"
    hdf = f"HDF {BACK_THICKNESS_MM}mm"

    W = round_mm(module.width_mm)
    H = round_mm(module.height_mm)
    D = round_mm(module.depth_mm)
    inner_w = W - 2 * t - ASSEMBLY_TOL

    # corner filler goes before the box
    if module.family == BASE and module.kind == "corner":
        filler = b.add(board, "Zaślepka narożna", 1, CORNER_FILLER_MM, H)
        b.band("filler", board, "Zaślepka narożna", filler.height_mm, filler.width_mm)

    # carcass
    side = b.add(board, "Bok", 2, D, H)
    b.band("left_side", board, "Bok lewy", side.height_mm, side.width_mm)
    b.band("right_side", board, "Bok prawy", side.height_mm, side.width_mm)

    top = b.add(board, "Wieniec górny", 1, inner_w, D)
    b.band("top", board, "Wieniec górny", top.width_mm, top.height_mm)
    bottom = b.add(board, "Wieniec dolny", 1, inner_w, D)
    b.band("bottom", board, "Wieniec dolny", bottom.width_mm, bottom.height_mm)

    back_w = W - 2 * t - BACK_GROOVE_TOL
    if cfg.back_panel == "full":
        back = b.add(hdf, "Plecy", 1, back_w, H - BACK_GROOVE_TOL)
        b.band("back", hdf, "Plecy", back.width_mm, back.height_mm)
    elif cfg.back_panel == "split":
        back = b.add(hdf, "Plecy", 2, back_w, (H - BACK_GROOVE_TOL) / 2)
        b.band("back", hdf, "Plecy", back.width_mm, back.height_mm, qty=2)

    # shelves
    shelves = cfg.shelves if cfg.shelves is not None else default_shelf_count(module.family, module.kind)
    if shelves > 0:
        shelf = b.add(board, "Półka", shelves, inner_w, D - BACK_THICKNESS_MM)
        label = "Półki (sumarycznie)" if shelves > 1 else "Półka"
        b.band("shelf", board, label, shelf.width_mm, shelf.height_mm, qty=shelves)

    # fronts
    doors, drawers = _door_drawer_counts(module)
    gaps = cfg.gaps
    avail_w = W - gaps.left - gaps.right
    avail_h = H - gaps.top - gaps.bottom

    if doors > 0:
        between = gaps.between if doors > 1 else 0
        b.add(front, "Front drzwi", doors, (avail_w - between) / doors, avail_h)

    if drawers > 0:
        for front_h in _drawer_front_heights(cfg, drawers, avail_h, over_doors=doors > 0):
            b.add(front, "Front szuflady", 1, avail_w, front_h)

        box_w = clamp_mm(avail_w - SLIDE_CLEARANCE)
        box_d = clamp_mm(D - DRAWER_DEPTH_SETBACK)
        for _ in range(drawers):
            b.add(board, "Szuflada bok", 2, box_d, DRAWER_BOX_HEIGHT)
            pair = b.add(board, "Szuflada przód/tył", 2, box_w - 2 * t, DRAWER_BOX_HEIGHT)
            b.add(hdf, "Szuflada dno", 1, box_w, box_d)
            b.band("drawer_box", board, "Szuflada przód/tył", pair.height_mm, pair.width_mm, qty=2)

    return b.result


def extract_cutlist(modules: Iterable[ModuleSpec],
                    families: Optional[Dict[str, FamilyConfig]] = None) -> ModuleCutlist:
    """Concatenates per-module cutlists in input order."""
    combined = ModuleCutlist()
    for m in modules:
        res = extract_module_cutlist(m, families)
        combined.items.extend(res.items)
        combined.edges.extend(res.edges)
    return combined
