# models.py — CabinetCut ver1.0
# Data structures for cabinet modules, cut items, boards, and sheet layouts.

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


# ------------------------------
# Module description
# ------------------------------

@dataclass(frozen=True)
class Gaps:
    """Front gaps in mm (distance from carcass edges, and between leaves)."""
    left: float = 2
    right: float = 2
    top: float = 2
    bottom: float = 2
    between: float = 3


EDGE_NAMES = ("front", "back", "left", "right", "top", "bottom")


@dataclass(frozen=True)
class EdgeBanding:
    """Per-edge banding flags for one panel type. Only True edges get tape."""
    front: bool = False
    back: bool = False
    left: bool = False
    right: bool = False
    top: bool = False
    bottom: bool = False

    def flagged(self) -> List[str]:
        return [e for e in EDGE_NAMES if getattr(self, e)]


# Panel types that carry their own banding flags
BANDED_PANELS = (
    "left_side", "right_side", "top", "bottom",
    "shelf", "back", "filler", "drawer_box",
)


@dataclass
class FamilyConfig:
    """
    Per-family defaults as supplied by the caller. Any field left as None
    falls back to the built-in default during resolution.
    """
    board_type: Optional[str] = None
    front_type: Optional[str] = None
    gaps: Optional[Dict[str, float]] = None
    shelves: Optional[int] = None
    back_panel: Optional[str] = None          # 'full' | 'split' | 'none'
    edge_banding: Optional[Dict[str, Dict[str, bool]]] = None
    edge_material: Optional[str] = None


@dataclass
class ModuleSpec:
    id: str
    label: str
    family: str
    kind: str
    width_mm: float
    height_mm: float
    depth_mm: float
    variant: Optional[str] = None
    doors: Optional[int] = None               # None = derive from variant
    drawers: Optional[int] = None
    overrides: Optional[FamilyConfig] = None
    drawer_fronts: Optional[List[float]] = None


@dataclass(frozen=True)
class ModuleConfig:
    """Fully resolved configuration of a single module."""
    board_type: str
    front_type: str
    gaps: Gaps
    shelves: Optional[int]                    # None = family/kind default
    back_panel: str
    edge_banding: Dict[str, EdgeBanding]
    edge_material: str
    drawer_fronts: Tuple[float, ...] = ()

    def banding(self, panel: str) -> EdgeBanding:
        return self.edge_banding.get(panel, EdgeBanding())


# ------------------------------
# Cutlist records
# ------------------------------

@dataclass(frozen=True)
class CutItem:
    module_id: str
    module_label: str
    material: str
    part: str
    quantity: int
    width_mm: int
    height_mm: int


@dataclass(frozen=True)
class EdgeItem:
    material: str       # tape type, e.g. "ABS 1mm"
    length_mm: int
    part: str           # descriptive label


@dataclass
class ModuleCutlist:
    items: List[CutItem] = field(default_factory=list)
    edges: List[EdgeItem] = field(default_factory=list)


@dataclass(frozen=True)
class EdgeTotal:
    material: str
    length_mm: int

    @property
    def length_m(self) -> float:
        """Running metres."""
        return self.length_mm / 1000.0


# ------------------------------
# Boards and parts to pack
# ------------------------------

@dataclass(frozen=True)
class Board:
    length_mm: float    # sheet dimension along Y (grain axis)
    width_mm: float     # sheet dimension along X
    kerf_mm: float = 0.0
    has_grain: bool = False

    def __post_init__(self):
        if self.length_mm <= 0 or self.width_mm <= 0:
            raise ValueError(
                f"Board dimensions must be positive, got {self.length_mm}x{self.width_mm} mm"
            )
        if self.kerf_mm < 0:
            raise ValueError(f"Kerf must be non-negative, got {self.kerf_mm} mm")

    @property
    def area_mm2(self) -> float:
        return self.length_mm * self.width_mm


@dataclass(frozen=True)
class Part:
    name: str
    width_mm: float
    height_mm: float
    require_grain: bool = False
    quantity: int = 1
    material: Optional[str] = None

    @property
    def units(self) -> int:
        return max(1, self.quantity)


@dataclass(frozen=True)
class SheetPlan:
    ok: bool
    sheets: int
    reason: Optional[str] = None


# ------------------------------
# Placed geometry
# ------------------------------

@dataclass
class PlacedPart:
    part: Part
    x_mm: float
    y_mm: float
    width_mm: float     # orientation actually used
    height_mm: float
    rotated: bool


@dataclass
class FreeRect:
    x_mm: float
    y_mm: float
    width_mm: float
    height_mm: float

    def fits(self, w: float, h: float) -> bool:
        return w <= self.width_mm and h <= self.height_mm

    def contains(self, other: "FreeRect") -> bool:
        return (
            other.x_mm >= self.x_mm and other.y_mm >= self.y_mm and
            other.x_mm + other.width_mm <= self.x_mm + self.width_mm and
            other.y_mm + other.height_mm <= self.y_mm + self.height_mm
        )


# ------------------------------
# Layout structures
# ------------------------------

class Sheet:
    """
    One physical board instance. Stores:
    - placed parts in placement order
    - overflow flag (set when a part could not legally be placed)
    """

    def __init__(self, index: int, overflow: bool = False):
        self.index = index
        self.overflow = overflow
        self.placed: List[PlacedPart] = []

    def used_area_mm2(self) -> float:
        return sum(p.width_mm * p.height_mm for p in self.placed)

    def utilization(self, board: Board) -> float:
        """Fraction of the board area covered by parts (0..1)."""
        return self.used_area_mm2() / board.area_mm2

    def __repr__(self) -> str:
        return f"Sheet(index={self.index}, placed={len(self.placed)}, overflow={self.overflow})"


@dataclass
class MaterialLayout:
    material: str
    sheets: List[Sheet]
