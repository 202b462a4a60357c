# summary.py — CabinetCut ver1.0
#
# Computes sheet usage per material and collects edge-banding totals for the
# report. Numeric totals are prepared here; formatting is done in pdf_export.py.

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from models import Board, EdgeTotal, MaterialLayout, Sheet


# -------------------------------------------------------------
# Data structures
# -------------------------------------------------------------

@dataclass
class MaterialUsageSummary:
    material: str
    sheets_used: int = 0            # sheets with at least one part
    overflow_sheets: int = 0
    parts_placed: int = 0
    used_area_mm2: float = 0.0
    board_area_mm2: float = 0.0     # sheets_used * board area

    @property
    def utilization(self) -> float:
        if self.board_area_mm2 <= 0:
            return 0.0
        return self.used_area_mm2 / self.board_area_mm2


@dataclass
class GlobalSummary:
    board: Board
    material_usages: Dict[str, MaterialUsageSummary] = field(default_factory=dict)
    edge_totals: List[EdgeTotal] = field(default_factory=list)

    @property
    def total_sheets(self) -> int:
        return sum(mu.sheets_used for mu in self.material_usages.values())

    @property
    def total_parts(self) -> int:
        return sum(mu.parts_placed for mu in self.material_usages.values())

    @property
    def has_overflow(self) -> bool:
        return any(mu.overflow_sheets for mu in self.material_usages.values())


# -------------------------------------------------------------
# Main summary computation
# -------------------------------------------------------------

def summarize_sheets(material: str, sheets: Sequence[Sheet], board: Board) -> MaterialUsageSummary:
    mu = MaterialUsageSummary(material=material)
    for s in sheets:
        if s.overflow:
            mu.overflow_sheets += 1
        if not s.placed:
            continue
        mu.sheets_used += 1
        mu.parts_placed += len(s.placed)
        mu.used_area_mm2 += s.used_area_mm2()
    mu.board_area_mm2 = mu.sheets_used * board.area_mm2
    return mu


def compute_summary(
    layouts: Sequence[MaterialLayout],
    board: Board,
    edge_totals: Sequence[EdgeTotal] = ()
) -> GlobalSummary:

    summary = GlobalSummary(board=board, edge_totals=list(edge_totals))
    for layout in layouts:
        summary.material_usages[layout.material] = summarize_sheets(layout.material, layout.sheets, board)
    return summary
