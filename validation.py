# validation.py — CabinetCut ver1.0
#
# Checks that every part can physically fit on a stock sheet, honouring the
# grain lock, and estimates how many sheets a job needs.

import logging
import math
from typing import Iterable, List, Tuple

from models import Board, Part, SheetPlan

logger = logging.getLogger(__name__)

# Allowance for kerf and imperfect nesting in the sheet estimate
WASTE_MARGIN = 1.15


# ---------------------------------------
# Orientation rules
# ---------------------------------------

def can_rotate(part: Part, board: Board) -> bool:
    """Rotation is forbidden only for grain-locked parts on grained boards."""
    return not (board.has_grain and part.require_grain)


def fits_as_is(part: Part, board: Board) -> bool:
    return part.width_mm <= board.width_mm and part.height_mm <= board.length_mm


def fits_rotated(part: Part, board: Board) -> bool:
    return part.height_mm <= board.width_mm and part.width_mm <= board.length_mm


def orientation_candidates(part: Part, board: Board) -> List[Tuple[float, float, bool]]:
    """
    Returns the allowed (width_mm, height_mm, rotated) orientations, as-is
    first. Square parts only get one candidate.
    """
    cands = [(part.width_mm, part.height_mm, False)]
    if can_rotate(part, board) and part.width_mm != part.height_mm:
        cands.append((part.height_mm, part.width_mm, True))
    return cands


def part_fits(part: Part, board: Board) -> bool:
    if not can_rotate(part, board):
        return fits_as_is(part, board)
    return fits_as_is(part, board) or fits_rotated(part, board)


# ---------------------------------------
# Global validation before packing
# ---------------------------------------

def _failure_reason(part: Part, board: Board) -> str:
    L, W = board.length_mm, board.width_mm
    if not board.has_grain:
        return (
            f"{part.name}: {part.width_mm}x{part.height_mm} mm exceeds board "
            f"{L}x{W} mm (no grain, rotation allowed)"
        )
    if part.require_grain:
        return (
            f"{part.name}: {part.width_mm}x{part.height_mm} mm exceeds "
            f"{W}x{L} mm (grain locked: h<={L}, w<={W})"
        )
    return (
        f"{part.name}: {part.width_mm}x{part.height_mm} mm exceeds board "
        f"{L}x{W} mm (rotation allowed for this part)"
    )


def validate_parts(board: Board, parts: Iterable[Part]) -> SheetPlan:
    """
    Fail-fast feasibility check: the first part that cannot fit a single
    sheet yields ok=False with a reason. On success, `sheets` is an area
    based estimate with a 15% waste margin, not the packed count.
    """
    parts = list(parts)
    for p in parts:
        if not part_fits(p, board):
            reason = _failure_reason(p, board)
            logger.debug("Validation failed: %s", reason)
            return SheetPlan(ok=False, sheets=0, reason=reason)

    area = sum(p.units * p.width_mm * p.height_mm for p in parts)
    sheets = max(1, math.ceil(area / board.area_mm2 * WASTE_MARGIN))
    logger.debug("Validated %d part records, estimated %d sheet(s)", len(parts), sheets)
    return SheetPlan(ok=True, sheets=sheets)
