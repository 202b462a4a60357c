# guillotine.py — CabinetCut ver1.0
#
# Best-fit free-rectangle packer with guillotine splitting. Each sheet keeps
# a list of free rectangles; every placed part splits its host rectangle
# into a strip to the right and a strip below.

import logging
from typing import List, Optional, Sequence, Tuple

from models import Board, FreeRect, Part, PlacedPart, Sheet
from packing import expand_quantities
from validation import orientation_candidates

logger = logging.getLogger(__name__)

# Free rectangles this thin are useless
MIN_FREE_MM = 0.5


# -------------------------------------------------------------
# Free-rectangle bookkeeping
# -------------------------------------------------------------

def full_sheet_rect(board: Board) -> FreeRect:
    return FreeRect(0.0, 0.0, board.width_mm, board.length_mm)


def split_free_rect(fr: FreeRect, x: float, y: float, w: float, h: float, kerf: float) -> List[FreeRect]:
    """
    Guillotine split after placing (w, h) at (x, y) inside `fr`:
    - right: beside the part, as tall as the part
    - bottom: below the part, spanning the full width of `fr`
    Both are offset by the kerf.
    """
    right = FreeRect(
        x_mm=x + w + kerf,
        y_mm=y,
        width_mm=max(0.0, fr.x_mm + fr.width_mm - (x + w + kerf)),
        height_mm=h,
    )
    bottom = FreeRect(
        x_mm=fr.x_mm,
        y_mm=y + h + kerf,
        width_mm=fr.width_mm,
        height_mm=max(0.0, fr.y_mm + fr.height_mm - (y + h + kerf)),
    )
    return [r for r in (right, bottom) if r.width_mm > MIN_FREE_MM and r.height_mm > MIN_FREE_MM]


def prune_free_rects(rects: Sequence[FreeRect]) -> List[FreeRect]:
    """Drops rectangles fully contained in another one. O(n^2)."""
    kept = []
    for i, a in enumerate(rects):
        contained = any(j != i and b.contains(a) for j, b in enumerate(rects))
        if not contained:
            kept.append(a)
    return kept


def leftover_score(fr: FreeRect, w: float, h: float) -> float:
    return (fr.width_mm - w) * fr.height_mm + fr.width_mm * (fr.height_mm - h)


def find_best_fit(free: Sequence[FreeRect], part: Part, board: Board) -> Optional[Tuple[int, float, float, bool]]:
    """
    Returns (free index, w, h, rotated) with the lowest leftover score, or
    None. Ties keep the first candidate found (free-list order, as-is first).
    """
    best = None
    best_score = None
    for idx, fr in enumerate(free):
        for w, h, rotated in orientation_candidates(part, board):
            if not fr.fits(w, h):
                continue
            score = leftover_score(fr, w, h)
            if best_score is None or score < best_score:
                best_score = score
                best = (idx, w, h, rotated)
    return best


# -------------------------------------------------------------
# Packing run
# -------------------------------------------------------------

class _GuillotineRun:
    """Sheet accumulator and free list for one packing call."""

    def __init__(self, board: Board):
        self.board = board
        self.sheets: List[Sheet] = []
        self.current = Sheet(index=1)
        self.free: List[FreeRect] = [full_sheet_rect(board)]

    def _next_index(self) -> int:
        return len(self.sheets) + 1

    def close_sheet(self, overflow: bool = False) -> None:
        self.current.overflow = self.current.overflow or overflow
        self.sheets.append(self.current)
        self.current = Sheet(index=self._next_index())
        self.free = [full_sheet_rect(self.board)]

    def place(self, part: Part) -> bool:
        best = find_best_fit(self.free, part, self.board)
        if best is None:
            return False
        idx, w, h, rotated = best
        fr = self.free.pop(idx)
        self.current.placed.append(PlacedPart(
            part=part, x_mm=fr.x_mm, y_mm=fr.y_mm,
            width_mm=w, height_mm=h, rotated=rotated,
        ))
        self.free.extend(split_free_rect(fr, fr.x_mm, fr.y_mm, w, h, self.board.kerf_mm))
        self.free = prune_free_rects(self.free)
        return True

    def dump_overflow(self, part: Part) -> None:
        """Puts an unplaceable part at the origin of an overflow sheet."""
        self.current.placed.append(PlacedPart(
            part=part, x_mm=0.0, y_mm=0.0,
            width_mm=part.width_mm, height_mm=part.height_mm, rotated=False,
        ))
        self.close_sheet(overflow=True)


def pack_guillotine(board: Board, parts: Sequence[Part]) -> List[Sheet]:
    """
    Packs parts onto as many sheets as needed. Units are placed largest
    (by max dimension) first; the sort is stable so equal units keep their
    input order. A unit that fits nowhere, not even on a fresh sheet, is
    put alone on a sheet flagged overflow=True. The final sheet is always
    returned, even when empty.
    """
    units = expand_quantities(parts)
    units.sort(key=lambda p: max(p.width_mm, p.height_mm), reverse=True)

    run = _GuillotineRun(board)
    for unit in units:
        if run.place(unit):
            continue
        # retry once on a fresh sheet
        if run.current.placed:
            run.close_sheet()
        if not run.place(unit):
            logger.warning(
                "Part '%s' (%sx%s mm) does not fit an empty %sx%s mm sheet",
                unit.name, unit.width_mm, unit.height_mm, board.width_mm, board.length_mm,
            )
            run.dump_overflow(unit)

    run.sheets.append(run.current)
    logger.debug("Guillotine: %d unit(s) on %d sheet(s)", len(units), len(run.sheets))
    return run.sheets
