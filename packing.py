# packing.py — CabinetCut ver1.0
#
# Quick row-based ("shelf") layout across one or more sheets.
# Parts are oriented up front, sorted tallest-first and laid left→right in
# rows; a row that does not fit the remaining sheet length opens a new sheet.

import logging
from typing import List, Sequence, Tuple

from models import Board, Part, PlacedPart, Sheet
from validation import can_rotate, fits_as_is, fits_rotated

logger = logging.getLogger(__name__)

EPS = 1e-6


# -------------------------------------------------------------
# Unit preparation
# -------------------------------------------------------------

def expand_quantities(parts: Sequence[Part]) -> List[Part]:
    """One entry per physical piece, in input order."""
    units: List[Part] = []
    for p in parts:
        units.extend([p] * p.units)
    return units


def orient_for_rows(part: Part, board: Board) -> Tuple[float, float, bool]:
    """
    Returns (width_mm, height_mm, rotated):
    - grain-locked parts keep their orientation
    - otherwise the orientation that alone fits the sheet
    - if both fit, the narrower one (rows stack more easily)
    """
    w, h = part.width_mm, part.height_mm
    if not can_rotate(part, board):
        return w, h, False
    direct = fits_as_is(part, board)
    rotated = fits_rotated(part, board)
    if rotated and not direct:
        return h, w, True
    if direct and rotated and w > h:
        return h, w, True
    return w, h, False


# -------------------------------------------------------------
# Row cursor
# -------------------------------------------------------------

class RowCursor:
    """
    Tracks the insertion point on the current sheet:
    - x: next free X in the current row
    - y: top of the current row
    - row_h: tallest part in the current row
    """

    def __init__(self, kerf: float):
        self.kerf = kerf
        self.reset()

    def reset(self) -> None:
        self.x = self.kerf
        self.y = self.kerf
        self.row_h = 0.0

    def new_row(self) -> None:
        self.x = self.kerf
        self.y += self.row_h + self.kerf
        self.row_h = 0.0

    def snap_to_edges(self, w: float, h: float, board: Board, sheet_empty: bool) -> None:
        """
        A part with no room for the kerf margin on both sides starts flush
        with the sheet edge: x = 0 when it opens a row, y = 0 when it opens
        a sheet.
        """
        if self.row_h == 0 and self.kerf + w + self.kerf > board.width_mm + EPS:
            self.x = 0.0
        if sheet_empty and self.kerf + h + self.kerf > board.length_mm + EPS:
            self.y = 0.0

    def advance(self, w: float, h: float) -> None:
        self.x += w + self.kerf
        self.row_h = max(self.row_h, h)


# -------------------------------------------------------------
# Packing run
# -------------------------------------------------------------

def pack_into_sheets(board: Board, parts: Sequence[Part]) -> List[Sheet]:
    """
    Strip packer. Units are sorted by oriented height, then width, both
    descending; the sort is stable so ties keep input order. Rows start at
    (kerf, kerf) unless the part needs the full sheet span. A unit larger
    than the sheet is put alone on a sheet flagged overflow=True.
    The final sheet is always returned.
    """
    prepared = [(u,) + orient_for_rows(u, board) for u in expand_quantities(parts)]
    prepared.sort(key=lambda e: (e[2], e[1]), reverse=True)

    kerf = board.kerf_mm
    sheets: List[Sheet] = []
    current = Sheet(index=1)
    cur = RowCursor(kerf)

    def close_sheet(overflow: bool = False) -> Sheet:
        nonlocal current
        current.overflow = overflow
        sheets.append(current)
        current = Sheet(index=len(sheets) + 1)
        cur.reset()
        return current

    for unit, w, h, rotated in prepared:
        if w > board.width_mm or h > board.length_mm:
            logger.warning(
                "Part '%s' (%sx%s mm) does not fit an empty %sx%s mm sheet",
                unit.name, w, h, board.width_mm, board.length_mm,
            )
            if current.placed:
                close_sheet()
            current.placed.append(PlacedPart(unit, 0.0, 0.0, w, h, rotated))
            close_sheet(overflow=True)
            continue

        # new row
        if cur.row_h > 0 and cur.x + w + kerf > board.width_mm + EPS:
            cur.new_row()
        # new sheet when the row runs past the sheet length
        if current.placed and cur.y + h + kerf > board.length_mm + EPS:
            close_sheet()
        cur.snap_to_edges(w, h, board, sheet_empty=not current.placed)

        current.placed.append(PlacedPart(unit, cur.x, cur.y, w, h, rotated))
        cur.advance(w, h)

    sheets.append(current)
    logger.debug("Strip: %d unit(s) on %d sheet(s)", len(prepared), len(sheets))
    return sheets
