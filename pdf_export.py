# pdf_export.py — CabinetCut ver1.0
#
# This file handles all PDF output:
# - Summary pages: aggregated cutlist, edge banding, sheet usage
# - Sheet pages with every placed part and its size
# - Lucida Sans Unicode fonts + monospace for numeric alignment

import os
from typing import Dict, List, Optional, Sequence

from reportlab.lib.colors import Color, black
from reportlab.lib.pagesizes import A4, landscape, portrait
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas

from io_utils import parse_bool
from models import Board, CutItem, MaterialLayout, Sheet
from summary import GlobalSummary


# ------------------------------------------------------------
# mm → pt
# ------------------------------------------------------------
def mm_to_pt(mm: float) -> float:
    return mm * 72.0 / 25.4


# ------------------------------------------------------------
# Parse hex RGB like "F00", "FF0000"
# ------------------------------------------------------------
def parse_rgb(hex_str: str) -> Color:
    s = hex_str.strip().lstrip("#")
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    if len(s) != 6:
        return black
    try:
        r = int(s[0:2], 16) / 255
        g = int(s[2:4], 16) / 255
        b = int(s[4:6], 16) / 255
    except ValueError:
        return black
    return Color(r, g, b)


# ------------------------------------------------------------
# FONT LOADING (Lucida Sans Unicode)
# ------------------------------------------------------------
# Polish labels (ł, ó, ż) need a Unicode TTF. If Lucida is missing we
# fall back to Helvetica.

LUCIDA_NAME = "LucidaSansUnicode_cc"
MONO_NAME = "Courier"

_FONT_PATHS = [
    "/usr/share/fonts/truetype/lucida/LucidaSansUnicode.ttf",
    "/usr/share/fonts/truetype/LucidaSansUnicode.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/Library/Fonts/LucidaSansUnicode.ttf",
    "C:/Windows/Fonts/l_10646.ttf",
    "C:/Windows/Fonts/LSANS.TTF",
]


def register_fonts() -> str:
    """Registers the label font once and returns its name."""
    global LUCIDA_NAME

    if LUCIDA_NAME in pdfmetrics.getRegisteredFontNames() or LUCIDA_NAME == "Helvetica":
        return LUCIDA_NAME

    for p in _FONT_PATHS:
        if not os.path.isfile(p):
            continue
        try:
            pdfmetrics.registerFont(TTFont(LUCIDA_NAME, p))
            return LUCIDA_NAME
        except TTFError:
            continue

    LUCIDA_NAME = "Helvetica"
    return LUCIDA_NAME


# ------------------------------------------------------------
# PART RECTANGLES WITH LABEL
# ------------------------------------------------------------

def draw_part_rect(c: canvas.Canvas,
                   x_pt: float, y_top_pt: float,
                   w_pt: float, h_pt: float,
                   color: Color,
                   label: str,
                   font_size: float = 8):
    """
    Draw rectangle + centered label for a placed part.
    The label shrinks to fit the rectangle width.
    """
    c.setStrokeColor(color)
    c.rect(x_pt, y_top_pt - h_pt, w_pt, h_pt, stroke=1, fill=0)

    size = font_size
    while size > 4 and pdfmetrics.stringWidth(label, LUCIDA_NAME, size) > w_pt - 2:
        size -= 0.5

    cx = x_pt + w_pt / 2
    cy = y_top_pt - h_pt / 2 - size * 0.4
    c.setFillColor(color)
    c.setFont(LUCIDA_NAME, size)
    c.drawCentredString(cx, cy, label)


# ------------------------------------------------------------
# SHEET PAGE
# ------------------------------------------------------------

def draw_sheet_page(c: canvas.Canvas,
                    page_width_pt: float, page_height_pt: float,
                    margin_mm: float,
                    board_color: Color, item_color: Color, overflow_color: Color,
                    board: Board,
                    sheet: Sheet,
                    material: str,
                    sheet_number: int,
                    total_sheets_for_material: int):
    """
    Draws:
      - Header
      - Board outline
      - Placed parts
    """

    margin_pt = mm_to_pt(margin_mm)
    header_h_pt = mm_to_pt(20.0)

    usable_w_pt = page_width_pt - 2 * margin_pt
    usable_h_pt = page_height_pt - 2 * margin_pt - header_h_pt

    board_w_mm = board.width_mm
    board_h_mm = board.length_mm

    scale = min(usable_w_pt / board_w_mm, usable_h_pt / board_h_mm)

    board_x0_pt = margin_pt + (usable_w_pt - board_w_mm * scale) / 2
    board_y0_pt = page_height_pt - margin_pt - header_h_pt

    # HEADER
    c.setFont(LUCIDA_NAME, 14)
    c.setFillColor(board_color)

    grain = "with grain" if board.has_grain else "no grain"
    header_text = (
        f"Material: {material}, board {board.width_mm:g} x {board.length_mm:g} mm, "
        f"kerf {board.kerf_mm:g} mm, {grain} "
        f"(sheet {sheet_number}/{total_sheets_for_material}, "
        f"{sheet.utilization(board) * 100:.1f}% used)"
    )
    c.drawString(margin_pt, page_height_pt - margin_pt - 12, header_text)
    if sheet.overflow:
        c.setFillColor(overflow_color)
        c.drawString(margin_pt, page_height_pt - margin_pt - 30,
                     "OVERFLOW: a part on this sheet does not fit the board")

    # BOARD OUTLINE
    c.setStrokeColor(board_color)
    c.rect(
        board_x0_pt,
        board_y0_pt - board_h_mm * scale,
        board_w_mm * scale,
        board_h_mm * scale,
        stroke=1,
        fill=0
    )

    # DRAW PARTS
    color = overflow_color if sheet.overflow else item_color
    for p in sheet.placed:
        label = f"{p.part.name} ({p.height_mm:g}x{p.width_mm:g})"
        if p.rotated:
            label += " *"
        draw_part_rect(
            c,
            board_x0_pt + p.x_mm * scale,
            board_y0_pt - p.y_mm * scale,
            p.width_mm * scale,
            p.height_mm * scale,
            color, label, font_size=8,
        )


# ------------------------------------------------------------
# TABLE DRAWING ENGINE (FULL-WIDTH, STACKED TABLES)
# ------------------------------------------------------------

def draw_table(
    c: canvas.Canvas,
    x0_pt: float, y0_pt: float,
    col_widths: List[float],
    row_height_pt: float,
    data: List[List[str]],
    font_size: float = 10,
    numeric_cols: Optional[List[int]] = None
):
    """
    Draws a table with a black grid; numeric columns use the monospace font
    and are right aligned. x0_pt, y0_pt = top-left corner of table.
    """

    if numeric_cols is None:
        numeric_cols = []

    for r, row in enumerate(data):
        y_top = y0_pt - r * row_height_pt

        for c_idx, w in enumerate(col_widths):
            x_left = x0_pt + sum(col_widths[:c_idx])

            c.setStrokeColor(black)
            c.setLineWidth(1)
            c.rect(x_left, y_top - row_height_pt, w, row_height_pt, stroke=1, fill=0)

            text = row[c_idx] if c_idx < len(row) and row[c_idx] is not None else ""
            font_name = MONO_NAME if (c_idx in numeric_cols and r > 0) else LUCIDA_NAME
            c.setFont(font_name, font_size)
            c.setFillColor(black)

            ty = y_top - row_height_pt + (row_height_pt * 0.33)
            if c_idx in numeric_cols:
                tw = pdfmetrics.stringWidth(text, font_name, font_size)
                c.drawString(x_left + w - tw - 3, ty, text)
            else:
                c.drawString(x_left + 3, ty, text)


def draw_paged_table(
    c: canvas.Canvas,
    page_h_pt: float,
    margin_pt: float,
    y: float,
    col_widths: List[float],
    row_height_pt: float,
    header: List[str],
    rows: List[List[str]],
    font_size: float = 9,
    numeric_cols: Optional[List[int]] = None
) -> float:
    """
    Draws a table starting at y, continuing on new pages (with the header
    repeated) as needed. Returns the y just below the last row.
    """
    remaining = list(rows)
    while True:
        fit = int((y - margin_pt) // row_height_pt) - 1
        if fit < 1:
            c.showPage()
            y = page_h_pt - margin_pt
            continue
        chunk, remaining = remaining[:fit], remaining[fit:]
        draw_table(c, margin_pt, y, col_widths, row_height_pt,
                   [header] + chunk, font_size=font_size, numeric_cols=numeric_cols)
        y -= row_height_pt * (len(chunk) + 1)
        if not remaining:
            return y
        c.showPage()
        y = page_h_pt - margin_pt


# ------------------------------------------------------------
# SUMMARY PAGES
# ------------------------------------------------------------

def draw_summary_pages(
    c: canvas.Canvas,
    page_w_pt: float,
    page_h_pt: float,
    margin_mm: float,
    items: Sequence[CutItem],
    summary: GlobalSummary
):
    """
    Draws:
      Header
      Table 1: Aggregated cutlist
      Table 2: Edge banding
      Table 3: Sheet usage per material
    """

    margin_pt = mm_to_pt(margin_mm)
    y = page_h_pt - margin_pt
    table_width = page_w_pt - 2 * margin_pt
    row_h = mm_to_pt(7)

    def heading(text: str, size: float = 14):
        nonlocal y
        if y - mm_to_pt(10) - 2 * row_h < margin_pt:
            c.showPage()
            y = page_h_pt - margin_pt
        c.setFont(LUCIDA_NAME, size)
        c.setFillColor(black)
        c.drawString(margin_pt, y - size, text)
        y -= size + mm_to_pt(5)

    heading("CabinetCut cutlist summary", 20)

    # --------------------------------------------------------
    # TABLE 1 — CUTLIST
    # --------------------------------------------------------
    heading("Cutlist (aggregated)")
    widths = [0.30, 0.34, 0.12, 0.12, 0.12]
    y = draw_paged_table(
        c, page_h_pt, margin_pt, y,
        [table_width * f for f in widths], row_h,
        ["Materiał", "Element", "Ilość", "W (mm)", "H (mm)"],
        [[it.material, it.part, str(it.quantity), str(it.width_mm), str(it.height_mm)] for it in items],
        numeric_cols=[2, 3, 4],
    )
    y -= mm_to_pt(10)

    # --------------------------------------------------------
    # TABLE 2 — EDGE BANDING
    # --------------------------------------------------------
    heading("Edge banding")
    y = draw_paged_table(
        c, page_h_pt, margin_pt, y,
        [table_width / 3] * 3, row_h,
        ["Materiał", "Length (mm)", "Length (m)"],
        [[e.material, str(e.length_mm), f"{e.length_m:.2f}"] for e in summary.edge_totals],
        numeric_cols=[1, 2],
    )
    y -= mm_to_pt(10)

    # --------------------------------------------------------
    # TABLE 3 — SHEETS
    # --------------------------------------------------------
    heading("Sheet usage")
    rows = [
        [name, str(mu.sheets_used), str(mu.parts_placed), f"{mu.utilization * 100:.1f}%", str(mu.overflow_sheets)]
        for name, mu in summary.material_usages.items()
    ]
    rows.append(["TOTAL", str(summary.total_sheets), str(summary.total_parts), "", ""])
    draw_paged_table(
        c, page_h_pt, margin_pt, y,
        [table_width * 0.36] + [table_width * 0.16] * 4, row_h,
        ["Material", "Sheets", "Parts", "Utilization", "Overflow"],
        rows,
        numeric_cols=[1, 2, 3, 4],
    )


# ------------------------------------------------------------
# FINAL PDF GENERATOR
# ------------------------------------------------------------

def generate_pdf(
    output_path: str,
    board: Board,
    layouts: Sequence[MaterialLayout],
    items: Sequence[CutItem],
    summary: GlobalSummary,
    cfg: Dict[str, str]
):
    """
    Generates the complete PDF:
      - optional summary pages
      - one page per non-empty sheet
    """

    register_fonts()

    gen_summary = parse_bool(cfg.get("generate-summary", "true"))

    board_color = parse_rgb(cfg.get("board-color", "000"))
    item_color = parse_rgb(cfg.get("item-color", "777"))
    overflow_color = parse_rgb(cfg.get("overflow-color", "F00"))

    margin_mm = float(cfg.get("margin", "10"))

    orientation = (cfg.get("orientation", "v") or "v").lower()
    pagesize = landscape(A4) if orientation == "h" else portrait(A4)
    page_w_pt, page_h_pt = pagesize

    c = canvas.Canvas(output_path, pagesize=pagesize)

    if gen_summary:
        draw_summary_pages(c, page_w_pt, page_h_pt, margin_mm, items, summary)
        c.showPage()

    for layout in layouts:
        sheets = [s for s in layout.sheets if s.placed]
        for number, sheet in enumerate(sheets, start=1):
            draw_sheet_page(
                c=c,
                page_width_pt=page_w_pt,
                page_height_pt=page_h_pt,
                margin_mm=margin_mm,
                board_color=board_color,
                item_color=item_color,
                overflow_color=overflow_color,
                board=board,
                sheet=sheet,
                material=layout.material,
                sheet_number=number,
                total_sheets_for_material=len(sheets),
            )
            c.showPage()

    c.save()
