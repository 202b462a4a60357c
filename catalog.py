# catalog.py — CabinetCut ver1.0
#
# Module families, built-in defaults, and the variant rules
# that decide how many doors / drawers a catalogue variant carries.

from typing import Dict, Tuple

from models import EdgeBanding


BASE = "BASE"
TALL = "TALL"
WALL = "WALL"
PAWLACZ = "PAWLACZ"

FAMILIES = (BASE, TALL, WALL, PAWLACZ)


# ------------------------------
# Built-in defaults
# ------------------------------

DEFAULT_BOARD_TYPE = "Płyta 18mm"
DEFAULT_FRONT_TYPE = "Laminat"
DEFAULT_BACK_PANEL = "full"
DEFAULT_EDGE_MATERIAL = "ABS 1mm"

BACK_PANEL_MODES = ("full", "split", "none")

DEFAULT_EDGE_BANDING: Dict[str, EdgeBanding] = {
    "left_side": EdgeBanding(front=True),
    "right_side": EdgeBanding(front=True),
    "top": EdgeBanding(front=True),
    "bottom": EdgeBanding(front=True),
    "shelf": EdgeBanding(front=True),
    "back": EdgeBanding(),
    "filler": EdgeBanding(front=True, back=True, top=True, bottom=True),
    "drawer_box": EdgeBanding(top=True),
}


# ------------------------------
# Variant rules: variant key -> (doors, drawers)
# ------------------------------

def _base_rules() -> Dict[str, Tuple[int, int]]:
    rules = {
        "d1": (1, 0),
        "d2": (2, 0),
        "d1+drawer": (1, 1),
        "d2+drawer": (2, 1),
        "sink": (2, 0),
        "sink1": (2, 0),
        "sink2": (2, 0),
        "hob": (2, 0),
    }
    # drawer variants s1 .. s5
    for i in range(1, 6):
        rules[f"s{i}"] = (0, i)
    return rules


VARIANT_RULES: Dict[str, Dict[str, Tuple[int, int]]] = {
    BASE: _base_rules(),
    TALL: {
        "t1": (1, 0),
        "t2": (2, 0),
        "fridge": (2, 0),
    },
    WALL: {
        "wd1": (1, 0),
        "wd2": (2, 0),
        "hood": (2, 0),
    },
    PAWLACZ: {
        "p1": (1, 0),
        "p2": (2, 0),
        "p3": (3, 0),
    },
}


def variant_counts(family: str, variant) -> Tuple[int, int]:
    """Returns (doors, drawers) for a variant; unknown variants carry none."""
    if not variant:
        return 0, 0
    return VARIANT_RULES.get(family, {}).get(variant, (0, 0))


def default_shelf_count(family: str, kind: str) -> int:
    if family == BASE and kind == "doors":
        return 1
    if family == WALL:
        return 1
    if family == TALL:
        return 4
    return 0
