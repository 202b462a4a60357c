# io_utils.py — CabinetCut ver1.0
# Reading module CSV files and config.properties, writing the cutlist export.

import csv
from typing import Dict, Iterable, List, Optional

from catalog import FAMILIES
from models import EDGE_NAMES, Board, CutItem, FamilyConfig, ModuleSpec


CSV_HEADER = ["Moduł", "Materiał", "Element", "Ilość", "W (mm)", "H (mm)"]


# ------------------------------
# Boolean parser
# ------------------------------

def parse_bool(val: str) -> bool:
    if val is None:
        return False
    v = val.strip().lower()
    return v in ("1", "true", "yes", "tak", "y")


# ------------------------------
# Config parser (strict one key per line)
# ------------------------------

def parse_properties(path: str) -> Dict[str, str]:
    """
    Conservative parser:
    - One key=value per line
    - Lines without '=' are ignored
    - '#' at start of line = comment
    """
    props: Dict[str, str] = {}
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, val = line.split("=", 1)
            props[key.strip()] = val.strip()
    return props


def _number(cfg: Dict[str, str], key: str, default: str) -> float:
    raw = cfg.get(key, default)
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"config value '{key}' must be a number, got '{raw}'")


def board_from_properties(cfg: Dict[str, str]) -> Board:
    """Stock sheet spec; defaults to a 2800x2070 mm grained board, 3 mm kerf."""
    return Board(
        length_mm=_number(cfg, "board-length", "2800"),
        width_mm=_number(cfg, "board-width", "2070"),
        kerf_mm=_number(cfg, "kerf", "3"),
        has_grain=parse_bool(cfg.get("grain", "true")),
    )


# ------------------------------
# Per-family overrides:  <FAMILY>.<field>=value
# ------------------------------

_GAP_KEYS = {f"gap-{side}": side for side in ("left", "right", "top", "bottom", "between")}


def _parse_edges(val: str) -> Dict[str, bool]:
    """'front,back' (or 'front|back') -> every edge explicitly set, listed ones True."""
    listed = {e.strip().lower() for e in val.replace("|", ",").split(",") if e.strip()}
    return {edge: edge in listed for edge in EDGE_NAMES}


def _apply_override(fc: FamilyConfig, field_name: str, val: str, strict: bool = False):
    """
    Sets one override field on `fc`; unknown fields are ignored.
    Unparseable numbers are skipped, or raise ValueError when strict.
    """
    if field_name == "board":
        fc.board_type = val
    elif field_name == "front":
        fc.front_type = val
    elif field_name == "shelves":
        if val.strip().lstrip("-").isdigit():
            fc.shelves = int(val)
        elif strict:
            raise ValueError(f"shelves must be an integer, got '{val}'")
        else:
            fc.shelves = None
    elif field_name == "back":
        fc.back_panel = val
    elif field_name == "edge-material":
        fc.edge_material = val
    elif field_name in _GAP_KEYS:
        fc.gaps = dict(fc.gaps or {})
        try:
            fc.gaps[_GAP_KEYS[field_name]] = float(val)
        except ValueError:
            if strict:
                raise ValueError(f"{field_name} must be a number, got '{val}'")
    elif field_name.startswith("band-"):
        fc.edge_banding = dict(fc.edge_banding or {})
        panel = field_name[len("band-"):].replace("-", "_")
        fc.edge_banding[panel] = _parse_edges(val)


def family_configs_from_properties(cfg: Dict[str, str]) -> Dict[str, FamilyConfig]:
    """
    Recognised keys, e.g.:
        BASE.board=Płyta 18mm      BASE.front=Akryl
        BASE.shelves=2             BASE.back=split
        BASE.gap-top=3             BASE.edge-material=ABS 2mm
        BASE.band-shelf=front,back
    Unknown keys are ignored.
    """
    families: Dict[str, FamilyConfig] = {}
    for key, val in cfg.items():
        if "." not in key:
            continue
        fam, field_name = key.split(".", 1)
        fam = fam.strip().upper()
        field_name = field_name.strip().lower()
        if fam not in FAMILIES:
            continue
        _apply_override(families.setdefault(fam, FamilyConfig()), field_name, val)
    return families


# ------------------------------
# Modules CSV
# ------------------------------

def _opt_int(val: Optional[str]) -> Optional[int]:
    if val is None or not val.strip():
        return None
    return int(val)


def _opt_str(val: Optional[str]) -> Optional[str]:
    if val is None or not val.strip():
        return None
    return val.strip()


_OVERRIDE_COLUMNS = ("board", "front", "shelves", "back", "edge-material")


def parse_modules(path: str) -> List[ModuleSpec]:
    """
    Required columns: id, label, family, kind, width, height, depth.
    Optional: variant, doors, drawers, drawer_fronts (heights joined by '|')
    and per-module overrides named like the properties keys without the
    family prefix (board, front, shelves, back, edge-material, gap-left,
    band-shelf holding e.g. "front|back", ...).
    """
    modules: List[ModuleSpec] = []
    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)

        required = {"id", "label", "family", "kind", "width", "height", "depth"}
        if not required.issubset(set(reader.fieldnames or [])):
            raise ValueError("modules.csv missing required columns")

        for row in reader:
            if not row["id"]:
                continue

            try:
                overrides = FamilyConfig()
                for key, val in row.items():
                    if key is None or not val or not val.strip():
                        continue
                    name = key.strip().lower()
                    if name in _OVERRIDE_COLUMNS or name in _GAP_KEYS or name.startswith("band-"):
                        _apply_override(overrides, name, val.strip(), strict=True)
                fronts = _opt_str(row.get("drawer_fronts"))
                modules.append(
                    ModuleSpec(
                        id=row["id"].strip(),
                        label=(row["label"] or "").strip(),
                        family=row["family"].strip().upper(),
                        kind=row["kind"].strip(),
                        width_mm=float(row["width"]),
                        height_mm=float(row["height"]),
                        depth_mm=float(row["depth"]),
                        variant=_opt_str(row.get("variant")),
                        doors=_opt_int(row.get("doors")),
                        drawers=_opt_int(row.get("drawers")),
                        overrides=overrides,
                        drawer_fronts=[float(v) for v in fronts.split("|")] if fronts else None,
                    )
                )
            except ValueError as e:
                raise ValueError(f"modules.csv row '{row['id']}': {e}")

    # Ensure uniqueness
    ids = [m.id for m in modules]
    if len(ids) != len(set(ids)):
        raise ValueError("Module ids must be unique.")

    return modules


# ------------------------------
# Cutlist export
# ------------------------------

def cutlist_rows(items: Iterable[CutItem]) -> List[List[str]]:
    rows = [list(CSV_HEADER)]
    for it in items:
        rows.append([
            f"{it.module_label} ({it.module_id})",
            it.material,
            it.part,
            str(it.quantity),
            str(it.width_mm),
            str(it.height_mm),
        ])
    return rows


def cutlist_to_csv(items: Iterable[CutItem], sep: str = ";") -> str:
    """Delimited text; fields are joined as-is, one line per item."""
    return "\n".join(sep.join(r) for r in cutlist_rows(items))


def write_cutlist_csv(path: str, items: Iterable[CutItem], sep: str = ";") -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(cutlist_to_csv(items, sep))
        f.write("\n")
