# CabinetCut ver1.0 — main entry
# - Board validation failures stop the run unless ignore-validation=true
# - Clean error reporting (no traceback)
# - Packer chosen in config.properties (guillotine | strip)

import argparse
import logging
import sys

from aggregation import (
    DEFAULT_GRAIN_PATTERN, aggregate_cutlist, aggregate_edgebanding, cutlist_to_parts,
)
from cutlist import extract_cutlist
from grouping import group_by_material, pack_by_material
from io_utils import (
    board_from_properties, family_configs_from_properties, parse_bool,
    parse_modules, parse_properties, write_cutlist_csv,
)
from models import MaterialLayout
from packing import pack_into_sheets
from pdf_export import generate_pdf
from summary import compute_summary
from validation import validate_parts


def run(args) -> int:
    # --- LOAD INPUT FILES ---
    modules = parse_modules(args.modules_csv)
    cfg = parse_properties(args.config_properties)

    board = board_from_properties(cfg)
    families = family_configs_from_properties(cfg)

    # --- CONFIG FLAGS ---
    ignore_validation = parse_bool(cfg.get("ignore-validation", "false"))
    packer = cfg.get("packer", "guillotine").strip().lower()
    sep = cfg.get("csv-separator", ";") or ";"
    grain_pattern = cfg.get("grain-parts", DEFAULT_GRAIN_PATTERN)

    # --- CUTLIST ---
    extracted = extract_cutlist(modules, families)
    aggregated = aggregate_cutlist(extracted.items)
    edge_totals = aggregate_edgebanding(extracted.edges)

    if args.csv_detailed:
        write_cutlist_csv(args.csv_detailed, extracted.items, sep)
    if args.csv_aggregated:
        write_cutlist_csv(args.csv_aggregated, aggregated, sep)

    parts = cutlist_to_parts(aggregated, grain_pattern)

    # --- BOARD VALIDATION ---
    plan = validate_parts(board, parts)
    if not plan.ok:
        if ignore_validation:
            print("\n[WARNING] Board validation failed but ignored (ignore-validation=true):")
            print(plan.reason)
            print("Overflowing parts will be put on sheets marked OVERFLOW.\n")
        else:
            print("\n[ERROR] Board validation failed:")
            print(plan.reason)
            print("No PDF created. To override, set ignore-validation=true in config.properties.\n")
            return 1
    else:
        print(f"Estimated sheets: {plan.sheets}")

    # --- PACKING ---
    if packer == "strip":
        layouts = [
            MaterialLayout(material=mat, sheets=pack_into_sheets(board, group))
            for mat, group in group_by_material(parts).items()
        ]
    else:
        layouts = pack_by_material(board, parts)

    # --- SUMMARY ---
    summary = compute_summary(layouts, board, edge_totals)

    # --- PDF OUTPUT ---
    generate_pdf(
        output_path=args.output_pdf,
        board=board,
        layouts=layouts,
        items=aggregated,
        summary=summary,
        cfg=cfg,
    )

    print(f"Success! PDF saved to {args.output_pdf}")
    print(f"Sheets used: {summary.total_sheets} ({summary.total_parts} parts)")
    for e in edge_totals:
        print(f"Edge banding {e.material}: {e.length_m:.2f} m")
    if summary.has_overflow:
        print("[WARNING] Some sheets are marked OVERFLOW.")
    return 0


def main():
    parser = argparse.ArgumentParser(description="CabinetCut 1.0: cabinet cutlist and sheet nesting")
    parser.add_argument("modules_csv", help="modules.csv input")
    parser.add_argument("config_properties", help="config.properties input")
    parser.add_argument("output_pdf", help="output PDF path")
    parser.add_argument("--csv-detailed", help="write the per-module cutlist here")
    parser.add_argument("--csv-aggregated", help="write the aggregated cutlist here")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        code = run(args)
    except (OSError, ValueError) as e:
        print(f"\n[ERROR] {e}\n")
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
