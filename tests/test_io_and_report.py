import argparse

import pytest

import main
from aggregation import aggregate_edgebanding
from cutlist import extract_module_cutlist
from grouping import pack_by_material
from io_utils import (
    CSV_HEADER, board_from_properties, cutlist_to_csv, family_configs_from_properties,
    parse_bool, parse_modules, parse_properties,
)
from models import Board, CutItem, Part
from pdf_export import generate_pdf, mm_to_pt, parse_rgb
from summary import compute_summary


MODULES_CSV = (
    "id,label,family,kind,width,height,depth,variant,doors,drawers,board,front,shelves,back,drawer_fronts\n"
    "m1,Dolna 60,BASE,doors,600,720,560,d2,,,,,,,\n"
    "m2,Szuflady 40,base,drawers,400,720,510,,,3,Płyta 16mm,Akryl,,split,140|280|296\n"
)

CONFIG = (
    "# board\n"
    "board-length=2800\n"
    "board-width=2070\n"
    "kerf=4\n"
    "grain=tak\n"
    "BASE.shelves=2\n"
    "BASE.gap-top=5\n"
    "BASE.band-shelf=front, back\n"
    "BASE.edge-material=ABS 2mm\n"
    "XYZ.shelves=9\n"
    "no equals sign here\n"
)


@pytest.fixture
def input_files(tmp_path):
    modules = tmp_path / "modules.csv"
    modules.write_text(MODULES_CSV, encoding="utf-8")
    config = tmp_path / "config.properties"
    config.write_text(CONFIG, encoding="utf-8")
    return modules, config


def test_parse_bool():
    assert parse_bool("TAK") and parse_bool(" yes ") and parse_bool("1")
    assert not parse_bool("nie") and not parse_bool(None)


def test_cutlist_csv_export():
    items = [CutItem("m1", "Dolna 60", "Płyta 18mm", "Bok", 2, 560, 720)]
    text = cutlist_to_csv(items)
    lines = text.split("\n")
    assert lines[0] == "Moduł;Materiał;Element;Ilość;W (mm);H (mm)"
    assert lines[1] == "Dolna 60 (m1);Płyta 18mm;Bok;2;560;720"
    assert cutlist_to_csv(items, sep=",").split("\n")[0] == ",".join(CSV_HEADER)


def test_parse_modules(input_files):
    modules, _ = input_files
    m1, m2 = parse_modules(str(modules))
    assert (m1.id, m1.family, m1.variant, m1.doors, m1.drawers) == ("m1", "BASE", "d2", None, None)
    assert m1.overrides.board_type is None
    assert m2.family == "BASE"
    assert m2.drawers == 3
    assert m2.overrides.board_type == "Płyta 16mm"
    assert m2.overrides.back_panel == "split"
    assert m2.drawer_fronts == [140.0, 280.0, 296.0]


def test_parse_modules_rejects_missing_columns(tmp_path):
    bad = tmp_path / "bad.csv"
    bad.write_text("id,label\nx,y\n", encoding="utf-8")
    with pytest.raises(ValueError):
        parse_modules(str(bad))


def test_parse_modules_rejects_duplicate_ids(tmp_path):
    dup = tmp_path / "dup.csv"
    dup.write_text(
        "id,label,family,kind,width,height,depth\n"
        "a,A,BASE,doors,600,720,560\n"
        "a,B,BASE,doors,600,720,560\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError):
        parse_modules(str(dup))


def test_parse_modules_reads_gap_banding_and_edge_columns(tmp_path):
    path = tmp_path / "modules.csv"
    path.write_text(
        "id,label,family,kind,width,height,depth,doors,gap-left,band-shelf,edge-material\n"
        "m3,Dolna 60,BASE,doors,600,720,560,2,5,front|back,ABS 2mm\n",
        encoding="utf-8",
    )
    (m3,) = parse_modules(str(path))
    assert m3.overrides.gaps == {"left": 5.0}
    assert m3.overrides.edge_material == "ABS 2mm"
    assert m3.overrides.edge_banding["shelf"]["back"] is True

    res = extract_module_cutlist(m3)
    door = next(it for it in res.items if it.part == "Front drzwi")
    assert door.width_mm == (600 - 5 - 2 - 3) / 2
    assert [e.length_mm for e in res.edges if e.part.startswith("Półka")] == [563, 563]
    assert {e.material for e in res.edges} == {"ABS 2mm"}


def test_parse_modules_rejects_bad_gap_column(tmp_path):
    path = tmp_path / "modules.csv"
    path.write_text(
        "id,label,family,kind,width,height,depth,gap-top\n"
        "m4,Dolna,BASE,doors,600,720,560,wide\n",
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="m4"):
        parse_modules(str(path))


def test_properties_to_board_and_families(input_files):
    _, config = input_files
    cfg = parse_properties(str(config))
    board = board_from_properties(cfg)
    assert board == Board(length_mm=2800, width_mm=2070, kerf_mm=4, has_grain=True)

    families = family_configs_from_properties(cfg)
    assert set(families) == {"BASE"}
    base = families["BASE"]
    assert base.shelves == 2
    assert base.gaps == {"top": 5.0}
    assert base.edge_material == "ABS 2mm"
    assert base.edge_banding["shelf"] == {
        "front": True, "back": True, "left": False, "right": False, "top": False, "bottom": False,
    }


def test_board_from_properties_rejects_garbage():
    with pytest.raises(ValueError):
        board_from_properties({"kerf": "three"})


def test_family_overrides_flow_into_extraction(input_files, base_cabinet):
    _, config = input_files
    families = family_configs_from_properties(parse_properties(str(config)))
    res = extract_module_cutlist(base_cabinet, families)
    shelf = next(it for it in res.items if it.part == "Półka")
    assert shelf.quantity == 2
    shelf_runs = [e for e in res.edges if e.part.startswith("Półki")]
    assert [e.length_mm for e in shelf_runs] == [563 * 2, 563 * 2]
    assert {e.material for e in res.edges} == {"ABS 2mm"}
    door = next(it for it in res.items if it.part == "Front drzwi")
    assert door.height_mm == 720 - 5 - 2


def test_summary_usage():
    board = Board(length_mm=100, width_mm=100, kerf_mm=0)
    layouts = pack_by_material(board, [Part("a", 50, 100, material="MDF", quantity=3)])
    summary = compute_summary(layouts, board)
    mu = summary.material_usages["MDF"]
    assert mu.sheets_used == 2
    assert mu.parts_placed == 3
    assert mu.utilization == pytest.approx(0.75)
    assert summary.total_sheets == 2
    assert not summary.has_overflow


def test_pdf_helpers():
    assert mm_to_pt(25.4) == pytest.approx(72.0)
    red = parse_rgb("F00")
    assert red.rgb() == (1, 0, 0)
    assert parse_rgb("zzzzzz").rgb() == (0, 0, 0)


def test_generate_pdf(tmp_path, base_cabinet):
    res = extract_module_cutlist(base_cabinet)
    board = Board(length_mm=2800, width_mm=2070, kerf_mm=3, has_grain=True)
    parts = [Part(it.part, it.width_mm, it.height_mm, quantity=it.quantity, material=it.material)
             for it in res.items]
    layouts = pack_by_material(board, parts)
    summary = compute_summary(layouts, board, aggregate_edgebanding(res.edges))
    out = tmp_path / "out.pdf"
    generate_pdf(str(out), board, layouts, res.items, summary, {"orientation": "h"})
    assert out.read_bytes().startswith(b"%PDF")


def _args(modules, config, out, **extra):
    ns = dict(modules_csv=str(modules), config_properties=str(config), output_pdf=str(out),
              csv_detailed=None, csv_aggregated=None, verbose=False)
    ns.update(extra)
    return argparse.Namespace(**ns)


def test_main_end_to_end(tmp_path, input_files, capsys):
    modules, config = input_files
    out = tmp_path / "cut.pdf"
    agg = tmp_path / "agg.csv"
    code = main.run(_args(modules, config, out, csv_aggregated=str(agg)))
    assert code == 0
    assert out.exists()
    assert agg.read_text(encoding="utf-8").startswith("Moduł;Materiał;Element")
    printed = capsys.readouterr().out
    assert "Success!" in printed
    assert "ABS 2mm" in printed


def test_main_stops_on_validation_failure(tmp_path, input_files, capsys):
    modules, config = input_files
    config.write_text("board-length=300\nboard-width=300\ngrain=false\n", encoding="utf-8")
    out = tmp_path / "cut.pdf"
    assert main.run(_args(modules, config, out)) == 1
    assert not out.exists()
    assert "[ERROR] Board validation failed" in capsys.readouterr().out


def test_main_strip_packer_with_ignored_validation(tmp_path, input_files, capsys):
    modules, config = input_files
    config.write_text(
        "board-length=600\nboard-width=600\ngrain=false\nignore-validation=true\npacker=strip\n",
        encoding="utf-8",
    )
    out = tmp_path / "cut.pdf"
    assert main.run(_args(modules, config, out)) == 0
    printed = capsys.readouterr().out
    assert "[WARNING] Board validation failed but ignored" in printed
    assert "OVERFLOW" in printed
