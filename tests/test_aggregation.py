from dataclasses import replace

from aggregation import aggregate_cutlist, aggregate_edgebanding, cutlist_to_parts
from models import CutItem, EdgeItem


def _item(material="Mat", part="Panel", qty=1, w=100, h=50, module="m1"):
    return CutItem(module_id=module, module_label=module.upper(), material=material,
                   part=part, quantity=qty, width_mm=w, height_mm=h)


def test_aggregates_items_regardless_of_rotation():
    result = aggregate_cutlist([_item(qty=1, w=100, h=50), _item(qty=2, w=50, h=100)])
    assert len(result) == 1
    merged = result[0]
    assert (merged.material, merged.part, merged.width_mm, merged.height_mm, merged.quantity) == \
        ("Mat", "Panel", 50, 100, 3)


def test_groups_by_material_and_part_in_first_seen_order():
    items = [
        _item(material="Mat1", part="Panel", qty=2, w=100, h=50, module="m1"),
        _item(material="Mat1", part="Panel", qty=3, w=50, h=100, module="m2"),
        _item(material="Mat1", part="Drzwi", qty=1, w=100, h=50, module="m3"),
        _item(material="Mat2", part="Panel", qty=1, w=100, h=50, module="m4"),
    ]
    result = aggregate_cutlist(items)
    summary = [(r.material, r.part, r.width_mm, r.height_mm, r.quantity) for r in result]
    assert summary == [
        ("Mat1", "Panel", 50, 100, 5),
        ("Mat1", "Drzwi", 50, 100, 1),
        ("Mat2", "Panel", 50, 100, 1),
    ]
    # first contributor's module is kept
    assert result[0].module_id == "m1"


def test_rotation_invariance_over_any_subset():
    items = [_item(qty=q, w=300, h=120) for q in (1, 2, 3, 4)]
    baseline = aggregate_cutlist(items)
    for mask in range(16):
        flipped = [
            replace(it, width_mm=it.height_mm, height_mm=it.width_mm) if mask & (1 << i) else it
            for i, it in enumerate(items)
        ]
        assert aggregate_cutlist(flipped) == baseline
    assert baseline[0].quantity == 10


def test_delimiter_in_names_does_not_collide():
    a = _item(material="A|B", part="C", w=60, h=60)
    b = _item(material="A", part="B|C", w=60, h=60)
    assert len(aggregate_cutlist([a, b])) == 2


def test_input_items_are_not_mutated():
    first = _item(qty=1, w=100, h=50)
    aggregate_cutlist([first, _item(qty=4, w=50, h=100)])
    assert first.quantity == 1 and first.width_mm == 100


def test_edgebanding_sums_and_rounds_totals():
    edges = [
        EdgeItem(material="ABS 1mm", length_mm=100.4, part="A"),
        EdgeItem(material="ABS 1mm", length_mm=100.4, part="B"),
        EdgeItem(material="ABS 2mm", length_mm=50.2, part="C"),
        EdgeItem(material="ABS 2mm", length_mm=25.7, part="D"),
    ]
    result = aggregate_edgebanding(edges)
    assert [(e.material, e.length_mm) for e in result] == [("ABS 1mm", 201), ("ABS 2mm", 76)]
    assert result[0].length_m == 0.201


def test_cutlist_to_parts_marks_grain_parts():
    items = [
        _item(material="Płyta 18mm", part="Wieniec górny", qty=2, w=563, h=560),
        _item(material="Płyta 18mm", part="Półka", qty=1, w=557, h=563),
        _item(material="Płyta 18mm", part="Bok", qty=2, w=560, h=720),
    ]
    parts = cutlist_to_parts(items)
    assert [p.require_grain for p in parts] == [True, True, False]
    assert [p.quantity for p in parts] == [2, 1, 2]
    assert all(p.material == "Płyta 18mm" for p in parts)

    parts = cutlist_to_parts(items, grain_pattern="bok")
    assert [p.require_grain for p in parts] == [False, False, True]
