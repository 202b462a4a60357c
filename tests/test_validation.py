import pytest

from models import Board, Part
from validation import orientation_candidates, validate_parts


def test_no_grain_part_too_large_in_both_orientations():
    board = Board(length_mm=200, width_mm=100, kerf_mm=2, has_grain=False)
    plan = validate_parts(board, [Part(name="B", width_mm=120, height_mm=110)])
    assert not plan.ok
    assert "B" in plan.reason and "120x110" in plan.reason
    assert plan.sheets == 0


def test_grain_locked_part_fitting_as_is():
    board = Board(length_mm=200, width_mm=100, kerf_mm=2, has_grain=True)
    plan = validate_parts(board, [Part(name="H", width_mm=90, height_mm=180, require_grain=True)])
    assert plan.ok
    assert plan.reason is None


def test_grain_locked_part_rejected_even_if_rotation_would_fit():
    board = Board(length_mm=200, width_mm=100, kerf_mm=0, has_grain=True)
    plan = validate_parts(board, [Part(name="G", width_mm=180, height_mm=90, require_grain=True)])
    assert not plan.ok
    assert "G" in plan.reason


def test_rotation_rescues_free_parts():
    board = Board(length_mm=200, width_mm=100, kerf_mm=0, has_grain=True)
    assert validate_parts(board, [Part(name="R", width_mm=180, height_mm=90)]).ok
    no_grain = Board(length_mm=200, width_mm=100, kerf_mm=0, has_grain=False)
    assert validate_parts(no_grain, [Part(name="R", width_mm=180, height_mm=90, require_grain=True)]).ok


def test_fail_fast_reports_first_offender():
    board = Board(length_mm=200, width_mm=100)
    parts = [
        Part(name="ok", width_mm=50, height_mm=50),
        Part(name="first", width_mm=300, height_mm=300),
        Part(name="second", width_mm=400, height_mm=400),
    ]
    plan = validate_parts(board, parts)
    assert not plan.ok
    assert plan.reason.startswith("first:")


def test_sheet_estimate_uses_quantity_and_margin():
    board = Board(length_mm=1000, width_mm=1000)
    # 0.5 sheet of area * 1.15 -> 1
    assert validate_parts(board, [Part(name="a", width_mm=500, height_mm=500, quantity=2)]).sheets == 1
    # 2 sheets of area * 1.15 = 2.3 -> 3
    assert validate_parts(board, [Part(name="a", width_mm=1000, height_mm=1000, quantity=2)]).sheets == 3
    # empty job still needs one sheet
    assert validate_parts(board, []).sheets == 1


def test_orientation_candidates():
    grained = Board(length_mm=200, width_mm=100, has_grain=True)
    assert orientation_candidates(Part("a", 30, 60), grained) == [(30, 60, False), (60, 30, True)]
    assert orientation_candidates(Part("a", 30, 60, require_grain=True), grained) == [(30, 60, False)]
    assert orientation_candidates(Part("sq", 40, 40), grained) == [(40, 40, False)]


def test_board_rejects_bad_dimensions():
    with pytest.raises(ValueError):
        Board(length_mm=0, width_mm=100)
    with pytest.raises(ValueError):
        Board(length_mm=100, width_mm=100, kerf_mm=-1)
