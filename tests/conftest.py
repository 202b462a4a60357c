import sys
from pathlib import Path

import pytest


def _add_repo_root_to_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_add_repo_root_to_path()

from models import Board, ModuleSpec  # noqa: E402


@pytest.fixture
def base_cabinet() -> ModuleSpec:
    """600 wide two-door base cabinet with default configuration."""
    return ModuleSpec(
        id="m1", label="Dolna 60", family="BASE", kind="doors",
        width_mm=600, height_mm=720, depth_mm=560, doors=2,
    )


@pytest.fixture
def drawer_cabinet() -> ModuleSpec:
    return ModuleSpec(
        id="m2", label="Szuflady 40", family="BASE", kind="drawers",
        width_mm=400, height_mm=720, depth_mm=510, drawers=3,
    )


@pytest.fixture
def standard_board() -> Board:
    return Board(length_mm=2800, width_mm=2070, kerf_mm=3, has_grain=True)
