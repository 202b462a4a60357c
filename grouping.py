# grouping.py — CabinetCut ver1.0
#
# Packs each material on its own sheets. Sheets never mix materials.

import logging
from typing import Dict, List, Sequence

from guillotine import pack_guillotine
from models import Board, MaterialLayout, Part

logger = logging.getLogger(__name__)

NO_MATERIAL = "Materiał: brak"


def group_by_material(parts: Sequence[Part]) -> Dict[str, List[Part]]:
    """First-seen material order; parts without a material share one bucket."""
    groups: Dict[str, List[Part]] = {}
    for p in parts:
        groups.setdefault(p.material or NO_MATERIAL, []).append(p)
    return groups


def pack_by_material(board: Board, parts: Sequence[Part]) -> List[MaterialLayout]:
    layouts = []
    for material, group in group_by_material(parts).items():
        sheets = pack_guillotine(board, group)
        logger.debug("Material '%s': %d sheet(s)", material, len(sheets))
        layouts.append(MaterialLayout(material=material, sheets=sheets))
    return layouts
