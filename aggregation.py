# aggregation.py — CabinetCut ver1.0
#
# Merges duplicate cut items across modules into a rotation-invariant
# cutlist, totals edge-banding tape per material, and prepares aggregated
# items for packing.

import re
from dataclasses import replace
from typing import Dict, Iterable, List, Tuple

from cutlist import round_mm
from models import CutItem, EdgeItem, EdgeTotal, Part


DEFAULT_GRAIN_PATTERN = r"wieniec|półka"


def aggregate_cutlist(items: Iterable[CutItem]) -> List[CutItem]:
    """
    Groups by (material, part, smaller dim, larger dim), so 100x50 and 50x100
    end up in the same record. Merged records report w = smaller, h = larger.
    First-seen order is kept.
    """
    merged: Dict[Tuple[str, str, int, int], CutItem] = {}
    for it in items:
        lo, hi = sorted((it.width_mm, it.height_mm))
        key = (it.material, it.part, lo, hi)
        prev = merged.get(key)
        if prev is None:
            merged[key] = replace(it, width_mm=lo, height_mm=hi)
        else:
            merged[key] = replace(prev, quantity=prev.quantity + it.quantity)
    return list(merged.values())


def aggregate_edgebanding(edges: Iterable[EdgeItem]) -> List[EdgeTotal]:
    """Total tape length per material; the sum is rounded once, at the end."""
    totals: Dict[str, float] = {}
    for e in edges:
        totals[e.material] = totals.get(e.material, 0) + e.length_mm
    return [EdgeTotal(material=m, length_mm=round_mm(length)) for m, length in totals.items()]


def cutlist_to_parts(items: Iterable[CutItem], grain_pattern: str = DEFAULT_GRAIN_PATTERN) -> List[Part]:
    """
    Converts cut items into packable parts. Parts whose role matches
    `grain_pattern` (case-insensitive) must keep their height on the grain axis.
    """
    grain_re = re.compile(grain_pattern, re.IGNORECASE) if grain_pattern else None
    return [
        Part(
            name=it.part or it.material or "elem",
            width_mm=it.width_mm,
            height_mm=it.height_mm,
            require_grain=bool(grain_re and grain_re.search(it.part or "")),
            quantity=max(1, it.quantity),
            material=it.material,
        )
        for it in items
    ]
