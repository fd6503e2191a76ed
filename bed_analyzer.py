"""
bed_analyzer.py — Raised-bed layout analysis.

This module implements:
- Water-needs tally: counts placements per low/medium/high bucket
- Water conflict: a bed mixing low-water and high-water plants
- Companion issues: adjacent placements whose species are bad companions
- Companion check: what the neighbours of a cell think of a candidate plant
- Placement rules: bounds and occupancy checks for place/move mutations

Adjacency is the 8-neighbourhood (Chebyshev distance 1). Companion
relationships match on the generic plant name only; the variety never
takes part in the lookup.

Everything here is a pure function over already-loaded data. The relationship
lookup is passed in, either as a CompanionIndex or as any callable
``lookup(name_a, name_b) -> CompanionRelationship | None``.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from errors import CellOccupied, OutOfBounds
from models import (
    AdjacentAnalysis, Bed, BedAnalysis, BedPlacement, CompanionRelationship,
    WATER_NEEDS, display_name,
)
from utils.grid import in_bounds, is_adjacent, neighbor_cells

logger = logging.getLogger(__name__)

RelationshipLookup = Callable[[str, str], Optional[CompanionRelationship]]


def normalize_companion_name(name: Optional[str]) -> str:
    """Trim and case-fold a generic plant name before relationship lookup."""
    if not name:
        return ""
    return " ".join(name.split()).casefold()


# ========================================
# Companion Index
# ========================================

class CompanionIndex:
    """
    Order-insensitive lookup over the companion relationship table.

    (a, b) and (b, a) resolve to the same relationship. Names are normalised
    so "Tomato", " tomato" and "TOMATO" all match.
    """

    def __init__(self, relationships: Iterable[CompanionRelationship]):
        self._relationships = list(relationships)
        self._pairs: Dict[frozenset, CompanionRelationship] = {}
        for rel in self._relationships:
            key = self._key(rel.plant_name_a, rel.plant_name_b)
            # First stored relationship for a pair wins
            self._pairs.setdefault(key, rel)

    @staticmethod
    def _key(name_a, name_b):
        return frozenset((normalize_companion_name(name_a), normalize_companion_name(name_b)))

    def lookup(self, name_a: str, name_b: str) -> Optional[CompanionRelationship]:
        return self._pairs.get(self._key(name_a, name_b))

    __call__ = lookup

    def companions_of(self, name: str, relationship: str) -> List[dict]:
        """
        List every stored partner of *name* with the given relationship tag.

        Returns:
            List of {'companion', 'notes'} dicts, duplicates removed,
            in table order.
        """
        norm = normalize_companion_name(name)
        seen = set()
        result = []
        for rel in self._relationships:
            if rel.relationship != relationship:
                continue
            a = normalize_companion_name(rel.plant_name_a)
            b = normalize_companion_name(rel.plant_name_b)
            if norm not in (a, b):
                continue
            companion = rel.plant_name_b if a == norm else rel.plant_name_a
            entry = (companion, rel.notes)
            if entry in seen:
                continue
            seen.add(entry)
            result.append({'companion': companion, 'notes': rel.notes})
        return result


# ========================================
# Bed Analysis
# ========================================

def tally_water_needs(placements: Iterable[BedPlacement]) -> Dict[str, int]:
    """Count placements per water-needs bucket; unset or unknown values are skipped."""
    counts = {need: 0 for need in ('low', 'medium', 'high')}
    for p in placements:
        if p.water_needs in WATER_NEEDS:
            counts[p.water_needs] += 1
    return counts


def has_water_conflict(counts: Dict[str, int]) -> bool:
    """Low- and high-water plants sharing a bed. Medium never conflicts."""
    return counts.get('low', 0) > 0 and counts.get('high', 0) > 0


def _issue_side(p: BedPlacement) -> dict:
    return {
        'id': p.plant_id,
        'name': p.plant_name,
        'variety': p.plant_variety,
        'row': p.row,
        'col': p.col,
    }


def find_companion_issues(placements: List[BedPlacement],
                          lookup: RelationshipLookup) -> List[dict]:
    """
    Report every adjacent pair of placements whose species are bad companions.

    Each unordered pair is visited once (i < j). Pairs without a stored
    relationship, or with a good/neutral one, are not issues.
    """
    issues = []
    for i in range(len(placements)):
        for j in range(i + 1, len(placements)):
            p1, p2 = placements[i], placements[j]
            if not is_adjacent(p1.cell, p2.cell):
                continue
            relationship = lookup(p1.plant_name, p2.plant_name)
            if relationship and relationship.relationship == 'bad':
                issues.append({
                    'plant1': _issue_side(p1),
                    'plant2': _issue_side(p2),
                    'reason': relationship.notes,
                })
    return issues


def analyze(bed: Bed, placements: Iterable[BedPlacement],
            lookup: RelationshipLookup) -> BedAnalysis:
    """
    Analyze a bed's current layout.

    Args:
        bed: The bed (only its dimensions are used).
        placements: Placements annotated with plant name/variety/water_needs.
        lookup: Relationship lookup by generic plant name.

    Returns:
        BedAnalysis with water_needs counts, has_water_conflict,
        companion_issues, total_plants and total_cells.
    """
    placements = list(placements)
    counts = tally_water_needs(placements)
    return BedAnalysis(
        water_needs=counts,
        has_water_conflict=has_water_conflict(counts),
        companion_issues=find_companion_issues(placements, lookup),
        total_plants=len(placements),
        total_cells=bed.total_cells,
    )


# ========================================
# Placement Rules
# ========================================

def validate_target_cell(bed: Bed, placements: Iterable[BedPlacement],
                         row: int, col: int, exclude_id: Optional[int] = None):
    """
    Enforce the place/move preconditions for a target cell.

    Raises:
        OutOfBounds: row/col outside the bed grid.
        CellOccupied: another placement (not *exclude_id*) holds the cell.
    """
    if not in_bounds(row, col, bed.rows, bed.cols):
        raise OutOfBounds(row, col, bed.rows, bed.cols)
    for p in placements:
        if p.row == row and p.col == col and p.id != exclude_id:
            raise CellOccupied(row, col)


def _neighbours(bed: Bed, placements: Iterable[BedPlacement], row: int, col: int):
    """Placements in the 8-neighbourhood of (row, col), row-major order."""
    by_cell = {p.cell: p for p in placements}
    return [by_cell[cell] for cell in neighbor_cells(row, col, bed.rows, bed.cols)
            if cell in by_cell]


def check_companions_at(bed: Bed, placements: Iterable[BedPlacement],
                        candidate_name: str, row: int, col: int,
                        index: CompanionIndex,
                        candidate_variety: Optional[str] = None) -> AdjacentAnalysis:
    """
    Ask the neighbours of (row, col) what they think of *candidate_name*.

    The target cell must be inside the bed and empty. Every neighbour is
    bucketed as good, bad or neutral (no stored relationship counts as
    neutral). The general good/bad companion lists for the candidate are
    returned alongside, irrespective of adjacency.
    """
    placements = list(placements)
    validate_target_cell(bed, placements, row, col)

    buckets = {'good': [], 'bad': [], 'neutral': []}
    for adj in _neighbours(bed, placements, row, col):
        relationship = index.lookup(candidate_name, adj.plant_name)
        kind = relationship.relationship if relationship else 'neutral'
        buckets.setdefault(kind, []).append({
            'plant': adj.display_name,
            'position': {'row': adj.row, 'col': adj.col},
            'notes': relationship.notes if relationship else None,
        })

    return AdjacentAnalysis(
        plant=display_name(candidate_name, candidate_variety),
        adjacent_analysis=buckets,
        general_companions={
            'good': index.companions_of(candidate_name, 'good'),
            'bad': index.companions_of(candidate_name, 'bad'),
        },
    )


def placement_companion_info(bed: Bed, placements: Iterable[BedPlacement],
                             placement: BedPlacement,
                             lookup: RelationshipLookup) -> List[dict]:
    """
    Good/bad companion notes for a freshly placed plant's neighbours.

    Neutral and unknown neighbours are left out. The placement itself is
    skipped if it appears in *placements*.
    """
    others = [p for p in placements if p.id != placement.id]
    info = []
    for adj in _neighbours(bed, others, placement.row, placement.col):
        relationship = lookup(placement.plant_name, adj.plant_name)
        if not relationship or relationship.relationship not in ('good', 'bad'):
            continue
        info.append({
            'type': f"{relationship.relationship}_companion",
            'plant': adj.display_name,
            'position': {'row': adj.row, 'col': adj.col},
            'message': relationship.notes,
        })
    if any(item['type'] == 'bad_companion' for item in info):
        logger.info("Placed %s at (%s, %s) next to a bad companion in bed %s",
                    placement.plant_name, placement.row, placement.col, bed.id)
    return info
