"""Match detection over a board snapshot.

The detector works on a plain ``{(row, col): type_name}`` mapping so the same
code scores the live board, scratch copies used for move validation, and hint
simulations. Empty cells are simply missing from the mapping.
"""
from __future__ import annotations

from typing import List, Mapping, Optional, Sequence, Set, Tuple

from esper import World

from ecs.components.grid_position import GridPosition
from ecs.components.match_group import MatchGroup, MatchShape
from ecs.constants import SCORE_UNIT
from ecs.systems.board_ops import board_dimensions, tile_type_map
from ecs.systems.scoring import score_positions

Offset = Tuple[int, int]
TypeMap = Mapping[Tuple[int, int], str]

# Every template contains the anchor (0, 0); the group type is the anchor's type.
L_TEMPLATES: Tuple[Tuple[Offset, ...], ...] = (
    ((0, 0), (0, 1), (0, 2), (1, 0), (2, 0)),      # corner top-left, arms right and down
    ((0, 0), (0, -1), (0, -2), (1, 0), (2, 0)),    # corner top-right, arms left and down
    ((0, 0), (0, 1), (0, 2), (-1, 0), (-2, 0)),    # corner bottom-left, arms right and up
    ((0, 0), (0, -1), (0, -2), (-1, 0), (-2, 0)),  # corner bottom-right, arms left and up
)
T_TEMPLATES: Tuple[Tuple[Offset, ...], ...] = (
    ((0, -1), (0, 0), (0, 1), (1, 0), (2, 0)),     # bar on top, stem down
    ((0, -1), (0, 0), (0, 1), (-1, 0), (-2, 0)),   # bar on bottom, stem up
)
CROSS_TEMPLATES: Tuple[Tuple[Offset, ...], ...] = (
    ((-1, 0), (0, -1), (0, 0), (0, 1), (1, 0)),
)
SQUARE_TEMPLATES: Tuple[Tuple[Offset, ...], ...] = (
    ((0, 0), (0, 1), (1, 0), (1, 1)),
)

SHAPE_CATALOGUE: Tuple[Tuple[MatchShape, Tuple[Tuple[Offset, ...], ...]], ...] = (
    (MatchShape.L_SHAPE, L_TEMPLATES),
    (MatchShape.T_SHAPE, T_TEMPLATES),
    (MatchShape.CROSS, CROSS_TEMPLATES),
    (MatchShape.SQUARE, SQUARE_TEMPLATES),
)


def _make_group(positions: Sequence[Tuple[int, int]], type_name: str, shape: MatchShape, unit: int) -> MatchGroup:
    return MatchGroup(
        positions=frozenset(GridPosition(r, c) for r, c in positions),
        type_name=type_name,
        shape=shape,
        score=score_positions(len(positions), shape, unit),
    )


def _scan_lines(types: TypeMap, outer: int, inner: int, horizontal: bool, unit: int) -> List[MatchGroup]:
    shape = MatchShape.HORIZONTAL if horizontal else MatchShape.VERTICAL
    groups: List[MatchGroup] = []
    for a in range(outer):
        run: List[Tuple[int, int]] = []
        last_type: Optional[str] = None
        for b in range(inner):
            pos = (a, b) if horizontal else (b, a)
            tval = types.get(pos)
            if tval is not None and tval == last_type:
                run.append(pos)
                continue
            if len(run) >= 3 and last_type is not None:
                groups.append(_make_group(run, last_type, shape, unit))
            run = [pos] if tval is not None else []
            last_type = tval
        if len(run) >= 3 and last_type is not None:
            groups.append(_make_group(run, last_type, shape, unit))
    return groups


def match_template(
    types: TypeMap,
    anchor: Tuple[int, int],
    template: Sequence[Offset],
    rows: int,
    cols: int,
) -> Optional[List[Tuple[int, int]]]:
    """Return the template's cells at ``anchor`` when all exist and share the anchor's type."""
    anchor_type = types.get(anchor)
    if anchor_type is None:
        return None
    cells: List[Tuple[int, int]] = []
    for d_row, d_col in template:
        row, col = anchor[0] + d_row, anchor[1] + d_col
        if not (0 <= row < rows and 0 <= col < cols):
            return None
        if types.get((row, col)) != anchor_type:
            return None
        cells.append((row, col))
    return cells


def _scan_shapes(types: TypeMap, rows: int, cols: int, unit: int) -> List[MatchGroup]:
    groups: List[MatchGroup] = []
    for shape, templates in SHAPE_CATALOGUE:
        for row in range(rows):
            for col in range(cols):
                anchor = (row, col)
                if anchor not in types:
                    continue
                # One group per anchor and shape family: the first variant that fits.
                for template in templates:
                    cells = match_template(types, anchor, template, rows, cols)
                    if cells is not None:
                        groups.append(_make_group(cells, types[anchor], shape, unit))
                        break
    return groups


def deduplicate(groups: Sequence[MatchGroup]) -> List[MatchGroup]:
    """Drop groups whose position set equals an earlier group's."""
    seen: Set[frozenset] = set()
    unique: List[MatchGroup] = []
    for group in groups:
        if group.positions in seen:
            continue
        seen.add(group.positions)
        unique.append(group)
    return unique


def detect_matches(types: TypeMap, rows: int, cols: int, *, unit: int = SCORE_UNIT) -> List[MatchGroup]:
    """Detect horizontal runs, vertical runs and special shapes, de-duplicated.

    Groups come back in detection order: horizontal runs (row-major), vertical
    runs (column-major), then L, T, cross and square shapes by anchor in
    row-major order. A cell can sit in several groups; clearing unions them.
    """
    if not types:
        return []
    groups = _scan_lines(types, rows, cols, True, unit)
    groups.extend(_scan_lines(types, cols, rows, False, unit))
    groups.extend(_scan_shapes(types, rows, cols, unit))
    return deduplicate(groups)


def find_all_matches(world: World, *, unit: int = SCORE_UNIT) -> List[MatchGroup]:
    """Run detection against the live board."""
    dims = board_dimensions(world)
    if not dims:
        return []
    rows, cols = dims
    return detect_matches(tile_type_map(world), rows, cols, unit=unit)


def matched_positions(groups: Sequence[MatchGroup]) -> List[GridPosition]:
    """Union of all group positions, sorted row-major."""
    union: Set[GridPosition] = set()
    for group in groups:
        union.update(group.positions)
    return sorted(union)
