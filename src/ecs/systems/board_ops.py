from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from esper import World

from ecs.components.board import Board
from ecs.components.board_position import BoardPosition
from ecs.components.grid_position import GridPosition
from ecs.components.tile import TileType
from ecs.components.tile_state import TileState, TileStatus
from ecs.components.tile_type_registry import TileTypeRegistry
from ecs.components.tile_types import TileTypes

Position = Tuple[int, int]
TypeEntry = Tuple[int, int, str]
CellSnapshot = Optional[Tuple[int, str]]


@dataclass(slots=True)
class GravityMove:
    source: GridPosition
    target: GridPosition
    entity: int
    type_name: str


@dataclass(slots=True)
class SpawnedTile:
    position: GridPosition
    entity: int
    type_name: str


@dataclass(slots=True)
class BoardChange:
    """Outcome of clearing cells: what was removed, what fell, what was spawned."""
    cleared: List[TypeEntry] = field(default_factory=list)
    moves: List[GravityMove] = field(default_factory=list)
    spawned: List[SpawnedTile] = field(default_factory=list)

    @property
    def cleared_positions(self) -> List[GridPosition]:
        return [GridPosition(row, col) for row, col, _ in self.cleared]


def get_board(world: World) -> Board:
    for _, board in world.get_component(Board):
        return board
    raise RuntimeError("Board component not found")


def board_dimensions(world: World) -> Tuple[int, int] | None:
    for _, board in world.get_component(Board):
        return board.rows, board.cols
    return None


def get_tile_registry(world: World) -> TileTypes:
    for entity, _ in world.get_component(TileTypeRegistry):
        return world.component_for_entity(entity, TileTypes)
    raise RuntimeError("TileTypes definitions not found")


def spawnable_tile_types(world: World) -> List[str]:
    return get_tile_registry(world).spawnable_types()


def resolve_rng(world: World, rng: random.Random | None = None) -> random.Random:
    candidate = rng or getattr(world, "random", None)
    if isinstance(candidate, random.Random):
        return candidate
    return random.Random()


def get_entity_at(world: World, row: int, col: int) -> int | None:
    board = get_board(world)
    if not board.is_valid((row, col)):
        return None
    return board.get((row, col))


def tile_type_of(world: World, entity: int) -> str | None:
    tile = world.try_component(entity, TileType)
    return tile.type_name if tile is not None else None


def place_tile(world: World, entity: int, pos: Position) -> None:
    """Put ``entity`` into ``pos`` and sync its BoardPosition.

    The slot the tile leaves is not cleared here; callers moving a tile clear or
    overwrite it themselves.
    """
    board = get_board(world)
    board.set(pos, entity)
    position = world.try_component(entity, BoardPosition)
    if position is None:
        world.add_component(entity, BoardPosition(row=pos[0], col=pos[1]))
    else:
        position.row, position.col = pos[0], pos[1]


def spawn_tile(world: World, pos: Position, type_name: str) -> int:
    entity = world.create_entity(TileType(type_name=type_name), TileStatus())
    place_tile(world, entity, pos)
    return entity


def remove_tiles(world: World, positions: Iterable[Position]) -> List[TypeEntry]:
    """Delete the tiles at ``positions``; empty or out-of-range cells are skipped."""
    board = get_board(world)
    removed: List[TypeEntry] = []
    for row, col in positions:
        if not board.is_valid((row, col)):
            continue
        entity = board.get((row, col))
        if entity is None:
            continue
        type_name = tile_type_of(world, entity) or ""
        board.set((row, col), None)
        world.delete_entity(entity, immediate=True)
        removed.append((row, col, type_name))
    return removed


def clear_board(world: World) -> None:
    board = get_board(world)
    remove_tiles(world, list(board.positions()))


def swap_tiles(world: World, src: Position, dst: Position) -> bool:
    """Exchange the tiles at two occupied cells, keeping each tile's identity."""
    board = get_board(world)
    if not (board.is_valid(src) and board.is_valid(dst)):
        return False
    src_entity = board.get(src)
    dst_entity = board.get(dst)
    if src_entity is None or dst_entity is None:
        return False
    place_tile(world, src_entity, dst)
    place_tile(world, dst_entity, src)
    return True


def set_tile_state(world: World, entity: int, state: TileState) -> None:
    status = world.try_component(entity, TileStatus)
    if status is None:
        world.add_component(entity, TileStatus(state=state))
    else:
        status.state = state


def tile_type_map(world: World) -> Dict[GridPosition, str]:
    """Return mapping of occupied positions to their type names."""
    board = get_board(world)
    mapping: Dict[GridPosition, str] = {}
    for pos in board.positions():
        entity = board.get(pos)
        if entity is None:
            continue
        type_name = tile_type_of(world, entity)
        if type_name is not None:
            mapping[pos] = type_name
    return mapping


def board_snapshot(world: World) -> Tuple[Tuple[CellSnapshot, ...], ...]:
    """Immutable (entity, type_name) grid, handy for comparing board states."""
    board = get_board(world)
    rows: List[Tuple[CellSnapshot, ...]] = []
    for row in range(board.rows):
        cells: List[CellSnapshot] = []
        for col in range(board.cols):
            entity = board.get((row, col))
            cells.append(None if entity is None else (entity, tile_type_of(world, entity) or ""))
        rows.append(tuple(cells))
    return tuple(rows)


def apply_gravity(world: World) -> List[GravityMove]:
    """Compact each column toward the bottom row, preserving tile order.

    Returns one move per tile whose row changed, columns left to right and
    bottom-up within a column.
    """
    board = get_board(world)
    moves: List[GravityMove] = []
    for col in range(board.cols):
        write_row = board.rows - 1
        for row in range(board.rows - 1, -1, -1):
            entity = board.get((row, col))
            if entity is None:
                continue
            if row != write_row:
                moves.append(GravityMove(
                    source=GridPosition(row, col),
                    target=GridPosition(write_row, col),
                    entity=entity,
                    type_name=tile_type_of(world, entity) or "",
                ))
                board.set((row, col), None)
                place_tile(world, entity, (write_row, col))
            write_row -= 1
    return moves


def refill_empty_cells(
    world: World,
    rng: random.Random | None = None,
    type_names: Sequence[str] | None = None,
) -> List[SpawnedTile]:
    """Fill every empty cell in row-major order with a uniformly drawn type."""
    board = get_board(world)
    rng = resolve_rng(world, rng)
    choices = list(type_names) if type_names else spawnable_tile_types(world)
    spawned: List[SpawnedTile] = []
    for pos in board.positions():
        if board.get(pos) is not None:
            continue
        type_name = rng.choice(choices)
        entity = spawn_tile(world, pos, type_name)
        spawned.append(SpawnedTile(position=pos, entity=entity, type_name=type_name))
    return spawned


def clear_tiles_with_cascade(
    world: World,
    positions: Iterable[Position],
    rng: random.Random | None = None,
    *,
    type_names: Sequence[str] | None = None,
) -> BoardChange:
    """Clear tiles at positions, apply gravity/refill, and return board change metadata."""
    cleared = remove_tiles(world, sorted(set((r, c) for r, c in positions)))
    if not cleared:
        return BoardChange()
    moves = apply_gravity(world)
    spawned = refill_empty_cells(world, rng, type_names)
    return BoardChange(cleared=cleared, moves=moves, spawned=spawned)


def transform_tiles_to_type(world: World, source_type: str, target_type: str) -> List[GridPosition]:
    """Convert every tile of ``source_type`` to ``target_type`` and flag it as transforming."""
    board = get_board(world)
    affected: List[GridPosition] = []
    for pos in board.positions():
        entity = board.get(pos)
        if entity is None:
            continue
        tile = world.component_for_entity(entity, TileType)
        if tile.type_name != source_type:
            continue
        tile.type_name = target_type
        set_tile_state(world, entity, TileState.TRANSFORMING)
        affected.append(pos)
    return affected


def apply_layout(world: World, layout: Sequence[Sequence[Optional[str]]]) -> List[int]:
    """Replace the whole board with ``layout`` (row lists of type names, None for empty)."""
    clear_board(world)
    created: List[int] = []
    for row, values in enumerate(layout):
        for col, type_name in enumerate(values):
            if type_name is None:
                continue
            created.append(spawn_tile(world, (row, col), type_name))
    return created
