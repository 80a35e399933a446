"""Classic 8x8 board."""

from __future__ import annotations

from ...spec_schema.board_spec import BoardDefinition, SpawnZone, PlacementMode
from ...spec_schema.grid import grid_nodes, grid_edges


BOARD_ID = "classic_8x8"
SIZE = 8


def create_classic_board() -> BoardDefinition:
    """
    Standard chess board.

    Edges are 8-way so adjacency-based queries (distance, ranged attacks)
    match king moves; other pieces move by pattern, not by edge.
    Player 0 spawns on rows 0-1, player 1 on rows 6-7.
    """
    back_0 = list(range(0, SIZE))
    front_0 = list(range(SIZE, 2 * SIZE))
    front_1 = list(range(6 * SIZE, 7 * SIZE))
    back_1 = list(range(7 * SIZE, 8 * SIZE))

    return BoardDefinition(
        board_id=BOARD_ID,
        display_name="Classic Chess Board",
        nodes=tuple(grid_nodes(SIZE, SIZE)),
        edges=tuple(grid_edges(SIZE, SIZE, diagonals=True)),
        spawn_zones=(
            SpawnZone.from_rows(0, back_0, front_0),
            SpawnZone.from_rows(1, back_1, front_1),
        ),
        width=SIZE,
        height=SIZE,
        placement_mode=PlacementMode.AUTOMATIC,
    )
