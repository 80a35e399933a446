"""
Movement Rules - Evaluates movement patterns into legal target nodes.

Every MovementKind has exactly one evaluator in _EVALUATORS. The
evaluators read live topology through BoardGraph.is_passable, so board
mutations (destroyed or unstable nodes, type changes) change legality
without any engine changes.

Occupancy is a mapping of node id -> owning player id for living units.
"""

from __future__ import annotations
from typing import Callable, Iterable, Mapping

from ..errors import StateError
from ..spec_schema.unit_spec import MovementKind, MovementPattern, UnitDefinition
from .graph import (
    BoardGraph,
    Direction,
    ORTHOGONAL_DIRECTIONS,
    DIAGONAL_DIRECTIONS,
    ADJACENT_DIRECTIONS,
    KNIGHT_OFFSETS,
)


Occupancy = Mapping[int, int]


def forward_direction(side: int) -> int:
    """Forward y step for a side: side 0 moves up the board, side 1 down."""
    return 1 if side == 0 else -1


def _is_enemy(occupants: Occupancy, node_id: int, side: int) -> bool:
    owner = occupants.get(node_id)
    return owner is not None and owner != side


def _is_friendly(occupants: Occupancy, node_id: int, side: int) -> bool:
    return occupants.get(node_id) == side


def _walk_rays(
    pattern: MovementPattern,
    graph: BoardGraph,
    from_node: int,
    side: int,
    occupants: Occupancy,
    directions: Iterable[Direction],
) -> list[int]:
    """Walk each direction until blocked. An enemy occupant ends the ray as a target."""
    limit = graph.ray_limit if pattern.is_unbounded else pattern.max_distance
    result = []
    for direction in directions:
        for i in range(1, limit + 1):
            node_id = graph.step(from_node, direction, i)
            if node_id is None or not graph.is_passable(node_id):
                break
            if node_id in occupants:
                if _is_enemy(occupants, node_id, side) and not pattern.move_only:
                    result.append(node_id)
                break
            if not pattern.capture_only:
                result.append(node_id)
    return result


def _orthogonal(pattern, graph, from_node, side, occupants) -> list[int]:
    return _walk_rays(pattern, graph, from_node, side, occupants, ORTHOGONAL_DIRECTIONS)


def _diagonal(pattern, graph, from_node, side, occupants) -> list[int]:
    return _walk_rays(pattern, graph, from_node, side, occupants, DIAGONAL_DIRECTIONS)


def _single_step_target(pattern, graph, node_id, side, occupants) -> bool:
    """Shared landing rule for knight and adjacent steps."""
    if node_id is None or not graph.is_passable(node_id):
        return False
    if _is_friendly(occupants, node_id, side):
        return False
    if node_id in occupants:
        return not pattern.move_only
    return not pattern.capture_only


def _knight_leg_clear(graph, from_node, offset, occupants) -> bool:
    """A non-jumping knight needs the first orthogonal step of its L to be open."""
    dx, dy = offset
    leg = (dx // 2, 0) if abs(dx) == 2 else (0, dy // 2)
    leg_node = graph.step(from_node, leg)
    return leg_node is not None and graph.is_passable(leg_node) and leg_node not in occupants


def _knight(pattern, graph, from_node, side, occupants) -> list[int]:
    result = []
    for offset in KNIGHT_OFFSETS:
        node_id = graph.step(from_node, offset)
        if not pattern.can_jump and not _knight_leg_clear(graph, from_node, offset, occupants):
            continue
        if _single_step_target(pattern, graph, node_id, side, occupants):
            result.append(node_id)
    return result


def _adjacent(pattern, graph, from_node, side, occupants) -> list[int]:
    result = []
    for direction in ADJACENT_DIRECTIONS:
        node_id = graph.step(from_node, direction)
        if _single_step_target(pattern, graph, node_id, side, occupants):
            result.append(node_id)
    return result


def _forward(pattern, graph, from_node, side, occupants) -> list[int]:
    limit = graph.ray_limit if pattern.is_unbounded else pattern.max_distance
    direction = (0, forward_direction(side))
    result = []
    for i in range(1, limit + 1):
        node_id = graph.step(from_node, direction, i)
        if node_id is None or not graph.is_passable(node_id):
            break
        # Any occupant blocks; forward moves never capture
        if node_id in occupants:
            break
        result.append(node_id)
    return result


def _diagonal_capture(pattern, graph, from_node, side, occupants) -> list[int]:
    dy = forward_direction(side)
    result = []
    for dx in (-1, 1):
        node_id = graph.step(from_node, (dx, dy))
        if node_id is None or not graph.is_passable(node_id):
            continue
        if _is_enemy(occupants, node_id, side):
            result.append(node_id)
    return result


Evaluator = Callable[[MovementPattern, BoardGraph, int, int, Occupancy], list[int]]

_EVALUATORS: dict[MovementKind, Evaluator] = {
    MovementKind.ORTHOGONAL: _orthogonal,
    MovementKind.DIAGONAL: _diagonal,
    MovementKind.KNIGHT: _knight,
    MovementKind.ADJACENT: _adjacent,
    MovementKind.FORWARD: _forward,
    MovementKind.DIAGONAL_CAPTURE: _diagonal_capture,
}


def evaluate_pattern(
    pattern: MovementPattern,
    graph: BoardGraph,
    from_node: int,
    side: int,
    occupants: Occupancy,
) -> list[int]:
    """
    Target nodes for a single pattern.

    Args:
        pattern: The movement rule
        graph: Live board topology
        from_node: Node the piece stands on
        side: Owning player id (sets the forward axis)
        occupants: node id -> owner id for living units

    Returns:
        Target node ids in evaluation order
    """
    evaluator = _EVALUATORS.get(pattern.kind)
    if evaluator is None:
        raise StateError(f"No evaluator for movement kind: {pattern.kind}")
    return evaluator(pattern, graph, from_node, side, occupants)


def legal_targets(
    definition: UnitDefinition,
    graph: BoardGraph,
    from_node: int,
    side: int,
    occupants: Occupancy,
    has_ever_moved: bool = False,
) -> list[int]:
    """
    Deduplicated union of every pattern's targets, in first-seen order.

    First-move-only patterns are skipped once the unit has moved.
    """
    seen: set[int] = set()
    result: list[int] = []
    for pattern in definition.movement_patterns:
        if pattern.first_move_only and has_ever_moved:
            continue
        for target in evaluate_pattern(pattern, graph, from_node, side, occupants):
            if target not in seen:
                seen.add(target)
                result.append(target)
    return result
