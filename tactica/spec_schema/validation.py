"""
Board Validation - Topology checks for board and match templates.

Validates that:
1. Node ids are dense and match their index
2. Edges and teleport links reference existing nodes
3. Spawn zones only reference nodes in the graph
4. Every player in a match has a spawn zone and a valid army

Runs at load time, before a match is initialized.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import TopologyError
from .board_spec import BoardDefinition, NO_TELEPORT

if TYPE_CHECKING:
    from .army_spec import ArmyDefinition, ArmyRestrictions


@dataclass
class ValidationResult:
    """Result of validation, with errors and warnings."""
    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_board(board: BoardDefinition) -> ValidationResult:
    """
    Validate a board definition.

    Returns ValidationResult with errors and warnings.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if not board.board_id:
        errors.append("board_id is required")
    if board.width < 1 or board.height < 1:
        errors.append("width and height must be >= 1")
    if not board.nodes:
        errors.append("Board has no nodes")

    for index, node in enumerate(board.nodes):
        if node.id != index:
            errors.append(f"Node at index {index} has id {node.id}; ids must be dense and ordered")

    node_ids = {node.id for node in board.nodes}

    for node in board.nodes:
        if node.teleport_target != NO_TELEPORT and node.teleport_target not in node_ids:
            errors.append(
                f"Node {node.id} teleports to unknown node {node.teleport_target}"
            )

    for edge in board.edges:
        for endpoint in (edge.from_node, edge.to_node):
            if endpoint not in node_ids:
                errors.append(
                    f"Edge {edge.from_node}->{edge.to_node} references unknown node {endpoint}"
                )

    seen_slots: set[int] = set()
    for zone in board.spawn_zones:
        if zone.player_slot in seen_slots:
            errors.append(f"Duplicate spawn zone for player slot {zone.player_slot}")
        seen_slots.add(zone.player_slot)
        for node_id in zone.all_node_ids:
            if node_id not in node_ids:
                errors.append(
                    f"Spawn zone for player {zone.player_slot} references unknown node {node_id}"
                )

    # Warnings for incomplete boards
    if not board.edges:
        warnings.append("No edges defined - pathfinding and range checks will fail")
    if not board.spawn_zones:
        warnings.append("No spawn zones defined")
    if len(board.nodes) != board.width * board.height:
        warnings.append(
            f"{len(board.nodes)} nodes on a {board.width}x{board.height} grid - "
            "directional patterns only reach grid-addressable nodes"
        )

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)


def validate_match_setup(
    board: BoardDefinition,
    armies: list[ArmyDefinition],
    restrictions: ArmyRestrictions | None = None,
) -> ValidationResult:
    """Validate a board together with the armies that will be placed on it."""
    result = validate_board(board)
    errors = list(result.errors)

    if len(armies) < 2:
        errors.append("A match needs at least 2 players")

    for slot, army in enumerate(armies):
        if board.spawn_zone_for(slot) is None:
            errors.append(f"No spawn zone for player slot {slot}")
        army_result = army.validate(restrictions)
        errors.extend(f"Player {slot} army '{army.army_id}': {e}" for e in army_result.errors)

    return ValidationResult(valid=not errors, errors=errors, warnings=result.warnings)


def require_valid(result: ValidationResult) -> None:
    """Raise TopologyError if a validation result has errors."""
    if not result.valid:
        raise TopologyError(result.errors)
