"""
Move Validator - Legality checks and check/checkmate/stalemate detection.

Validation never mutates match state. Checkmate detection simulates
each candidate move in place and always rolls it back (see
simulate_move); callers must hold the match's single-writer lock so no
reader observes a simulated position.
"""

from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Mapping

from ..errors import StateError
from ..spec_schema.unit_spec import UnitDefinition
from .graph import BoardGraph
from .movement import legal_targets
from .units import UnitState


@dataclass
class MoveValidationResult:
    """Outcome of validating a move."""
    valid: bool
    error: str | None = None
    is_capture: bool = False
    captured_unit_id: int | None = None

    @classmethod
    def success(cls, is_capture: bool = False, captured_unit_id: int | None = None) -> MoveValidationResult:
        return cls(valid=True, is_capture=is_capture, captured_unit_id=captured_unit_id)

    @classmethod
    def fail(cls, error: str) -> MoveValidationResult:
        return cls(valid=False, error=error)


@dataclass
class AttackValidationResult:
    """Outcome of validating an attack."""
    valid: bool
    error: str | None = None
    distance: int = -1

    @classmethod
    def success(cls, distance: int) -> AttackValidationResult:
        return cls(valid=True, distance=distance)

    @classmethod
    def fail(cls, error: str) -> AttackValidationResult:
        return cls(valid=False, error=error)


def occupancy(units: list[UnitState]) -> dict[int, int]:
    """node id -> owner id for every living unit."""
    return {u.node_id: u.owner_id for u in units if u.alive}


def unit_at(units: list[UnitState], node_id: int) -> UnitState | None:
    for u in units:
        if u.alive and u.node_id == node_id:
            return u
    return None


@contextmanager
def simulate_move(unit: UnitState, target_node: int, units: list[UnitState]) -> Iterator[UnitState | None]:
    """
    Temporarily play a move: relocate the unit and kill any occupant.

    The position is restored on exit, including when the body raises.
    Yields the captured unit, if any.
    """
    original_node = unit.node_id
    captured = unit_at(units, target_node)
    if captured is unit:
        captured = None

    unit.node_id = target_node
    if captured is not None:
        captured.alive = False
    try:
        yield captured
    finally:
        unit.node_id = original_node
        if captured is not None:
            captured.alive = True


class MoveValidator:
    """
    Validates moves and attacks, and detects check states.

    Usage:
        validator = MoveValidator(graph, definitions)
        result = validator.validate_move(unit, target, units, current_player)
        if validator.is_checkmate(player, units): ...
    """

    def __init__(self, graph: BoardGraph, unit_definitions: Mapping[str, UnitDefinition]):
        self.graph = graph
        self.unit_definitions = unit_definitions

    def definition_for(self, unit: UnitState) -> UnitDefinition:
        """Resolve a unit's definition through the match registry."""
        definition = self.unit_definitions.get(unit.definition_id)
        if definition is None:
            raise StateError(f"Unknown unit definition '{unit.definition_id}' for unit {unit.unit_id}")
        return definition

    # =========================================================================
    # Legal targets
    # =========================================================================

    def get_valid_moves_for_unit(
        self,
        unit: UnitState,
        units: list[UnitState],
        occupants: Mapping[int, int] | None = None,
    ) -> list[int]:
        """All legal target nodes for a unit from its current node."""
        if not unit.alive or not self.graph.state.has_node(unit.node_id):
            return []
        if occupants is None:
            occupants = occupancy(units)
        return legal_targets(
            self.definition_for(unit),
            self.graph,
            unit.node_id,
            unit.owner_id,
            occupants,
            has_ever_moved=unit.has_ever_moved,
        )

    def legal_moves_for_player(self, player_id: int, units: list[UnitState]) -> dict[int, list[int]]:
        """unit id -> legal targets for every living unit of a player."""
        occupants = occupancy(units)
        return {
            u.unit_id: self.get_valid_moves_for_unit(u, units, occupants)
            for u in units
            if u.alive and u.owner_id == player_id
        }

    # =========================================================================
    # Move / attack validation
    # =========================================================================

    def validate_move(
        self,
        unit: UnitState,
        target_node: int,
        units: list[UnitState],
        current_player_id: int,
    ) -> MoveValidationResult:
        """Check whether a unit may move to a target node this turn."""
        if not unit.alive:
            return MoveValidationResult.fail("Unit is dead")
        if unit.owner_id != current_player_id:
            return MoveValidationResult.fail("Not your unit")
        if unit.has_moved_this_turn:
            return MoveValidationResult.fail("Unit has already moved this turn")
        if not self.graph.is_passable(target_node):
            return MoveValidationResult.fail("Target node is not passable")

        if target_node not in self.get_valid_moves_for_unit(unit, units):
            return MoveValidationResult.fail("Invalid move for this unit type")

        occupant = unit_at(units, target_node)
        if occupant is not None:
            if occupant.owner_id == current_player_id:
                return MoveValidationResult.fail(
                    "Cannot move to a node occupied by your own unit"
                )
            return MoveValidationResult.success(is_capture=True, captured_unit_id=occupant.unit_id)

        return MoveValidationResult.success()

    def validate_attack(
        self,
        attacker: UnitState,
        target: UnitState,
        current_player_id: int,
    ) -> AttackValidationResult:
        """Check whether an attacker may strike a target (separate attack phase)."""
        if not attacker.alive:
            return AttackValidationResult.fail("Attacker is dead")
        if not target.alive:
            return AttackValidationResult.fail("Target is dead")
        if attacker.owner_id != current_player_id:
            return AttackValidationResult.fail("Not your unit")
        if target.owner_id == current_player_id:
            return AttackValidationResult.fail("Cannot attack your own unit")
        if attacker.has_acted_this_turn:
            return AttackValidationResult.fail("Unit has already acted this turn")

        distance = self.graph.get_distance(attacker.node_id, target.node_id)
        if distance < 0 or distance > attacker.range:
            return AttackValidationResult.fail("Target is out of range")

        return AttackValidationResult.success(distance)

    # =========================================================================
    # Check detection
    # =========================================================================

    def king_nodes(self, player_id: int, units: list[UnitState]) -> set[int]:
        return {
            u.node_id for u in units
            if u.alive and u.owner_id == player_id and self.definition_for(u).is_king
        }

    def is_king_in_check(self, player_id: int, units: list[UnitState]) -> bool:
        """
        True if any enemy unit can reach one of the player's king nodes.

        A player without a living king is not in check; king loss is a
        separate win condition.
        """
        kings = self.king_nodes(player_id, units)
        if not kings:
            return False

        occupants = occupancy(units)
        for enemy in units:
            if not enemy.alive or enemy.owner_id == player_id:
                continue
            targets = self.get_valid_moves_for_unit(enemy, units, occupants)
            if kings.intersection(targets):
                return True
        return False

    def is_checkmate(self, player_id: int, units: list[UnitState]) -> bool:
        """In check, and no candidate move of any unit escapes it."""
        if not self.is_king_in_check(player_id, units):
            return False

        own_units = [u for u in units if u.alive and u.owner_id == player_id]
        for unit in own_units:
            for move in self.get_valid_moves_for_unit(unit, units):
                with simulate_move(unit, move, units):
                    still_in_check = self.is_king_in_check(player_id, units)
                if not still_in_check:
                    return False
        return True

    def has_any_legal_move(self, player_id: int, units: list[UnitState]) -> bool:
        occupants = occupancy(units)
        for unit in units:
            if unit.alive and unit.owner_id == player_id:
                if self.get_valid_moves_for_unit(unit, units, occupants):
                    return True
        return False

    def is_stalemate(self, player_id: int, units: list[UnitState]) -> bool:
        """Not in check and no legal move across all of the player's units."""
        if self.is_king_in_check(player_id, units):
            return False
        return not self.has_any_legal_move(player_id, units)
