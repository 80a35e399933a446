"""
Game State - Authoritative state of one match.

GameState owns everything mutable in a match: the runtime board, the
units, the players, the turn cursor and the action history. It is the
only place where units move, die or gain experience.

Design principles:
- Single writer: exactly one caller mutates a match at a time
  (see session.Session for the lock that enforces it)
- Guarded entry points: execute_move/execute_attack validate first and
  raise ValidationError before touching anything
- Observable: accepted actions emit events the host can drain
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import uuid

from ..config import RulesConfig, DEFAULT_RULES
from ..errors import StateError, ValidationError
from ..spec_schema.army_spec import ArmyDefinition, ArmyRestrictions
from ..spec_schema.board_spec import BoardDefinition, NodeType, PlacementMode, NO_TELEPORT
from ..spec_schema.unit_spec import UnitDefinition
from ..spec_schema.validation import validate_match_setup, require_valid
from .events import MatchEvent, UnitMoved, UnitCaptured, TurnChanged, GameEnded
from .graph import BoardGraph
from .placement import NOT_PLACED, place_army, create_units_for_placement, is_valid_placement
from .units import Modifier, UnitState
from .validator import MoveValidator, MoveValidationResult, AttackValidationResult

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    """High-level match phases."""
    SETUP = "setup"
    PLACEMENT = "placement"  # Manual placement boards only
    PLAYING = "playing"
    ENDED = "ended"


class GameEndReason(Enum):
    NONE = "none"
    CHECKMATE = "checkmate"
    KING_CAPTURED = "king_captured"
    STALEMATE = "stalemate"
    RESIGNATION = "resignation"
    TIMEOUT = "timeout"
    DISCONNECT = "disconnect"


class GameActionType(Enum):
    """Kinds of entries in the action history."""
    PLACE = "place"
    MOVE = "move"
    ATTACK = "attack"
    END_TURN = "end_turn"
    RESIGN = "resign"


@dataclass
class PlayerState:
    """A player seated in the match. player_id is the seat index."""
    player_id: int
    display_name: str
    army_id: str = ""
    army_has_king: bool = False
    is_ready: bool = False
    is_connected: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_id": self.player_id,
            "display_name": self.display_name,
            "army_id": self.army_id,
            "army_has_king": self.army_has_king,
            "is_ready": self.is_ready,
            "is_connected": self.is_connected,
        }


@dataclass(frozen=True)
class PlayerSetup:
    """What a player brings to a match."""
    display_name: str
    army: ArmyDefinition


@dataclass(frozen=True)
class GameAction:
    """Immutable record of an applied action."""
    action_type: GameActionType
    player_id: int
    turn_number: int
    unit_id: int = -1
    from_node: int = -1
    to_node: int = -1
    target_unit_id: int = -1

    def to_dict(self) -> dict[str, Any]:
        return {
            "action_type": self.action_type.value,
            "player_id": self.player_id,
            "turn_number": self.turn_number,
            "unit_id": self.unit_id,
            "from_node": self.from_node,
            "to_node": self.to_node,
            "target_unit_id": self.target_unit_id,
        }


@dataclass
class GameState:
    """
    Complete state of a match.

    Usage:
        state = GameState(rules=RulesConfig())
        state.initialize(board, [PlayerSetup("White", army), PlayerSetup("Black", army)])
        state.execute_move(unit_id, target_node)
        state.check_win_conditions()
        state.end_turn()
    """
    rules: RulesConfig = DEFAULT_RULES

    match_id: str = ""
    phase: GamePhase = GamePhase.SETUP
    turn_number: int = 0
    current_player_index: int = 0

    board_definition: BoardDefinition | None = None
    graph: BoardGraph | None = None
    validator: MoveValidator | None = None

    players: list[PlayerState] = field(default_factory=list)
    units: list[UnitState] = field(default_factory=list)
    unit_definitions: dict[str, UnitDefinition] = field(default_factory=dict)

    winner_id: int | None = None
    end_reason: GameEndReason = GameEndReason.NONE

    action_history: list[GameAction] = field(default_factory=list)
    pending_events: list[MatchEvent] = field(default_factory=list)

    # =========================================================================
    # Setup
    # =========================================================================

    def initialize(
        self,
        board: BoardDefinition,
        setups: list[PlayerSetup],
        restrictions: ArmyRestrictions | None = None,
    ):
        """
        Start a match on a board with one army per player.

        Raises TopologyError (phase stays SETUP) if the board or any army
        is invalid. Boards with automatic placement go straight to PLAYING
        at turn 1 with player 0 to move; manual boards enter PLACEMENT.
        """
        if self.phase != GamePhase.SETUP:
            raise StateError(f"Match {self.match_id} is already initialized")

        require_valid(validate_match_setup(board, [s.army for s in setups], restrictions))

        definitions: dict[str, UnitDefinition] = {}
        for setup in setups:
            for slot in setup.army.slots:
                known = definitions.setdefault(slot.unit.unit_id, slot.unit)
                if known != slot.unit:
                    raise StateError(f"Conflicting definitions for unit id '{slot.unit.unit_id}'")

        graph = BoardGraph(board)
        manual = board.placement_mode == PlacementMode.MANUAL

        players = []
        units: list[UnitState] = []
        for slot_index, setup in enumerate(setups):
            players.append(PlayerState(
                player_id=slot_index,
                display_name=setup.display_name,
                army_id=setup.army.army_id,
                army_has_king=setup.army.has_king,
                is_ready=not manual,
            ))
            if manual:
                placed = create_units_for_placement(setup.army, slot_index, len(units))
            else:
                placed = place_army(
                    setup.army,
                    board.spawn_zone_for(slot_index),
                    slot_index,
                    len(units),
                    mirror=slot_index % 2 == 1,
                )
            units.extend(placed)

        self.match_id = str(uuid.uuid4())
        self.board_definition = board
        self.graph = graph
        self.unit_definitions = definitions
        self.validator = MoveValidator(graph, definitions)
        self.players = players
        self.units = units
        self.winner_id = None
        self.end_reason = GameEndReason.NONE
        self.action_history = []
        self.pending_events = []

        if manual:
            self.phase = GamePhase.PLACEMENT
        else:
            self._start_playing()

        logger.info(
            "Match %s initialized on board '%s': %d players, %d units, phase %s",
            self.match_id, board.board_id, len(players), len(units), self.phase.value,
        )

    def _start_playing(self):
        self.phase = GamePhase.PLAYING
        self.turn_number = 1
        self.current_player_index = 0
        for unit in self.player_units(self.current_player_id):
            unit.start_turn()

    def place_unit(self, player_id: int, unit_id: int, node_id: int):
        """Put one of a player's units on a node of their spawn zone."""
        if self.phase != GamePhase.PLACEMENT:
            raise ValidationError("Match is not in the placement phase")
        if self.require_player(player_id).is_ready:
            raise ValidationError("Player has already finished placement")
        unit = self.require_unit(unit_id)
        if unit.owner_id != player_id:
            raise ValidationError("Not your unit")

        zone = self.board_definition.spawn_zone_for(player_id)
        if zone is None or not is_valid_placement(node_id, zone, self.graph.state):
            raise ValidationError("Node is not a valid placement for this player")
        occupant = self.unit_at_node(node_id)
        if occupant is not None and occupant is not unit:
            raise ValidationError("Node is already occupied")

        from_node = unit.node_id
        unit.relocate(node_id)
        self._record(GameActionType.PLACE, player_id, unit_id=unit_id, from_node=from_node, to_node=node_id)

    def finish_placement(self, player_id: int) -> bool:
        """
        Mark a player ready. Play starts once every player is ready.

        Returns True if this call started the match.
        """
        if self.phase != GamePhase.PLACEMENT:
            raise ValidationError("Match is not in the placement phase")
        if any(u.node_id == NOT_PLACED for u in self.units if u.owner_id == player_id):
            raise ValidationError("Not all units have been placed")

        self.require_player(player_id).is_ready = True
        if all(p.is_ready for p in self.players):
            self._start_playing()
            self.pending_events.append(TurnChanged(self.turn_number, self.current_player_id))
            return True
        return False

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def current_player(self) -> PlayerState:
        return self.players[self.current_player_index]

    @property
    def current_player_id(self) -> int:
        return self.players[self.current_player_index].player_id

    @property
    def is_over(self) -> bool:
        return self.phase == GamePhase.ENDED

    def get_player(self, player_id: int) -> PlayerState | None:
        for player in self.players:
            if player.player_id == player_id:
                return player
        return None

    def require_player(self, player_id: int) -> PlayerState:
        player = self.get_player(player_id)
        if player is None:
            raise StateError(f"Unknown player {player_id}")
        return player

    def opponent_of(self, player_id: int) -> int | None:
        """First seated player other than player_id."""
        for player in self.players:
            if player.player_id != player_id:
                return player.player_id
        return None

    def get_unit(self, unit_id: int) -> UnitState | None:
        for unit in self.units:
            if unit.unit_id == unit_id:
                return unit
        return None

    def require_unit(self, unit_id: int) -> UnitState:
        unit = self.get_unit(unit_id)
        if unit is None:
            raise StateError(f"Unknown unit {unit_id}")
        return unit

    def unit_at_node(self, node_id: int) -> UnitState | None:
        for unit in self.units:
            if unit.alive and unit.node_id == node_id:
                return unit
        return None

    def is_node_occupied(self, node_id: int) -> bool:
        return self.unit_at_node(node_id) is not None

    def player_units(self, player_id: int, alive_only: bool = True) -> list[UnitState]:
        return [
            u for u in self.units
            if u.owner_id == player_id and (u.alive or not alive_only)
        ]

    @property
    def alive_units(self) -> list[UnitState]:
        return [u for u in self.units if u.alive]

    def legal_moves(self, unit_id: int) -> list[int]:
        """Legal targets of a unit from its current node."""
        return self.validator.get_valid_moves_for_unit(self.require_unit(unit_id), self.units)

    # =========================================================================
    # Actions
    # =========================================================================

    def execute_move(self, unit_id: int, target_node: int) -> MoveValidationResult:
        """
        Move a unit for the current player, resolving capture and tile effects.

        Raises ValidationError (nothing mutated) if the move is illegal.
        """
        unit = self.require_unit(unit_id)
        result = self.validator.validate_move(unit, target_node, self.units, self.current_player_id)
        if not result.valid:
            raise ValidationError(result.error)

        from_node = unit.node_id
        if result.is_capture:
            captured = self.require_unit(result.captured_unit_id)
            captured.kill()
            unit.add_experience(self.rules.kill_experience)
            self.pending_events.append(UnitCaptured(captured.unit_id, captured_by=unit.unit_id))

        unit.move_to(target_node)
        self._record(
            GameActionType.MOVE,
            unit.owner_id,
            unit_id=unit.unit_id,
            from_node=from_node,
            to_node=target_node,
            target_unit_id=result.captured_unit_id if result.is_capture else -1,
        )
        self.pending_events.append(UnitMoved(unit.unit_id, from_node, target_node))
        logger.debug(
            "Unit %d moved %d -> %d%s",
            unit.unit_id, from_node, target_node,
            f" capturing {result.captured_unit_id}" if result.is_capture else "",
        )

        self._apply_node_effect(unit)
        return result

    def _apply_node_effect(self, unit: UnitState):
        """Resolve the effect of the node a unit just landed on."""
        node = self.graph.get_node(unit.node_id)

        if node.current_type == NodeType.BOOST:
            unit.add_modifier(Modifier.buff(
                "Attack", self.rules.boost_attack, self.rules.boost_turns, source="node:boost",
            ))

        elif node.current_type == NodeType.TRAP:
            unit.take_true_damage(self.rules.trap_damage)
            if not unit.alive:
                self.pending_events.append(UnitCaptured(unit.unit_id))
                logger.debug("Unit %d destroyed by trap at node %d", unit.unit_id, node.id)

        elif node.current_type == NodeType.TELEPORT:
            target = node.teleport_target
            # Teleports never chain and never land on another unit
            if (
                target != NO_TELEPORT
                and self.graph.is_passable(target)
                and not self.is_node_occupied(target)
            ):
                unit.relocate(target)
                self.pending_events.append(UnitMoved(unit.unit_id, node.id, target))

        # UNSTABLE has no immediate effect; the board collapses it at turn end

    def execute_attack(self, attacker_id: int, target_id: int) -> AttackValidationResult:
        """
        Strike a unit in range without moving.

        Raises ValidationError (nothing mutated) if the attack is illegal.
        """
        attacker = self.require_unit(attacker_id)
        target = self.require_unit(target_id)
        result = self.validator.validate_attack(attacker, target, self.current_player_id)
        if not result.valid:
            raise ValidationError(result.error)

        damage = target.take_damage(attacker.attack)
        attacker.has_acted_this_turn = True
        if not target.alive:
            attacker.add_experience(self.rules.kill_experience)
            self.pending_events.append(UnitCaptured(target.unit_id, captured_by=attacker.unit_id))

        self._record(
            GameActionType.ATTACK,
            attacker.owner_id,
            unit_id=attacker.unit_id,
            from_node=attacker.node_id,
            to_node=target.node_id,
            target_unit_id=target.unit_id,
        )
        logger.debug("Unit %d hit unit %d for %d", attacker.unit_id, target.unit_id, damage)
        return result

    def end_turn(self):
        """
        Finish the current player's turn.

        Ticks the finishing player's modifiers and the board's unstable
        nodes, then hands the turn to the next seat. The turn number
        advances when the rotation wraps to seat 0.
        """
        finishing = self.current_player_id
        for unit in self.player_units(finishing):
            unit.end_turn()

        collapsed = self.graph.process_turn_end()
        if collapsed:
            logger.debug("Nodes collapsed: %s", collapsed)

        self._record(GameActionType.END_TURN, finishing)

        self.current_player_index = (self.current_player_index + 1) % len(self.players)
        if self.current_player_index == 0:
            self.turn_number += 1
        for unit in self.player_units(self.current_player_id):
            unit.start_turn()

        self.pending_events.append(TurnChanged(self.turn_number, self.current_player_id))
        logger.debug("Turn %d: player %d to move", self.turn_number, self.current_player_id)

    # =========================================================================
    # Match end
    # =========================================================================

    def check_win_conditions(self) -> bool:
        """
        End the match if a king is lost, a player is mated, or the
        player to move is stalemated.

        Every player is checked for king loss and checkmate first; only
        the current player is checked for stalemate. A player whose army
        definition has no king cannot lose it. Returns True if the match ended.
        """
        if self.phase != GamePhase.PLAYING:
            return False

        for player in self.players:
            pid = player.player_id
            has_king = any(u.is_king for u in self.player_units(pid))
            if player.army_has_king and not has_king:
                self._end(self.opponent_of(pid), GameEndReason.KING_CAPTURED)
                return True
            if self.validator.is_checkmate(pid, self.units):
                self._end(self.opponent_of(pid), GameEndReason.CHECKMATE)
                return True

        if self.validator.is_stalemate(self.current_player_id, self.units):
            self._end(None, GameEndReason.STALEMATE)
            return True

        return False

    def resign(self, player_id: int):
        """Concede; the opponent wins."""
        self.require_player(player_id)
        self._record(GameActionType.RESIGN, player_id)
        self._end(self.opponent_of(player_id), GameEndReason.RESIGNATION)

    def force_end(self, reason: GameEndReason, winner_id: int | None = None):
        """Host hook for timeouts and disconnects."""
        if self.phase == GamePhase.ENDED:
            return
        self._end(winner_id, reason)

    def _end(self, winner_id: int | None, reason: GameEndReason):
        self.phase = GamePhase.ENDED
        self.winner_id = winner_id
        self.end_reason = reason
        self.pending_events.append(GameEnded(winner_id, reason.value))
        logger.info("Match %s ended: %s, winner %s", self.match_id, reason.value, winner_id)

    # =========================================================================
    # History, events, serialization
    # =========================================================================

    def _record(self, action_type: GameActionType, player_id: int, **fields):
        self.action_history.append(
            GameAction(action_type=action_type, player_id=player_id, turn_number=self.turn_number, **fields)
        )

    def drain_events(self) -> list[MatchEvent]:
        """Return and clear the events emitted since the last drain."""
        events, self.pending_events = self.pending_events, []
        return events

    def snapshot(self) -> dict[str, Any]:
        """Full serializable view of the match."""
        return {
            "match_id": self.match_id,
            "phase": self.phase.value,
            "turn_number": self.turn_number,
            "current_player_id": self.current_player_id if self.players else None,
            "winner_id": self.winner_id,
            "end_reason": self.end_reason.value,
            "board_id": self.board_definition.board_id if self.board_definition else None,
            "board": self.graph.state.to_dict() if self.graph else None,
            "players": [p.to_dict() for p in self.players],
            "units": [u.to_dict() for u in self.units],
            "action_history": [a.to_dict() for a in self.action_history],
        }
