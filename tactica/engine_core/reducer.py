"""
Reducer - Applies commands to a match.

The reducer is the single point of state mutation.
All commands must go through apply().

Design principles:
- Validates phase and turn order before dispatching
- Handlers call GameState's guarded entry points, which raise
  ValidationError before mutating anything
- Returns ActionResult with acceptance or rejection, never raises for
  an illegal command
- Engine lookup failures (StateError) are logged and returned
"""

from __future__ import annotations
import logging

from ..errors import StateError, ValidationError
from .action import Action, ActionType, ActionResult
from .state import GameState, GamePhase

logger = logging.getLogger(__name__)


PLACEMENT_ACTIONS = {ActionType.PLACE_UNIT, ActionType.FINISH_PLACEMENT}
TURN_ACTIONS = {ActionType.MOVE, ActionType.ATTACK, ActionType.END_TURN}


class Reducer:
    """
    Reducer applies commands to a GameState.

    Stateless - all state is in GameState, rule constants in its config.
    """

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply a command to the match.

        Returns ActionResult; on rejection the state is unchanged.
        """
        validation_error = self._validate_action(state, action)
        if validation_error:
            logger.warning("Rejected %s from player %d: %s",
                           action.action_type.value, action.requester_id, validation_error)
            return ActionResult.failure(validation_error, error_code="INVALID_ACTION",
                                        phase_after=state.phase.value)

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code="NO_HANDLER",
                phase_after=state.phase.value,
            )

        try:
            captured_unit_id = handler(state, action)
        except ValidationError as e:
            logger.warning("Rejected %s from player %d: %s",
                           action.action_type.value, action.requester_id, e.reason)
            state.drain_events()
            return ActionResult.failure(e.reason, error_code=e.error_code, phase_after=state.phase.value)
        except StateError as e:
            logger.error("State error applying %s: %s", action.action_type.value, e)
            state.drain_events()
            return ActionResult.failure(e.message, error_code=e.error_code, phase_after=state.phase.value)

        return ActionResult.success(
            phase_after=state.phase.value,
            winner_id=state.winner_id,
            captured_unit_id=captured_unit_id,
            events=state.drain_events(),
        )

    def _validate_action(self, state: GameState, action: Action) -> str | None:
        """
        Check phase and turn order.

        Returns error message if invalid, None if valid.
        """
        if state.phase == GamePhase.SETUP:
            return "Match not started"
        if state.phase == GamePhase.ENDED:
            return "Match is over - no actions allowed"

        if state.get_player(action.requester_id) is None:
            return f"Unknown player {action.requester_id}"

        if state.phase == GamePhase.PLACEMENT:
            if action.action_type not in PLACEMENT_ACTIONS | {ActionType.RESIGN}:
                return "Only placement actions are allowed during placement"
            return None

        if action.action_type in PLACEMENT_ACTIONS:
            return "Placement is over"
        if action.action_type in TURN_ACTIONS and action.requester_id != state.current_player_id:
            return f"Not player {action.requester_id}'s turn"

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.PLACE_UNIT: self._handle_place_unit,
            ActionType.FINISH_PLACEMENT: self._handle_finish_placement,
            ActionType.MOVE: self._handle_move,
            ActionType.ATTACK: self._handle_attack,
            ActionType.END_TURN: self._handle_end_turn,
            ActionType.RESIGN: self._handle_resign,
        }
        return handlers.get(action_type)

    # Handlers return the captured unit id, if any.

    def _handle_move(self, state: GameState, action: Action) -> int | None:
        result = state.execute_move(action.unit_id, action.target_node)
        if not state.check_win_conditions() and state.rules.auto_end_turn:
            state.end_turn()
            state.check_win_conditions()
        return result.captured_unit_id

    def _handle_attack(self, state: GameState, action: Action) -> int | None:
        target = state.require_unit(action.target_unit_id)
        state.execute_attack(action.unit_id, action.target_unit_id)
        state.check_win_conditions()
        return None if target.alive else target.unit_id

    def _handle_end_turn(self, state: GameState, action: Action) -> None:
        state.end_turn()
        state.check_win_conditions()

    def _handle_resign(self, state: GameState, action: Action) -> None:
        state.resign(action.requester_id)

    def _handle_place_unit(self, state: GameState, action: Action) -> None:
        state.place_unit(action.requester_id, action.unit_id, action.target_node)

    def _handle_finish_placement(self, state: GameState, action: Action) -> None:
        if state.finish_placement(action.requester_id):
            state.check_win_conditions()
