"""
Engine Core - Deterministic match state management and rules.

The engine is the runtime that:
1. Materializes a board template into a mutable board graph
2. Evaluates movement patterns into legal targets
3. Validates moves and detects check, checkmate and stalemate
4. Applies commands via the reducer
5. Emits events for the host
"""

from .graph import BoardGraph, BoardState, NodeState, EdgeState
from .movement import legal_targets, evaluate_pattern
from .units import UnitState, Modifier, ModifierOperation, ModifierDuration, ModifierType
from .validator import MoveValidator, MoveValidationResult, AttackValidationResult
from .state import (
    GameState,
    GamePhase,
    GameEndReason,
    PlayerState,
    PlayerSetup,
    GameAction,
    GameActionType,
)
from .action import Action, ActionType, ActionResult
from .reducer import Reducer
from .events import UnitMoved, UnitCaptured, TurnChanged, GameEnded

__all__ = [
    "BoardGraph",
    "BoardState",
    "NodeState",
    "EdgeState",
    "legal_targets",
    "evaluate_pattern",
    "UnitState",
    "Modifier",
    "ModifierOperation",
    "ModifierDuration",
    "ModifierType",
    "MoveValidator",
    "MoveValidationResult",
    "AttackValidationResult",
    "GameState",
    "GamePhase",
    "GameEndReason",
    "PlayerState",
    "PlayerSetup",
    "GameAction",
    "GameActionType",
    "Action",
    "ActionType",
    "ActionResult",
    "Reducer",
    "UnitMoved",
    "UnitCaptured",
    "TurnChanged",
    "GameEnded",
]
