"""
Action System - Commands and their results.

Commands are what a host asks of a match:
1. Placement (manual-placement boards only)
2. Move, attack, end turn
3. Resign

Every command carries its requester; the reducer checks it against the
player to move. All state changes flow through the reducer.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .events import MatchEvent, event_to_dict


class ActionType(Enum):
    """Commands accepted by the reducer."""
    PLACE_UNIT = "place_unit"
    FINISH_PLACEMENT = "finish_placement"
    MOVE = "move"
    ATTACK = "attack"
    END_TURN = "end_turn"
    RESIGN = "resign"


@dataclass(frozen=True)
class Action:
    """
    A command for one match.

    unit_id is the mover/attacker/placed unit; target_node is the move or
    placement destination; target_unit_id is the attacked unit.
    """
    action_type: ActionType
    requester_id: int
    unit_id: int = -1
    target_node: int = -1
    target_unit_id: int = -1

    @classmethod
    def move(cls, requester_id: int, unit_id: int, target_node: int) -> Action:
        return cls(ActionType.MOVE, requester_id, unit_id=unit_id, target_node=target_node)

    @classmethod
    def attack(cls, requester_id: int, attacker_id: int, target_unit_id: int) -> Action:
        return cls(ActionType.ATTACK, requester_id, unit_id=attacker_id, target_unit_id=target_unit_id)

    @classmethod
    def end_turn(cls, requester_id: int) -> Action:
        return cls(ActionType.END_TURN, requester_id)

    @classmethod
    def resign(cls, requester_id: int) -> Action:
        return cls(ActionType.RESIGN, requester_id)

    @classmethod
    def place_unit(cls, requester_id: int, unit_id: int, node_id: int) -> Action:
        return cls(ActionType.PLACE_UNIT, requester_id, unit_id=unit_id, target_node=node_id)

    @classmethod
    def finish_placement(cls, requester_id: int) -> Action:
        return cls(ActionType.FINISH_PLACEMENT, requester_id)


@dataclass
class ActionResult:
    """
    Result of applying a command.

    Contains:
    - Whether it was accepted, and why not
    - Capture information for moves
    - The phase and winner after the command
    - Events emitted while applying it
    """
    accepted: bool
    reason: str | None = None
    error_code: str | None = None
    captured_unit_id: int | None = None
    phase_after: str | None = None
    winner_id: int | None = None
    events: list[MatchEvent] = field(default_factory=list)

    @classmethod
    def failure(cls, reason: str, error_code: str | None = None, phase_after: str | None = None) -> ActionResult:
        """Create a rejection."""
        return cls(accepted=False, reason=reason, error_code=error_code, phase_after=phase_after)

    @classmethod
    def success(
        cls,
        phase_after: str,
        winner_id: int | None = None,
        captured_unit_id: int | None = None,
        events: list[MatchEvent] | None = None,
    ) -> ActionResult:
        """Create an acceptance."""
        return cls(
            accepted=True,
            captured_unit_id=captured_unit_id,
            phase_after=phase_after,
            winner_id=winner_id,
            events=events or [],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "accepted": self.accepted,
            "reason": self.reason,
            "error_code": self.error_code,
            "captured_unit_id": self.captured_unit_id,
            "phase_after": self.phase_after,
            "winner_id": self.winner_id,
            "events": [event_to_dict(e) for e in self.events],
        }
