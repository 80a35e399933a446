"""
Match Events - Records emitted for the host.

Events are produced by GameState while it executes accepted actions,
returned in every ActionResult, and fanned out to session subscribers.
They are plain immutable records; the host decides how to render them.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Union


@dataclass(frozen=True)
class UnitMoved:
    unit_id: int
    from_node: int
    to_node: int


@dataclass(frozen=True)
class UnitCaptured:
    unit_id: int
    captured_by: int | None = None


@dataclass(frozen=True)
class TurnChanged:
    turn_number: int
    current_player_id: int


@dataclass(frozen=True)
class GameEnded:
    winner_id: int | None
    reason: str


MatchEvent = Union[UnitMoved, UnitCaptured, TurnChanged, GameEnded]


def event_to_dict(event: MatchEvent) -> dict[str, Any]:
    """Serialize an event with its type name under "event"."""
    data = asdict(event)
    data["event"] = type(event).__name__
    return data
