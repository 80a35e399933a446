"""
Classic Match Setup - Army and ready-to-play match.

This module handles:
- The 16-slot classic army
- Bundling board, definitions and army
- Initializing a two-player GameState
"""

from __future__ import annotations
from dataclasses import dataclass

from ...config import RulesConfig, DEFAULT_RULES
from ...engine_core.state import GameState, PlayerSetup
from ...spec_schema.army_spec import ArmyDefinition, ArmySlot, ArmyRestrictions, SlotRow
from ...spec_schema.board_spec import BoardDefinition
from ...spec_schema.unit_spec import UnitDefinition
from .board import create_classic_board
from .units import create_all_unit_definitions


BACK_ROW_ORDER = ("Rook", "Knight", "Bishop", "Queen", "King", "Bishop", "Knight", "Rook")


@dataclass(frozen=True)
class ClassicSetup:
    """Everything needed for a classic match."""
    board: BoardDefinition
    unit_definitions: dict[str, UnitDefinition]
    army: ArmyDefinition


def create_classic_army(units: dict[str, UnitDefinition] | None = None) -> ArmyDefinition:
    """Standard 16-piece army: back row RNBQKBNR, eight pawns in front."""
    if units is None:
        units = create_all_unit_definitions()

    slots = [ArmySlot(units[name], x, 0, SlotRow.BACK) for x, name in enumerate(BACK_ROW_ORDER)]
    slots.extend(ArmySlot(units["Pawn"], x, 1, SlotRow.FRONT) for x in range(8))

    return ArmyDefinition(
        army_id="classic_chess_army",
        display_name="Classic Chess Army",
        description="Standard chess army with 16 pieces",
        slots=tuple(slots),
        requires_king=True,
    )


def create_classic_setup() -> ClassicSetup:
    units = create_all_unit_definitions()
    return ClassicSetup(
        board=create_classic_board(),
        unit_definitions=units,
        army=create_classic_army(units),
    )


def create_classic_match(
    white: str = "White",
    black: str = "Black",
    rules: RulesConfig = DEFAULT_RULES,
) -> GameState:
    """A classic match initialized and ready for white's first move."""
    setup = create_classic_setup()
    state = GameState(rules=rules)
    state.initialize(
        setup.board,
        [PlayerSetup(white, setup.army), PlayerSetup(black, setup.army)],
        ArmyRestrictions.classic(),
    )
    return state
