"""
Pytest fixtures for Tactica tests.
"""

import pytest
from typing import Callable

from ..cli import parse_square
from ..config import RulesConfig, DEFAULT_RULES
from ..engine_core.graph import BoardGraph
from ..engine_core.state import GameState, GamePhase, PlayerState
from ..engine_core.units import UnitState
from ..engine_core.validator import MoveValidator
from ..games.classic import create_classic_board, create_all_unit_definitions, create_classic_match
from ..spec_schema.board_spec import BoardDefinition
from ..spec_schema.unit_spec import UnitDefinition


def sq(name: str) -> int:
    """Node id of an algebraic square on the 8x8 board."""
    return parse_square(name)


def build_match(
    placements: list[tuple[UnitDefinition, int, int]],
    board: BoardDefinition | None = None,
    rules: RulesConfig = DEFAULT_RULES,
    current_player: int = 0,
) -> GameState:
    """
    A two-player match in PLAYING with units at arbitrary nodes.

    placements: (definition, owner, node) per unit; unit ids follow list order.
    """
    board = board or create_classic_board()
    graph = BoardGraph(board)
    units = [
        UnitState.create(unit_id, definition, owner, node)
        for unit_id, (definition, owner, node) in enumerate(placements)
    ]
    definitions = {u.definition_id: u.definition for u in units}
    fielded_king = {owner for definition, owner, _ in placements if definition.is_king}
    return GameState(
        rules=rules,
        match_id="test-match",
        phase=GamePhase.PLAYING,
        turn_number=1,
        current_player_index=current_player,
        board_definition=board,
        graph=graph,
        validator=MoveValidator(graph, definitions),
        players=[
            PlayerState(player_id=0, display_name="White", army_has_king=0 in fielded_king, is_ready=True),
            PlayerState(player_id=1, display_name="Black", army_has_king=1 in fielded_king, is_ready=True),
        ],
        units=units,
        unit_definitions=definitions,
    )


@pytest.fixture
def defs() -> dict[str, UnitDefinition]:
    """Classic unit definitions keyed by unit id."""
    return create_all_unit_definitions()


@pytest.fixture
def classic_board() -> BoardDefinition:
    return create_classic_board()


@pytest.fixture
def graph(classic_board: BoardDefinition) -> BoardGraph:
    """Fresh runtime graph over the classic board."""
    return BoardGraph(classic_board)


@pytest.fixture
def classic_match() -> GameState:
    """A classic match at white's first move."""
    return create_classic_match()


@pytest.fixture
def make_match() -> Callable[..., GameState]:
    """Factory for matches with hand-placed units."""
    return build_match


@pytest.fixture
def manual_rules() -> RulesConfig:
    """Rules without automatic turn ending, for multi-step scenarios."""
    return RulesConfig(auto_end_turn=False)
