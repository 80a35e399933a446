"""
API Service - Business logic layer between hosts and the engine.

The service:
1. Translates requests into engine commands
2. Manages sessions
3. Formats results and snapshots as pydantic models

This layer is framework-agnostic (used by the FastAPI adapter in app.py
and directly by tests and embedding hosts).
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..engine_core.action import Action, ActionResult
from ..engine_core.events import event_to_dict
from ..engine_core.state import GameState, PlayerSetup
from ..errors import SessionNotFoundError
from ..games.classic import create_classic_setup
from ..session import SessionManager, Session
from ..spec_schema.army_spec import ArmyRestrictions
from ..spec_schema.loader import parse_board
from .schemas import (
    # Requests
    CreateMatchRequest,
    MoveRequest,
    AttackRequest,
    PlaceUnitRequest,
    PlayerRequest,
    # Responses
    CommandResponse,
    MatchSnapshot,
    LegalMovesResponse,
    SessionListResponse,
    # Shared
    EventInfo,
    NodeInfo,
    PlayerInfo,
    UnitInfo,
    # Enums
    ErrorCode,
    MatchPhase,
)


@dataclass
class MatchService:
    """
    Command and query surface for hosts.

    Usage:
        service = MatchService()

        snapshot = service.create_match(CreateMatchRequest())
        response = service.request_move(snapshot.session_id, MoveRequest(...))
        if response.accepted: ...
    """
    session_manager: SessionManager = field(default_factory=SessionManager)

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_match(self, request: CreateMatchRequest) -> MatchSnapshot:
        """
        Initialize a match and return its first snapshot.

        Raises TopologyError for a board the armies do not fit.
        """
        setup = create_classic_setup()
        board = parse_board(request.board) if request.board is not None else setup.board
        setups = [PlayerSetup(name, setup.army) for name in request.player_names]

        session = self.session_manager.create_session(board, setups, ArmyRestrictions.classic())
        return self.get_snapshot(session.session_id)

    def get_session(self, session_id: str) -> Session:
        session = self.session_manager.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def end_session(self, session_id: str) -> bool:
        return self.session_manager.end_session(session_id) is not None

    def list_sessions(self) -> SessionListResponse:
        sessions = self.session_manager.list_active_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    # =========================================================================
    # Commands
    # =========================================================================

    def request_move(self, session_id: str, request: MoveRequest) -> CommandResponse:
        action = Action.move(request.requester_id, request.unit_id, request.target_node)
        return self._submit(session_id, action)

    def request_attack(self, session_id: str, request: AttackRequest) -> CommandResponse:
        action = Action.attack(request.requester_id, request.attacker_id, request.target_unit_id)
        return self._submit(session_id, action)

    def request_end_turn(self, session_id: str, request: PlayerRequest) -> CommandResponse:
        return self._submit(session_id, Action.end_turn(request.requester_id))

    def request_resign(self, session_id: str, request: PlayerRequest) -> CommandResponse:
        return self._submit(session_id, Action.resign(request.requester_id))

    def request_place_unit(self, session_id: str, request: PlaceUnitRequest) -> CommandResponse:
        action = Action.place_unit(request.requester_id, request.unit_id, request.node_id)
        return self._submit(session_id, action)

    def request_finish_placement(self, session_id: str, request: PlayerRequest) -> CommandResponse:
        return self._submit(session_id, Action.finish_placement(request.requester_id))

    def _submit(self, session_id: str, action: Action) -> CommandResponse:
        result = self.get_session(session_id).submit(action)
        return self._convert_result(result)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_snapshot(self, session_id: str) -> MatchSnapshot:
        session = self.get_session(session_id)
        return session.read(lambda state: self._convert_state(session_id, state))

    def legal_moves(self, session_id: str, unit_id: int) -> LegalMovesResponse:
        """Legal targets for a unit. Raises StateError for an unknown unit."""
        targets = self.get_session(session_id).legal_moves(unit_id)
        return LegalMovesResponse(session_id=session_id, unit_id=unit_id, targets=sorted(targets))

    # =========================================================================
    # Conversion Helpers
    # =========================================================================

    @staticmethod
    def _convert_result(result: ActionResult) -> CommandResponse:
        events = []
        for event in result.events:
            data = event_to_dict(event)
            name = data.pop("event")
            events.append(EventInfo(event=name, data=data))

        return CommandResponse(
            accepted=result.accepted,
            reason=result.reason,
            error_code=ErrorCode.from_code(result.error_code),
            captured_unit_id=result.captured_unit_id,
            phase_after=MatchPhase(result.phase_after) if result.phase_after else None,
            winner_id=result.winner_id,
            events=events,
        )

    @staticmethod
    def _convert_state(session_id: str, state: GameState) -> MatchSnapshot:
        board = state.board_definition
        graph = state.graph

        nodes = []
        for node in graph.state.nodes:
            x, y = board.get_coordinates(node.id)
            nodes.append(NodeInfo(
                node_id=node.id,
                x=x,
                y=y,
                node_type=node.current_type.value,
                active=node.active,
                is_light=board.get_node(node.id).is_light,
                teleport_target=node.teleport_target,
                effect_duration=node.effect_duration,
            ))

        units = [
            UnitInfo(
                unit_id=u.unit_id,
                definition_id=u.definition_id,
                display_name=u.definition.display_name or u.definition_id,
                piece_type=u.definition.piece_type.value,
                glyph=u.definition.glyph(u.owner_id),
                owner_id=u.owner_id,
                node_id=u.node_id,
                level=u.level,
                experience=u.experience,
                current_health=u.current_health,
                max_health=u.max_health,
                attack=u.attack,
                defense=u.defense,
                speed=u.speed,
                range=u.range,
                alive=u.alive,
                has_moved_this_turn=u.has_moved_this_turn,
                modifier_count=len(u.active_modifiers),
            )
            for u in state.units
        ]

        players = [
            PlayerInfo(
                player_id=p.player_id,
                display_name=p.display_name,
                army_id=p.army_id,
                is_current_turn=p.player_id == state.current_player_id,
                is_ready=p.is_ready,
                alive_units=len(state.player_units(p.player_id)),
            )
            for p in state.players
        ]

        return MatchSnapshot(
            session_id=session_id,
            match_id=state.match_id,
            board_id=board.board_id,
            width=board.width,
            height=board.height,
            phase=MatchPhase(state.phase.value),
            turn_number=state.turn_number,
            current_player_id=state.current_player_id,
            winner_id=state.winner_id,
            end_reason=state.end_reason.value,
            players=players,
            units=units,
            nodes=nodes,
        )
