"""
API Module - Host interface.

Exposes the engine to hosts through pydantic request/response models.
A host:
1. Creates a match
2. Submits move/attack/end-turn/resign commands for a requester
3. Reads snapshots and legal moves
4. Consumes the events returned with each command

MatchService is framework-agnostic; create_app() wraps it in FastAPI.
"""

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
    EndSessionResponse,
    ErrorResponse,
    HealthResponse,
    # Shared
    EventInfo,
    NodeInfo,
    PlayerInfo,
    UnitInfo,
    # Enums
    ErrorCode,
    MatchPhase,
)
from .service import MatchService
from .app import create_app

__all__ = [
    # Requests
    "CreateMatchRequest",
    "MoveRequest",
    "AttackRequest",
    "PlaceUnitRequest",
    "PlayerRequest",
    # Responses
    "CommandResponse",
    "MatchSnapshot",
    "LegalMovesResponse",
    "SessionListResponse",
    "EndSessionResponse",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "EventInfo",
    "NodeInfo",
    "PlayerInfo",
    "UnitInfo",
    # Enums
    "ErrorCode",
    "MatchPhase",
    # Service
    "MatchService",
    "create_app",
]
