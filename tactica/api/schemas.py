"""
Pydantic Schemas for API - Request/response models for hosts.

These models define the contract between a host (game client, server
adapter, CLI) and the engine. Every command response has the same shape:
{accepted, reason?, capturedUnitId?, phaseAfter, winnerId?} plus events.

Error Codes:
- INVALID_ACTION: wrong phase or not the requester's turn
- VALIDATION_ERROR: the rules rejected the move/attack/placement
- STATE_ERROR: unknown unit or definition id (a host bug)
- TOPOLOGY_ERROR: board or armies failed validation at match creation
- SESSION_NOT_FOUND: session does not exist or has ended
"""

from enum import Enum
from typing import Literal, Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class MatchPhase(str, Enum):
    """Match phase values."""
    SETUP = "setup"
    PLACEMENT = "placement"
    PLAYING = "playing"
    ENDED = "ended"


class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_ACTION = "INVALID_ACTION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    STATE_ERROR = "STATE_ERROR"
    TOPOLOGY_ERROR = "TOPOLOGY_ERROR"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    NO_HANDLER = "NO_HANDLER"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @classmethod
    def from_code(cls, code: Optional[str]) -> Optional["ErrorCode"]:
        """Map an engine error code string, unknown codes to INTERNAL_ERROR."""
        if code is None:
            return None
        try:
            return cls(code)
        except ValueError:
            return cls.INTERNAL_ERROR


# =============================================================================
# Shared Models
# =============================================================================

class NodeInfo(BaseModel):
    """A board node for display."""
    node_id: int
    x: int
    y: int
    node_type: str = Field(description="normal, impassable, boost, teleport, trap, destroyed, unstable")
    active: bool = True
    is_light: bool = True
    teleport_target: int = -1
    effect_duration: int = -1


class UnitInfo(BaseModel):
    """A unit for display."""
    unit_id: int
    definition_id: str
    display_name: str
    piece_type: str
    glyph: str
    owner_id: int
    node_id: int
    level: int = 1
    experience: int = 0
    current_health: int
    max_health: int
    attack: int
    defense: int
    speed: int
    range: int
    alive: bool = True
    has_moved_this_turn: bool = False
    modifier_count: int = 0


class PlayerInfo(BaseModel):
    """A seated player."""
    player_id: int
    display_name: str
    army_id: str = ""
    is_current_turn: bool = False
    is_ready: bool = True
    alive_units: int = 0


class EventInfo(BaseModel):
    """An event emitted by an accepted command."""
    event: str = Field(description="UnitMoved, UnitCaptured, TurnChanged, GameEnded")
    data: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Request Models
# =============================================================================

class CreateMatchRequest(BaseModel):
    """Request to start a match."""
    game_type: Literal["classic"] = Field("classic", description="Built-in game type")
    player_names: list[str] = Field(
        default_factory=lambda: ["White", "Black"],
        min_length=2,
        description="Display name per seat, seat 0 moves first",
    )
    board: Optional[dict[str, Any]] = Field(
        None, description="Optional JSON board document replacing the built-in board"
    )


class MoveRequest(BaseModel):
    """Request to move a unit."""
    requester_id: int = Field(..., ge=0)
    unit_id: int = Field(..., ge=0)
    target_node: int


class AttackRequest(BaseModel):
    """Request to attack a unit in range."""
    requester_id: int = Field(..., ge=0)
    attacker_id: int = Field(..., ge=0)
    target_unit_id: int = Field(..., ge=0)


class PlaceUnitRequest(BaseModel):
    """Request to place a unit during the placement phase."""
    requester_id: int = Field(..., ge=0)
    unit_id: int = Field(..., ge=0)
    node_id: int = Field(..., ge=0)


class PlayerRequest(BaseModel):
    """Request carrying only the requester (end turn, resign, finish placement)."""
    requester_id: int = Field(..., ge=0)


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class CommandResponse(BaseModel):
    """Outcome of a command."""
    accepted: bool
    reason: Optional[str] = None
    error_code: Optional[ErrorCode] = None
    captured_unit_id: Optional[int] = None
    phase_after: Optional[MatchPhase] = None
    winner_id: Optional[int] = None
    events: list[EventInfo] = Field(default_factory=list)
    api_version: str = "v1"


class MatchSnapshot(BaseModel):
    """Complete match state for display."""
    session_id: str
    match_id: str
    board_id: str
    width: int
    height: int
    phase: MatchPhase
    turn_number: int
    current_player_id: Optional[int] = None
    winner_id: Optional[int] = None
    end_reason: str = "none"
    players: list[PlayerInfo] = Field(default_factory=list)
    units: list[UnitInfo] = Field(default_factory=list)
    nodes: list[NodeInfo] = Field(default_factory=list)
    api_version: str = "v1"


class LegalMovesResponse(BaseModel):
    """Legal targets for one unit."""
    session_id: str
    unit_id: int
    targets: list[int] = Field(default_factory=list)


class SessionListResponse(BaseModel):
    """Response listing live sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
