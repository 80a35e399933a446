"""
FastAPI Application - HTTP adapter over MatchService.

Endpoints:
    POST   /api/v1/matches                          Create a match
    GET    /api/v1/matches                          List live matches
    GET    /api/v1/matches/{id}                     Match snapshot
    DELETE /api/v1/matches/{id}                     End a match session
    GET    /api/v1/matches/{id}/units/{uid}/moves   Legal targets of a unit
    POST   /api/v1/matches/{id}/move                Move a unit
    POST   /api/v1/matches/{id}/attack              Attack a unit in range
    POST   /api/v1/matches/{id}/end-turn            End the current turn
    POST   /api/v1/matches/{id}/resign              Resign
    POST   /api/v1/matches/{id}/place               Place a unit (manual boards)
    POST   /api/v1/matches/{id}/finish-placement    Finish placement

Rule rejections are normal 200 responses with accepted=false. Engine
errors (unknown session/unit, invalid board) map to ErrorResponse.

Handlers are plain functions: FastAPI runs them in its threadpool and
each session's lock serializes access to its match.

Run with: uvicorn tactica.api.app:create_app --factory
"""

from typing import Optional
import os

from ..errors import TacticaError

# Environment configuration
TACTICA_ENV = os.getenv("TACTICA_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

API_VERSION = "0.1.0"

ERROR_STATUS = {
    "SESSION_NOT_FOUND": 404,
    "STATE_ERROR": 404,
    "TOPOLOGY_ERROR": 400,
    "VALIDATION_ERROR": 400,
}


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional MatchService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Request
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install 'tactica[api]'"
        )

    from .service import MatchService
    from .schemas import (
        # Request models
        CreateMatchRequest,
        MoveRequest,
        AttackRequest,
        PlaceUnitRequest,
        PlayerRequest,
        # Response models
        CommandResponse,
        MatchSnapshot,
        LegalMovesResponse,
        SessionListResponse,
        EndSessionResponse,
        ErrorResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Tactica Engine API",
        description="Turn-based tactical board-game rules engine.",
        version=API_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or MatchService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(TacticaError)
    def handle_engine_error(request: Request, exc: TacticaError) -> JSONResponse:
        details = {"errors": exc.errors} if hasattr(exc, "errors") else None
        return make_error_response(
            ErrorCode.from_code(exc.error_code),
            exc.message,
            status_code=ERROR_STATUS.get(exc.error_code, 500),
            details=details,
        )

    # =========================================================================
    # Match Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/matches",
        response_model=MatchSnapshot,
        responses={400: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="Create a match",
    )
    def create_match(request: CreateMatchRequest) -> MatchSnapshot:
        """Initialize a match; player 0 moves first."""
        return api_service.create_match(request)

    @app.get(
        "/api/v1/matches",
        response_model=SessionListResponse,
        tags=["Matches"],
        summary="List live matches",
    )
    def list_matches() -> SessionListResponse:
        return api_service.list_sessions()

    @app.get(
        "/api/v1/matches/{session_id}",
        response_model=MatchSnapshot,
        responses={404: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="Get a match snapshot",
    )
    def get_match(session_id: str) -> MatchSnapshot:
        return api_service.get_snapshot(session_id)

    @app.delete(
        "/api/v1/matches/{session_id}",
        response_model=EndSessionResponse,
        tags=["Matches"],
        summary="End a match session",
    )
    def end_match(session_id: str) -> EndSessionResponse:
        success = api_service.end_session(session_id)
        return EndSessionResponse(success=success, session_id=session_id)

    @app.get(
        "/api/v1/matches/{session_id}/units/{unit_id}/moves",
        response_model=LegalMovesResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Queries"],
        summary="Legal targets of a unit",
    )
    def legal_moves(session_id: str, unit_id: int) -> LegalMovesResponse:
        return api_service.legal_moves(session_id, unit_id)

    # =========================================================================
    # Command Endpoints
    # =========================================================================

    @app.post("/api/v1/matches/{session_id}/move", response_model=CommandResponse, tags=["Commands"])
    def move(session_id: str, request: MoveRequest) -> CommandResponse:
        return api_service.request_move(session_id, request)

    @app.post("/api/v1/matches/{session_id}/attack", response_model=CommandResponse, tags=["Commands"])
    def attack(session_id: str, request: AttackRequest) -> CommandResponse:
        return api_service.request_attack(session_id, request)

    @app.post("/api/v1/matches/{session_id}/end-turn", response_model=CommandResponse, tags=["Commands"])
    def end_turn(session_id: str, request: PlayerRequest) -> CommandResponse:
        return api_service.request_end_turn(session_id, request)

    @app.post("/api/v1/matches/{session_id}/resign", response_model=CommandResponse, tags=["Commands"])
    def resign(session_id: str, request: PlayerRequest) -> CommandResponse:
        return api_service.request_resign(session_id, request)

    @app.post("/api/v1/matches/{session_id}/place", response_model=CommandResponse, tags=["Commands"])
    def place_unit(session_id: str, request: PlaceUnitRequest) -> CommandResponse:
        return api_service.request_place_unit(session_id, request)

    @app.post(
        "/api/v1/matches/{session_id}/finish-placement",
        response_model=CommandResponse,
        tags=["Commands"],
    )
    def finish_placement(session_id: str, request: PlayerRequest) -> CommandResponse:
        return api_service.request_finish_placement(session_id, request)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    def health_check() -> HealthResponse:
        return HealthResponse(status="healthy", service="tactica-engine", version=API_VERSION)

    return app
