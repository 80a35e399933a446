"""
Session Manager - Creates and manages match sessions.

CONCURRENCY (single writer):
- Each Session owns one GameState and one re-entrant lock
- Every command (submit) and every read (snapshot, legal moves) takes
  the lock, so a reader never sees a check simulation mid-flight
- Subscribers are called under the lock, in event order; they must not
  block and must not submit commands from another thread

LIFECYCLE:
1. Host creates a session from a board and player setups
2. Commands are submitted until the match phase is ENDED
3. Host ends the session; it is dropped from memory
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable
import logging
import threading
import time
import uuid

from ..config import RulesConfig, DEFAULT_RULES
from ..engine_core.action import Action, ActionResult
from ..engine_core.events import MatchEvent
from ..engine_core.reducer import Reducer
from ..engine_core.state import GameState, GamePhase, GameEndReason, PlayerSetup
from ..spec_schema.army_spec import ArmyDefinition, ArmyRestrictions
from ..spec_schema.board_spec import BoardDefinition

logger = logging.getLogger(__name__)


EventCallback = Callable[[MatchEvent], None]


class SessionStatus(Enum):
    """State of a session."""
    ACTIVE = "active"  # Match in placement or play
    FINISHED = "finished"  # Match phase is ENDED
    ABANDONED = "abandoned"  # Host ended it early


@dataclass
class Session:
    """
    One live match.

    All access to game_state goes through the methods below.
    """
    session_id: str
    game_state: GameState
    created_at: float
    reducer: Reducer = field(default_factory=Reducer)
    status: SessionStatus = SessionStatus.ACTIVE

    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)
    _subscribers: list[EventCallback] = field(default_factory=list, repr=False, compare=False)

    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    def submit(self, action: Action) -> ActionResult:
        """Apply a command and deliver its events to subscribers."""
        with self._lock:
            result = self.reducer.apply(self.game_state, action)
            if self.game_state.phase == GamePhase.ENDED and self.status == SessionStatus.ACTIVE:
                self.status = SessionStatus.FINISHED
            for event in result.events:
                for callback in list(self._subscribers):
                    callback(event)
            return result

    def force_end(self, reason: GameEndReason, winner_id: int | None = None) -> list[MatchEvent]:
        """Host hook for timeouts and disconnects. Returns emitted events."""
        with self._lock:
            self.game_state.force_end(reason, winner_id)
            events = self.game_state.drain_events()
            if self.status == SessionStatus.ACTIVE:
                self.status = SessionStatus.FINISHED
            for event in events:
                for callback in list(self._subscribers):
                    callback(event)
            return events

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return self.game_state.snapshot()

    def legal_moves(self, unit_id: int) -> list[int]:
        with self._lock:
            return self.game_state.legal_moves(unit_id)

    def legal_moves_for_player(self, player_id: int) -> dict[int, list[int]]:
        with self._lock:
            state = self.game_state
            return state.validator.legal_moves_for_player(player_id, state.units)

    def read(self, fn: Callable[[GameState], Any]) -> Any:
        """Run an arbitrary read-only query under the session lock."""
        with self._lock:
            return fn(self.game_state)

    def subscribe(self, callback: EventCallback) -> Callable[[], None]:
        """Register an event callback. Returns a function that unsubscribes it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe


class SessionManager:
    """
    Manages match sessions.

    Responsibilities:
    - Create sessions (initializing their matches)
    - Track live sessions
    - Clean up finished sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, rules: RulesConfig = DEFAULT_RULES):
        self.rules = rules
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def create_session(
        self,
        board: BoardDefinition,
        setups: list[PlayerSetup],
        restrictions: ArmyRestrictions | None = None,
        rules: RulesConfig | None = None,
    ) -> Session:
        """
        Create a session with an initialized match.

        Raises TopologyError if the board or armies are invalid; nothing
        is registered in that case.
        """
        state = GameState(rules=rules or self.rules)
        state.initialize(board, setups, restrictions)

        session = Session(
            session_id=str(uuid.uuid4()),
            game_state=state,
            created_at=time.time(),
        )
        with self._lock:
            self._sessions[session.session_id] = session
        logger.info("Session %s created for match %s", session.session_id, state.match_id)
        return session

    def create_classic_session(self, white: str = "White", black: str = "Black") -> Session:
        """Session for a classic chess match."""
        from ..games.classic import create_classic_setup

        setup = create_classic_setup()
        army: ArmyDefinition = setup.army
        return self.create_session(
            setup.board,
            [PlayerSetup(white, army), PlayerSetup(black, army)],
            ArmyRestrictions.classic(),
        )

    def get_session(self, session_id: str) -> Session | None:
        with self._lock:
            return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> Session | None:
        """
        Remove a session.

        A match still in progress is marked ABANDONED.
        """
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is not None:
            if session.is_active():
                session.status = SessionStatus.ABANDONED
            logger.info("Session %s ended (%s)", session_id, session.status.value)
        return session

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions with a match still in progress."""
        with self._lock:
            return [sid for sid, s in self._sessions.items() if s.is_active()]

    def cleanup_finished_sessions(self, max_age_seconds: int = 3600) -> list[str]:
        """Drop finished sessions older than max_age. Returns removed ids."""
        now = time.time()
        with self._lock:
            stale = [
                sid for sid, s in self._sessions.items()
                if not s.is_active() and now - s.created_at > max_age_seconds
            ]
        for sid in stale:
            self.end_session(sid)
        return stale
