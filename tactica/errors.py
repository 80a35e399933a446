"""
Error taxonomy for the engine.

- ValidationError: an illegal move/attack/turn-order request. Recoverable.
  Returned as a rejection; never applied partially.
- StateError: a reference to an unknown unit or definition id. A host bug,
  surfaced to logs.
- TopologyError: a board or army that does not fit the board graph. Raised
  at load time, before a match is committed.
- SessionNotFoundError: a host addressed a session that does not exist.
"""

from __future__ import annotations


class TacticaError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__

    def __str__(self):
        return f"[{self.error_code}] {self.message}"


class ValidationError(TacticaError):
    """An action was rejected by the rules."""

    def __init__(self, reason: str):
        super().__init__(reason, "VALIDATION_ERROR")
        self.reason = reason


class StateError(TacticaError):
    """A unit or definition id does not exist in this match."""

    def __init__(self, message: str):
        super().__init__(message, "STATE_ERROR")


class TopologyError(TacticaError):
    """Board or army data does not match the board graph."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(
            f"Topology validation failed with {len(errors)} error(s)",
            "TOPOLOGY_ERROR",
        )


class SessionNotFoundError(TacticaError):
    """No live session has this id."""

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} not found", "SESSION_NOT_FOUND")
        self.session_id = session_id
