"""
Session Module - Owns live matches.

A session represents one match:
- Created when a host starts a match
- Holds the authoritative GameState and the reducer
- Serializes every command and read behind one lock
- Removed when the host ends it

Sessions are in-memory only. Reporting results to a persistence
collaborator is the host's job.
"""

from .manager import SessionManager, Session, SessionStatus

__all__ = [
    "SessionManager",
    "Session",
    "SessionStatus",
]
