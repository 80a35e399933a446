"""
Rules configuration.

The constants below are the values the classic rule set ships with.
Hosts can override them per match, or through TACTICA_* environment
variables via RulesConfig.from_env().
"""

from __future__ import annotations
from dataclasses import dataclass
import os


# Environment configuration
TACTICA_LOG_LEVEL = os.getenv("TACTICA_LOG_LEVEL", "INFO")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class RulesConfig:
    """
    Tunable rule constants for a match.

    kill_experience: xp granted to a unit that kills or captures another
    trap_damage: fixed damage dealt by Trap nodes (ignores defense)
    boost_attack / boost_turns: timed Attack buff granted by Boost nodes
    auto_end_turn: end the mover's turn automatically after an accepted move
    """
    kill_experience: int = 50
    trap_damage: int = 10
    boost_attack: int = 2
    boost_turns: int = 3
    auto_end_turn: bool = True

    @classmethod
    def from_env(cls) -> RulesConfig:
        """Build a config from TACTICA_* environment variables."""
        defaults = cls()
        return cls(
            kill_experience=_env_int("TACTICA_KILL_XP", defaults.kill_experience),
            trap_damage=_env_int("TACTICA_TRAP_DAMAGE", defaults.trap_damage),
            boost_attack=_env_int("TACTICA_BOOST_ATTACK", defaults.boost_attack),
            boost_turns=_env_int("TACTICA_BOOST_TURNS", defaults.boost_turns),
            auto_end_turn=_env_bool("TACTICA_AUTO_END_TURN", defaults.auto_end_turn),
        )


DEFAULT_RULES = RulesConfig()
