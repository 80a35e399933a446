"""Board, unit and army templates - immutable data authored once per process."""

from .board_spec import (
    BoardDefinition,
    NodeDefinition,
    EdgeDefinition,
    SpawnZone,
    NodeType,
    EdgeType,
    PlacementMode,
    NO_TELEPORT,
)
from .unit_spec import (
    UnitDefinition,
    UnitBaseStats,
    UnitGrowthStats,
    UnitCalculatedStats,
    MovementPattern,
    MovementKind,
    PieceType,
    AbilityUnlock,
)
from .army_spec import ArmyDefinition, ArmySlot, ArmyRestrictions, SlotRow
from .validation import validate_board, validate_match_setup, require_valid, ValidationResult
from .loader import load_board, parse_board

__all__ = [
    "BoardDefinition",
    "NodeDefinition",
    "EdgeDefinition",
    "SpawnZone",
    "NodeType",
    "EdgeType",
    "PlacementMode",
    "NO_TELEPORT",
    "UnitDefinition",
    "UnitBaseStats",
    "UnitGrowthStats",
    "UnitCalculatedStats",
    "MovementPattern",
    "MovementKind",
    "PieceType",
    "AbilityUnlock",
    "ArmyDefinition",
    "ArmySlot",
    "ArmyRestrictions",
    "SlotRow",
    "validate_board",
    "validate_match_setup",
    "require_valid",
    "ValidationResult",
    "load_board",
    "parse_board",
]
