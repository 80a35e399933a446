"""
Classic piece definitions.

Movement is pure data: each piece is a tuple of MovementPatterns. Stats
follow the classic RPG balance (kings are tough, queens hit hard, pawns
grow fastest in health).
"""

from __future__ import annotations

from ...spec_schema.unit_spec import (
    UnitDefinition,
    UnitBaseStats,
    UnitGrowthStats,
    MovementPattern,
    MovementKind,
    PieceType,
)


def create_king_definition() -> UnitDefinition:
    return UnitDefinition(
        unit_id="King",
        display_name="King",
        piece_type=PieceType.KING,
        base_stats=UnitBaseStats(health=100, attack=5, defense=5, speed=3, range=1, movement=1),
        movement_patterns=(MovementPattern(MovementKind.ADJACENT, max_distance=1),),
        is_king=True,
        can_castle=True,
        base_cost=0,  # Required, never bought
    )


def create_queen_definition() -> UnitDefinition:
    return UnitDefinition(
        unit_id="Queen",
        display_name="Queen",
        piece_type=PieceType.QUEEN,
        base_stats=UnitBaseStats(health=50, attack=15, defense=3, speed=8, range=1, movement=8),
        growth_stats=UnitGrowthStats(health_per_level=5, attack_per_level=2, defense_per_level=1),
        movement_patterns=(
            MovementPattern(MovementKind.ORTHOGONAL),
            MovementPattern(MovementKind.DIAGONAL),
        ),
        base_cost=9,
    )


def create_rook_definition() -> UnitDefinition:
    return UnitDefinition(
        unit_id="Rook",
        display_name="Rook",
        piece_type=PieceType.ROOK,
        base_stats=UnitBaseStats(health=60, attack=10, defense=5, speed=5, range=1, movement=8),
        movement_patterns=(MovementPattern(MovementKind.ORTHOGONAL),),
        can_castle=True,
        base_cost=5,
    )


def create_bishop_definition() -> UnitDefinition:
    return UnitDefinition(
        unit_id="Bishop",
        display_name="Bishop",
        piece_type=PieceType.BISHOP,
        base_stats=UnitBaseStats(health=40, attack=8, defense=2, speed=6, range=1, movement=8),
        movement_patterns=(MovementPattern(MovementKind.DIAGONAL),),
        base_cost=3,
    )


def create_knight_definition() -> UnitDefinition:
    return UnitDefinition(
        unit_id="Knight",
        display_name="Knight",
        piece_type=PieceType.KNIGHT,
        base_stats=UnitBaseStats(health=45, attack=8, defense=3, speed=7, range=1, movement=1),
        movement_patterns=(MovementPattern(MovementKind.KNIGHT, can_jump=True),),
        base_cost=3,
    )


def create_pawn_definition() -> UnitDefinition:
    return UnitDefinition(
        unit_id="Pawn",
        display_name="Pawn",
        piece_type=PieceType.PAWN,
        base_stats=UnitBaseStats(health=20, attack=5, defense=1, speed=4, range=1, movement=1),
        growth_stats=UnitGrowthStats(health_per_level=3, attack_per_level=1, defense_per_level=1),
        movement_patterns=(
            MovementPattern(MovementKind.FORWARD, max_distance=1, move_only=True),
            MovementPattern(MovementKind.FORWARD, max_distance=2, move_only=True, first_move_only=True),
            MovementPattern(MovementKind.DIAGONAL_CAPTURE, capture_only=True),
        ),
        can_promote=True,
        can_en_passant=True,
        promotion_row=7,  # Relative to the owner's side
        base_cost=1,
    )


def create_all_unit_definitions() -> dict[str, UnitDefinition]:
    """All classic definitions keyed by unit id."""
    definitions = [
        create_king_definition(),
        create_queen_definition(),
        create_rook_definition(),
        create_bishop_definition(),
        create_knight_definition(),
        create_pawn_definition(),
    ]
    return {d.unit_id: d for d in definitions}
