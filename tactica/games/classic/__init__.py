"""
Classic Chess - The reference rule set.

An 8x8 board with 8-way connectivity, the six standard pieces expressed
as movement patterns, and the standard 16-piece army. Pieces also carry
RPG stats, so the same setup exercises levelling and combat.

This module contains:
- The classic board (spawn zones on rows 0-1 and 6-7)
- King, Queen, Rook, Bishop, Knight and Pawn definitions
- The classic army and a two-player match setup
"""

from .board import create_classic_board, BOARD_ID
from .units import (
    create_king_definition,
    create_queen_definition,
    create_rook_definition,
    create_bishop_definition,
    create_knight_definition,
    create_pawn_definition,
    create_all_unit_definitions,
)
from .setup import ClassicSetup, create_classic_army, create_classic_setup, create_classic_match

__all__ = [
    "create_classic_board",
    "BOARD_ID",
    "create_king_definition",
    "create_queen_definition",
    "create_rook_definition",
    "create_bishop_definition",
    "create_knight_definition",
    "create_pawn_definition",
    "create_all_unit_definitions",
    "ClassicSetup",
    "create_classic_army",
    "create_classic_setup",
    "create_classic_match",
]
