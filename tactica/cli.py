"""
Tactica CLI - Command-line interface for the engine.

Usage:
    tactica validate <board_file>       Validate a JSON board document
    tactica moves <square>              Legal targets of the unit on a square (classic setup)
    tactica demo [moves ...]            Print the classic board, optionally after moves like e2e4
"""

import argparse
import sys

from pydantic import ValidationError as DocumentError

from .logging_setup import setup_logger


FILES = "abcdefgh"


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Tactica - Tactical board-game rules engine",
        prog="tactica",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log engine activity")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    validate_parser = subparsers.add_parser("validate", help="Validate a JSON board document")
    validate_parser.add_argument("board_file", help="Path to board JSON file")

    moves_parser = subparsers.add_parser("moves", help="Legal targets on the classic opening position")
    moves_parser.add_argument("square", help="Square of the unit, e.g. b1")

    demo_parser = subparsers.add_parser("demo", help="Play moves on the classic board and print it")
    demo_parser.add_argument("moves", nargs="*", help="Moves as <from><to>, e.g. e2e4")
    demo_parser.add_argument("--ascii", action="store_true", help="Letters instead of chess glyphs")

    args = parser.parse_args(argv)
    setup_logger(level="DEBUG" if args.verbose else "WARNING")

    if args.command == "validate":
        return cmd_validate(args)
    elif args.command == "moves":
        return cmd_moves(args)
    elif args.command == "demo":
        return cmd_demo(args)
    else:
        parser.print_help()
        return 1


# =============================================================================
# Board text helpers
# =============================================================================

def square_name(node_id: int, width: int = 8) -> str:
    """Algebraic name of a node on an 8-file board, e.g. 12 -> e2."""
    x, y = node_id % width, node_id // width
    return f"{FILES[x]}{y + 1}"


def parse_square(square: str, width: int = 8) -> int:
    """Node id from an algebraic square name."""
    square = square.strip().lower()
    if len(square) != 2 or square[0] not in FILES or not square[1].isdigit():
        raise ValueError(f"Not a square: {square!r}")
    return (int(square[1]) - 1) * width + FILES.index(square[0])


def render_board(state, ascii_only: bool = False) -> str:
    """Text diagram of a match, rank 8 at the top."""
    board = state.board_definition
    lines = []
    for y in reversed(range(board.height)):
        row = []
        for x in range(board.width):
            node_id = board.get_node_id(x, y)
            unit = state.unit_at_node(node_id)
            if unit is not None:
                if ascii_only:
                    letter = unit.definition.letter
                    row.append(letter if unit.owner_id == 0 else letter.lower())
                else:
                    row.append(unit.definition.glyph(unit.owner_id))
            elif not state.graph.is_passable(node_id):
                row.append("#")
            else:
                row.append(".")
        lines.append(f"{y + 1} " + " ".join(row))
    lines.append("  " + " ".join(FILES[:board.width]))
    return "\n".join(lines)


# =============================================================================
# Commands
# =============================================================================

def cmd_validate(args):
    """Validate a board document."""
    from .spec_schema import load_board, validate_board

    print(f"Validating: {args.board_file}")
    try:
        board = load_board(args.board_file)
    except FileNotFoundError:
        print(f"Error: File not found: {args.board_file}")
        return 1
    except (ValueError, DocumentError) as e:
        print(f"Error: Invalid board document: {e}")
        return 1

    result = validate_board(board)
    print(f"Board: {board.board_id} ({board.width}x{board.height}, {board.node_count} nodes)")

    if result.warnings:
        print("\nWarnings:")
        for w in result.warnings:
            print(f"  - {w}")

    if result.errors:
        print("\nErrors:")
        for e in result.errors:
            print(f"  - {e}")
        return 1

    print("Board is valid")
    return 0


def cmd_moves(args):
    """List legal targets of the unit on a square of the opening position."""
    from .games.classic import create_classic_match

    state = create_classic_match()
    try:
        node_id = parse_square(args.square)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    unit = state.unit_at_node(node_id)
    if unit is None:
        print(f"No unit on {args.square}")
        return 1

    targets = sorted(state.legal_moves(unit.unit_id))
    names = ", ".join(square_name(t) for t in targets) or "none"
    print(f"{unit.definition.display_name} on {args.square}: {names}")
    return 0


def cmd_demo(args):
    """Play a move list on the classic board and print the result."""
    from .engine_core.action import Action
    from .engine_core.reducer import Reducer
    from .games.classic import create_classic_match

    state = create_classic_match()
    reducer = Reducer()

    for move in args.moves:
        try:
            from_node, to_node = parse_square(move[:2]), parse_square(move[2:])
        except ValueError as e:
            print(f"Error: {e}")
            return 1

        unit = state.unit_at_node(from_node)
        if unit is None:
            print(f"{move}: no unit on {move[:2]}")
            return 1

        result = reducer.apply(state, Action.move(state.current_player_id, unit.unit_id, to_node))
        if not result.accepted:
            print(f"{move}: rejected ({result.reason})")
            return 1
        print(f"{move}: ok" + (" (capture)" if result.captured_unit_id is not None else ""))

    print(render_board(state, ascii_only=args.ascii))
    if state.is_over:
        winner = state.winner_id
        print(f"Game over: {state.end_reason.value}" + (f", winner {winner}" if winner is not None else ""))
    else:
        print(f"Turn {state.turn_number}, player {state.current_player_id} to move")
    return 0


if __name__ == "__main__":
    sys.exit(main())
