"""
Tests for movement pattern evaluation.

Tests:
- Ray patterns (orthogonal, diagonal) and occupancy
- Knight jumps and blocked legs
- Adjacent, forward and diagonal-capture patterns
- Pattern composition per unit definition
"""

import pytest

from ..engine_core import movement
from ..engine_core.movement import evaluate_pattern, legal_targets, forward_direction
from ..errors import StateError
from ..spec_schema.board_spec import NodeType
from ..spec_schema.unit_spec import MovementPattern, MovementKind, UnitDefinition
from .conftest import sq


ORTHOGONAL = MovementPattern(MovementKind.ORTHOGONAL)
DIAGONAL = MovementPattern(MovementKind.DIAGONAL)
KNIGHT_JUMP = MovementPattern(MovementKind.KNIGHT, can_jump=True)
KNIGHT_WALK = MovementPattern(MovementKind.KNIGHT, can_jump=False)


def squares(*names):
    return sorted(sq(n) for n in names)


class TestRays:
    """Tests for orthogonal and diagonal rays."""

    def test_isolated_queen_on_d1(self, graph, defs):
        """Queen on d1 of an empty 8x8 board reaches 14 + 7 nodes."""
        targets = legal_targets(defs["Queen"], graph, sq("d1"), 0, {})

        assert len(targets) == 21
        expected = set(graph.get_orthogonal_nodes(sq("d1"))) | set(graph.get_diagonal_nodes(sq("d1")))
        assert set(targets) == expected

    def test_ray_stops_at_enemy_including_it(self, graph):
        occupants = {sq("a4"): 1}
        targets = evaluate_pattern(ORTHOGONAL, graph, sq("a1"), 0, occupants)

        assert sq("a4") in targets
        assert sq("a5") not in targets
        assert sq("a3") in targets

    def test_ray_stops_before_friend(self, graph):
        occupants = {sq("d1"): 0}
        targets = evaluate_pattern(ORTHOGONAL, graph, sq("a1"), 0, occupants)

        assert sq("c1") in targets
        assert sq("d1") not in targets
        assert sq("e1") not in targets

    def test_mixed_blockers(self, graph):
        occupants = {sq("a4"): 1, sq("d1"): 0}
        targets = evaluate_pattern(ORTHOGONAL, graph, sq("a1"), 0, occupants)

        assert sorted(targets) == squares("a2", "a3", "a4", "b1", "c1")

    def test_max_distance(self, graph):
        pattern = MovementPattern(MovementKind.DIAGONAL, max_distance=1)
        targets = evaluate_pattern(pattern, graph, sq("d4"), 0, {})
        assert sorted(targets) == squares("c3", "e3", "c5", "e5")

    def test_move_only_ray_excludes_enemy(self, graph):
        pattern = MovementPattern(MovementKind.ORTHOGONAL, move_only=True)
        targets = evaluate_pattern(pattern, graph, sq("a1"), 0, {sq("a3"): 1})

        assert sq("a2") in targets
        assert sq("a3") not in targets

    def test_capture_only_ray_only_enemy(self, graph):
        pattern = MovementPattern(MovementKind.DIAGONAL, capture_only=True)
        targets = evaluate_pattern(pattern, graph, sq("a1"), 0, {sq("d4"): 1})

        assert targets == [sq("d4")]

    def test_ray_stops_at_live_impassable_node(self, graph):
        """Topology changes affect legality immediately."""
        graph.change_node_type(sq("d4"), NodeType.IMPASSABLE)
        targets = evaluate_pattern(DIAGONAL, graph, sq("a1"), 0, {})

        assert sorted(targets) == squares("b2", "c3")

    def test_ray_stops_at_destroyed_node(self, graph):
        graph.destroy_node(sq("a3"), force=True)
        targets = evaluate_pattern(ORTHOGONAL, graph, sq("a1"), 0, {})

        assert sq("a2") in targets
        assert sq("a4") not in targets


class TestKnight:
    """Tests for knight movement."""

    def test_center_knight_has_eight_targets(self, graph):
        assert len(evaluate_pattern(KNIGHT_JUMP, graph, sq("d4"), 0, {})) == 8

    def test_surrounding_units_do_not_matter(self, graph):
        """Filling every non-target cell around d4 leaves a jumping knight unchanged."""
        targets = set(evaluate_pattern(KNIGHT_JUMP, graph, sq("d4"), 0, {}))
        x0, y0 = graph.get_coordinates(sq("d4"))

        occupants = {}
        for dx in range(-2, 3):
            for dy in range(-2, 3):
                node = graph.node_at(x0 + dx, y0 + dy)
                if node is not None and node != sq("d4") and node not in targets:
                    occupants[node] = 1 if (dx + dy) % 2 else 0

        assert set(evaluate_pattern(KNIGHT_JUMP, graph, sq("d4"), 0, occupants)) == targets

    def test_friendly_target_excluded_enemy_included(self, graph):
        occupants = {sq("c3"): 0, sq("a3"): 1}
        targets = evaluate_pattern(KNIGHT_JUMP, graph, sq("b1"), 0, occupants)

        assert sorted(targets) == squares("a3", "d2")

    def test_non_jumping_knight_needs_open_leg(self, graph):
        """Without jumping, the first orthogonal step of the L must be open."""
        assert len(evaluate_pattern(KNIGHT_WALK, graph, sq("d4"), 0, {})) == 8

        # d5 is the leg for the two upward L moves
        targets = evaluate_pattern(KNIGHT_WALK, graph, sq("d4"), 0, {sq("d5"): 0})

        assert sq("c6") not in targets
        assert sq("e6") not in targets
        assert len(targets) == 6

    def test_knight_on_impassable_target(self, graph):
        graph.change_node_type(sq("c3"), NodeType.IMPASSABLE)
        targets = evaluate_pattern(KNIGHT_JUMP, graph, sq("b1"), 0, {})
        assert sorted(targets) == squares("a3", "d2")


class TestAdjacent:
    """Tests for single-step adjacent movement."""

    def test_corner(self, graph):
        pattern = MovementPattern(MovementKind.ADJACENT, max_distance=1)
        targets = evaluate_pattern(pattern, graph, sq("a1"), 0, {sq("b1"): 0, sq("b2"): 1})

        assert sorted(targets) == squares("a2", "b2")


class TestPawnPatterns:
    """Tests for forward and diagonal-capture patterns."""

    def test_forward_direction_per_side(self):
        assert forward_direction(0) == 1
        assert forward_direction(1) == -1

    def test_first_move_double_step(self, graph, defs):
        targets = legal_targets(defs["Pawn"], graph, sq("e2"), 0, {})
        assert sorted(targets) == squares("e3", "e4")

    def test_first_move_only_skipped_after_moving(self, graph, defs):
        targets = legal_targets(defs["Pawn"], graph, sq("e3"), 0, {}, has_ever_moved=True)
        assert targets == [sq("e4")]

    def test_side_one_moves_down(self, graph, defs):
        targets = legal_targets(defs["Pawn"], graph, sq("d7"), 1, {})
        assert sorted(targets) == squares("d5", "d6")

    @pytest.mark.parametrize("owner", [0, 1])
    def test_forward_never_targets_occupied(self, graph, defs, owner):
        targets = legal_targets(defs["Pawn"], graph, sq("e2"), 0, {sq("e4"): owner})
        assert targets == [sq("e3")]

        targets = legal_targets(defs["Pawn"], graph, sq("e2"), 0, {sq("e3"): owner})
        assert targets == []

    def test_diagonal_capture_only_enemies(self, graph):
        pattern = MovementPattern(MovementKind.DIAGONAL_CAPTURE, capture_only=True)

        assert evaluate_pattern(pattern, graph, sq("e4"), 0, {}) == []
        targets = evaluate_pattern(pattern, graph, sq("e4"), 0, {sq("d5"): 1, sq("f5"): 0})
        assert targets == [sq("d5")]

    def test_diagonal_capture_side_one(self, graph):
        pattern = MovementPattern(MovementKind.DIAGONAL_CAPTURE, capture_only=True)
        targets = evaluate_pattern(pattern, graph, sq("e5"), 1, {sq("d4"): 0, sq("f6"): 0})
        assert targets == [sq("d4")]

    def test_pawn_on_edge_file(self, graph, defs):
        targets = legal_targets(defs["Pawn"], graph, sq("a2"), 0, {sq("b3"): 1})
        assert sorted(targets) == squares("a3", "a4", "b3")


class TestComposition:
    """Tests for the union over a definition's patterns."""

    def test_union_is_deduplicated(self, graph):
        definition = UnitDefinition(
            unit_id="Doubled",
            movement_patterns=(ORTHOGONAL, MovementPattern(MovementKind.ORTHOGONAL, max_distance=2)),
        )
        targets = legal_targets(definition, graph, sq("d4"), 0, {})

        assert len(targets) == len(set(targets)) == 14

    def test_custom_piece_from_data(self, graph):
        """A new piece is just a new pattern tuple."""
        amazon = UnitDefinition(unit_id="Amazon", movement_patterns=(ORTHOGONAL, DIAGONAL, KNIGHT_JUMP))
        targets = legal_targets(amazon, graph, sq("d4"), 0, {})

        assert len(targets) == 14 + 13 + 8

    def test_unknown_kind_raises_state_error(self, graph, monkeypatch):
        monkeypatch.delitem(movement._EVALUATORS, MovementKind.KNIGHT)
        with pytest.raises(StateError):
            evaluate_pattern(KNIGHT_JUMP, graph, sq("d4"), 0, {})
