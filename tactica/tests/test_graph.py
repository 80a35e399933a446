"""
Tests for the board graph.

Tests:
- Materializing runtime state from a template
- Passability and node mutations
- Edge directionality and lazy adjacency
- Pathfinding, ranges and rays
- Unstable node collapse
"""

import pytest

from ..engine_core.graph import BoardGraph, BoardState
from ..spec_schema.board_spec import (
    BoardDefinition,
    NodeDefinition,
    EdgeDefinition,
    NodeType,
    EdgeType,
)
from ..spec_schema.grid import grid_nodes
from .conftest import sq


def line_board(edges, length=3) -> BoardDefinition:
    """A 1-row board with explicit edges."""
    return BoardDefinition(
        board_id="line",
        nodes=tuple(grid_nodes(length, 1)),
        edges=tuple(edges),
        width=length,
        height=1,
    )


class TestInitialState:
    """Tests for BoardDefinition.create_initial_state."""

    def test_classic_board_materializes(self, classic_board):
        """Every template node and edge gets runtime state."""
        state = classic_board.create_initial_state()

        assert isinstance(state, BoardState)
        assert len(state.nodes) == 64
        # 56 horizontal + 56 vertical + 2 * 49 diagonal
        assert len(state.edges) == 210
        assert all(n.is_passable for n in state.nodes)

    def test_each_match_gets_fresh_state(self, classic_board):
        """Mutating one runtime board does not touch another."""
        a = BoardGraph(classic_board)
        b = BoardGraph(classic_board)

        a.destroy_node(sq("e4"), force=True)

        assert not a.is_passable(sq("e4"))
        assert b.is_passable(sq("e4"))

    def test_node_types_and_teleports_copied(self):
        board = BoardDefinition(
            board_id="special",
            nodes=(
                NodeDefinition(0),
                NodeDefinition(1, initial_type=NodeType.TELEPORT, teleport_target=0),
            ),
            edges=(EdgeDefinition(0, 1),),
            width=2,
            height=1,
        )
        node = board.create_initial_state().get_node(1)

        assert node.current_type == NodeType.TELEPORT
        assert node.teleport_target == 0


class TestPassability:
    """Tests for node passability and mutation."""

    def test_out_of_range_is_not_passable(self, graph):
        assert not graph.is_passable(-1)
        assert not graph.is_passable(64)

    def test_destroy_requires_destructible_flag(self, graph):
        """Template nodes are indestructible unless forced."""
        assert graph.destroy_node(sq("d4")) is False
        assert graph.is_passable(sq("d4"))

        assert graph.destroy_node(sq("d4"), force=True) is True
        node = graph.get_node(sq("d4"))
        assert node.current_type == NodeType.DESTROYED
        assert not node.active
        assert not graph.is_passable(sq("d4"))

    def test_destructible_node(self):
        board = BoardDefinition(
            board_id="fragile",
            nodes=(NodeDefinition(0), NodeDefinition(1, destructible=True)),
            edges=(EdgeDefinition(0, 1),),
            width=2,
            height=1,
        )
        graph = BoardGraph(board)

        assert graph.destroy_node(1) is True
        assert not graph.is_passable(1)

    def test_impassable_type(self, graph):
        graph.change_node_type(sq("c3"), NodeType.IMPASSABLE)
        assert not graph.is_passable(sq("c3"))

        graph.change_node_type(sq("c3"), NodeType.BOOST)
        assert graph.is_passable(sq("c3"))

    def test_unstable_collapses_after_countdown(self, graph):
        graph.set_unstable(sq("e5"), 2)

        assert graph.process_turn_end() == []
        assert graph.is_passable(sq("e5"))
        assert graph.get_node(sq("e5")).effect_duration == 1

        assert graph.process_turn_end() == [sq("e5")]
        assert graph.get_node(sq("e5")).current_type == NodeType.DESTROYED
        assert not graph.is_passable(sq("e5"))

        # Already destroyed, nothing more to collapse
        assert graph.process_turn_end() == []


class TestAdjacency:
    """Tests for edge-derived adjacency."""

    def test_corner_and_center(self, graph):
        assert sorted(graph.state.adjacent_nodes(0)) == [1, 8, 9]
        assert len(graph.state.adjacent_nodes(sq("d4"))) == 8

    def test_remove_edge_cuts_both_directions(self, graph):
        assert graph.state.are_connected(0, 1)

        graph.state.remove_edge(1, 0)

        assert not graph.state.are_connected(0, 1)
        assert not graph.state.are_connected(1, 0)

    def test_add_edge_invalidates_adjacency(self, graph):
        assert not graph.state.are_connected(0, 63)
        graph.state.add_edge(0, 63)
        assert graph.state.are_connected(0, 63)
        assert graph.state.are_connected(63, 0)

    def test_one_way_edges(self):
        """Non-bidirectional and ONE_WAY edges only connect from -> to."""
        graph = BoardGraph(line_board([
            EdgeDefinition(0, 1, bidirectional=False),
            EdgeDefinition(1, 2, edge_type=EdgeType.ONE_WAY),
        ]))

        assert graph.state.adjacent_nodes(0) == [1]
        assert graph.state.adjacent_nodes(1) == [2]
        assert graph.state.adjacent_nodes(2) == []
        assert graph.find_path(0, 2) == [0, 1, 2]
        assert graph.find_path(2, 0) == []

    def test_blocked_edge_gives_no_adjacency(self):
        graph = BoardGraph(line_board([EdgeDefinition(0, 1), EdgeDefinition(1, 2)]))

        graph.state.set_edge_type(1, 2, EdgeType.BLOCKED)

        assert graph.state.adjacent_nodes(1) == [0]
        assert graph.get_distance(0, 2) == -1

    def test_passable_adjacent_skips_destroyed(self, graph):
        graph.destroy_node(1, force=True)
        assert sorted(graph.state.passable_adjacent_nodes(0)) == [8, 9]


class TestPathfinding:
    """Tests for BFS queries."""

    def test_distance_uses_diagonals(self, graph):
        assert graph.get_distance(sq("a1"), sq("h8")) == 7
        assert graph.get_distance(sq("a1"), sq("a1")) == 0

    def test_path_endpoints(self, graph):
        path = graph.find_path(sq("a1"), sq("c1"))
        assert path[0] == sq("a1")
        assert path[-1] == sq("c1")
        assert len(path) == 3

    def test_path_to_impassable_is_empty(self, graph):
        graph.change_node_type(sq("c1"), NodeType.IMPASSABLE)
        assert graph.find_path(sq("a1"), sq("c1")) == []
        assert graph.get_distance(sq("a1"), sq("c1")) == -1

    def test_path_routes_around_walls(self, graph):
        """A wall across file b forces a detour."""
        for rank in "1234567":
            graph.change_node_type(sq(f"b{rank}"), NodeType.IMPASSABLE)

        path = graph.find_path(sq("a1"), sq("c1"))

        assert sq("b8") in path
        assert graph.get_distance(sq("a1"), sq("c1")) == 14

    def test_nodes_in_range(self, graph):
        in_range = graph.get_nodes_in_range(sq("a1"), 1)
        assert sorted(in_range) == sorted([sq("a1"), sq("b1"), sq("a2"), sq("b2")])

        assert len(graph.get_nodes_in_range(sq("d4"), 2)) == 25


class TestRays:
    """Tests for directional grid queries."""

    def test_line_to_board_edge(self, graph):
        assert graph.get_nodes_in_line(sq("a1"), (1, 0)) == [sq(f"{f}1") for f in "bcdefgh"]

    def test_line_respects_max_distance(self, graph):
        assert graph.get_nodes_in_line(sq("a1"), (1, 1), max_distance=2) == [sq("b2"), sq("c3")]

    def test_line_stops_at_impassable(self, graph):
        graph.change_node_type(sq("d1"), NodeType.IMPASSABLE)
        assert graph.get_nodes_in_line(sq("a1"), (1, 0)) == [sq("b1"), sq("c1")]

    def test_orthogonal_and_diagonal_counts(self, graph):
        assert len(graph.get_orthogonal_nodes(sq("d4"))) == 14
        assert len(graph.get_diagonal_nodes(sq("d4"))) == 13

    def test_knight_offsets(self, graph):
        assert sorted(graph.get_knight_move_nodes(sq("b1"))) == sorted([sq("a3"), sq("c3"), sq("d2")])
        assert len(graph.get_knight_move_nodes(sq("d4"))) == 8

    def test_off_board_origin_has_no_targets(self, graph):
        assert graph.step(-1, (0, 1)) is None
        assert graph.step(64, (-1, 0)) is None
        assert graph.get_nodes_in_line(-1, (0, 1)) == []
        assert graph.get_knight_move_nodes(64) == []
        assert graph.get_orthogonal_nodes(-1) == []

    def test_clone_is_independent(self, graph):
        copy = graph.state.clone()
        copy.destroy_node(0)
        assert graph.is_passable(0)
        assert not copy.is_passable(0)
