"""
Board Graph - Runtime topology and graph queries.

BoardState is the mutable per-match copy of a BoardDefinition: node
types change, nodes collapse, edges are added or cut. BoardGraph pairs
the immutable definition with that state and answers movement queries
(pathfinding, ranges, directional rays).

Node ids are list indices. Out-of-range ids are never passable; direct
access through get_node() expects a valid id.
"""

from __future__ import annotations
from collections import deque
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any

from ..spec_schema.board_spec import (
    BoardDefinition,
    NodeDefinition,
    EdgeDefinition,
    NodeType,
    EdgeType,
    NO_TELEPORT,
)


Direction = tuple[int, int]

ORTHOGONAL_DIRECTIONS: tuple[Direction, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))
DIAGONAL_DIRECTIONS: tuple[Direction, ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))
ADJACENT_DIRECTIONS: tuple[Direction, ...] = ORTHOGONAL_DIRECTIONS + DIAGONAL_DIRECTIONS
KNIGHT_OFFSETS: tuple[Direction, ...] = (
    (2, 1), (2, -1), (-2, 1), (-2, -1),
    (1, 2), (1, -2), (-1, 2), (-1, -2),
)

BLOCKING_TYPES = {NodeType.IMPASSABLE, NodeType.DESTROYED}


@dataclass
class NodeState:
    """Runtime state of a node."""
    id: int
    current_type: NodeType = NodeType.NORMAL
    active: bool = True
    teleport_target: int = NO_TELEPORT
    effect_duration: int = -1  # Turns left on a timed effect, -1 when none

    @classmethod
    def from_definition(cls, definition: NodeDefinition) -> NodeState:
        return cls(
            id=definition.id,
            current_type=definition.initial_type,
            active=True,
            teleport_target=definition.teleport_target,
            effect_duration=-1,
        )

    @property
    def is_passable(self) -> bool:
        return self.active and self.current_type not in BLOCKING_TYPES


@dataclass
class EdgeState:
    """Runtime state of an edge."""
    from_node: int
    to_node: int
    bidirectional: bool = True
    active: bool = True
    current_type: EdgeType = EdgeType.NORMAL

    @classmethod
    def from_definition(cls, definition: EdgeDefinition) -> EdgeState:
        return cls(
            from_node=definition.from_node,
            to_node=definition.to_node,
            bidirectional=definition.bidirectional,
            active=True,
            current_type=definition.edge_type,
        )

    @property
    def carries_traffic(self) -> bool:
        return self.active and self.current_type != EdgeType.BLOCKED

    @property
    def is_two_way(self) -> bool:
        return self.bidirectional and self.current_type != EdgeType.ONE_WAY


@dataclass
class BoardState:
    """
    Mutable runtime board.

    The adjacency map is rebuilt lazily after any edge mutation.
    """
    nodes: list[NodeState] = field(default_factory=list)
    edges: list[EdgeState] = field(default_factory=list)

    _adjacency: dict[int, list[int]] | None = field(default=None, repr=False, compare=False)
    _adjacency_dirty: bool = field(default=True, repr=False, compare=False)

    # =========================================================================
    # Nodes
    # =========================================================================

    def has_node(self, node_id: int) -> bool:
        return 0 <= node_id < len(self.nodes)

    def get_node(self, node_id: int) -> NodeState:
        return self.nodes[node_id]

    def is_passable(self, node_id: int) -> bool:
        if not self.has_node(node_id):
            return False
        return self.nodes[node_id].is_passable

    def destroy_node(self, node_id: int):
        node = self.nodes[node_id]
        node.current_type = NodeType.DESTROYED
        node.active = False
        node.effect_duration = -1

    def change_node_type(self, node_id: int, new_type: NodeType):
        node = self.nodes[node_id]
        if new_type == NodeType.DESTROYED:
            self.destroy_node(node_id)
            return
        node.current_type = new_type

    def set_unstable(self, node_id: int, turns_until_destruction: int):
        node = self.nodes[node_id]
        node.current_type = NodeType.UNSTABLE
        node.effect_duration = turns_until_destruction

    # =========================================================================
    # Edges
    # =========================================================================

    def add_edge(
        self,
        from_node: int,
        to_node: int,
        bidirectional: bool = True,
        edge_type: EdgeType = EdgeType.NORMAL,
    ):
        self.edges.append(EdgeState(
            from_node=from_node,
            to_node=to_node,
            bidirectional=bidirectional,
            active=True,
            current_type=edge_type,
        ))
        self.invalidate_adjacency()

    def remove_edge(self, node_a: int, node_b: int):
        """Deactivate every edge between two nodes, in either direction."""
        for edge in self.edges:
            if {edge.from_node, edge.to_node} == {node_a, node_b}:
                edge.active = False
        self.invalidate_adjacency()

    def set_edge_type(self, node_a: int, node_b: int, edge_type: EdgeType):
        """Change the type of every edge between two nodes."""
        for edge in self.edges:
            if {edge.from_node, edge.to_node} == {node_a, node_b}:
                edge.current_type = edge_type
        self.invalidate_adjacency()

    def are_connected(self, node_a: int, node_b: int) -> bool:
        return node_b in self.adjacent_nodes(node_a)

    # =========================================================================
    # Adjacency
    # =========================================================================

    def adjacent_nodes(self, node_id: int) -> list[int]:
        self._rebuild_adjacency_if_needed()
        return list(self._adjacency.get(node_id, ()))

    def passable_adjacent_nodes(self, node_id: int) -> list[int]:
        return [n for n in self.adjacent_nodes(node_id) if self.is_passable(n)]

    def invalidate_adjacency(self):
        self._adjacency_dirty = True

    def _rebuild_adjacency_if_needed(self):
        if not self._adjacency_dirty and self._adjacency is not None:
            return

        adjacency: dict[int, list[int]] = {node.id: [] for node in self.nodes}
        for edge in self.edges:
            if not edge.carries_traffic:
                continue
            adjacency.setdefault(edge.from_node, []).append(edge.to_node)
            if edge.is_two_way:
                adjacency.setdefault(edge.to_node, []).append(edge.from_node)

        self._adjacency = adjacency
        self._adjacency_dirty = False

    # =========================================================================
    # Turn processing
    # =========================================================================

    def process_turn_end(self) -> list[int]:
        """
        Tick unstable countdowns.

        Returns ids of nodes that collapsed this turn.
        """
        collapsed = []
        for node in self.nodes:
            if node.current_type == NodeType.UNSTABLE and node.effect_duration > 0:
                node.effect_duration -= 1
                if node.effect_duration <= 0:
                    node.current_type = NodeType.DESTROYED
                    node.active = False
                    collapsed.append(node.id)
        return collapsed

    # =========================================================================
    # Copies
    # =========================================================================

    def clone(self) -> BoardState:
        """Deep copy the board."""
        return deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [
                {
                    "id": n.id,
                    "type": n.current_type.value,
                    "active": n.active,
                    "teleport_target": n.teleport_target,
                    "effect_duration": n.effect_duration,
                }
                for n in self.nodes
            ],
            "edges": [
                {
                    "from": e.from_node,
                    "to": e.to_node,
                    "bidirectional": e.bidirectional,
                    "active": e.active,
                    "type": e.current_type.value,
                }
                for e in self.edges
            ],
        }


class BoardGraph:
    """
    Query API over a board definition and its runtime state.

    Usage:
        graph = BoardGraph(definition)
        path = graph.find_path(0, 9)
        ray = graph.get_nodes_in_line(0, (1, 1))
    """

    def __init__(self, definition: BoardDefinition, state: BoardState | None = None):
        self.definition = definition
        self.state = state if state is not None else definition.create_initial_state()

    # =========================================================================
    # Node queries
    # =========================================================================

    def get_node(self, node_id: int) -> NodeState:
        return self.state.get_node(node_id)

    def get_node_definition(self, node_id: int) -> NodeDefinition:
        return self.definition.nodes[node_id]

    def is_passable(self, node_id: int) -> bool:
        return self.state.is_passable(node_id)

    def get_coordinates(self, node_id: int) -> tuple[int, int]:
        return self.definition.get_coordinates(node_id)

    def node_at(self, x: int, y: int) -> int | None:
        """Node id at grid coordinates, or None when off the board."""
        if not self.definition.in_bounds(x, y):
            return None
        return self.definition.get_node_id(x, y)

    def step(self, node_id: int, direction: Direction, distance: int = 1) -> int | None:
        """Node reached by moving `distance` steps along a grid direction."""
        if not self.state.has_node(node_id):
            return None
        x, y = self.get_coordinates(node_id)
        return self.node_at(x + direction[0] * distance, y + direction[1] * distance)

    @property
    def ray_limit(self) -> int:
        """Longest possible straight walk on this board."""
        return max(self.definition.width, self.definition.height)

    # =========================================================================
    # Pathfinding
    # =========================================================================

    def find_path(self, from_node: int, to_node: int) -> list[int]:
        """
        Shortest path between two nodes, breadth-first over passable edges.

        Returns an empty list if no path exists.
        """
        if from_node == to_node:
            return [from_node]
        if not self.is_passable(to_node):
            return []

        came_from: dict[int, int] = {}
        visited = {from_node}
        queue = deque([from_node])

        while queue:
            current = queue.popleft()
            for neighbor in self.state.passable_adjacent_nodes(current):
                if neighbor in visited:
                    continue
                came_from[neighbor] = current
                if neighbor == to_node:
                    return self._reconstruct_path(came_from, from_node, to_node)
                visited.add(neighbor)
                queue.append(neighbor)

        return []

    @staticmethod
    def _reconstruct_path(came_from: dict[int, int], start: int, end: int) -> list[int]:
        path = [end]
        current = end
        while current != start:
            current = came_from[current]
            path.append(current)
        path.reverse()
        return path

    def get_nodes_in_range(self, from_node: int, max_distance: int) -> list[int]:
        """All nodes reachable within max_distance steps, origin included."""
        result = []
        visited = {from_node}
        queue = deque([(from_node, 0)])

        while queue:
            current, dist = queue.popleft()
            result.append(current)
            if dist >= max_distance:
                continue
            for neighbor in self.state.passable_adjacent_nodes(current):
                if neighbor in visited:
                    continue
                visited.add(neighbor)
                queue.append((neighbor, dist + 1))

        return result

    def get_distance(self, from_node: int, to_node: int) -> int:
        """Edge count of the shortest path, or -1 if unreachable."""
        path = self.find_path(from_node, to_node)
        return len(path) - 1 if path else -1

    # =========================================================================
    # Directional rays (grid coordinates)
    # =========================================================================

    def get_nodes_in_line(self, from_node: int, direction: Direction, max_distance: int = -1) -> list[int]:
        """
        Nodes in a straight line from origin, origin excluded.

        Stops at the board edge or the first impassable node.
        """
        limit = self.ray_limit if max_distance < 0 else max_distance
        result = []
        for i in range(1, limit + 1):
            node_id = self.step(from_node, direction, i)
            if node_id is None or not self.is_passable(node_id):
                break
            result.append(node_id)
        return result

    def get_diagonal_nodes(self, from_node: int, max_distance: int = -1) -> list[int]:
        result = []
        for direction in DIAGONAL_DIRECTIONS:
            result.extend(self.get_nodes_in_line(from_node, direction, max_distance))
        return result

    def get_orthogonal_nodes(self, from_node: int, max_distance: int = -1) -> list[int]:
        result = []
        for direction in ORTHOGONAL_DIRECTIONS:
            result.extend(self.get_nodes_in_line(from_node, direction, max_distance))
        return result

    def get_knight_move_nodes(self, from_node: int) -> list[int]:
        result = []
        for offset in KNIGHT_OFFSETS:
            node_id = self.step(from_node, offset)
            if node_id is not None and self.is_passable(node_id):
                result.append(node_id)
        return result

    # =========================================================================
    # Board modifications
    # =========================================================================

    def destroy_node(self, node_id: int, force: bool = False) -> bool:
        """
        Destroy a node.

        Only nodes marked destructible in the template are destroyed
        unless force is set. Returns True if the node was destroyed.
        """
        if not self.state.has_node(node_id):
            return False
        if not force and not self.get_node_definition(node_id).destructible:
            return False
        self.state.destroy_node(node_id)
        return True

    def change_node_type(self, node_id: int, new_type: NodeType):
        self.state.change_node_type(node_id, new_type)

    def set_unstable(self, node_id: int, turns: int):
        self.state.set_unstable(node_id, turns)

    def process_turn_end(self) -> list[int]:
        return self.state.process_turn_end()
