"""
Board Spec - Immutable board templates.

A board is an explicit graph of small integer node ids. Node ids are
dense (0..n-1) so the runtime can index nodes directly; grid boards
derive coordinates from id = y * width + x.

Definitions are authored once and never mutated. A fresh BoardState is
produced for every match by BoardDefinition.create_initial_state().
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..engine_core.graph import BoardState


NO_TELEPORT = -1


class NodeType(Enum):
    """Types of nodes in the board graph."""
    NORMAL = "normal"
    IMPASSABLE = "impassable"
    BOOST = "boost"  # Buffs the unit that lands here
    TELEPORT = "teleport"  # Relocates to the linked node
    TRAP = "trap"  # Fixed damage on landing
    DESTROYED = "destroyed"  # Permanently impassable
    UNSTABLE = "unstable"  # Collapses after a countdown


class EdgeType(Enum):
    """Types of edges between nodes."""
    NORMAL = "normal"
    ONE_WAY = "one_way"
    BLOCKED = "blocked"  # Temporarily impassable
    HAZARDOUS = "hazardous"


class PlacementMode(Enum):
    """How units are placed at the start of a match."""
    AUTOMATIC = "automatic"  # Army slots map onto spawn zones
    MANUAL = "manual"  # Players place units during a placement phase


@dataclass(frozen=True)
class NodeDefinition:
    """Template for a single node."""
    id: int
    position: tuple[float, float] = (0.0, 0.0)  # Layout position for hosts
    initial_type: NodeType = NodeType.NORMAL
    teleport_target: int = NO_TELEPORT
    destructible: bool = False
    is_light: bool = True


@dataclass(frozen=True)
class EdgeDefinition:
    """Template for a connection between two nodes."""
    from_node: int
    to_node: int
    bidirectional: bool = True
    edge_type: EdgeType = EdgeType.NORMAL


@dataclass(frozen=True)
class SpawnZone:
    """
    Nodes a player may start on. A property of the map, not the army.

    back_row/front_row are optional ordered subsets used to map army
    slots by row class. When they are empty the full node list is used.
    """
    player_slot: int
    node_ids: tuple[int, ...] = ()
    back_row: tuple[int, ...] = ()
    front_row: tuple[int, ...] = ()

    @classmethod
    def from_rows(cls, player_slot: int, back_row: list[int], front_row: list[int]) -> SpawnZone:
        """Build a zone whose node list is back row followed by front row."""
        return cls(
            player_slot=player_slot,
            node_ids=tuple(back_row) + tuple(front_row),
            back_row=tuple(back_row),
            front_row=tuple(front_row),
        )

    @property
    def all_node_ids(self) -> tuple[int, ...]:
        """Every node referenced by this zone."""
        return tuple(dict.fromkeys(self.node_ids + self.back_row + self.front_row))


@dataclass(frozen=True)
class BoardDefinition:
    """
    Immutable board template.

    Produces a fresh runtime BoardState for every match.
    """
    board_id: str
    display_name: str = ""
    nodes: tuple[NodeDefinition, ...] = ()
    edges: tuple[EdgeDefinition, ...] = ()
    spawn_zones: tuple[SpawnZone, ...] = ()
    width: int = 8
    height: int = 8
    placement_mode: PlacementMode = PlacementMode.AUTOMATIC

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    def get_node_id(self, x: int, y: int) -> int:
        """Node id from grid coordinates."""
        return y * self.width + x

    def get_coordinates(self, node_id: int) -> tuple[int, int]:
        """Grid coordinates (x, y) from a node id."""
        return node_id % self.width, node_id // self.width

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_node(self, node_id: int) -> NodeDefinition:
        return self.nodes[node_id]

    def spawn_zone_for(self, player_slot: int) -> SpawnZone | None:
        """Spawn zone for a player slot, if the board defines one."""
        for zone in self.spawn_zones:
            if zone.player_slot == player_slot:
                return zone
        return None

    def create_initial_state(self) -> BoardState:
        """Materialize runtime node and edge state from the templates."""
        from ..engine_core.graph import BoardState, NodeState, EdgeState

        return BoardState(
            nodes=[NodeState.from_definition(n) for n in self.nodes],
            edges=[EdgeState.from_definition(e) for e in self.edges],
        )
