"""
Board Loader - JSON board documents.

Boards can be authored as JSON and loaded into a BoardDefinition. The
document shape is checked with pydantic; topology is checked afterwards
by validate_board().

A document that omits "nodes" gets a full grid of width x height nodes,
and one that omits "edges" gets 8-connected grid edges.
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

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
from .grid import grid_nodes, grid_edges


class NodeDocument(BaseModel):
    """A node as written in a board file."""
    id: int = Field(ge=0)
    x: float = 0.0
    y: float = 0.0
    type: NodeType = NodeType.NORMAL
    teleport_target: int = NO_TELEPORT
    destructible: bool = False
    is_light: bool = True


class EdgeDocument(BaseModel):
    """An edge as written in a board file."""
    from_node: int = Field(alias="from")
    to_node: int = Field(alias="to")
    bidirectional: bool = True
    type: EdgeType = EdgeType.NORMAL

    model_config = {"populate_by_name": True}


class SpawnZoneDocument(BaseModel):
    """A spawn zone as written in a board file."""
    player_slot: int = Field(ge=0)
    node_ids: list[int] = Field(default_factory=list)
    back_row: list[int] = Field(default_factory=list)
    front_row: list[int] = Field(default_factory=list)


class BoardDocument(BaseModel):
    """Top-level board file."""
    board_id: str
    display_name: str = ""
    width: int = Field(default=8, ge=1)
    height: int = Field(default=8, ge=1)
    placement_mode: PlacementMode = PlacementMode.AUTOMATIC
    nodes: Optional[list[NodeDocument]] = None
    edges: Optional[list[EdgeDocument]] = None
    diagonal_edges: bool = True
    spawn_zones: list[SpawnZoneDocument] = Field(default_factory=list)

    def to_definition(self) -> BoardDefinition:
        """Convert to an immutable BoardDefinition."""
        if self.nodes is None:
            nodes = grid_nodes(self.width, self.height)
        else:
            nodes = [
                NodeDefinition(
                    id=n.id,
                    position=(n.x, n.y),
                    initial_type=n.type,
                    teleport_target=n.teleport_target,
                    destructible=n.destructible,
                    is_light=n.is_light,
                )
                for n in sorted(self.nodes, key=lambda n: n.id)
            ]

        if self.edges is None:
            edges = grid_edges(self.width, self.height, diagonals=self.diagonal_edges)
        else:
            edges = [
                EdgeDefinition(e.from_node, e.to_node, e.bidirectional, e.type)
                for e in self.edges
            ]

        zones = []
        for z in self.spawn_zones:
            node_ids = z.node_ids or (z.back_row + z.front_row)
            zones.append(SpawnZone(
                player_slot=z.player_slot,
                node_ids=tuple(node_ids),
                back_row=tuple(z.back_row),
                front_row=tuple(z.front_row),
            ))

        return BoardDefinition(
            board_id=self.board_id,
            display_name=self.display_name or self.board_id,
            nodes=tuple(nodes),
            edges=tuple(edges),
            spawn_zones=tuple(zones),
            width=self.width,
            height=self.height,
            placement_mode=self.placement_mode,
        )


def parse_board(data: dict) -> BoardDefinition:
    """Parse a board document from already-decoded JSON."""
    return BoardDocument.model_validate(data).to_definition()


def load_board(path: str | Path) -> BoardDefinition:
    """Load a board document from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return parse_board(data)
