"""Helpers for building rectangular grid boards."""

from __future__ import annotations

from .board_spec import NodeDefinition, EdgeDefinition


def grid_nodes(width: int, height: int) -> list[NodeDefinition]:
    """Nodes for a width x height grid, id = y * width + x."""
    nodes = []
    for y in range(height):
        for x in range(width):
            nodes.append(NodeDefinition(
                id=y * width + x,
                position=(float(x), float(y)),
                is_light=(x + y) % 2 == 1,
            ))
    return nodes


def grid_edges(width: int, height: int, diagonals: bool = True) -> list[EdgeDefinition]:
    """
    Bidirectional edges between grid neighbours.

    With diagonals the grid is 8-connected, otherwise 4-connected.
    """
    edges = []
    for y in range(height):
        for x in range(width):
            node_id = y * width + x
            if x < width - 1:
                edges.append(EdgeDefinition(node_id, node_id + 1))
            if y < height - 1:
                edges.append(EdgeDefinition(node_id, node_id + width))
            if diagonals and x < width - 1 and y < height - 1:
                edges.append(EdgeDefinition(node_id, node_id + width + 1))
            if diagonals and x > 0 and y < height - 1:
                edges.append(EdgeDefinition(node_id, node_id + width - 1))
    return edges
