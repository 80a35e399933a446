"""
Army Placement - Maps army slots onto a board's spawn zones.

A slot's relative x selects an index in the zone row matching its row
class (back/front), falling back to the full zone when the row is not
defined. The second player's index is mirrored so armies face each other.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..spec_schema.army_spec import ArmyDefinition, ArmySlot, SlotRow
from ..spec_schema.board_spec import SpawnZone
from .units import UnitState

if TYPE_CHECKING:
    from .graph import BoardState


NOT_PLACED = -1


def map_slot_to_node(slot: ArmySlot, zone: SpawnZone, mirror: bool) -> int:
    """Node id for a slot, or NOT_PLACED if the slot does not fit the zone."""
    row = zone.back_row if slot.row == SlotRow.BACK else zone.front_row
    if not row:
        row = zone.node_ids
    if not row:
        return NOT_PLACED

    index = len(row) - 1 - slot.x if mirror else slot.x
    if index < 0 or index >= len(row):
        return NOT_PLACED
    return row[index]


def place_army(
    army: ArmyDefinition,
    zone: SpawnZone,
    player_id: int,
    starting_unit_id: int,
    mirror: bool,
) -> list[UnitState]:
    """
    Create units for an army on its spawn zone.

    Unit ids ascend from starting_unit_id. Slots that do not map to a
    node are skipped.
    """
    units = []
    unit_id = starting_unit_id
    for slot in army.slots:
        node_id = map_slot_to_node(slot, zone, mirror)
        if node_id == NOT_PLACED:
            continue
        units.append(UnitState.create(unit_id, slot.unit, player_id, node_id))
        unit_id += 1
    return units


def create_units_for_placement(
    army: ArmyDefinition,
    player_id: int,
    starting_unit_id: int,
) -> list[UnitState]:
    """Create unplaced units (node NOT_PLACED) for a manual placement phase."""
    return [
        UnitState.create(starting_unit_id + i, slot.unit, player_id, NOT_PLACED)
        for i, slot in enumerate(army.slots)
    ]


def is_valid_placement(node_id: int, zone: SpawnZone, board_state: BoardState) -> bool:
    """A node is a valid placement if it is in the zone and passable."""
    return node_id in zone.all_node_ids and board_state.is_passable(node_id)
