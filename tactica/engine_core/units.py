"""
Unit Model - Runtime unit state, modifiers and combat primitives.

UnitState is owned by the match and changed only through its methods.
Stats are always base + growth for the level, then folded through the
active modifiers by recalculate_stats().
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from fractions import Fraction
from typing import Any
import math
import uuid

from ..spec_schema.unit_spec import UnitDefinition, UnitCalculatedStats, STAT_FIELDS


class ModifierType(Enum):
    """Where a modifier came from, for display and bulk removal."""
    BUFF = "buff"
    DEBUFF = "debuff"
    EQUIPMENT = "equipment"
    TILE_EFFECT = "tile_effect"
    ABILITY = "ability"
    AURA = "aura"


class ModifierOperation(Enum):
    """How a modifier combines with the stat."""
    ADD = "add"  # stat + value
    MULTIPLY = "multiply"  # stat * value / 100 (150 = 1.5x)
    SET = "set"  # stat = value
    OVERRIDE = "override"  # stat = value, beats SET


class ModifierDuration(Enum):
    """Expiry policy."""
    TURNS = "turns"
    UNTIL_END_OF_TURN = "until_end_of_turn"
    UNTIL_DAMAGED = "until_damaged"
    WHILE_ON_NODE = "while_on_node"
    UNTIL_MATCH_END = "until_match_end"
    PERMANENT = "permanent"
    UNTIL_REMOVED = "until_removed"


@dataclass(frozen=True)
class Modifier:
    """A stat adjustment. Immutable; ticking a turn returns a new record."""
    target_stat: str
    operation: ModifierOperation
    value: int
    duration: ModifierDuration = ModifierDuration.TURNS
    turns_remaining: int = -1
    source: str = ""
    modifier_type: ModifierType = ModifierType.BUFF
    display_name: str = ""
    modifier_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def is_expired(self) -> bool:
        return self.duration == ModifierDuration.TURNS and self.turns_remaining <= 0

    def decremented(self) -> Modifier:
        """This modifier one turn later."""
        if self.duration == ModifierDuration.TURNS and self.turns_remaining > 0:
            return replace(self, turns_remaining=self.turns_remaining - 1)
        return self

    @classmethod
    def buff(cls, stat: str, value: int, turns: int, source: str = "") -> Modifier:
        return cls(
            target_stat=stat,
            operation=ModifierOperation.ADD,
            value=value,
            duration=ModifierDuration.TURNS,
            turns_remaining=turns,
            source=source,
            modifier_type=ModifierType.BUFF,
        )

    @classmethod
    def debuff(cls, stat: str, value: int, turns: int, source: str = "") -> Modifier:
        return cls(
            target_stat=stat,
            operation=ModifierOperation.ADD,
            value=-value,
            duration=ModifierDuration.TURNS,
            turns_remaining=turns,
            source=source,
            modifier_type=ModifierType.DEBUFF,
        )

    @classmethod
    def permanent(cls, stat: str, value: int, source: str) -> Modifier:
        return cls(
            target_stat=stat,
            operation=ModifierOperation.ADD,
            value=value,
            duration=ModifierDuration.PERMANENT,
            turns_remaining=-1,
            source=source,
            modifier_type=ModifierType.EQUIPMENT,
        )


def xp_required(level: int) -> int:
    """Experience needed to leave a level: floor(100 * level^1.5)."""
    return math.floor(100 * level ** 1.5)


def fold_modifiers(stat: str, base_value: int, modifiers: list[Modifier]) -> int:
    """
    Apply modifiers for one stat.

    Additive values sum, multiplicative percentages compound on
    (base + additive), truncated toward zero. Any SET/OVERRIDE replaces
    the result: OVERRIDE beats SET, and among equals the most recently
    added modifier wins.
    """
    additive = 0
    multiplier = Fraction(1)
    fixed: Modifier | None = None

    for mod in modifiers:
        if mod.target_stat != stat or mod.is_expired:
            continue
        if mod.operation == ModifierOperation.ADD:
            additive += mod.value
        elif mod.operation == ModifierOperation.MULTIPLY:
            multiplier *= Fraction(mod.value, 100)
        elif fixed is None or not (
            fixed.operation == ModifierOperation.OVERRIDE
            and mod.operation == ModifierOperation.SET
        ):
            fixed = mod

    if fixed is not None:
        return fixed.value
    return math.trunc((base_value + additive) * multiplier)


@dataclass
class UnitState:
    """
    Runtime state of a unit in a match.

    Mutated only through the action methods below.
    """
    unit_id: int
    definition: UnitDefinition = field(repr=False, compare=False)
    owner_id: int
    node_id: int

    # Progression
    level: int = 1
    experience: int = 0
    experience_to_next_level: int = 100

    # Current stats (recalculated when modifiers change)
    current_health: int = 0
    max_health: int = 0
    attack: int = 0
    defense: int = 0
    speed: int = 0
    range: int = 1

    equipped_item_ids: list[str] = field(default_factory=list)
    active_modifiers: list[Modifier] = field(default_factory=list)

    # Turn state
    has_moved_this_turn: bool = False
    has_acted_this_turn: bool = False
    has_ever_moved: bool = False

    alive: bool = True
    turns_until_respawn: int = -1

    @classmethod
    def create(
        cls,
        unit_id: int,
        definition: UnitDefinition,
        owner_id: int,
        node_id: int,
        level: int = 1,
    ) -> UnitState:
        """Create a fresh unit with stats derived for its level."""
        stats = UnitCalculatedStats.calculate(definition.base_stats, definition.growth_stats, level)
        return cls(
            unit_id=unit_id,
            definition=definition,
            owner_id=owner_id,
            node_id=node_id,
            level=level,
            experience=0,
            experience_to_next_level=xp_required(level),
            current_health=stats.max_health,
            max_health=stats.max_health,
            attack=stats.attack,
            defense=stats.defense,
            speed=stats.speed,
            range=stats.range,
        )

    @property
    def definition_id(self) -> str:
        return self.definition.unit_id

    @property
    def is_king(self) -> bool:
        return self.definition.is_king

    @property
    def can_move(self) -> bool:
        return self.alive and not self.has_moved_this_turn

    @property
    def can_act(self) -> bool:
        return self.alive and not self.has_acted_this_turn

    # =========================================================================
    # Stats
    # =========================================================================

    def recalculate_stats(self):
        """Recompute stats from level and active, unexpired modifiers."""
        base = UnitCalculatedStats.calculate(
            self.definition.base_stats, self.definition.growth_stats, self.level
        )
        for stat, attr in STAT_FIELDS.items():
            value = fold_modifiers(stat, base.get(stat), self.active_modifiers)
            setattr(self, attr, value)

        if self.current_health > self.max_health:
            self.current_health = self.max_health

    def add_modifier(self, modifier: Modifier):
        self.active_modifiers.append(modifier)
        self.recalculate_stats()

    def remove_modifier(self, modifier_id: str):
        self.active_modifiers = [m for m in self.active_modifiers if m.modifier_id != modifier_id]
        self.recalculate_stats()

    def remove_modifiers_by_source(self, source: str):
        self.active_modifiers = [m for m in self.active_modifiers if m.source != source]
        self.recalculate_stats()

    # =========================================================================
    # Experience
    # =========================================================================

    def add_experience(self, amount: int) -> int:
        """
        Add experience, levelling up while the threshold is met.

        Returns the number of levels gained.
        """
        self.experience += amount
        levels = 0
        while self.experience >= self.experience_to_next_level:
            self.experience -= self.experience_to_next_level
            self.level += 1
            self.experience_to_next_level = xp_required(self.level)
            levels += 1
        if levels:
            self.recalculate_stats()
        return levels

    # =========================================================================
    # Combat
    # =========================================================================

    def take_damage(self, amount: int) -> int:
        """
        Take combat damage mitigated by defense (minimum 1).

        Returns health actually lost. Dead units take no damage.
        """
        if not self.alive:
            return 0
        return self._lose_health(max(1, amount - self.defense))

    def take_true_damage(self, amount: int) -> int:
        """Take fixed damage that ignores defense."""
        if not self.alive:
            return 0
        return self._lose_health(max(0, amount))

    def _lose_health(self, amount: int) -> int:
        lost = min(amount, self.current_health)
        self.current_health -= amount
        if self.current_health <= 0:
            self.current_health = 0
            self.alive = False

        remaining = [m for m in self.active_modifiers if m.duration != ModifierDuration.UNTIL_DAMAGED]
        if len(remaining) != len(self.active_modifiers):
            self.active_modifiers = remaining
            self.recalculate_stats()
        return lost

    def kill(self) -> bool:
        """Mark the unit dead. Returns False if it already was."""
        if not self.alive:
            return False
        self.alive = False
        return True

    def heal(self, amount: int):
        if not self.alive:
            return
        self.current_health = min(self.current_health + amount, self.max_health)

    # =========================================================================
    # Turns and movement
    # =========================================================================

    def start_turn(self):
        self.has_moved_this_turn = False
        self.has_acted_this_turn = False

    def end_turn(self):
        """Tick turn-counted modifiers and drop expired and end-of-turn ones."""
        ticked = [m.decremented() for m in self.active_modifiers]
        self.active_modifiers = [
            m for m in ticked
            if not m.is_expired and m.duration != ModifierDuration.UNTIL_END_OF_TURN
        ]
        self.recalculate_stats()

    def move_to(self, node_id: int):
        self.node_id = node_id
        self.has_moved_this_turn = True
        self.has_ever_moved = True

    def relocate(self, node_id: int):
        """Change position without spending the move (teleports)."""
        self.node_id = node_id

    def to_dict(self) -> dict[str, Any]:
        return {
            "unit_id": self.unit_id,
            "definition_id": self.definition_id,
            "owner_id": self.owner_id,
            "node_id": self.node_id,
            "level": self.level,
            "experience": self.experience,
            "experience_to_next_level": self.experience_to_next_level,
            "current_health": self.current_health,
            "max_health": self.max_health,
            "attack": self.attack,
            "defense": self.defense,
            "speed": self.speed,
            "range": self.range,
            "equipped_item_ids": list(self.equipped_item_ids),
            "active_modifiers": [
                {
                    "modifier_id": m.modifier_id,
                    "target_stat": m.target_stat,
                    "operation": m.operation.value,
                    "value": m.value,
                    "duration": m.duration.value,
                    "turns_remaining": m.turns_remaining,
                    "source": m.source,
                }
                for m in self.active_modifiers
            ],
            "has_moved_this_turn": self.has_moved_this_turn,
            "has_acted_this_turn": self.has_acted_this_turn,
            "has_ever_moved": self.has_ever_moved,
            "alive": self.alive,
        }
