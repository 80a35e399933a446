"""
Tests for runtime unit state.

Tests:
- Combat damage and death
- Experience and levelling
- Modifier folding and expiry
"""

import pytest

from ..engine_core.units import (
    UnitState,
    Modifier,
    ModifierOperation,
    ModifierDuration,
    fold_modifiers,
    xp_required,
)


def modifier(stat, operation, value, duration=ModifierDuration.PERMANENT, turns=-1):
    return Modifier(
        target_stat=stat,
        operation=operation,
        value=value,
        duration=duration,
        turns_remaining=turns,
    )


@pytest.fixture
def queen(defs):
    return UnitState.create(0, defs["Queen"], owner_id=0, node_id=3)


class TestCreation:
    """Tests for fresh units."""

    def test_stats_from_definition(self, queen):
        assert queen.level == 1
        assert queen.max_health == queen.current_health == 50
        assert queen.attack == 15
        assert queen.defense == 3
        assert queen.experience_to_next_level == 100
        assert queen.alive

    def test_higher_level_applies_growth(self, defs):
        queen = UnitState.create(0, defs["Queen"], owner_id=0, node_id=3, level=3)

        assert queen.max_health == 60
        assert queen.attack == 19
        assert queen.defense == 5


class TestCombat:
    """Tests for damage, healing and death."""

    def test_damage_mitigated_by_defense(self, queen):
        lost = queen.take_damage(10)

        assert lost == 7
        assert queen.current_health == 43

    def test_damage_minimum_one(self, queen):
        assert queen.take_damage(2) == 1
        assert queen.current_health == 49

    def test_true_damage_ignores_defense(self, queen):
        assert queen.take_true_damage(10) == 10
        assert queen.current_health == 40

    def test_health_clamps_at_zero_and_dies_once(self, queen):
        lost = queen.take_damage(500)

        assert lost == 50
        assert queen.current_health == 0
        assert not queen.alive
        assert queen.take_damage(10) == 0
        assert queen.current_health == 0

    def test_kill(self, queen):
        assert queen.kill() is True
        assert queen.kill() is False
        assert not queen.alive

    def test_heal_clamps_to_max(self, queen):
        queen.take_true_damage(20)
        queen.heal(5)
        assert queen.current_health == 35

        queen.heal(100)
        assert queen.current_health == 50

    def test_dead_units_do_not_heal(self, queen):
        queen.kill()
        health = queen.current_health
        queen.heal(10)
        assert queen.current_health == health


class TestExperience:
    """Tests for the levelling curve."""

    @pytest.mark.parametrize("level, required", [(1, 100), (2, 282), (3, 519), (4, 800)])
    def test_xp_curve(self, level, required):
        assert xp_required(level) == required

    def test_level_up(self, queen):
        gained = queen.add_experience(100)

        assert gained == 1
        assert queen.level == 2
        assert queen.experience == 0
        assert queen.experience_to_next_level == 282
        assert queen.max_health == 55
        assert queen.attack == 17

    def test_multiple_levels_carry_remainder(self, queen):
        gained = queen.add_experience(100 + 282 + 10)

        assert gained == 2
        assert queen.level == 3
        assert queen.experience == 10

    def test_below_threshold(self, queen):
        assert queen.add_experience(99) == 0
        assert queen.level == 1
        assert queen.experience == 99


class TestModifierFolding:
    """Tests for combining modifiers on one stat."""

    def test_no_modifiers(self):
        assert fold_modifiers("Attack", 10, []) == 10

    def test_add_then_multiply(self):
        mods = [
            modifier("Attack", ModifierOperation.MULTIPLY, 150),
            modifier("Attack", ModifierOperation.ADD, 5),
        ]
        assert fold_modifiers("Attack", 10, mods) == 22

    def test_multipliers_compound_and_truncate(self):
        mods = [
            modifier("Attack", ModifierOperation.MULTIPLY, 50),
            modifier("Attack", ModifierOperation.MULTIPLY, 50),
        ]
        assert fold_modifiers("Attack", 15, mods) == 3

    def test_truncates_toward_zero(self):
        mods = [
            modifier("Attack", ModifierOperation.ADD, -17),
            modifier("Attack", ModifierOperation.MULTIPLY, 150),
        ]
        assert fold_modifiers("Attack", 10, mods) == -10

    def test_other_stats_ignored(self):
        mods = [modifier("Defense", ModifierOperation.ADD, 5)]
        assert fold_modifiers("Attack", 10, mods) == 10

    def test_set_replaces_result(self):
        mods = [
            modifier("Attack", ModifierOperation.ADD, 5),
            modifier("Attack", ModifierOperation.SET, 3),
        ]
        assert fold_modifiers("Attack", 10, mods) == 3

    def test_latest_set_wins(self):
        mods = [
            modifier("Attack", ModifierOperation.SET, 3),
            modifier("Attack", ModifierOperation.SET, 7),
        ]
        assert fold_modifiers("Attack", 10, mods) == 7

    @pytest.mark.parametrize("order", ["override_first", "set_first"])
    def test_override_beats_set(self, order):
        override = modifier("Attack", ModifierOperation.OVERRIDE, 9)
        set_mod = modifier("Attack", ModifierOperation.SET, 3)
        mods = [override, set_mod] if order == "override_first" else [set_mod, override]

        assert fold_modifiers("Attack", 10, mods) == 9

    def test_latest_override_wins(self):
        mods = [
            modifier("Attack", ModifierOperation.OVERRIDE, 9),
            modifier("Attack", ModifierOperation.OVERRIDE, 4),
        ]
        assert fold_modifiers("Attack", 10, mods) == 4

    def test_expired_modifier_ignored(self):
        mods = [modifier("Attack", ModifierOperation.ADD, 5, ModifierDuration.TURNS, turns=0)]
        assert fold_modifiers("Attack", 10, mods) == 10


class TestModifierLifecycle:
    """Tests for adding, expiring and purging modifiers on a unit."""

    def test_buff_applies_and_expires(self, queen):
        queen.add_modifier(Modifier.buff("Attack", 5, turns=2))
        assert queen.attack == 20

        queen.end_turn()
        assert queen.attack == 20
        assert queen.active_modifiers[0].turns_remaining == 1

        queen.end_turn()
        assert queen.attack == 15
        assert queen.active_modifiers == []

    def test_debuff(self, queen):
        queen.add_modifier(Modifier.debuff("Defense", 2, turns=1))
        assert queen.defense == 1

    def test_until_end_of_turn(self, queen):
        queen.add_modifier(modifier("Speed", ModifierOperation.ADD, 4, ModifierDuration.UNTIL_END_OF_TURN))
        assert queen.speed == 12

        queen.end_turn()
        assert queen.speed == 8

    def test_permanent_survives_turns(self, queen):
        queen.add_modifier(Modifier.permanent("Defense", 2, source="item:shield"))
        for _ in range(5):
            queen.end_turn()

        assert queen.defense == 5

    def test_until_damaged_purged_on_damage(self, queen):
        queen.add_modifier(modifier("Defense", ModifierOperation.ADD, 10, ModifierDuration.UNTIL_DAMAGED))
        assert queen.defense == 13

        # Mitigated by the shield itself, then the shield drops
        queen.take_damage(20)
        assert queen.current_health == 43
        assert queen.defense == 3

    def test_until_damaged_purged_on_true_damage(self, queen):
        queen.add_modifier(modifier("Attack", ModifierOperation.ADD, 10, ModifierDuration.UNTIL_DAMAGED))
        queen.take_true_damage(1)
        assert queen.attack == 15

    def test_lowered_max_health_clamps_current(self, queen):
        queen.add_modifier(modifier("Health", ModifierOperation.SET, 20))

        assert queen.max_health == 20
        assert queen.current_health == 20

    def test_remove_by_id_and_source(self, queen):
        first = Modifier.buff("Attack", 5, turns=3, source="node:boost")
        second = Modifier.buff("Attack", 1, turns=3, source="aura")
        queen.add_modifier(first)
        queen.add_modifier(second)
        assert queen.attack == 21

        queen.remove_modifier(second.modifier_id)
        assert queen.attack == 20

        queen.remove_modifiers_by_source("node:boost")
        assert queen.attack == 15


class TestTurnFlags:
    """Tests for per-turn flags and movement."""

    def test_move_sets_flags(self, queen):
        queen.move_to(11)

        assert queen.node_id == 11
        assert queen.has_moved_this_turn
        assert queen.has_ever_moved
        assert not queen.can_move

    def test_start_turn_resets(self, queen):
        queen.move_to(11)
        queen.has_acted_this_turn = True
        queen.start_turn()

        assert queen.can_move
        assert queen.can_act
        assert queen.has_ever_moved

    def test_relocate_keeps_move(self, queen):
        queen.relocate(40)
        assert queen.node_id == 40
        assert queen.can_move

    def test_to_dict(self, queen):
        queen.add_modifier(Modifier.buff("Attack", 5, turns=2))
        data = queen.to_dict()

        assert data["definition_id"] == "Queen"
        assert data["attack"] == 20
        assert data["active_modifiers"][0]["operation"] == "add"
