"""Tests for spell slot computation."""

from __future__ import annotations

import pytest

from dnd_sheet.engine.spell_slots import (
    build_pact_magic_slots,
    calculate_effective_caster_level,
    empty_spell_slots,
    get_pact_magic,
    get_spell_slots_for_classes,
    get_spell_slots_for_level,
    get_warlock_class,
    has_auto_slots,
    has_spellcasting,
    is_multiclass_caster,
    regenerate_spell_state,
)
from dnd_sheet.models.character import ClassMembership, PactMagicSlots, SpellSlot
from dnd_sheet.models.progression import PactMagicEntry


def caster(caster_type: str, level: int, name: str = "") -> ClassMembership:
    """Build a membership with a caster type."""
    return ClassMembership(name=name or caster_type.title(), level=level, spellcaster_type=caster_type)


def maximums(slots: dict[int, SpellSlot]) -> dict[int, int]:
    """Non-zero slot maximums."""
    return {level: slot.maximum for level, slot in slots.items() if slot.maximum}


class TestSingleClassTables:
    """Tests for get_spell_slots_for_level."""

    @pytest.mark.parametrize(
        ("caster_type", "level", "expected"),
        [
            ("full", 1, {1: 2}),
            ("full", 5, {1: 4, 2: 3, 3: 2}),
            ("full", 20, {1: 4, 2: 3, 3: 3, 4: 3, 5: 3, 6: 2, 7: 2, 8: 1, 9: 1}),
            ("half", 1, {}),
            ("half", 5, {1: 4, 2: 2}),
            ("third", 2, {}),
            ("third", 5, {1: 3}),
            ("warlock", 3, {2: 2}),
            ("none", 10, {}),
            ("manual", 10, {}),
        ],
    )
    def test_tables(self, caster_type: str, level: int, expected: dict[int, int]) -> None:
        """Test table lookups by caster type and class level."""
        assert maximums(get_spell_slots_for_level(caster_type, level)) == expected

    def test_all_levels_present_and_full(self) -> None:
        """Test that results cover spell levels 1-9 at full capacity."""
        slots = get_spell_slots_for_level("full", 5)

        assert list(slots) == list(range(1, 10))
        assert all(slot.current == slot.maximum for slot in slots.values())

    def test_level_out_of_table(self) -> None:
        """Test levels outside 1-20 give no slots."""
        assert maximums(get_spell_slots_for_level("full", 0)) == {}
        assert maximums(get_spell_slots_for_level("full", 21)) == {}


class TestMulticlassBlending:
    """Tests for effective caster level and the multiclass table."""

    def test_full_plus_half(self) -> None:
        """Test full 3 + half 4 -> effective level 5."""
        classes = [caster("full", 3), caster("half", 4)]

        assert calculate_effective_caster_level(classes) == 5
        assert maximums(get_spell_slots_for_classes(classes)) == {1: 4, 2: 3, 3: 2}

    @pytest.mark.parametrize(
        ("classes", "expected"),
        [
            ([caster("half", 3)], 2),
            ([caster("third", 5)], 1),
            ([caster("third", 2)], 0),
            ([caster("warlock", 5), caster("none", 5), caster("manual", 5)], 0),
            ([caster("full", 15), caster("full", 15)], 20),
        ],
    )
    def test_effective_level_weights(self, classes: list[ClassMembership], expected: int) -> None:
        """Test half rounds up, third rounds down, others count zero, cap 20."""
        assert calculate_effective_caster_level(classes) == expected

    def test_single_caster_uses_own_table(self) -> None:
        """Test that one caster plus non-casters uses its own table."""
        classes = [caster("half", 5), caster("none", 3)]

        assert is_multiclass_caster(classes) is False
        assert maximums(get_spell_slots_for_classes(classes)) == {1: 4, 2: 2}

    def test_warlock_not_blended(self) -> None:
        """Test that Warlock levels never add regular slots."""
        classes = [caster("warlock", 5), caster("full", 3)]

        assert is_multiclass_caster(classes) is False
        assert maximums(get_spell_slots_for_classes(classes)) == {1: 4, 2: 2}

    def test_no_casters(self) -> None:
        """Test that no spellcasting classes give nine empty levels."""
        slots = get_spell_slots_for_classes([caster("none", 5)])

        assert slots == empty_spell_slots()
        assert len(slots) == 9


class TestPactMagic:
    """Tests for Pact Magic helpers."""

    def test_get_pact_magic(self) -> None:
        """Test lookups and out-of-range levels."""
        assert get_pact_magic(3) == PactMagicEntry(slots=2, slot_level=2)
        assert get_pact_magic(0) is None
        assert get_pact_magic(21) is None

    def test_first_warlock_wins(self) -> None:
        """Test that the first Warlock membership is used."""
        first = caster("warlock", 2, name="Warlock")
        second = caster("warlock", 5, name="Hexblade")

        assert get_warlock_class([caster("full", 3), first, second]) is first

    def test_build_from_warlock_level(self) -> None:
        """Test the pool comes from the Warlock's own level."""
        pact = build_pact_magic_slots([caster("full", 10), caster("warlock", 5)])
        assert pact == PactMagicSlots(current=2, maximum=2, level=3)

    def test_no_warlock(self) -> None:
        """Test that no Warlock means no pool."""
        assert build_pact_magic_slots([caster("full", 10)]) is None

    def test_unallocated_warlock(self) -> None:
        """Test that a level 0 Warlock has no pool yet."""
        assert build_pact_magic_slots([caster("full", 3), caster("warlock", 0)]) is None


class TestRegeneration:
    """Tests for regenerate_spell_state."""

    def test_auto_slot_detection(self) -> None:
        """Test which caster types use tables."""
        assert has_auto_slots([caster("warlock", 1)]) is True
        assert has_auto_slots([caster("manual", 1), caster("none", 1)]) is False
        assert has_spellcasting([caster("manual", 1)]) is True
        assert has_spellcasting([caster("none", 1)]) is False

    def test_no_spellcasting_clears_slots(self) -> None:
        """Test that non-casters get an empty table and no Pact Magic."""
        slots, pact = regenerate_spell_state([caster("none", 4)], {1: SpellSlot(current=1, maximum=2)})

        assert slots == {}
        assert pact is None

    def test_manual_tables_preserved(self) -> None:
        """Test that manual-only rosters keep their hand-edited slots."""
        current = {1: SpellSlot(current=1, maximum=3), 2: SpellSlot(current=0, maximum=1)}

        slots, pact = regenerate_spell_state([caster("manual", 4)], current)

        assert slots == current
        assert pact is None

    def test_tables_regenerated_full(self) -> None:
        """Test that regenerated slots and Pact Magic are full."""
        classes = [caster("full", 3), caster("warlock", 2)]

        slots, pact = regenerate_spell_state(classes, {1: SpellSlot(current=0, maximum=4)})

        assert maximums(slots) == {1: 4, 2: 2}
        assert slots[1].current == 4
        assert pact == PactMagicSlots(current=2, maximum=2, level=1)
