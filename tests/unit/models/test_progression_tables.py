"""Tests for the progression tables."""

from __future__ import annotations

import pytest

from dnd_sheet.models.enums import Ability, HitDie, SpellcasterType
from dnd_sheet.models.progression import (
    CLASS_DEFAULTS,
    FULL_CASTER_SLOTS,
    HALF_CASTER_SLOTS,
    MULTICLASS_SPELL_SLOTS,
    MULTICLASS_PREREQUISITES,
    THIRD_CASTER_SLOTS,
    WARLOCK_LEGACY_SLOTS,
    WARLOCK_PACT_MAGIC,
    XP_THRESHOLDS,
    PactMagicEntry,
    get_class_defaults,
    get_level_for_xp,
    get_xp_for_level,
    get_xp_for_next_level,
    get_xp_progress,
)


class TestXPThresholds:
    """Tests for XP lookups."""

    def test_table_is_ascending(self) -> None:
        """Test that thresholds strictly increase."""
        values = [XP_THRESHOLDS[level] for level in range(1, 21)]
        assert values == sorted(values)
        assert len(set(values)) == 20

    @pytest.mark.parametrize(
        ("xp", "level"),
        [
            (-50, 1),
            (0, 1),
            (299, 1),
            (300, 2),
            (899, 2),
            (6500, 5),
            (354999, 19),
            (355000, 20),
            (10_000_000, 20),
        ],
    )
    def test_level_for_xp(self, xp: int, level: int) -> None:
        """Test level lookup at and around thresholds."""
        assert get_level_for_xp(xp) == level

    @pytest.mark.parametrize(("level", "xp"), [(1, 0), (5, 6500), (20, 355000), (0, 0), (25, 355000)])
    def test_xp_for_level_clamps(self, level: int, xp: int) -> None:
        """Test threshold lookup with level clamped to 1-20."""
        assert get_xp_for_level(level) == xp

    def test_round_trip(self) -> None:
        """Test that each threshold maps back to its level."""
        for level in range(1, 21):
            assert get_level_for_xp(get_xp_for_level(level)) == level

    def test_next_level(self) -> None:
        """Test the XP needed for the next level."""
        assert get_xp_for_next_level(1) == 300
        assert get_xp_for_next_level(19) == 355000
        assert get_xp_for_next_level(20) is None

    def test_progress(self) -> None:
        """Test progress bar values."""
        assert get_xp_progress(450) == (150, 600)
        assert get_xp_progress(400000) == (0, 0)


class TestSlotTables:
    """Tests for spell slot tables."""

    def test_full_caster_level_5(self) -> None:
        """Test the full caster table at level 5."""
        assert FULL_CASTER_SLOTS[5] == {1: 4, 2: 3, 3: 2}

    def test_half_caster_level_5(self) -> None:
        """Test the half caster table at level 5."""
        assert HALF_CASTER_SLOTS[5] == {1: 4, 2: 2}

    def test_third_caster_level_5(self) -> None:
        """Test the third caster table at level 5."""
        assert THIRD_CASTER_SLOTS[5] == {1: 3}

    def test_multiclass_matches_full_table(self) -> None:
        """Test that the multiclass table follows the full caster progression."""
        assert MULTICLASS_SPELL_SLOTS == FULL_CASTER_SLOTS
        assert MULTICLASS_SPELL_SLOTS is not FULL_CASTER_SLOTS

    @pytest.mark.parametrize(
        "table",
        [FULL_CASTER_SLOTS, HALF_CASTER_SLOTS, THIRD_CASTER_SLOTS, WARLOCK_LEGACY_SLOTS],
    )
    def test_tables_cover_all_levels(self, table: dict[int, dict[int, int]]) -> None:
        """Test that every table covers class levels 1-20 with spell levels 1-9."""
        assert set(table) == set(range(1, 21))
        for slots in table.values():
            assert all(1 <= spell_level <= 9 for spell_level in slots)


class TestPactMagic:
    """Tests for the Warlock tables."""

    @pytest.mark.parametrize(
        ("level", "entry"),
        [
            (1, PactMagicEntry(1, 1)),
            (2, PactMagicEntry(2, 1)),
            (3, PactMagicEntry(2, 2)),
            (9, PactMagicEntry(2, 5)),
            (11, PactMagicEntry(3, 5)),
            (17, PactMagicEntry(4, 5)),
        ],
    )
    def test_pact_magic(self, level: int, entry: PactMagicEntry) -> None:
        """Test Pact Magic slots and slot level by Warlock level."""
        assert WARLOCK_PACT_MAGIC[level] == entry

    def test_legacy_slots_mirror_pact_magic(self) -> None:
        """Test that legacy Warlock slots sit at the pact slot level."""
        assert WARLOCK_LEGACY_SLOTS[3] == {2: 2}
        assert WARLOCK_LEGACY_SLOTS[20] == {5: 4}


class TestClassDefaults:
    """Tests for class defaults and prerequisites."""

    def test_twelve_classes(self) -> None:
        """Test that the standard classes are all present."""
        assert len(CLASS_DEFAULTS) == 12

    @pytest.mark.parametrize(
        ("name", "hit_die", "caster_type", "ability"),
        [
            ("Barbarian", HitDie.D12, SpellcasterType.NONE, None),
            ("Paladin", HitDie.D10, SpellcasterType.HALF, Ability.CHA),
            ("Warlock", HitDie.D8, SpellcasterType.WARLOCK, Ability.CHA),
            ("Wizard", HitDie.D6, SpellcasterType.FULL, Ability.INT),
        ],
    )
    def test_defaults(
        self,
        name: str,
        hit_die: HitDie,
        caster_type: SpellcasterType,
        ability: Ability | None,
    ) -> None:
        """Test hit die, caster type, and spellcasting ability per class."""
        defaults = get_class_defaults(name)

        assert defaults is not None
        assert defaults.hit_die == hit_die
        assert defaults.spellcaster_type == caster_type
        assert defaults.spellcasting_ability == ability

    def test_custom_class_has_no_defaults(self) -> None:
        """Test that custom classes return None."""
        assert get_class_defaults("Blood Hunter") is None

    def test_prerequisites_follow_primary_abilities(self) -> None:
        """Test multiclass prerequisites."""
        assert MULTICLASS_PREREQUISITES["Monk"] == (Ability.DEX, Ability.WIS)
        assert MULTICLASS_PREREQUISITES["Paladin"] == (Ability.STR, Ability.CHA)
