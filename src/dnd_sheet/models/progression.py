"""D&D 2024 Level Progression Data.

This module contains the static data needed for character level progression:
- XP thresholds for each level
- Spell slots by caster type and level
- Warlock Pact Magic by Warlock level
- Class defaults (hit die, caster type, spellcasting ability)
- Multiclass prerequisites

All values follow the 2024 rules (SRD 5.2.1). Engine modules read these
tables; nothing writes to them.
"""

from __future__ import annotations

from typing import NamedTuple

from dnd_sheet.core.constants import MAX_CHARACTER_LEVEL, MIN_CHARACTER_LEVEL
from dnd_sheet.models.character import clamp
from dnd_sheet.models.enums import Ability, HitDie, SpellcasterType


# =============================================================================
# XP Thresholds
# =============================================================================

XP_THRESHOLDS: dict[int, int] = {
    1: 0,
    2: 300,
    3: 900,
    4: 2700,
    5: 6500,
    6: 14000,
    7: 23000,
    8: 34000,
    9: 48000,
    10: 64000,
    11: 85000,
    12: 100000,
    13: 120000,
    14: 140000,
    15: 165000,
    16: 195000,
    17: 225000,
    18: 265000,
    19: 305000,
    20: 355000,
}


def get_level_for_xp(xp: int) -> int:
    """Determine character level based on XP. Negative XP is level 1."""
    for level in range(MAX_CHARACTER_LEVEL, MIN_CHARACTER_LEVEL, -1):
        if xp >= XP_THRESHOLDS[level]:
            return level
    return MIN_CHARACTER_LEVEL


def get_xp_for_level(level: int) -> int:
    """Get the XP threshold for a level, clamped to 1-20."""
    return XP_THRESHOLDS[clamp(level, MIN_CHARACTER_LEVEL, MAX_CHARACTER_LEVEL)]


def get_xp_for_next_level(current_level: int) -> int | None:
    """Get XP needed for the next level. Returns None at level 20."""
    if current_level >= MAX_CHARACTER_LEVEL:
        return None
    return get_xp_for_level(current_level + 1)


def get_xp_progress(xp: int) -> tuple[int, int]:
    """Get (current_xp_in_level, xp_needed_for_level).

    Returns:
        Tuple of (progress, total) for progress bar display. ``(0, 0)``
        at maximum level.
    """
    current_level = get_level_for_xp(xp)
    if current_level >= MAX_CHARACTER_LEVEL:
        return (0, 0)

    current_threshold = XP_THRESHOLDS[current_level]
    next_threshold = XP_THRESHOLDS[current_level + 1]

    return (xp - current_threshold, next_threshold - current_threshold)


# =============================================================================
# Spell Slots by Level
# =============================================================================

# Full casters: Bard, Cleric, Druid, Sorcerer, Wizard
FULL_CASTER_SLOTS: dict[int, dict[int, int]] = {
    1:  {1: 2},
    2:  {1: 3},
    3:  {1: 4, 2: 2},
    4:  {1: 4, 2: 3},
    5:  {1: 4, 2: 3, 3: 2},
    6:  {1: 4, 2: 3, 3: 3},
    7:  {1: 4, 2: 3, 3: 3, 4: 1},
    8:  {1: 4, 2: 3, 3: 3, 4: 2},
    9:  {1: 4, 2: 3, 3: 3, 4: 3, 5: 1},
    10: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2},
    11: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1},
    12: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1},
    13: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1},
    14: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1},
    15: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1, 8: 1},
    16: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1, 8: 1},
    17: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2, 6: 1, 7: 1, 8: 1, 9: 1},
    18: {1: 4, 2: 3, 3: 3, 4: 3, 5: 3, 6: 1, 7: 1, 8: 1, 9: 1},
    19: {1: 4, 2: 3, 3: 3, 4: 3, 5: 3, 6: 2, 7: 1, 8: 1, 9: 1},
    20: {1: 4, 2: 3, 3: 3, 4: 3, 5: 3, 6: 2, 7: 2, 8: 1, 9: 1},
}

# Half casters: Paladin, Ranger (start at level 2)
HALF_CASTER_SLOTS: dict[int, dict[int, int]] = {
    1:  {},
    2:  {1: 2},
    3:  {1: 3},
    4:  {1: 3},
    5:  {1: 4, 2: 2},
    6:  {1: 4, 2: 2},
    7:  {1: 4, 2: 3},
    8:  {1: 4, 2: 3},
    9:  {1: 4, 2: 3, 3: 2},
    10: {1: 4, 2: 3, 3: 2},
    11: {1: 4, 2: 3, 3: 3},
    12: {1: 4, 2: 3, 3: 3},
    13: {1: 4, 2: 3, 3: 3, 4: 1},
    14: {1: 4, 2: 3, 3: 3, 4: 1},
    15: {1: 4, 2: 3, 3: 3, 4: 2},
    16: {1: 4, 2: 3, 3: 3, 4: 2},
    17: {1: 4, 2: 3, 3: 3, 4: 3, 5: 1},
    18: {1: 4, 2: 3, 3: 3, 4: 3, 5: 1},
    19: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2},
    20: {1: 4, 2: 3, 3: 3, 4: 3, 5: 2},
}

# Third casters: Eldritch Knight, Arcane Trickster (start at level 3)
THIRD_CASTER_SLOTS: dict[int, dict[int, int]] = {
    1:  {},
    2:  {},
    3:  {1: 2},
    4:  {1: 3},
    5:  {1: 3},
    6:  {1: 3},
    7:  {1: 4, 2: 2},
    8:  {1: 4, 2: 2},
    9:  {1: 4, 2: 2},
    10: {1: 4, 2: 3},
    11: {1: 4, 2: 3},
    12: {1: 4, 2: 3},
    13: {1: 4, 2: 3, 3: 2},
    14: {1: 4, 2: 3, 3: 2},
    15: {1: 4, 2: 3, 3: 2},
    16: {1: 4, 2: 3, 3: 3},
    17: {1: 4, 2: 3, 3: 3},
    18: {1: 4, 2: 3, 3: 3},
    19: {1: 4, 2: 3, 3: 3, 4: 1},
    20: {1: 4, 2: 3, 3: 3, 4: 1},
}

# Multiclass spellcaster table, keyed by effective caster level.
# Same progression as the full caster table.
MULTICLASS_SPELL_SLOTS: dict[int, dict[int, int]] = {
    level: dict(slots) for level, slots in FULL_CASTER_SLOTS.items()
}


class PactMagicEntry(NamedTuple):
    """Pact Magic at one Warlock level."""

    slots: int
    slot_level: int


# Warlock pact magic
WARLOCK_PACT_MAGIC: dict[int, PactMagicEntry] = {
    # level: (num_slots, slot_level)
    1:  PactMagicEntry(1, 1),
    2:  PactMagicEntry(2, 1),
    3:  PactMagicEntry(2, 2),
    4:  PactMagicEntry(2, 2),
    5:  PactMagicEntry(2, 3),
    6:  PactMagicEntry(2, 3),
    7:  PactMagicEntry(2, 4),
    8:  PactMagicEntry(2, 4),
    9:  PactMagicEntry(2, 5),
    10: PactMagicEntry(2, 5),
    11: PactMagicEntry(3, 5),
    12: PactMagicEntry(3, 5),
    13: PactMagicEntry(3, 5),
    14: PactMagicEntry(3, 5),
    15: PactMagicEntry(3, 5),
    16: PactMagicEntry(3, 5),
    17: PactMagicEntry(4, 5),
    18: PactMagicEntry(4, 5),
    19: PactMagicEntry(4, 5),
    20: PactMagicEntry(4, 5),
}

# Older sheets show Pact Magic as regular slots at the pact slot level
WARLOCK_LEGACY_SLOTS: dict[int, dict[int, int]] = {
    level: {entry.slot_level: entry.slots} for level, entry in WARLOCK_PACT_MAGIC.items()
}

CASTER_SLOT_TABLES: dict[SpellcasterType, dict[int, dict[int, int]]] = {
    SpellcasterType.FULL: FULL_CASTER_SLOTS,
    SpellcasterType.HALF: HALF_CASTER_SLOTS,
    SpellcasterType.THIRD: THIRD_CASTER_SLOTS,
    SpellcasterType.WARLOCK: WARLOCK_LEGACY_SLOTS,
}


# =============================================================================
# Class Defaults
# =============================================================================


class ClassDefaults(NamedTuple):
    """Values pre-filled when a standard class is added."""

    hit_die: HitDie
    spellcaster_type: SpellcasterType
    spellcasting_ability: Ability | None
    primary_abilities: tuple[Ability, ...]


CLASS_DEFAULTS: dict[str, ClassDefaults] = {
    "Barbarian": ClassDefaults(HitDie.D12, SpellcasterType.NONE, None, (Ability.STR,)),
    "Bard": ClassDefaults(HitDie.D8, SpellcasterType.FULL, Ability.CHA, (Ability.CHA,)),
    "Cleric": ClassDefaults(HitDie.D8, SpellcasterType.FULL, Ability.WIS, (Ability.WIS,)),
    "Druid": ClassDefaults(HitDie.D8, SpellcasterType.FULL, Ability.WIS, (Ability.WIS,)),
    "Fighter": ClassDefaults(HitDie.D10, SpellcasterType.NONE, None, (Ability.STR,)),
    "Monk": ClassDefaults(HitDie.D8, SpellcasterType.NONE, None, (Ability.DEX, Ability.WIS)),
    "Paladin": ClassDefaults(HitDie.D10, SpellcasterType.HALF, Ability.CHA, (Ability.STR, Ability.CHA)),
    "Ranger": ClassDefaults(HitDie.D10, SpellcasterType.HALF, Ability.WIS, (Ability.DEX, Ability.WIS)),
    "Rogue": ClassDefaults(HitDie.D8, SpellcasterType.NONE, None, (Ability.DEX,)),
    "Sorcerer": ClassDefaults(HitDie.D6, SpellcasterType.FULL, Ability.CHA, (Ability.CHA,)),
    "Warlock": ClassDefaults(HitDie.D8, SpellcasterType.WARLOCK, Ability.CHA, (Ability.CHA,)),
    "Wizard": ClassDefaults(HitDie.D6, SpellcasterType.FULL, Ability.INT, (Ability.INT,)),
}

def get_class_defaults(class_name: str) -> ClassDefaults | None:
    """Get defaults for a standard class. Custom classes return None."""
    return CLASS_DEFAULTS.get(class_name.strip())


# =============================================================================
# Multiclass Prerequisites (SRD 5.2.1)
# =============================================================================

# Every listed ability must meet the minimum score
MULTICLASS_PREREQUISITES: dict[str, tuple[Ability, ...]] = {
    name: defaults.primary_abilities for name, defaults in CLASS_DEFAULTS.items()
}

# Any one listed ability is enough
FLEXIBLE_PREREQUISITES: dict[str, tuple[Ability, ...]] = {
    "Fighter": (Ability.STR, Ability.DEX),
}


__all__ = [
    # XP
    "XP_THRESHOLDS",
    "get_level_for_xp",
    "get_xp_for_level",
    "get_xp_for_next_level",
    "get_xp_progress",
    # Spell slots
    "FULL_CASTER_SLOTS",
    "HALF_CASTER_SLOTS",
    "THIRD_CASTER_SLOTS",
    "MULTICLASS_SPELL_SLOTS",
    "WARLOCK_PACT_MAGIC",
    "WARLOCK_LEGACY_SLOTS",
    "CASTER_SLOT_TABLES",
    "PactMagicEntry",
    # Classes
    "ClassDefaults",
    "CLASS_DEFAULTS",
    "get_class_defaults",
    "MULTICLASS_PREREQUISITES",
    "FLEXIBLE_PREREQUISITES",
]
