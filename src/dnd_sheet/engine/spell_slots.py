"""Spell slot computation.

Turns a character's class memberships into spell slot pools:

- One full, half, or third caster uses its own class table.
- Two or more of them share the multiclass table, indexed by the
  effective caster level.
- A Warlock's Pact Magic is always computed from the Warlock's own level
  and never blended into the regular slots.
- Classes with caster type ``manual`` keep hand-edited tables.

Regenerated pools are always full (``current == max``).
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence

from dnd_sheet.core.constants import MAX_CHARACTER_LEVEL, MAX_SPELL_LEVEL, MIN_SPELL_LEVEL
from dnd_sheet.core.logging import get_logger
from dnd_sheet.models.character import ClassMembership, PactMagicSlots, SpellSlot
from dnd_sheet.models.enums import SpellcasterType
from dnd_sheet.models.progression import (
    CASTER_SLOT_TABLES,
    MULTICLASS_SPELL_SLOTS,
    WARLOCK_PACT_MAGIC,
    PactMagicEntry,
)


logger = get_logger(__name__)

SpellSlotTable = dict[int, SpellSlot]
"""Spell level (1-9) -> slot pool."""


# =============================================================================
# Tables
# =============================================================================


def _full_table(maximums: Mapping[int, int]) -> SpellSlotTable:
    """Expand ``{spell_level: max}`` into all nine levels at full capacity."""
    return {
        spell_level: SpellSlot.full(maximums.get(spell_level, 0))
        for spell_level in range(MIN_SPELL_LEVEL, MAX_SPELL_LEVEL + 1)
    }


def empty_spell_slots() -> SpellSlotTable:
    """All nine spell levels with no slots."""
    return _full_table({})


def get_spell_slots_for_level(caster_type: SpellcasterType | str, level: int) -> SpellSlotTable:
    """Get the single-class slot table for a caster type at a class level.

    Args:
        caster_type: The class's caster type. ``warlock`` returns the
            Pact Magic slots expressed as regular slots (older sheets);
            ``none`` and ``manual`` return an empty table.
        level: The class level.

    Returns:
        Slots for spell levels 1-9, full.

    Example:
        >>> slots = get_spell_slots_for_level("full", 5)
        >>> {lvl: s.maximum for lvl, s in slots.items() if s.maximum}
        {1: 4, 2: 3, 3: 2}
    """
    table = CASTER_SLOT_TABLES.get(SpellcasterType(caster_type), {})
    return _full_table(table.get(level, {}))


# =============================================================================
# Multiclass Spellcasting
# =============================================================================


def caster_classes(classes: Sequence[ClassMembership]) -> list[ClassMembership]:
    """Classes that use the regular slot tables (full, half, third)."""
    return [c for c in classes if c.spellcaster_type.uses_slot_table]


def calculate_effective_caster_level(classes: Sequence[ClassMembership]) -> int:
    """Blend class levels into one level for the multiclass table.

    Full caster levels count fully, half caster levels count half (rounded
    up), third caster levels count a third (rounded down). Warlock, manual,
    and non-caster levels do not count. Capped at 20.
    """
    level = 0
    for membership in classes:
        if membership.spellcaster_type == SpellcasterType.FULL:
            level += membership.level
        elif membership.spellcaster_type == SpellcasterType.HALF:
            level += math.ceil(membership.level / 2)
        elif membership.spellcaster_type == SpellcasterType.THIRD:
            level += membership.level // 3
    return min(MAX_CHARACTER_LEVEL, level)


def is_multiclass_caster(classes: Sequence[ClassMembership]) -> bool:
    """Whether more than one class uses the regular slot tables."""
    return len(caster_classes(classes)) > 1


def get_spell_slots_for_classes(classes: Sequence[ClassMembership]) -> SpellSlotTable:
    """Get the regular spell slots for a set of class memberships.

    Returns:
        Slots for spell levels 1-9, full. All zero when no class uses the
        regular slot tables.
    """
    casters = caster_classes(classes)
    if not casters:
        return empty_spell_slots()
    if len(casters) == 1:
        return get_spell_slots_for_level(casters[0].spellcaster_type, casters[0].level)

    effective_level = calculate_effective_caster_level(classes)
    return _full_table(MULTICLASS_SPELL_SLOTS.get(effective_level, {}))


# =============================================================================
# Pact Magic
# =============================================================================


def get_warlock_class(classes: Sequence[ClassMembership]) -> ClassMembership | None:
    """The first Warlock membership, if any."""
    return next(
        (c for c in classes if c.spellcaster_type == SpellcasterType.WARLOCK),
        None,
    )


def get_pact_magic(warlock_level: int) -> PactMagicEntry | None:
    """Pact Magic at a Warlock level. None outside 1-20."""
    return WARLOCK_PACT_MAGIC.get(warlock_level)


def build_pact_magic_slots(classes: Sequence[ClassMembership]) -> PactMagicSlots | None:
    """Full Pact Magic pool for the Warlock membership, if any."""
    warlock = get_warlock_class(classes)
    if warlock is None:
        return None
    entry = get_pact_magic(warlock.level)
    if entry is None:
        return None
    return PactMagicSlots(current=entry.slots, maximum=entry.slots, level=entry.slot_level)


# =============================================================================
# Regeneration
# =============================================================================


def has_auto_slots(classes: Sequence[ClassMembership]) -> bool:
    """Whether any class gets its slots from a table (full, half, third, warlock)."""
    return any(
        c.spellcaster_type.uses_slot_table or c.spellcaster_type == SpellcasterType.WARLOCK
        for c in classes
    )


def has_spellcasting(classes: Sequence[ClassMembership]) -> bool:
    """Whether any class casts spells at all (including manual tables)."""
    return any(c.spellcaster_type != SpellcasterType.NONE for c in classes)


def regenerate_spell_state(
    classes: Sequence[ClassMembership],
    current_slots: Mapping[int, SpellSlot],
) -> tuple[SpellSlotTable, PactMagicSlots | None]:
    """Recompute spell slots and Pact Magic after the class roster changed.

    Args:
        classes: The updated class memberships.
        current_slots: The character's current slot table, kept when only
            manual tables remain.

    Returns:
        ``(spell_slots, pact_magic_slots)``. Slots are empty when no class
        casts spells; Pact Magic is None when no Warlock remains.
    """
    if not has_spellcasting(classes):
        spell_slots: SpellSlotTable = {}
    elif has_auto_slots(classes):
        spell_slots = get_spell_slots_for_classes(classes)
    else:
        spell_slots = dict(current_slots)

    pact_magic = build_pact_magic_slots(classes)
    logger.debug(
        "Spell state regenerated",
        effective_caster_level=calculate_effective_caster_level(classes),
        slot_levels=sorted(lvl for lvl, slot in spell_slots.items() if slot.maximum),
        pact_magic=pact_magic is not None,
    )
    return spell_slots, pact_magic


__all__ = [
    "SpellSlotTable",
    "empty_spell_slots",
    "get_spell_slots_for_level",
    "caster_classes",
    "calculate_effective_caster_level",
    "is_multiclass_caster",
    "get_spell_slots_for_classes",
    "get_warlock_class",
    "get_pact_magic",
    "build_pact_magic_slots",
    "has_auto_slots",
    "has_spellcasting",
    "regenerate_spell_state",
]
