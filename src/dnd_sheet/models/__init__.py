"""Pydantic V2 schemas and rules tables for the character rules engine.

Submodules:
    enums: Enumeration types (Ability, Skill, SpellcasterType, HitDie, etc.)
    character: The Character aggregate, its parts, and CharacterPatch
    progression: XP, spell slot, Pact Magic, and class default tables
    legacy: Reads stored documents in either class schema

Example:
    >>> from dnd_sheet.models import Character, ClassMembership, normalize_character
    >>> character = normalize_character({"class": "Wizard", "level": 3})
    >>> character.classes[0].name
    'Wizard'
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from dnd_sheet.models.enums import (
    Ability,
    DeathSaveKind,
    HitDie,
    ProficiencyRank,
    RestType,
    Skill,
    SpellcasterType,
    VitalState,
)

# =============================================================================
# Character
# =============================================================================
from dnd_sheet.models.character import (
    AbilityScores,
    Character,
    CharacterPatch,
    ClassMembership,
    DeathSaves,
    HitPoints,
    PactMagicSlots,
    SpellSlot,
    apply_patch,
    clamp,
    coerce_int,
    coerce_optional_int,
)

# =============================================================================
# Progression Tables
# =============================================================================
from dnd_sheet.models.progression import (
    CLASS_DEFAULTS,
    WARLOCK_PACT_MAGIC,
    XP_THRESHOLDS,
    ClassDefaults,
    PactMagicEntry,
    get_class_defaults,
    get_level_for_xp,
    get_xp_for_level,
    get_xp_for_next_level,
    get_xp_progress,
)

# =============================================================================
# Boundary
# =============================================================================
from dnd_sheet.models.legacy import normalize_character


__all__ = [
    # Enums
    "Ability",
    "DeathSaveKind",
    "HitDie",
    "ProficiencyRank",
    "RestType",
    "Skill",
    "SpellcasterType",
    "VitalState",
    # Character
    "AbilityScores",
    "Character",
    "CharacterPatch",
    "ClassMembership",
    "DeathSaves",
    "HitPoints",
    "PactMagicSlots",
    "SpellSlot",
    "apply_patch",
    "clamp",
    "coerce_int",
    "coerce_optional_int",
    # Progression
    "CLASS_DEFAULTS",
    "WARLOCK_PACT_MAGIC",
    "XP_THRESHOLDS",
    "ClassDefaults",
    "PactMagicEntry",
    "get_class_defaults",
    "get_level_for_xp",
    "get_xp_for_level",
    "get_xp_for_next_level",
    "get_xp_progress",
    # Boundary
    "normalize_character",
]
