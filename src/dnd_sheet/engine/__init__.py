"""Rules engine for D&D 2024 character sheets.

Every command takes the current Character and returns a CharacterPatch
(or a result wrapping one) holding all fields that must change together.
The caller writes the patch as one update.

Submodules:
    ability_math: Modifiers, skills, saves, spell DC, score and proficiency edits
    spell_slots: Slot tables, multiclass blending, Pact Magic
    hit_dice: Hit dice pools by die type, spending and recovery
    resources: Hit points, death saves, slot usage, exhaustion, rests
    progression: Experience, global level, class level allocation
    classes: Class roster edits and multiclass prerequisite advice

Example:
    >>> from dnd_sheet.engine import apply_damage, long_rest
    >>> from dnd_sheet.models import apply_patch
    >>>
    >>> character = apply_patch(character, apply_damage(character, 8))
    >>> character = apply_patch(character, long_rest(character))
"""

from __future__ import annotations

# =============================================================================
# Ability Math
# =============================================================================
from dnd_sheet.engine.ability_math import (
    SpellStats,
    calculate_modifier,
    get_proficiency_bonus,
    get_saving_throw_modifier,
    get_skill_modifier,
    initiative_modifier,
    passive_score,
    saving_throw_modifier,
    set_ability_score,
    set_initiative_override,
    skill_modifier,
    spell_stats,
    toggle_saving_throw,
    toggle_skill_proficiency,
)

# =============================================================================
# Spell Slots
# =============================================================================
from dnd_sheet.engine.spell_slots import (
    build_pact_magic_slots,
    calculate_effective_caster_level,
    get_pact_magic,
    get_spell_slots_for_classes,
    get_spell_slots_for_level,
    get_warlock_class,
    has_auto_slots,
    is_multiclass_caster,
    regenerate_spell_state,
)

# =============================================================================
# Hit Dice
# =============================================================================
from dnd_sheet.engine.hit_dice import (
    HitDiceGroup,
    apply_long_rest_recovery,
    calculate_long_rest_recovery,
    group_hit_dice,
    set_hit_dice_used,
    spend_hit_dice,
    total_hit_dice_remaining,
)

# =============================================================================
# Resources & Rests
# =============================================================================
from dnd_sheet.engine.resources import (
    apply_damage,
    apply_healing,
    long_rest,
    set_current_hp,
    set_exhaustion,
    set_hp_bonus,
    set_max_hp,
    set_spell_slot_max,
    set_temp_hp,
    short_rest,
    take_rest,
    toggle_death_save,
    use_pact_magic_slot,
    use_spell_slot,
    vital_state,
)

# =============================================================================
# Progression
# =============================================================================
from dnd_sheet.engine.progression import (
    AllocationSummary,
    ProgressionResult,
    allocation_summary,
    gain_experience,
    level_up,
    recalculate_derived,
    set_experience,
)

# =============================================================================
# Class Roster
# =============================================================================
from dnd_sheet.engine.classes import (
    ClassEditResult,
    PrerequisiteCheck,
    add_class,
    change_class_level,
    check_all_class_prerequisites,
    check_multiclass_prerequisites,
    new_class_membership,
    remove_class,
    update_class,
)


__all__ = [
    # Ability Math
    "SpellStats",
    "calculate_modifier",
    "get_proficiency_bonus",
    "get_saving_throw_modifier",
    "get_skill_modifier",
    "initiative_modifier",
    "passive_score",
    "saving_throw_modifier",
    "set_ability_score",
    "set_initiative_override",
    "skill_modifier",
    "spell_stats",
    "toggle_saving_throw",
    "toggle_skill_proficiency",
    # Spell Slots
    "build_pact_magic_slots",
    "calculate_effective_caster_level",
    "get_pact_magic",
    "get_spell_slots_for_classes",
    "get_spell_slots_for_level",
    "get_warlock_class",
    "has_auto_slots",
    "is_multiclass_caster",
    "regenerate_spell_state",
    # Hit Dice
    "HitDiceGroup",
    "apply_long_rest_recovery",
    "calculate_long_rest_recovery",
    "group_hit_dice",
    "set_hit_dice_used",
    "spend_hit_dice",
    "total_hit_dice_remaining",
    # Resources
    "apply_damage",
    "apply_healing",
    "long_rest",
    "set_current_hp",
    "set_exhaustion",
    "set_hp_bonus",
    "set_max_hp",
    "set_spell_slot_max",
    "set_temp_hp",
    "short_rest",
    "take_rest",
    "toggle_death_save",
    "use_pact_magic_slot",
    "use_spell_slot",
    "vital_state",
    # Progression
    "AllocationSummary",
    "ProgressionResult",
    "allocation_summary",
    "gain_experience",
    "level_up",
    "recalculate_derived",
    "set_experience",
    # Class Roster
    "ClassEditResult",
    "PrerequisiteCheck",
    "add_class",
    "change_class_level",
    "check_all_class_prerequisites",
    "check_multiclass_prerequisites",
    "new_class_membership",
    "remove_class",
    "update_class",
]
