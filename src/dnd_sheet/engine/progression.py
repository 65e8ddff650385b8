"""Experience and level progression.

Experience is the single source of a character's global level, and the
global level alone sets the proficiency bonus. How class levels follow
depends on the roster:

- A single-class character's class level always equals the global level,
  and its spell slots and Pact Magic are rebuilt with it.
- A multiclass character allocates class levels by hand. XP changes only
  touch the global level; the engine reports how many levels are left to
  allocate (or how far the class levels overshoot).
"""

from __future__ import annotations

from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict

from dnd_sheet.core.constants import MAX_CHARACTER_LEVEL
from dnd_sheet.core.logging import get_logger
from dnd_sheet.engine.ability_math import get_proficiency_bonus
from dnd_sheet.engine.spell_slots import has_auto_slots, regenerate_spell_state
from dnd_sheet.models.character import Character, CharacterPatch, ClassMembership, coerce_int
from dnd_sheet.models.progression import get_level_for_xp, get_xp_for_level


logger = get_logger(__name__)


class ProgressionResult(BaseModel):
    """Outcome of an experience change.

    Attributes:
        patch: Fields to write in one update.
        global_level: Global level after the change.
        previous_level: Global level before the change.
        allocation_delta: Global level minus the sum of class levels.
            Positive means levels are waiting to be allocated.
        leveled_up: Whether the global level went up.
        message: Short status line for the player.
    """

    model_config = ConfigDict(frozen=True)

    patch: CharacterPatch
    global_level: int
    previous_level: int
    allocation_delta: int = 0
    leveled_up: bool = False
    message: str = ""


class AllocationSummary(NamedTuple):
    """Global level versus allocated class levels."""

    global_level: int
    class_levels: int
    delta: int


# =============================================================================
# Queries
# =============================================================================


def allocation_summary(character: Character) -> AllocationSummary:
    """Compare the XP-derived global level with the allocated class levels."""
    global_level = get_level_for_xp(character.experience)
    class_levels = character.total_class_levels
    return AllocationSummary(global_level, class_levels, global_level - class_levels)


# =============================================================================
# Derived Fields
# =============================================================================


def _spell_fields(
    character: Character,
    classes: list[ClassMembership],
    patch: CharacterPatch,
) -> None:
    """Rebuild spell slots and Pact Magic into ``patch`` when tables apply."""
    if not has_auto_slots(classes):
        return
    spell_slots, pact_magic = regenerate_spell_state(classes, character.spell_slots)
    patch.spell_slots = spell_slots
    if pact_magic != character.pact_magic_slots:
        patch.pact_magic_slots = pact_magic


def recalculate_derived(character: Character) -> CharacterPatch:
    """Recompute global level, proficiency bonus, and spell pools.

    Class levels are left as they are. Used after roster edits that change
    class levels by hand.
    """
    global_level = get_level_for_xp(character.experience)
    patch = CharacterPatch(
        level=global_level,
        proficiency_bonus=get_proficiency_bonus(global_level),
    )
    _spell_fields(character, list(character.classes), patch)
    return patch


def _experience_patch(character: Character, experience: int) -> tuple[CharacterPatch, int]:
    """Build the patch for a new XP total. Returns the patch and new global level."""
    global_level = get_level_for_xp(experience)
    patch = CharacterPatch(
        experience=experience,
        level=global_level,
        proficiency_bonus=get_proficiency_bonus(global_level),
    )
    if not character.is_multiclass:
        classes = [character.primary_class.with_changes(level=global_level)]
        patch.classes = classes
        _spell_fields(character, classes, patch)
    return patch, global_level


# =============================================================================
# Commands
# =============================================================================


def set_experience(character: Character, experience: Any) -> ProgressionResult:
    """Set total experience points.

    Args:
        character: The character.
        experience: New XP total; negative values become 0 and unreadable
            values keep the current total.

    Returns:
        ProgressionResult with the patch and a status message.
    """
    experience = max(0, coerce_int(experience, character.experience))
    previous_level = get_level_for_xp(character.experience)
    patch, global_level = _experience_patch(character, experience)
    delta = global_level - character.total_class_levels if character.is_multiclass else 0

    if character.is_multiclass and delta > 0:
        message = f"Level {global_level}! {delta} level(s) to allocate in Class tab."
    elif character.is_multiclass and delta < 0:
        message = f"Level {global_level}! Class levels exceed by {-delta}. Reduce in Class tab."
    elif global_level != previous_level and not character.is_multiclass:
        message = f"Level {global_level}!"
    else:
        message = "XP updated."

    logger.info(
        "Experience set",
        character=character.name,
        experience=experience,
        previous_level=previous_level,
        global_level=global_level,
        allocation_delta=delta,
    )
    return ProgressionResult(
        patch=patch,
        global_level=global_level,
        previous_level=previous_level,
        allocation_delta=delta,
        leveled_up=global_level > previous_level,
        message=message,
    )


def gain_experience(character: Character, amount: Any) -> ProgressionResult:
    """Add experience points. Zero, negative, or unreadable amounts do nothing."""
    amount = coerce_int(amount, 0)
    previous_level = get_level_for_xp(character.experience)
    if amount <= 0:
        return ProgressionResult(
            patch=CharacterPatch(),
            global_level=previous_level,
            previous_level=previous_level,
        )

    experience = character.experience + amount
    patch, global_level = _experience_patch(character, experience)
    delta = global_level - character.total_class_levels if character.is_multiclass else 0

    if character.is_multiclass and delta > 0:
        message = f"+{amount} XP! Level {global_level}! {delta} level(s) to allocate."
    elif global_level != previous_level and not character.is_multiclass:
        message = f"+{amount} XP! Level {global_level}!"
    else:
        message = f"+{amount} XP!"

    logger.info(
        "Experience gained",
        character=character.name,
        amount=amount,
        experience=experience,
        global_level=global_level,
    )
    return ProgressionResult(
        patch=patch,
        global_level=global_level,
        previous_level=previous_level,
        allocation_delta=delta,
        leveled_up=global_level > previous_level,
        message=message,
    )


def level_up(character: Character) -> ProgressionResult:
    """Advance to the next level by setting XP to its threshold.

    At level 20 nothing changes.
    """
    previous_level = get_level_for_xp(character.experience)
    if previous_level >= MAX_CHARACTER_LEVEL:
        return ProgressionResult(
            patch=CharacterPatch(),
            global_level=previous_level,
            previous_level=previous_level,
            message="Maximum level reached!",
        )

    patch, global_level = _experience_patch(character, get_xp_for_level(previous_level + 1))
    delta = global_level - character.total_class_levels if character.is_multiclass else 0
    if character.is_multiclass:
        message = f"Level {global_level}! {delta} level(s) to allocate in Class tab."
    else:
        message = f"Level {global_level}!"

    logger.info("Level up", character=character.name, global_level=global_level)
    return ProgressionResult(
        patch=patch,
        global_level=global_level,
        previous_level=previous_level,
        allocation_delta=delta,
        leveled_up=True,
        message=message,
    )


__all__ = [
    "ProgressionResult",
    "AllocationSummary",
    "allocation_summary",
    "recalculate_derived",
    "set_experience",
    "gain_experience",
    "level_up",
]
