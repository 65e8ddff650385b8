"""Ability score math.

Derives modifiers, proficiency bonus, skill and saving throw bonuses,
passive scores, and spellcasting statistics. Every function is pure and
total: any integer input produces a result.

The commands at the bottom edit scores and proficiencies and return a
CharacterPatch. Unknown abilities or skills return an empty patch.
"""

from __future__ import annotations

import math
from typing import Any, NamedTuple

from dnd_sheet.core.constants import (
    MAX_ABILITY_SCORE,
    MAX_CHARACTER_LEVEL,
    MIN_ABILITY_SCORE,
    MIN_CHARACTER_LEVEL,
)
from dnd_sheet.core.logging import get_logger
from dnd_sheet.models.character import (
    Character,
    CharacterPatch,
    clamp,
    coerce_int,
    coerce_optional_int,
)
from dnd_sheet.models.enums import Ability, ProficiencyRank, Skill


logger = get_logger(__name__)


# =============================================================================
# Core Formulas
# =============================================================================


def calculate_modifier(score: int) -> int:
    """Calculate the ability modifier from an ability score.

    The modifier is calculated as: (score - 10) // 2, rounded down.

    Args:
        score: The ability score (1-30).

    Returns:
        The ability modifier (-5 to +10).

    Example:
        >>> calculate_modifier(10)
        0
        >>> calculate_modifier(9)
        -1
        >>> calculate_modifier(17)
        3
    """
    return (score - 10) // 2


def get_proficiency_bonus(level: int) -> int:
    """Get proficiency bonus for a level: ceil(level / 4) + 1.

    Level is clamped to 1-20, so the result is always 2-6.
    """
    level = clamp(level, MIN_CHARACTER_LEVEL, MAX_CHARACTER_LEVEL)
    return math.ceil(level / 4) + 1


def get_skill_modifier(score: int, rank: int, proficiency_bonus: int) -> int:
    """Calculate a skill bonus.

    Args:
        score: The governing ability score.
        rank: 0 (none), 1 (proficient), or 2 (expertise).
        proficiency_bonus: The character's proficiency bonus.

    Returns:
        Ability modifier plus ``rank`` times the proficiency bonus.
    """
    rank = clamp(rank, ProficiencyRank.NONE, ProficiencyRank.EXPERTISE)
    return calculate_modifier(score) + rank * proficiency_bonus


def get_saving_throw_modifier(score: int, proficient: bool, proficiency_bonus: int) -> int:
    """Calculate a saving throw bonus."""
    bonus = calculate_modifier(score)
    if proficient:
        bonus += proficiency_bonus
    return bonus


# =============================================================================
# Character Statistics
# =============================================================================


class SpellStats(NamedTuple):
    """Spellcasting numbers for one ability."""

    ability: Ability
    modifier: int
    save_dc: int
    attack_bonus: int


def character_proficiency_bonus(character: Character) -> int:
    """Proficiency bonus from the character's global level."""
    return get_proficiency_bonus(character.level)


def ability_modifier(character: Character, ability: Ability | str) -> int:
    """Modifier for one of the character's abilities."""
    return calculate_modifier(character.abilities.get_score(ability))


def skill_modifier(character: Character, skill: Skill | str) -> int:
    """Total bonus for a skill check, using the character's proficiency rank."""
    skill = Skill(skill)
    rank = character.skills.get(skill, ProficiencyRank.NONE)
    return get_skill_modifier(
        character.abilities.get_score(skill.ability),
        rank,
        character_proficiency_bonus(character),
    )


def saving_throw_modifier(character: Character, ability: Ability | str) -> int:
    """Total bonus for a saving throw."""
    ability = Ability(ability)
    return get_saving_throw_modifier(
        character.abilities.get_score(ability),
        character.saving_throws.get(ability, False),
        character_proficiency_bonus(character),
    )


def passive_score(character: Character, skill: Skill | str) -> int:
    """Passive score for a skill (e.g., Passive Perception): 10 + skill bonus."""
    return 10 + skill_modifier(character, skill)


def initiative_modifier(character: Character) -> int:
    """Initiative bonus: the override when one is set, else the DEX modifier."""
    if character.initiative_override is not None:
        return character.initiative_override
    return ability_modifier(character, Ability.DEX)


def spell_stats(character: Character, ability: Ability | str | None = None) -> SpellStats | None:
    """Spell save DC and spell attack bonus.

    Args:
        character: The character.
        ability: Spellcasting ability. Defaults to that of the first class
            that has one.

    Returns:
        SpellStats, or None when no spellcasting ability is known.

    Example:
        A level 5 Wizard with INT 18 has save DC 8 + 3 + 4 = 15 and a
        spell attack bonus of +7.
    """
    if ability is None:
        ability = next(
            (c.spellcasting_ability for c in character.classes if c.spellcasting_ability),
            None,
        )
        if ability is None:
            return None

    ability = Ability(ability)
    modifier = ability_modifier(character, ability)
    proficiency_bonus = character_proficiency_bonus(character)
    return SpellStats(
        ability=ability,
        modifier=modifier,
        save_dc=8 + proficiency_bonus + modifier,
        attack_bonus=proficiency_bonus + modifier,
    )


# =============================================================================
# Commands
# =============================================================================


def _read_ability(value: Any) -> Ability | None:
    try:
        return Ability(str(value).strip().lower())
    except ValueError:
        return None


def _read_skill(value: Any) -> Skill | None:
    try:
        return Skill(value)
    except ValueError:
        return None


def set_ability_score(character: Character, ability: Ability | str, value: Any) -> CharacterPatch:
    """Set one ability score, clamped to 1-30.

    Args:
        character: The character being edited.
        ability: The ability (or its stored abbreviation).
        value: The new score. An unreadable value keeps the current score.

    Returns:
        Patch with the whole ``abilities`` block.

    Example:
        >>> set_ability_score(Character(), "str", 35).abilities.strength
        30
    """
    parsed = _read_ability(ability)
    if parsed is None:
        logger.warning("Unknown ability", character=character.name, ability=str(ability))
        return CharacterPatch()

    current = character.abilities.get_score(parsed)
    score = clamp(coerce_int(value, current), MIN_ABILITY_SCORE, MAX_ABILITY_SCORE)
    logger.debug("Ability score set", character=character.name, ability=parsed.value, score=score)
    return CharacterPatch(abilities=character.abilities.with_score(parsed, score))


def toggle_skill_proficiency(character: Character, skill: Skill | str) -> CharacterPatch:
    """Cycle a skill's rank: none, proficient, expertise, then none again.

    The patch carries the full skills map with the one rank changed.
    """
    parsed = _read_skill(skill)
    if parsed is None:
        logger.warning("Unknown skill", character=character.name, skill=str(skill))
        return CharacterPatch()

    current = character.skills.get(parsed, ProficiencyRank.NONE)
    rank = ProficiencyRank((current + 1) % (ProficiencyRank.EXPERTISE + 1))
    skills = dict(character.skills)
    skills[parsed] = rank
    logger.debug(
        "Skill proficiency toggled", character=character.name, skill=parsed.value, rank=int(rank)
    )
    return CharacterPatch(skills=skills)


def toggle_saving_throw(character: Character, ability: Ability | str) -> CharacterPatch:
    """Flip proficiency in one saving throw."""
    parsed = _read_ability(ability)
    if parsed is None:
        logger.warning("Unknown ability", character=character.name, ability=str(ability))
        return CharacterPatch()

    saving_throws = dict(character.saving_throws)
    saving_throws[parsed] = not character.saving_throws.get(parsed, False)
    return CharacterPatch(saving_throws=saving_throws)


def set_initiative_override(character: Character, value: Any) -> CharacterPatch:
    """Set a fixed initiative bonus, or clear it with None or a blank value.

    Example:
        >>> set_initiative_override(Character(), "").to_update()
        {'initiativeOverride': None}
    """
    return CharacterPatch(initiative_override=coerce_optional_int(value))


__all__ = [
    "calculate_modifier",
    "get_proficiency_bonus",
    "get_skill_modifier",
    "get_saving_throw_modifier",
    "SpellStats",
    "character_proficiency_bonus",
    "ability_modifier",
    "skill_modifier",
    "saving_throw_modifier",
    "passive_score",
    "initiative_modifier",
    "spell_stats",
    "set_ability_score",
    "toggle_skill_proficiency",
    "toggle_saving_throw",
    "set_initiative_override",
]
