"""Class roster edits and multiclass prerequisite advice.

Adding, editing, and removing class memberships never changes the global
level, which follows experience alone. Prerequisite checks are advisory:
a failed check produces a warning but the edit still goes through.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from dnd_sheet.core.config import RulesSettings, get_settings
from dnd_sheet.core.constants import MAX_CHARACTER_LEVEL, MIN_CHARACTER_LEVEL, MIN_CLASS_LEVEL
from dnd_sheet.core.logging import get_logger
from dnd_sheet.engine.spell_slots import regenerate_spell_state
from dnd_sheet.models.character import (
    AbilityScores,
    Character,
    CharacterPatch,
    ClassMembership,
    clamp,
    coerce_int,
)
from dnd_sheet.models.enums import Ability, SpellcasterType
from dnd_sheet.models.progression import (
    FLEXIBLE_PREREQUISITES,
    MULTICLASS_PREREQUISITES,
    get_class_defaults,
    get_level_for_xp,
)


logger = get_logger(__name__)

SPELL_FIELDS = frozenset({"level", "spellcaster_type"})
"""Membership fields whose change rebuilds spell slots."""


class PrerequisiteCheck(BaseModel):
    """Result of a multiclass prerequisite check."""

    model_config = ConfigDict(frozen=True)

    class_name: str
    can_multiclass: bool = True
    failing_abilities: tuple[Ability, ...] = Field(default_factory=tuple)
    message: str | None = None


class ClassEditResult(BaseModel):
    """Outcome of a roster edit: the patch plus advisory warnings."""

    model_config = ConfigDict(frozen=True)

    patch: CharacterPatch = Field(default_factory=CharacterPatch)
    warnings: tuple[str, ...] = Field(default_factory=tuple)

    @property
    def applied(self) -> bool:
        """Whether the edit changed anything."""
        return not self.patch.is_empty


# =============================================================================
# Prerequisites
# =============================================================================


def check_multiclass_prerequisites(
    abilities: AbilityScores,
    class_name: str,
    *,
    rules: RulesSettings | None = None,
) -> PrerequisiteCheck:
    """Check whether ability scores allow multiclassing into a class.

    Args:
        abilities: The character's ability scores.
        class_name: Class to check. Custom classes always pass.
        rules: Rule variants. Defaults to the configured settings.

    Returns:
        PrerequisiteCheck with the failing abilities and a warning message.

    Example:
        >>> check_multiclass_prerequisites(AbilityScores(charisma=12), "Sorcerer").message
        'Sorcerer requires CHA 13+'
    """
    rules = rules or get_settings().rules
    minimum = rules.multiclass_min_score

    flexible = FLEXIBLE_PREREQUISITES.get(class_name)
    if flexible is not None:
        if any(abilities.get_score(a) >= minimum for a in flexible):
            return PrerequisiteCheck(class_name=class_name)
        options = " or ".join(f"{a.abbreviation} {minimum}" for a in flexible)
        return PrerequisiteCheck(
            class_name=class_name,
            can_multiclass=False,
            failing_abilities=flexible,
            message=f"{class_name} requires {options}",
        )

    required = MULTICLASS_PREREQUISITES.get(class_name)
    if required is None:
        return PrerequisiteCheck(class_name=class_name)

    failing = tuple(a for a in required if abilities.get_score(a) < minimum)
    if not failing:
        return PrerequisiteCheck(class_name=class_name)

    names = ", ".join(a.abbreviation for a in failing)
    return PrerequisiteCheck(
        class_name=class_name,
        can_multiclass=False,
        failing_abilities=failing,
        message=f"{class_name} requires {names} {minimum}+",
    )


def check_all_class_prerequisites(
    abilities: AbilityScores,
    class_names: Iterable[str],
    *,
    rules: RulesSettings | None = None,
) -> list[PrerequisiteCheck]:
    """Failing checks for every class a multiclass character has."""
    checks = (
        check_multiclass_prerequisites(abilities, name, rules=rules)
        for name in class_names
    )
    return [check for check in checks if not check.can_multiclass]


# =============================================================================
# Roster Edits
# =============================================================================


def new_class_membership(
    name: str,
    *,
    is_first: bool = False,
    overrides: Mapping[str, Any] | None = None,
) -> ClassMembership:
    """Create a membership pre-filled from the class defaults.

    The first class starts at level 1; classes added later start at level 0
    and receive levels by allocation.
    """
    data: dict[str, Any] = {
        "name": name,
        "level": MIN_CHARACTER_LEVEL if is_first else MIN_CLASS_LEVEL,
    }
    defaults = get_class_defaults(name)
    if defaults is not None:
        data.update(
            hit_dice=defaults.hit_die,
            spellcaster_type=defaults.spellcaster_type,
            spellcasting_ability=defaults.spellcasting_ability,
        )
    data.update(overrides or {})
    return ClassMembership.model_validate(data)


def _spell_patch(character: Character, classes: list[ClassMembership], patch: CharacterPatch) -> None:
    spell_slots, pact_magic = regenerate_spell_state(classes, character.spell_slots)
    patch.spell_slots = spell_slots
    if pact_magic != character.pact_magic_slots:
        patch.pact_magic_slots = pact_magic


def add_class(
    character: Character,
    membership: ClassMembership,
    *,
    rules: RulesSettings | None = None,
) -> ClassEditResult:
    """Add a class, replacing the unnamed placeholder of a new sheet.

    Returns:
        ClassEditResult whose warnings list unmet multiclass prerequisites.
        Warnings never block the edit.
    """
    replaces_placeholder = not character.is_multiclass and not character.primary_class.is_named
    classes = [membership] if replaces_placeholder else [*character.classes, membership]

    patch = CharacterPatch(classes=classes)
    if membership.spellcaster_type != SpellcasterType.NONE:
        _spell_patch(character, classes, patch)

    warnings: tuple[str, ...] = ()
    if len(classes) > 1:
        failing = check_all_class_prerequisites(
            character.abilities,
            (c.name for c in classes if c.is_named),
            rules=rules,
        )
        warnings = tuple(check.message for check in failing if check.message)

    logger.info(
        "Class added",
        character=character.name,
        class_name=membership.name,
        replaced_placeholder=replaces_placeholder,
        warnings=len(warnings),
    )
    return ClassEditResult(patch=patch, warnings=warnings)


def update_class(character: Character, index: int, **changes: Any) -> ClassEditResult:
    """Edit one membership.

    Changing ``level`` or ``spellcaster_type`` rebuilds spell slots and Pact
    Magic. Pact Magic is removed when no Warlock remains. An index outside
    the roster does nothing.
    """
    if not 0 <= index < len(character.classes):
        return ClassEditResult()

    classes = list(character.classes)
    classes[index] = classes[index].with_changes(**changes)
    patch = CharacterPatch(classes=classes)
    if SPELL_FIELDS & changes.keys():
        _spell_patch(character, classes, patch)

    logger.debug("Class updated", character=character.name, index=index, fields=sorted(changes))
    return ClassEditResult(patch=patch)


def change_class_level(character: Character, index: int, delta: Any) -> ClassEditResult:
    """Allocate (positive delta) or remove (negative delta) class levels.

    Increments are refused once class levels reach the global level.
    """
    if not 0 <= index < len(character.classes):
        return ClassEditResult()

    delta = coerce_int(delta, 0)
    global_level = get_level_for_xp(character.experience)
    if delta > 0 and character.total_class_levels >= global_level:
        return ClassEditResult(
            warnings=(f"All {global_level} level(s) are already allocated.",),
        )

    new_level = clamp(character.classes[index].level + delta, MIN_CLASS_LEVEL, MAX_CHARACTER_LEVEL)
    return update_class(character, index, level=new_level)


def remove_class(character: Character, index: int) -> ClassEditResult:
    """Remove a membership. The last remaining class cannot be removed.

    Spell slots are left as they are; a later level or caster type change
    rebuilds them.
    """
    if len(character.classes) <= 1 or not 0 <= index < len(character.classes):
        return ClassEditResult()

    removed = character.classes[index]
    classes = [c for i, c in enumerate(character.classes) if i != index]
    logger.info("Class removed", character=character.name, class_name=removed.name)
    return ClassEditResult(patch=CharacterPatch(classes=classes))


__all__ = [
    "PrerequisiteCheck",
    "ClassEditResult",
    "check_multiclass_prerequisites",
    "check_all_class_prerequisites",
    "new_class_membership",
    "add_class",
    "update_class",
    "change_class_level",
    "remove_class",
]
