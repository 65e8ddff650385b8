"""Enumeration types for the D&D 2024 character rules engine.

Values match the strings stored in character documents, so enums can be
read from and written to the document store without translation.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Ability(StrEnum):
    """D&D ability scores, keyed by their stored abbreviation."""

    STR = "str"
    DEX = "dex"
    CON = "con"
    INT = "int"
    WIS = "wis"
    CHA = "cha"

    @property
    def abbreviation(self) -> str:
        """Get the three-letter abbreviation (e.g., 'STR')."""
        return self.name


class Skill(StrEnum):
    """D&D skills and their associated abilities.

    Values are the display names used as keys in stored sheets.
    """

    ACROBATICS = "Acrobatics"
    ANIMAL_HANDLING = "Animal Handling"
    ARCANA = "Arcana"
    ATHLETICS = "Athletics"
    DECEPTION = "Deception"
    HISTORY = "History"
    INSIGHT = "Insight"
    INTIMIDATION = "Intimidation"
    INVESTIGATION = "Investigation"
    MEDICINE = "Medicine"
    NATURE = "Nature"
    PERCEPTION = "Perception"
    PERFORMANCE = "Performance"
    PERSUASION = "Persuasion"
    RELIGION = "Religion"
    SLEIGHT_OF_HAND = "Sleight of Hand"
    STEALTH = "Stealth"
    SURVIVAL = "Survival"

    @property
    def ability(self) -> Ability:
        """Get the ability score used for checks with this skill.

        Returns:
            The Ability enum value associated with this skill.
        """
        skill_abilities: dict[Skill, Ability] = {
            # Strength
            Skill.ATHLETICS: Ability.STR,
            # Dexterity
            Skill.ACROBATICS: Ability.DEX,
            Skill.SLEIGHT_OF_HAND: Ability.DEX,
            Skill.STEALTH: Ability.DEX,
            # Intelligence
            Skill.ARCANA: Ability.INT,
            Skill.HISTORY: Ability.INT,
            Skill.INVESTIGATION: Ability.INT,
            Skill.NATURE: Ability.INT,
            Skill.RELIGION: Ability.INT,
            # Wisdom
            Skill.ANIMAL_HANDLING: Ability.WIS,
            Skill.INSIGHT: Ability.WIS,
            Skill.MEDICINE: Ability.WIS,
            Skill.PERCEPTION: Ability.WIS,
            Skill.SURVIVAL: Ability.WIS,
            # Charisma
            Skill.DECEPTION: Ability.CHA,
            Skill.INTIMIDATION: Ability.CHA,
            Skill.PERFORMANCE: Ability.CHA,
            Skill.PERSUASION: Ability.CHA,
        }
        return skill_abilities[self]


class ProficiencyRank(IntEnum):
    """How many times the proficiency bonus applies to a skill."""

    NONE = 0
    PROFICIENT = 1
    EXPERTISE = 2


class SpellcasterType(StrEnum):
    """How a class gains spell slots.

    Levels:
        NONE: No spellcasting.
        FULL: Full caster table (Bard, Cleric, Druid, Sorcerer, Wizard).
        HALF: Half caster table (Paladin, Ranger).
        THIRD: One-third caster table (Eldritch Knight, Arcane Trickster).
        WARLOCK: Pact Magic, a separate short-rest pool.
        MANUAL: Slots are edited by hand and never regenerated.
    """

    NONE = "none"
    FULL = "full"
    HALF = "half"
    THIRD = "third"
    WARLOCK = "warlock"
    MANUAL = "manual"

    @property
    def display_name(self) -> str:
        """Get the label shown next to a class."""
        names = {
            SpellcasterType.NONE: "None",
            SpellcasterType.FULL: "Full Caster",
            SpellcasterType.HALF: "Half Caster",
            SpellcasterType.THIRD: "1/3 Caster",
            SpellcasterType.WARLOCK: "Warlock",
            SpellcasterType.MANUAL: "Manual",
        }
        return names[self]

    @property
    def uses_slot_table(self) -> bool:
        """Whether the class contributes to the regular slot tables."""
        return self in (SpellcasterType.FULL, SpellcasterType.HALF, SpellcasterType.THIRD)


class HitDie(StrEnum):
    """Hit die types."""

    D6 = "d6"
    D8 = "d8"
    D10 = "d10"
    D12 = "d12"

    @property
    def sides(self) -> int:
        """Number of faces on the die."""
        return int(self.value[1:])


class DeathSaveKind(StrEnum):
    """The two death saving throw tracks."""

    SUCCESS = "successes"
    FAILURE = "failures"


class VitalState(StrEnum):
    """Coarse hit point state.

    Character death is not modeled; three failed death saves are a
    display signal only.
    """

    CONSCIOUS = "conscious"
    DOWN = "down"


class RestType(StrEnum):
    """Types of rest."""

    SHORT = "short"
    LONG = "long"


__all__ = [
    "Ability",
    "Skill",
    "ProficiencyRank",
    "SpellcasterType",
    "HitDie",
    "DeathSaveKind",
    "VitalState",
    "RestType",
]
