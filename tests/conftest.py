"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the character rules engine test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from dnd_sheet.core.config import RulesSettings
from dnd_sheet.models.character import (
    AbilityScores,
    Character,
    ClassMembership,
    HitPoints,
    PactMagicSlots,
    SpellSlot,
)


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from dnd_sheet.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run in an empty directory with no DND_SHEET_ variables set.

    Returns:
        The temporary working directory.
    """
    import os

    for key in list(os.environ):
        if key.startswith("DND_SHEET_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def rules() -> RulesSettings:
    """Provide default rule settings."""
    return RulesSettings(
        legacy_warlock_short_rest=True,
        multiclass_min_score=13,
        default_hit_die="d8",
    )


# =============================================================================
# Character Fixtures
# =============================================================================


def slot_table(maximums: dict[int, int], current: dict[int, int] | None = None) -> dict[int, SpellSlot]:
    """Build a nine-level slot table from ``{level: max}``."""
    current = current or {}
    return {
        level: SpellSlot(
            current=current.get(level, maximums.get(level, 0)),
            maximum=maximums.get(level, 0),
        )
        for level in range(1, 10)
    }


@pytest.fixture
def sample_abilities() -> AbilityScores:
    """Provide sample ability scores.

    Returns:
        STR 16, DEX 14, CON 15, INT 10, WIS 12, CHA 8.
    """
    return AbilityScores(
        strength=16,
        dexterity=14,
        constitution=15,
        intelligence=10,
        wisdom=12,
        charisma=8,
    )


@pytest.fixture
def new_character() -> Character:
    """A freshly created sheet with one unnamed class."""
    return Character(name="New Hero")


@pytest.fixture
def fighter(sample_abilities: AbilityScores) -> Character:
    """Level 5 single-class Fighter with some damage and spent hit dice."""
    return Character(
        name="Thorin",
        abilities=sample_abilities,
        classes=[
            ClassMembership(name="Fighter", level=5, hit_dice="d10", hit_dice_used=3),
        ],
        experience=6500,
        level=5,
        proficiency_bonus=3,
        hp=HitPoints(current=20, maximum=44, temp=0),
        skills={"Athletics": 1, "Perception": 2},
        saving_throws={"str": True, "con": True},
        exhaustion=2,
    )


@pytest.fixture
def wizard() -> Character:
    """Level 5 Wizard with a few slots spent."""
    return Character(
        name="Elminster",
        abilities=AbilityScores(intelligence=18, dexterity=14, constitution=12),
        classes=[
            ClassMembership(
                name="Wizard",
                level=5,
                hit_dice="d6",
                spellcaster_type="full",
                spellcasting_ability="int",
            ),
        ],
        experience=6500,
        level=5,
        proficiency_bonus=3,
        hp=HitPoints(current=27, maximum=27),
        spell_slots=slot_table({1: 4, 2: 3, 3: 2}, current={1: 1, 2: 0, 3: 2}),
    )


@pytest.fixture
def warlock() -> Character:
    """Level 3 single-class Warlock with spent Pact Magic and legacy slots."""
    return Character(
        name="Mordai",
        abilities=AbilityScores(charisma=16),
        classes=[
            ClassMembership(
                name="Warlock",
                level=3,
                hit_dice="d8",
                spellcaster_type="warlock",
                spellcasting_ability="cha",
            ),
        ],
        experience=900,
        level=3,
        hp=HitPoints(current=18, maximum=24),
        spell_slots=slot_table({2: 2}, current={2: 0}),
        pact_magic_slots=PactMagicSlots(current=0, maximum=2, level=2),
    )


@pytest.fixture
def warlock_sorcerer() -> Character:
    """Warlock 2 / Sorcerer 3 multiclass with everything spent."""
    return Character(
        name="Vex",
        abilities=AbilityScores(charisma=16),
        classes=[
            ClassMembership(name="Warlock", level=2, hit_dice="d8", spellcaster_type="warlock"),
            ClassMembership(name="Sorcerer", level=3, hit_dice="d6", spellcaster_type="full"),
        ],
        experience=6500,
        level=5,
        proficiency_bonus=3,
        hp=HitPoints(current=30, maximum=30),
        spell_slots=slot_table({1: 4, 2: 2}, current={1: 0, 2: 0}),
        pact_magic_slots=PactMagicSlots(current=0, maximum=2, level=1),
    )


@pytest.fixture
def cleric_paladin() -> Character:
    """Cleric 3 / Paladin 4 multiclass caster at global level 7."""
    return Character(
        name="Aldric",
        abilities=AbilityScores(strength=14, wisdom=15, charisma=13),
        classes=[
            ClassMembership(name="Cleric", level=3, hit_dice="d8", spellcaster_type="full"),
            ClassMembership(name="Paladin", level=4, hit_dice="d10", spellcaster_type="half"),
        ],
        experience=23000,
        level=7,
        proficiency_bonus=3,
        hp=HitPoints(current=50, maximum=58),
        spell_slots=slot_table({1: 4, 2: 3, 3: 2}),
    )


@pytest.fixture
def legacy_document() -> dict[str, Any]:
    """A stored sheet using the flat single-class fields."""
    return {
        "name": "Old Sheet",
        "class": "Ranger",
        "subclass": "Hunter",
        "level": 4,
        "hitDice": "d10",
        "hitDiceUsed": 2,
        "spellcasterType": "half",
        "spellcastingAbility": "wis",
        "experience": 2700,
        "proficiencyBonus": 2,
        "abilities": {"str": 12, "dex": 16, "con": 14, "int": 10, "wis": 14, "cha": 8},
        "hp": {"current": 30, "max": 34, "temp": 0},
        "spellSlots": {"1": {"current": 2, "max": 3}},
        "notes": "Not modeled by the engine",
    }
