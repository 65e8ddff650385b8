"""Tests for the stored document adapter."""

from __future__ import annotations

from typing import Any

import pytest

from dnd_sheet.core.exceptions import CharacterDataError
from dnd_sheet.models.character import Character, ClassMembership
from dnd_sheet.models.enums import Ability, HitDie, SpellcasterType
from dnd_sheet.models.legacy import (
    is_legacy_document,
    legacy_class_entry,
    normalize_character,
)


class TestLegacyDetection:
    """Tests for schema detection."""

    @pytest.mark.parametrize(
        ("document", "expected"),
        [
            ({"class": "Fighter"}, True),
            ({"classes": []}, True),
            ({"classes": None, "class": "Rogue"}, True),
            ({"classes": [{"name": "Rogue"}]}, False),
        ],
    )
    def test_is_legacy_document(self, document: dict[str, Any], expected: bool) -> None:
        """Test detection of the flat class schema."""
        assert is_legacy_document(document) is expected

    def test_legacy_class_entry_skips_missing(self) -> None:
        """Test that absent flat fields are not copied."""
        assert legacy_class_entry({"class": "Bard", "subclass": None}) == {"name": "Bard"}


class TestNormalizeCharacter:
    """Tests for normalize_character."""

    def test_legacy_fields(self, legacy_document: dict[str, Any]) -> None:
        """Test that flat fields become a single-class roster."""
        character = normalize_character(legacy_document)

        assert len(character.classes) == 1
        ranger = character.classes[0]
        assert ranger.name == "Ranger"
        assert ranger.subclass == "Hunter"
        assert ranger.level == 4
        assert ranger.hit_dice == HitDie.D10
        assert ranger.hit_dice_used == 2
        assert ranger.spellcaster_type == SpellcasterType.HALF
        assert ranger.spellcasting_ability == Ability.WIS
        assert character.level == 4
        assert character.spell_slots[1].maximum == 3

    def test_equivalent_to_classes_array(self, legacy_document: dict[str, Any]) -> None:
        """Test that both schemas produce the same character."""
        modern = {
            key: value
            for key, value in legacy_document.items()
            if key not in {"class", "subclass", "hitDice", "hitDiceUsed", "spellcasterType", "spellcastingAbility"}
        }
        modern["classes"] = [
            {
                "name": "Ranger",
                "subclass": "Hunter",
                "level": 4,
                "hitDice": "d10",
                "hitDiceUsed": 2,
                "spellcasterType": "half",
                "spellcastingAbility": "wis",
            }
        ]

        assert normalize_character(modern) == normalize_character(legacy_document)

    def test_classes_array_wins(self) -> None:
        """Test that the classes array is used when present."""
        character = normalize_character(
            {
                "class": "Wizard",
                "level": 5,
                "classes": [{"name": "Fighter", "level": 3}, {"name": "Wizard", "level": 2}],
            }
        )
        assert [c.name for c in character.classes] == ["Fighter", "Wizard"]

    def test_empty_document(self) -> None:
        """Test that an empty document yields a new character."""
        character = normalize_character({})
        assert character.classes == [ClassMembership()]

    def test_character_passthrough(self, fighter: Character) -> None:
        """Test that Character instances are returned unchanged."""
        assert normalize_character(fighter) is fighter

    @pytest.mark.parametrize("payload", [None, "character", 42, ["classes"]])
    def test_non_mapping_raises(self, payload: Any) -> None:
        """Test that non-mapping payloads are rejected."""
        with pytest.raises(CharacterDataError) as exc_info:
            normalize_character(payload)

        assert "source" in exc_info.value.details

    def test_malformed_classes_raises(self) -> None:
        """Test that an unreadable roster raises CharacterDataError."""
        with pytest.raises(CharacterDataError) as exc_info:
            normalize_character({"classes": "Fighter 3"})

        assert exc_info.value.details["field_name"] == "classes"
