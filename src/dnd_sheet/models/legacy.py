"""Boundary adapter for stored character documents.

Older sheets keep a single class in flat top-level fields (``class``,
``subclass``, ``level``, ``hitDice``, ``hitDiceUsed``, ``spellcasterType``,
``spellcastingAbility``). Newer sheets keep a ``classes`` array. This
module reads either shape once so nothing past the boundary needs to know
which schema a sheet was saved with.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from dnd_sheet.core.exceptions import CharacterDataError
from dnd_sheet.core.logging import get_logger
from dnd_sheet.models.character import Character


logger = get_logger(__name__)

LEGACY_CLASS_FIELDS: dict[str, str] = {
    "class": "name",
    "subclass": "subclass",
    "level": "level",
    "hitDice": "hitDice",
    "hitDiceUsed": "hitDiceUsed",
    "spellcasterType": "spellcasterType",
    "spellcastingAbility": "spellcastingAbility",
}
"""Flat document field -> ClassMembership field."""


def is_legacy_document(data: Mapping[str, Any]) -> bool:
    """Whether a document stores its class in flat fields only."""
    classes = data.get("classes")
    return classes is None or classes == []


def legacy_class_entry(data: Mapping[str, Any]) -> dict[str, Any]:
    """Build a ``classes`` entry from flat legacy fields."""
    return {
        target: data[source]
        for source, target in LEGACY_CLASS_FIELDS.items()
        if data.get(source) is not None
    }


def normalize_character(data: Character | Mapping[str, Any]) -> Character:
    """Read a stored character document into a Character.

    Args:
        data: A Character (returned unchanged) or a raw document in either
            the flat legacy shape or the ``classes`` array shape.

    Returns:
        The canonical Character with a non-empty ``classes`` list.

    Raises:
        CharacterDataError: If the payload is not a mapping or cannot be
            coerced into a Character.
    """
    if isinstance(data, Character):
        return data
    if not isinstance(data, Mapping):
        raise CharacterDataError(
            "Character document must be a mapping",
            source=type(data).__name__,
        )

    document = dict(data)
    if is_legacy_document(document):
        document["classes"] = [legacy_class_entry(document)]
        logger.debug(
            "Normalized legacy class fields",
            class_name=document["classes"][0].get("name", ""),
        )

    try:
        return Character.model_validate(document)
    except ValidationError as exc:
        first = exc.errors()[0]
        raise CharacterDataError(
            "Character document could not be read",
            field_name=".".join(str(part) for part in first["loc"]),
            details={"errors": exc.error_count()},
        ) from exc


__all__ = [
    "LEGACY_CLASS_FIELDS",
    "is_legacy_document",
    "legacy_class_entry",
    "normalize_character",
]
