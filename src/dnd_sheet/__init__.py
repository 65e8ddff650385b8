"""dnd_sheet - Rules engine for D&D 2024 character sheets.

Derives statistics from ability scores, tracks experience and multiclass
level allocation, computes spell slots and Pact Magic, and manages hit
points, hit dice, death saves, and rests.

The engine is pure: it reads a Character and returns a CharacterPatch.
Loading and saving character documents is up to the caller.

Example:
    >>> from dnd_sheet import normalize_character, gain_experience, apply_patch
    >>>
    >>> character = normalize_character(document)  # either class schema
    >>> result = gain_experience(character, 300)
    >>> result.message
    '+300 XP! Level 2!'
    >>> store.update(character_id, result.patch.to_update())

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 schemas, rules tables, and the document adapter.
    engine: Rules commands (ability math, slots, hit dice, resources,
        progression, class roster).
"""

from __future__ import annotations

# Core
from dnd_sheet.core.config import Settings, get_settings
from dnd_sheet.core.exceptions import CharacterDataError, DndSheetError
from dnd_sheet.core.logging import configure_logging, get_logger

# Models
from dnd_sheet.models import (
    Character,
    CharacterPatch,
    ClassMembership,
    apply_patch,
    normalize_character,
)

# Engine
from dnd_sheet.engine import (
    add_class,
    apply_damage,
    apply_healing,
    gain_experience,
    level_up,
    long_rest,
    set_experience,
    short_rest,
)


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "DndSheetError",
    "CharacterDataError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Character",
    "CharacterPatch",
    "ClassMembership",
    "apply_patch",
    "normalize_character",
    # Engine
    "add_class",
    "apply_damage",
    "apply_healing",
    "gain_experience",
    "level_up",
    "long_rest",
    "set_experience",
    "short_rest",
]
