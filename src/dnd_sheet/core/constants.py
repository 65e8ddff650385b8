"""Rules constants for the D&D 2024 character rules engine.

Bounds used when clamping stored character data and by the rule
computations themselves.
"""

from __future__ import annotations

# =============================================================================
# Ability Scores
# =============================================================================

MIN_ABILITY_SCORE = 1
"""Minimum ability score."""

MAX_ABILITY_SCORE = 30
"""Maximum ability score."""

DEFAULT_ABILITY_SCORE = 10
"""Ability score used when a stored value cannot be read."""

MULTICLASS_MIN_SCORE = 13
"""Ability score required by multiclass prerequisites (SRD 5.2.1)."""

# =============================================================================
# Levels
# =============================================================================

MIN_CHARACTER_LEVEL = 1
"""Minimum global character level."""

MAX_CHARACTER_LEVEL = 20
"""Maximum global and class level."""

MIN_CLASS_LEVEL = 0
"""Additional classes start at level 0 until levels are allocated."""

DEFAULT_PROFICIENCY_BONUS = 2
"""Proficiency bonus at level 1."""

# =============================================================================
# Spellcasting
# =============================================================================

MIN_SPELL_LEVEL = 1
"""Lowest spell level that uses a slot."""

MAX_SPELL_LEVEL = 9
"""Highest spell slot level."""

MAX_PACT_SLOT_LEVEL = 5
"""Pact Magic slots never exceed 5th level."""

# =============================================================================
# Resources
# =============================================================================

MAX_DEATH_SAVES = 3
"""Death save pips per track (3 successes = stable, 3 failures = dead)."""

MAX_EXHAUSTION = 6
"""Highest exhaustion level."""

DEFAULT_HIT_DIE = "d8"
"""Hit die assumed for classes that do not name one."""


__all__ = [
    # Ability Scores
    "MIN_ABILITY_SCORE",
    "MAX_ABILITY_SCORE",
    "DEFAULT_ABILITY_SCORE",
    "MULTICLASS_MIN_SCORE",
    # Levels
    "MIN_CHARACTER_LEVEL",
    "MAX_CHARACTER_LEVEL",
    "MIN_CLASS_LEVEL",
    "DEFAULT_PROFICIENCY_BONUS",
    # Spellcasting
    "MIN_SPELL_LEVEL",
    "MAX_SPELL_LEVEL",
    "MAX_PACT_SLOT_LEVEL",
    # Resources
    "MAX_DEATH_SAVES",
    "MAX_EXHAUSTION",
    "DEFAULT_HIT_DIE",
]
