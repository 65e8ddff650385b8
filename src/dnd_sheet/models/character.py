"""Character data model for the D&D 2024 character rules engine.

The models mirror the character document kept in the document store.
Stored field names are camelCase (``hitDiceUsed``, ``proficiencyBonus``);
Python code uses snake_case. Both spellings are accepted on input.

Out-of-range numbers are never rejected. Every numeric field is clamped to
its valid range and unreadable values fall back to a default, so a sheet
edited by hand (or by an older client) always loads.

Models:
    AbilityScores: The six ability scores.
    ClassMembership: One class entry in a (possibly multiclass) character.
    HitPoints: Current, maximum, and temporary hit points.
    DeathSaves: Death saving throw pips.
    SpellSlot: One spell level's slot pool.
    PactMagicSlots: The Warlock's separate slot pool.
    Character: The aggregate the engine reads.
    CharacterPatch: The set of fields a command changes.

Example:
    >>> character = Character(classes=[ClassMembership(name="Wizard", level=5)])
    >>> patch = CharacterPatch(experience=6500)
    >>> patch.to_update()
    {'experience': 6500}
"""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from dnd_sheet.core.config import get_settings
from dnd_sheet.core.constants import (
    DEFAULT_ABILITY_SCORE,
    DEFAULT_PROFICIENCY_BONUS,
    MAX_ABILITY_SCORE,
    MAX_CHARACTER_LEVEL,
    MAX_DEATH_SAVES,
    MAX_EXHAUSTION,
    MAX_PACT_SLOT_LEVEL,
    MAX_SPELL_LEVEL,
    MIN_ABILITY_SCORE,
    MIN_CHARACTER_LEVEL,
    MIN_CLASS_LEVEL,
    MIN_SPELL_LEVEL,
)
from dnd_sheet.models.enums import (
    Ability,
    HitDie,
    ProficiencyRank,
    Skill,
    SpellcasterType,
)


# =============================================================================
# Validators and Type Definitions
# =============================================================================


def clamp(value: int, low: int, high: int) -> int:
    """Clamp a value into ``[low, high]``.

    Example:
        >>> clamp(35, 1, 30)
        30
    """
    return max(low, min(high, value))


def coerce_int(value: Any, default: int) -> int:
    """Read an integer from loosely typed document data.

    Accepts ints, floats (truncated), numeric strings and booleans.
    Anything else, including NaN and infinities, returns ``default``.

    Args:
        value: The raw stored value.
        default: Fallback when the value cannot be read as a number.

    Returns:
        The integer value or the default.

    Example:
        >>> coerce_int("14", 10)
        14
        >>> coerce_int("abc", 10)
        10
    """
    if value is None:
        return default
    if isinstance(value, int):
        return int(value)
    if isinstance(value, str):
        value = value.strip()
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def coerce_optional_int(value: Any) -> int | None:
    """Like :func:`coerce_int`, but blank or unreadable values become None."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, int):
        return int(value)
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


class SheetModel(BaseModel):
    """Base class for stored character sheet models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# Ability Scores
# =============================================================================


class AbilityScores(SheetModel):
    """The six ability scores, stored under their abbreviations.

    Scores are clamped to 1-30. Unreadable scores become 10.

    Example:
        >>> scores = AbilityScores(strength=16, dexterity=14)
        >>> scores.get_score(Ability.STR)
        16
    """

    strength: int = Field(default=DEFAULT_ABILITY_SCORE, alias="str")
    dexterity: int = Field(default=DEFAULT_ABILITY_SCORE, alias="dex")
    constitution: int = Field(default=DEFAULT_ABILITY_SCORE, alias="con")
    intelligence: int = Field(default=DEFAULT_ABILITY_SCORE, alias="int")
    wisdom: int = Field(default=DEFAULT_ABILITY_SCORE, alias="wis")
    charisma: int = Field(default=DEFAULT_ABILITY_SCORE, alias="cha")

    @field_validator("*", mode="before")
    @classmethod
    def clamp_score(cls, value: Any) -> int:
        """Clamp each score into the valid range."""
        return clamp(coerce_int(value, DEFAULT_ABILITY_SCORE), MIN_ABILITY_SCORE, MAX_ABILITY_SCORE)

    def get_score(self, ability: Ability | str) -> int:
        """Get the score for a specific ability.

        Args:
            ability: The ability (or its stored abbreviation).

        Returns:
            The ability score value.
        """
        ability_map: dict[Ability, int] = {
            Ability.STR: self.strength,
            Ability.DEX: self.dexterity,
            Ability.CON: self.constitution,
            Ability.INT: self.intelligence,
            Ability.WIS: self.wisdom,
            Ability.CHA: self.charisma,
        }
        return ability_map[Ability(ability)]

    def with_score(self, ability: Ability | str, score: int) -> "AbilityScores":
        """Return a copy with one score replaced, clamped to 1-30."""
        scores = self.model_dump(by_alias=True)
        scores[Ability(ability).value] = score
        return AbilityScores.model_validate(scores)

    def as_dict(self) -> dict[Ability, int]:
        """Return the scores keyed by ability."""
        return {ability: self.get_score(ability) for ability in Ability}


# =============================================================================
# Class Membership
# =============================================================================


class ClassMembership(SheetModel):
    """One class a character has levels in.

    A brand-new character holds one unnamed membership at level 1.
    Classes added later start at level 0 and receive levels by manual
    allocation from the global level.

    Attributes:
        name: Class name. Custom names are accepted as-is.
        subclass: Optional subclass name.
        level: Levels in this class (0-20).
        hit_dice: Hit die type granted by this class.
        hit_dice_used: Hit dice of this class already spent (0..level).
        spellcaster_type: Slot progression used by this class.
        spellcasting_ability: Ability used for this class's spells.
    """

    name: str = Field(default="", description="Class name")
    subclass: str | None = Field(default=None, description="Subclass name")
    level: int = Field(default=MIN_CHARACTER_LEVEL, description="Class level (0-20)")
    hit_dice: HitDie = Field(default=HitDie.D8, description="Hit die type")
    hit_dice_used: int = Field(default=0, description="Hit dice spent (0..level)")
    spellcaster_type: SpellcasterType = Field(default=SpellcasterType.NONE)
    spellcasting_ability: Ability | None = Field(default=None)

    @field_validator("name", mode="before")
    @classmethod
    def default_none_name(cls, value: Any) -> str:
        """Missing names become the empty string."""
        if value is None:
            return ""
        return str(value)

    @field_validator("level", mode="before")
    @classmethod
    def clamp_level(cls, value: Any) -> int:
        """Clamp class level to 0-20."""
        return clamp(coerce_int(value, MIN_CHARACTER_LEVEL), MIN_CLASS_LEVEL, MAX_CHARACTER_LEVEL)

    @field_validator("hit_dice_used", mode="before")
    @classmethod
    def coerce_hit_dice_used(cls, value: Any) -> int:
        """Read spent hit dice. The upper bound is checked against level later."""
        return max(0, coerce_int(value, 0))

    @field_validator("hit_dice", mode="before")
    @classmethod
    def normalize_hit_die(cls, value: Any) -> str:
        """Accept 'd10', 'D10', '10' or 10. Unknown dice use the configured default."""
        if isinstance(value, HitDie):
            return value.value
        text = str(value).strip().lower() if value is not None else ""
        if text and not text.startswith("d"):
            text = f"d{text}"
        if text in {die.value for die in HitDie}:
            return text
        return get_settings().rules.default_hit_die

    @field_validator("spellcaster_type", mode="before")
    @classmethod
    def normalize_caster_type(cls, value: Any) -> str:
        """Unknown caster types are treated as non-casters."""
        text = str(value).strip().lower() if value is not None else ""
        if text in {caster.value for caster in SpellcasterType}:
            return text
        return SpellcasterType.NONE.value

    @field_validator("spellcasting_ability", mode="before")
    @classmethod
    def normalize_ability(cls, value: Any) -> str | None:
        """Unknown abilities are dropped."""
        text = str(value).strip().lower()[:3] if value else ""
        if text in {ability.value for ability in Ability}:
            return text
        return None

    @model_validator(mode="after")
    def clamp_hit_dice_used(self) -> "ClassMembership":
        """Spent hit dice cannot exceed the class level."""
        self.hit_dice_used = clamp(self.hit_dice_used, 0, self.level)
        return self

    def with_changes(self, **changes: Any) -> "ClassMembership":
        """Return a re-validated copy with ``changes`` applied."""
        return ClassMembership.model_validate({**self.model_dump(), **changes})

    @property
    def is_named(self) -> bool:
        """Whether the class has been chosen (new sheets start unnamed)."""
        return bool(self.name.strip())

    @property
    def hit_dice_remaining(self) -> int:
        """Hit dice of this class still available."""
        return self.level - self.hit_dice_used

    @property
    def display_name(self) -> str:
        """Class and level for display (e.g., 'Fighter 5')."""
        return f"{self.name} {self.level}" if self.is_named else "No Class"


# =============================================================================
# Hit Points & Death Saves
# =============================================================================


class HitPoints(SheetModel):
    """Current, maximum, and temporary hit points.

    The upper bound on ``current`` depends on the character's HP bonus,
    so it is enforced by Character rather than here.
    """

    current: int = Field(default=10, description="Current hit points")
    maximum: int = Field(default=10, alias="max", description="Base maximum hit points")
    temp: int = Field(default=0, description="Temporary hit points")

    @field_validator("current", "maximum", "temp", mode="before")
    @classmethod
    def floor_at_zero(cls, value: Any) -> int:
        """Hit point values are never negative."""
        return max(0, coerce_int(value, 0))


class DeathSaves(SheetModel):
    """Death saving throw pips (0-3 on each track)."""

    successes: int = Field(default=0)
    failures: int = Field(default=0)

    @field_validator("successes", "failures", mode="before")
    @classmethod
    def clamp_pips(cls, value: Any) -> int:
        """Clamp pip counts to 0-3."""
        return clamp(coerce_int(value, 0), 0, MAX_DEATH_SAVES)

    @property
    def is_stable(self) -> bool:
        """Three successes."""
        return self.successes >= MAX_DEATH_SAVES

    @property
    def is_failed(self) -> bool:
        """Three failures. Display signal only; the engine keeps accepting edits."""
        return self.failures >= MAX_DEATH_SAVES


# =============================================================================
# Spell Slots
# =============================================================================


class SpellSlot(SheetModel):
    """Slots for one spell level."""

    current: int = Field(default=0)
    maximum: int = Field(default=0, alias="max")

    @field_validator("current", "maximum", mode="before")
    @classmethod
    def floor_at_zero(cls, value: Any) -> int:
        """Slot counts are never negative."""
        return max(0, coerce_int(value, 0))

    @model_validator(mode="after")
    def clamp_current(self) -> "SpellSlot":
        """Available slots cannot exceed the maximum."""
        self.current = min(self.current, self.maximum)
        return self

    @classmethod
    def full(cls, maximum: int) -> "SpellSlot":
        """Create a slot pool at full capacity."""
        return cls(current=maximum, maximum=maximum)

    def refilled(self) -> "SpellSlot":
        """Return this pool at full capacity."""
        return SpellSlot.full(self.maximum)


class PactMagicSlots(SheetModel):
    """The Warlock's Pact Magic pool.

    All pact slots share one slot level and recover on a short rest.
    """

    current: int = Field(default=0)
    maximum: int = Field(default=0, alias="max")
    level: int = Field(default=1, description="Slot level of every pact slot")

    @field_validator("current", "maximum", mode="before")
    @classmethod
    def floor_at_zero(cls, value: Any) -> int:
        """Slot counts are never negative."""
        return max(0, coerce_int(value, 0))

    @field_validator("level", mode="before")
    @classmethod
    def clamp_slot_level(cls, value: Any) -> int:
        """Pact slots are 1st through 5th level."""
        return clamp(coerce_int(value, 1), MIN_SPELL_LEVEL, MAX_PACT_SLOT_LEVEL)

    @model_validator(mode="after")
    def clamp_current(self) -> "PactMagicSlots":
        """Available slots cannot exceed the maximum."""
        self.current = min(self.current, self.maximum)
        return self

    def refilled(self) -> "PactMagicSlots":
        """Return this pool at full capacity."""
        return PactMagicSlots(current=self.maximum, maximum=self.maximum, level=self.level)


# =============================================================================
# Character
# =============================================================================


class Character(SheetModel):
    """The character aggregate read by the rules engine.

    Only the fields the rules need are modeled; anything else in the stored
    document is ignored. ``experience`` is the source of truth for the global
    level; ``level`` and ``proficiency_bonus`` are cached copies the engine
    rewrites whenever experience changes.

    Example:
        >>> character = Character(
        ...     name="Thorin",
        ...     classes=[ClassMembership(name="Fighter", level=3, hit_dice="d10")],
        ...     experience=900,
        ...     level=3,
        ... )
        >>> character.effective_max_hp
        10
    """

    name: str = Field(default="", description="Display name")
    abilities: AbilityScores = Field(default_factory=AbilityScores)
    classes: list[ClassMembership] = Field(
        default_factory=lambda: [ClassMembership()],
        description="Class memberships, primary first",
    )
    experience: int = Field(default=0, description="Experience points")
    level: int = Field(default=MIN_CHARACTER_LEVEL, description="Cached global level")
    proficiency_bonus: int = Field(default=DEFAULT_PROFICIENCY_BONUS)
    hp: HitPoints = Field(default_factory=HitPoints)
    hp_bonus: int = Field(default=0, description="Flat bonus to maximum hit points")
    death_saves: DeathSaves = Field(default_factory=DeathSaves)
    spell_slots: dict[int, SpellSlot] = Field(default_factory=dict)
    pact_magic_slots: PactMagicSlots | None = Field(default=None)
    exhaustion: int = Field(default=0)
    skills: dict[Skill, ProficiencyRank] = Field(default_factory=dict)
    saving_throws: dict[Ability, bool] = Field(default_factory=dict)
    initiative_override: int | None = Field(
        default=None, description="Initiative bonus shown instead of the DEX modifier"
    )

    @field_validator("name", mode="before")
    @classmethod
    def default_none_name(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("classes", mode="before")
    @classmethod
    def ensure_one_class(cls, value: Any) -> Any:
        """A character always has at least one (possibly unnamed) class."""
        if value is None or value == []:
            return [ClassMembership()]
        return value

    @field_validator("experience", mode="before")
    @classmethod
    def floor_experience(cls, value: Any) -> int:
        return max(0, coerce_int(value, 0))

    @field_validator("level", mode="before")
    @classmethod
    def clamp_level(cls, value: Any) -> int:
        return clamp(coerce_int(value, MIN_CHARACTER_LEVEL), MIN_CHARACTER_LEVEL, MAX_CHARACTER_LEVEL)

    @field_validator("proficiency_bonus", mode="before")
    @classmethod
    def clamp_proficiency_bonus(cls, value: Any) -> int:
        return clamp(coerce_int(value, DEFAULT_PROFICIENCY_BONUS), 2, 6)

    @field_validator("hp_bonus", mode="before")
    @classmethod
    def coerce_hp_bonus(cls, value: Any) -> int:
        return coerce_int(value, 0)

    @field_validator("exhaustion", mode="before")
    @classmethod
    def clamp_exhaustion(cls, value: Any) -> int:
        return clamp(coerce_int(value, 0), 0, MAX_EXHAUSTION)

    @field_validator("spell_slots", mode="before")
    @classmethod
    def drop_invalid_slot_levels(cls, value: Any) -> Any:
        """Keep only spell levels 1-9; documents key them by string."""
        if not isinstance(value, dict):
            return {} if value is None else value
        slots: dict[int, Any] = {}
        for key, slot in value.items():
            spell_level = coerce_int(key, 0)
            if MIN_SPELL_LEVEL <= spell_level <= MAX_SPELL_LEVEL and slot is not None:
                slots[spell_level] = slot
        return slots

    @field_validator("skills", mode="before")
    @classmethod
    def read_skill_ranks(cls, value: Any) -> Any:
        """Accept ``{"Arcana": 1}`` or the stored ``{"Arcana": {"proficiency": 1}}``."""
        if not isinstance(value, dict):
            return {} if value is None else value
        known = {skill.value for skill in Skill}
        ranks: dict[str, int] = {}
        for skill, entry in value.items():
            if skill not in known:
                continue
            raw = entry.get("proficiency") if isinstance(entry, dict) else entry
            ranks[skill] = clamp(coerce_int(raw, 0), ProficiencyRank.NONE, ProficiencyRank.EXPERTISE)
        return ranks

    @field_validator("saving_throws", mode="before")
    @classmethod
    def read_save_proficiencies(cls, value: Any) -> Any:
        """Accept ``{"str": True}`` or the stored ``{"str": {"proficiency": True}}``."""
        if not isinstance(value, dict):
            return {} if value is None else value
        known = {ability.value for ability in Ability}
        proficiencies: dict[str, bool] = {}
        for ability, entry in value.items():
            if ability not in known:
                continue
            raw = entry.get("proficiency") if isinstance(entry, dict) else entry
            proficiencies[ability] = bool(raw)
        return proficiencies

    @field_validator("initiative_override", mode="before")
    @classmethod
    def read_initiative_override(cls, value: Any) -> int | None:
        """Blank or unreadable overrides clear the override."""
        return coerce_optional_int(value)

    @model_validator(mode="after")
    def clamp_current_hp(self) -> "Character":
        """Current HP cannot exceed the effective maximum."""
        if self.hp.current > self.effective_max_hp:
            self.hp = HitPoints(
                current=self.effective_max_hp,
                maximum=self.hp.maximum,
                temp=self.hp.temp,
            )
        return self

    @computed_field(description="Maximum HP including the flat bonus")
    @property
    def effective_max_hp(self) -> int:
        return max(0, self.hp.maximum + self.hp_bonus)

    @computed_field(description="Sum of all class levels")
    @property
    def total_class_levels(self) -> int:
        return sum(membership.level for membership in self.classes)

    @property
    def is_multiclass(self) -> bool:
        """Whether the character has more than one class entry."""
        return len(self.classes) > 1

    @property
    def primary_class(self) -> ClassMembership:
        """The first class, used for legacy display and manual slot tables."""
        return self.classes[0]

    @property
    def class_display(self) -> str:
        """Class summary (e.g., 'Fighter 5 / Wizard 3')."""
        if not self.is_multiclass:
            return self.primary_class.display_name
        return " / ".join(c.display_name for c in self.classes if c.is_named)


# =============================================================================
# Patches
# =============================================================================


class CharacterPatch(SheetModel):
    """The fields one command changes, to be written in a single update.

    Only fields that were explicitly set are part of the patch. Setting
    ``pact_magic_slots`` to None explicitly removes the Pact Magic pool.
    Setting ``initiative_override`` to None clears the override.

    Example:
        >>> patch = CharacterPatch(level=5, proficiency_bonus=3)
        >>> patch.to_update()
        {'level': 5, 'proficiencyBonus': 3}
    """

    experience: int | None = None
    level: int | None = None
    proficiency_bonus: int | None = None
    classes: list[ClassMembership] | None = None
    hp: HitPoints | None = None
    hp_bonus: int | None = None
    death_saves: DeathSaves | None = None
    spell_slots: dict[int, SpellSlot] | None = None
    pact_magic_slots: PactMagicSlots | None = None
    exhaustion: int | None = None
    abilities: AbilityScores | None = None
    skills: dict[Skill, ProficiencyRank] | None = None
    saving_throws: dict[Ability, bool] | None = None
    initiative_override: int | None = None

    @field_serializer("skills", when_used="json")
    def write_skill_ranks(self, skills: dict[Skill, ProficiencyRank] | None) -> dict[str, Any] | None:
        """Skills are stored as ``{"Arcana": {"proficiency": 1}}``."""
        if skills is None:
            return None
        return {skill.value: {"proficiency": int(rank)} for skill, rank in skills.items()}

    @field_serializer("saving_throws", when_used="json")
    def write_save_proficiencies(self, saves: dict[Ability, bool] | None) -> dict[str, Any] | None:
        """Saving throws are stored as ``{"str": {"proficiency": true}}``."""
        if saves is None:
            return None
        return {ability.value: {"proficiency": proficient} for ability, proficient in saves.items()}

    @property
    def changed_fields(self) -> set[str]:
        """Names of the fields this patch sets."""
        return set(self.model_fields_set)

    @property
    def is_empty(self) -> bool:
        """Whether the patch changes nothing."""
        return not self.model_fields_set

    def to_update(self) -> dict[str, Any]:
        """Serialize the set fields under their stored names.

        Returns:
            A mapping ready to be written to the document store as one update.
        """
        if self.is_empty:
            return {}
        # Nested models are written whole; stored maps are replaced, not merged
        return self.model_dump(mode="json", by_alias=True, include=self.model_fields_set)

    def merge(self, other: "CharacterPatch") -> "CharacterPatch":
        """Combine two patches; fields set on ``other`` win."""
        data = {name: getattr(self, name) for name in self.model_fields_set}
        data.update({name: getattr(other, name) for name in other.model_fields_set})
        return CharacterPatch(**data)


def apply_patch(character: Character, patch: CharacterPatch) -> Character:
    """Merge a patch into a character and re-validate the result.

    Args:
        character: The current character.
        patch: Changes produced by an engine command.

    Returns:
        A new Character with the patch applied.
    """
    data = character.model_dump(exclude={"effective_max_hp", "total_class_levels"})
    if not patch.is_empty:
        data.update(patch.model_dump(include=patch.model_fields_set))
    return Character.model_validate(data)


__all__ = [
    "clamp",
    "coerce_int",
    "coerce_optional_int",
    "AbilityScores",
    "ClassMembership",
    "HitPoints",
    "DeathSaves",
    "SpellSlot",
    "PactMagicSlots",
    "Character",
    "CharacterPatch",
    "apply_patch",
]
