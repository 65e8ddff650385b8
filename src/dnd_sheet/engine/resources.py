"""Hit points, death saves, spell slot usage, exhaustion, and rests.

Every command takes the current Character and returns a CharacterPatch
with only the fields it changes. Commands never raise on bad input:
amounts are clamped, unreadable values fall back to a default, and
commands aimed at a resource the character does not have return an
empty patch.

Example:
    >>> character = Character(hp=HitPoints(current=10, maximum=10, temp=5))
    >>> apply_damage(character, 8).hp
    HitPoints(current=7, maximum=10, temp=0)
"""

from __future__ import annotations

from typing import Any

from dnd_sheet.core.config import RulesSettings, get_settings
from dnd_sheet.core.constants import MAX_DEATH_SAVES, MAX_EXHAUSTION, MAX_SPELL_LEVEL, MIN_SPELL_LEVEL
from dnd_sheet.core.logging import get_logger
from dnd_sheet.engine.hit_dice import apply_long_rest_recovery, spend_hit_dice
from dnd_sheet.engine.spell_slots import get_warlock_class
from dnd_sheet.models.character import (
    Character,
    CharacterPatch,
    DeathSaves,
    HitPoints,
    SpellSlot,
    clamp,
    coerce_int,
)
from dnd_sheet.models.enums import DeathSaveKind, HitDie, RestType, VitalState


logger = get_logger(__name__)


# =============================================================================
# Hit Points
# =============================================================================


def _with_hp(character: Character, **changes: int) -> HitPoints:
    return character.hp.model_copy(update=changes)


def apply_damage(character: Character, amount: Any) -> CharacterPatch:
    """Apply damage, taking it from temporary hit points first.

    Args:
        character: The damaged character.
        amount: Damage dealt. Zero, negative, or unreadable amounts do nothing.

    Returns:
        Patch with the new ``hp``.
    """
    amount = coerce_int(amount, 0)
    if amount <= 0:
        return CharacterPatch()

    absorbed = min(character.hp.temp, amount)
    spillover = amount - absorbed
    hp = _with_hp(
        character,
        temp=character.hp.temp - absorbed,
        current=max(0, character.hp.current - spillover),
    )
    logger.info(
        "Damage applied",
        character=character.name,
        amount=amount,
        absorbed_by_temp=absorbed,
        current_hp=hp.current,
    )
    return CharacterPatch(hp=hp)


def apply_healing(character: Character, amount: Any) -> CharacterPatch:
    """Heal up to the effective maximum and clear death saves.

    Zero, negative, or unreadable amounts do nothing.
    """
    amount = coerce_int(amount, 0)
    if amount <= 0:
        return CharacterPatch()

    hp = _with_hp(
        character,
        current=min(character.effective_max_hp, character.hp.current + amount),
    )
    logger.info("Healing applied", character=character.name, amount=amount, current_hp=hp.current)
    return CharacterPatch(hp=hp, death_saves=DeathSaves())


def set_temp_hp(character: Character, value: Any) -> CharacterPatch:
    """Replace temporary hit points. Temporary HP never stacks."""
    return CharacterPatch(hp=_with_hp(character, temp=max(0, coerce_int(value, 0))))


def set_current_hp(character: Character, value: Any) -> CharacterPatch:
    """Set current hit points, clamped to ``[0, effective max]``.

    An unreadable value keeps the current hit points.
    """
    current = clamp(coerce_int(value, character.hp.current), 0, character.effective_max_hp)
    return CharacterPatch(hp=_with_hp(character, current=current))


def set_max_hp(character: Character, value: Any) -> CharacterPatch:
    """Set base maximum hit points; current HP is pulled down if needed."""
    maximum = max(0, coerce_int(value, character.hp.maximum))
    effective_max = max(0, maximum + character.hp_bonus)
    hp = _with_hp(
        character,
        maximum=maximum,
        current=min(character.hp.current, effective_max),
    )
    return CharacterPatch(hp=hp)


def set_hp_bonus(character: Character, value: Any) -> CharacterPatch:
    """Set the flat maximum HP bonus; current HP is pulled down if needed."""
    hp_bonus = coerce_int(value, character.hp_bonus)
    effective_max = max(0, character.hp.maximum + hp_bonus)
    if character.hp.current > effective_max:
        return CharacterPatch(hp_bonus=hp_bonus, hp=_with_hp(character, current=effective_max))
    return CharacterPatch(hp_bonus=hp_bonus)


def vital_state(character: Character) -> VitalState:
    """Whether the character is up or down.

    Death is not tracked. Three failed death saves are shown to the player,
    but every command keeps working.
    """
    if character.hp.current > 0:
        return VitalState.CONSCIOUS
    return VitalState.DOWN


# =============================================================================
# Death Saves
# =============================================================================


def toggle_death_save(
    character: Character,
    kind: DeathSaveKind | str,
    index: Any,
) -> CharacterPatch:
    """Toggle a death save pip.

    Clicking pip ``i`` (0-2) fills pips up to and including ``i``. Clicking
    the last filled pip clears it.

    Example:
        With 2 failures, clicking pip 1 leaves 1 failure; clicking pip 2
        makes it 3. An unknown ``kind`` returns an empty patch.
    """
    try:
        kind = DeathSaveKind(kind)
    except ValueError:
        logger.warning("Unknown death save kind", character=character.name, kind=str(kind))
        return CharacterPatch()
    index = clamp(coerce_int(index, 0), 0, MAX_DEATH_SAVES - 1)
    count = getattr(character.death_saves, kind.value)
    new_count = index if count == index + 1 else index + 1

    death_saves = character.death_saves.model_copy(update={kind.value: new_count})
    logger.debug("Death save toggled", character=character.name, kind=kind.value, count=new_count)
    return CharacterPatch(death_saves=death_saves)


# =============================================================================
# Spell Slots
# =============================================================================


def use_spell_slot(character: Character, spell_level: Any, delta: Any = 1) -> CharacterPatch:
    """Spend (positive delta) or regain (negative delta) slots of one level.

    Levels without a slot pool are a no-op. An unreadable delta spends one
    slot.
    """
    spell_level = coerce_int(spell_level, 0)
    delta = coerce_int(delta, 1)
    slot = character.spell_slots.get(spell_level)
    if slot is None:
        return CharacterPatch()

    spell_slots = dict(character.spell_slots)
    spell_slots[spell_level] = SpellSlot(
        current=clamp(slot.current - delta, 0, slot.maximum),
        maximum=slot.maximum,
    )
    return CharacterPatch(spell_slots=spell_slots)


def use_pact_magic_slot(character: Character, delta: Any = 1) -> CharacterPatch:
    """Spend or regain Pact Magic slots. No-op without a Pact Magic pool."""
    pact = character.pact_magic_slots
    if pact is None:
        return CharacterPatch()
    delta = coerce_int(delta, 1)
    return CharacterPatch(
        pact_magic_slots=pact.model_copy(
            update={"current": clamp(pact.current - delta, 0, pact.maximum)}
        )
    )


def set_spell_slot_max(character: Character, spell_level: Any, maximum: Any) -> CharacterPatch:
    """Edit a slot maximum by hand (manual slot tables).

    Available slots are clamped to the new maximum.
    """
    spell_level = coerce_int(spell_level, 0)
    if not MIN_SPELL_LEVEL <= spell_level <= MAX_SPELL_LEVEL:
        return CharacterPatch()

    slot = character.spell_slots.get(spell_level, SpellSlot())
    new_max = max(0, coerce_int(maximum, slot.maximum))
    spell_slots = dict(character.spell_slots)
    spell_slots[spell_level] = SpellSlot(current=min(slot.current, new_max), maximum=new_max)
    return CharacterPatch(spell_slots=spell_slots)


# =============================================================================
# Exhaustion
# =============================================================================


def set_exhaustion(character: Character, value: Any) -> CharacterPatch:
    """Set the exhaustion level, clamped to 0-6."""
    return CharacterPatch(
        exhaustion=clamp(coerce_int(value, character.exhaustion), 0, MAX_EXHAUSTION)
    )


# =============================================================================
# Rests
# =============================================================================


def short_rest(
    character: Character,
    die: HitDie | str | None = None,
    count: Any = 0,
    *,
    rules: RulesSettings | None = None,
) -> CharacterPatch:
    """Take a short rest.

    Args:
        character: The resting character.
        die: Hit die pool to spend from, if any.
        count: Number of hit dice to spend. Unreadable counts spend none.
        rules: Rule variants. Defaults to the configured settings.

    Returns:
        Patch with spent hit dice and restored Pact Magic. Single-class
        Warlocks also get every regular slot back when
        ``legacy_warlock_short_rest`` is enabled.
    """
    rules = rules or get_settings().rules
    patch = CharacterPatch()
    count = coerce_int(count, 0)

    if die is not None and count > 0:
        patch.classes = spend_hit_dice(character.classes, die, count)

    warlock = get_warlock_class(character.classes)
    if warlock is not None and character.pact_magic_slots is not None:
        patch.pact_magic_slots = character.pact_magic_slots.refilled()

    if warlock is not None and not character.is_multiclass and rules.legacy_warlock_short_rest:
        patch.spell_slots = {
            spell_level: slot.refilled() for spell_level, slot in character.spell_slots.items()
        }

    logger.info(
        "Short rest applied",
        character=character.name,
        hit_die=str(die) if die else None,
        hit_dice_spent=count if patch.classes is not None else 0,
        pact_magic_restored=patch.pact_magic_slots is not None,
    )
    return patch


def long_rest(character: Character) -> CharacterPatch:
    """Take a long rest.

    Restores hit points to the effective maximum, clears temporary hit points
    and death saves, recovers hit dice, refills every slot pool, and removes
    one level of exhaustion. Nothing guards against resting twice in a row.
    """
    patch = CharacterPatch(
        hp=_with_hp(character, current=character.effective_max_hp, temp=0),
        classes=apply_long_rest_recovery(character.classes),
        spell_slots={
            spell_level: slot.refilled() for spell_level, slot in character.spell_slots.items()
        },
        exhaustion=max(0, character.exhaustion - 1),
        death_saves=DeathSaves(),
    )
    if character.pact_magic_slots is not None:
        patch.pact_magic_slots = character.pact_magic_slots.refilled()

    logger.info(
        "Long rest applied",
        character=character.name,
        hit_dice_recovered=sum(
            before.hit_dice_used - after.hit_dice_used
            for before, after in zip(character.classes, patch.classes)
        ),
        exhaustion=patch.exhaustion,
    )
    return patch


def take_rest(character: Character, rest_type: RestType | str, **options: Any) -> CharacterPatch:
    """Dispatch to :func:`short_rest` or :func:`long_rest`.

    An unknown ``rest_type`` returns an empty patch.
    """
    try:
        rest_type = RestType(rest_type)
    except ValueError:
        logger.warning("Unknown rest type", character=character.name, rest_type=str(rest_type))
        return CharacterPatch()
    if rest_type == RestType.SHORT:
        return short_rest(character, **options)
    return long_rest(character)


__all__ = [
    "apply_damage",
    "apply_healing",
    "set_temp_hp",
    "set_current_hp",
    "set_max_hp",
    "set_hp_bonus",
    "vital_state",
    "toggle_death_save",
    "use_spell_slot",
    "use_pact_magic_slot",
    "set_spell_slot_max",
    "set_exhaustion",
    "short_rest",
    "long_rest",
    "take_rest",
]
