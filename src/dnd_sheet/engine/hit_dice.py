"""Hit dice ledger.

Hit dice are tracked per class membership (``hitDiceUsed``) but spent and
recovered per die type. A Fighter 3 / Paladin 2 has one d10 pool of five
dice; spending from it fills the first class in the pool before the next.

Long rests recover half of each pool's total (minimum 1), never more than
was spent.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field

from dnd_sheet.core.logging import get_logger
from dnd_sheet.models.character import ClassMembership, clamp, coerce_int
from dnd_sheet.models.enums import HitDie


logger = get_logger(__name__)


class HitDiceGroup(BaseModel):
    """All hit dice of one die type across class memberships.

    Attributes:
        die: The die type.
        total: Sum of the class levels using this die.
        used: Sum of spent dice of this type.
        class_names: Names of the classes in the pool, in roster order.
    """

    model_config = ConfigDict(frozen=True)

    die: HitDie
    total: int = Field(default=0, ge=0)
    used: int = Field(default=0, ge=0)
    class_names: tuple[str, ...] = Field(default_factory=tuple)

    @property
    def remaining(self) -> int:
        """Dice still available to spend."""
        return self.total - self.used

    @property
    def label(self) -> str:
        """Pool label for display (e.g., 'Fighter, Paladin')."""
        return ", ".join(self.class_names)


# =============================================================================
# Queries
# =============================================================================


def group_hit_dice(classes: Sequence[ClassMembership]) -> list[HitDiceGroup]:
    """Group class memberships by hit die, largest die first."""
    totals: dict[HitDie, list[ClassMembership]] = {}
    for membership in classes:
        totals.setdefault(membership.hit_dice, []).append(membership)

    groups = [
        HitDiceGroup(
            die=die,
            total=sum(m.level for m in members),
            used=sum(m.hit_dice_used for m in members),
            class_names=tuple(m.name for m in members),
        )
        for die, members in totals.items()
    ]
    return sorted(groups, key=lambda group: group.die.sides, reverse=True)


def get_hit_dice_group(classes: Sequence[ClassMembership], die: HitDie | str) -> HitDiceGroup | None:
    """The pool for one die type, if any class uses it."""
    return next((g for g in group_hit_dice(classes) if g.die == die), None)


def total_hit_dice_remaining(classes: Sequence[ClassMembership]) -> int:
    """Unspent hit dice across all pools."""
    return sum(m.level - m.hit_dice_used for m in classes)


def calculate_long_rest_recovery(classes: Sequence[ClassMembership]) -> dict[HitDie, int]:
    """Dice recovered per pool on a long rest: min(used, max(1, total // 2))."""
    return {
        group.die: min(group.used, max(1, group.total // 2))
        for group in group_hit_dice(classes)
    }


# =============================================================================
# Commands
# =============================================================================


def _distribute(
    classes: Sequence[ClassMembership],
    die: HitDie,
    new_used: int,
) -> list[ClassMembership]:
    """Spread a pool's used count over its classes, first to last."""
    updated = list(classes)
    remaining = new_used
    for index, membership in enumerate(updated):
        if membership.hit_dice != die:
            continue
        used_here = min(remaining, membership.level)
        updated[index] = membership.model_copy(update={"hit_dice_used": used_here})
        remaining -= used_here
    return updated


def set_hit_dice_used(
    classes: Sequence[ClassMembership],
    die: HitDie | str,
    new_used: int,
) -> list[ClassMembership]:
    """Set the number of spent dice in one pool.

    Args:
        classes: Current class memberships.
        die: The pool's die type.
        new_used: Spent dice for the whole pool, clamped to ``[0, total]``.
            Unreadable values count as zero.

    Returns:
        The updated memberships. Unchanged when no class uses ``die``.
    """
    group = get_hit_dice_group(classes, die)
    if group is None:
        return list(classes)
    return _distribute(classes, group.die, clamp(coerce_int(new_used, 0), 0, group.total))


def spend_hit_dice(
    classes: Sequence[ClassMembership],
    die: HitDie | str,
    delta_used: int,
) -> list[ClassMembership]:
    """Spend (positive delta) or restore (negative delta) dice in one pool.

    Example:
        >>> fighter = ClassMembership(name="Fighter", level=3, hit_dice="d10")
        >>> paladin = ClassMembership(name="Paladin", level=2, hit_dice="d10")
        >>> [c.hit_dice_used for c in spend_hit_dice([fighter, paladin], "d10", 4)]
        [3, 1]
    """
    group = get_hit_dice_group(classes, die)
    if group is None:
        logger.debug("No hit dice pool", die=str(die))
        return list(classes)
    new_used = clamp(group.used + coerce_int(delta_used, 0), 0, group.total)
    return _distribute(classes, group.die, new_used)


def apply_long_rest_recovery(classes: Sequence[ClassMembership]) -> list[ClassMembership]:
    """Recover hit dice for every pool, starting with the first class in it."""
    recovery = calculate_long_rest_recovery(classes)
    updated = list(classes)
    for index, membership in enumerate(updated):
        to_recover = recovery.get(membership.hit_dice, 0)
        if to_recover <= 0:
            continue
        recovered = min(membership.hit_dice_used, to_recover)
        updated[index] = membership.model_copy(
            update={"hit_dice_used": membership.hit_dice_used - recovered}
        )
        recovery[membership.hit_dice] = to_recover - recovered
    return updated


__all__ = [
    "HitDiceGroup",
    "group_hit_dice",
    "get_hit_dice_group",
    "total_hit_dice_remaining",
    "calculate_long_rest_recovery",
    "set_hit_dice_used",
    "spend_hit_dice",
    "apply_long_rest_recovery",
]
