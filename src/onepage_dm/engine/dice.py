"""Dice rolling for the One Page 5e ruleset.

Every random decision in the engine (ability rolls, starting gold,
spell picks, random events, encounters, the dice tray) goes through a
DiceRoller, which wraps a ``random.Random`` instance. Passing a seeded or
scripted ``Random`` makes the whole build and adventure flow reproducible.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

from onepage_dm.core.constants import (
    ABILITY_COUNT,
    ABILITY_DICE_ROLLED,
    ABILITY_DIE_SIDES,
    DICE_TRAY_SIDES,
    STARTING_GOLD_DIE,
)
from onepage_dm.core.exceptions import DiceRollError
from onepage_dm.core.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


class DiceRoller:
    """Dice rolling backed by an injectable random source.

    Example:
        >>> roller = DiceRoller(seed=42)
        >>> sum(roller.roll_dice(2, 4)) in range(2, 9)
        True
    """

    def __init__(self, rng: random.Random | None = None, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            rng: Random source to draw from. Takes precedence over ``seed``.
            seed: Seed for a private random source, for reproducible rolls.
        """
        self._rng = rng if rng is not None else random.Random(seed)
        logger.debug("DiceRoller initialized", seed=seed, injected=rng is not None)

    @property
    def rng(self) -> random.Random:
        return self._rng

    def roll_die(self, sides: int) -> int:
        """Roll a single die.

        Args:
            sides: Number of faces.

        Returns:
            A uniform value in 1..sides.

        Raises:
            DiceRollError: If sides is less than 1.
        """
        if sides < 1:
            raise DiceRollError(f"A die needs at least one side, got {sides}", expression=f"d{sides}")
        return self._rng.randint(1, sides)

    def roll_dice(self, count: int, sides: int) -> list[int]:
        """Roll several identical dice.

        Args:
            count: Number of dice.
            sides: Faces on each die.

        Returns:
            The individual results, in rolling order.

        Raises:
            DiceRollError: If count or sides is less than 1.
        """
        if count < 1:
            raise DiceRollError(f"Roll at least one die, got {count}", expression=f"{count}d{sides}")
        rolls = [self.roll_die(sides) for _ in range(count)]
        logger.debug("Dice rolled", expression=f"{count}d{sides}", rolls=rolls)
        return rolls

    # -------------------------------------------------------------------------
    # Character creation
    # -------------------------------------------------------------------------

    def roll_4d6_drop_lowest(self) -> int:
        """Roll 4d6 and sum the highest three."""
        rolls = sorted(self.roll_dice(ABILITY_DICE_ROLLED, ABILITY_DIE_SIDES), reverse=True)
        return sum(rolls[:3])

    def roll_ability_scores(self, count: int = ABILITY_COUNT) -> list[int]:
        """Roll a fresh set of ability scores.

        Args:
            count: Number of independent scores.

        Returns:
            ``count`` results of 4d6 drop lowest, each in 3..18.
        """
        scores = [self.roll_4d6_drop_lowest() for _ in range(count)]
        logger.info("Ability scores rolled", scores=scores)
        return scores

    def roll_starting_gold(self, die: int = STARTING_GOLD_DIE) -> int:
        return self.roll_die(die)

    # -------------------------------------------------------------------------
    # Sampling
    # -------------------------------------------------------------------------

    def choice(self, items: Sequence[T]) -> T:
        """Pick one item uniformly at random.

        Raises:
            DiceRollError: If ``items`` is empty.
        """
        if not items:
            raise DiceRollError("Cannot choose from an empty table")
        return items[self.roll_die(len(items)) - 1]

    def sample(self, items: Sequence[T], k: int) -> list[T]:
        """Pick ``k`` distinct items uniformly at random, without replacement."""
        if k > len(items):
            raise DiceRollError(
                f"Cannot sample {k} entries from a table of {len(items)}",
                details={"k": k, "size": len(items)},
            )
        return self._rng.sample(list(items), k)

    # -------------------------------------------------------------------------
    # Dice tray
    # -------------------------------------------------------------------------

    def tray_roll(self, sides: int) -> str:
        """Roll one die from the dice tray.

        Args:
            sides: One of the tray dice (4, 6, 8, 10, 12, 20).

        Returns:
            The annotation the tray adds to the player's input,
            e.g. 'Rolled d20: 17'.

        Raises:
            DiceRollError: If the tray has no such die.
        """
        if sides not in DICE_TRAY_SIDES:
            raise DiceRollError(f"The dice tray has no d{sides}", expression=f"d{sides}")
        result = self.roll_die(sides)
        return f"Rolled d{sides}: {result}"


def annotate_input(text: str, roll_text: str) -> str:
    """Append a dice tray result to the player's pending input.

    Args:
        text: Input typed so far.
        roll_text: Result of DiceRoller.tray_roll.

    Returns:
        '[roll]' for empty input, else 'text [roll]'.
    """
    return f"{text} [{roll_text}]" if text else f"[{roll_text}]"


__all__ = [
    "DiceRoller",
    "annotate_input",
]
