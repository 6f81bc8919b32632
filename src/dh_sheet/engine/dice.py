"""Dice rolling for trait rolls and class actions.

Rolls go through the d20 library. The engine only ever asks for one
die at a time, via :meth:`DiceRoller.roll_die`; tests substitute a
roller subclass that returns scripted faces.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

import d20

from dh_sheet.core.exceptions import DiceRollError
from dh_sheet.core.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class DiceResult:
    """Outcome of a dice expression.

    Attributes:
        expression: The expression that was rolled.
        total: The total result.
    """

    expression: str
    total: int


class DiceRoller:
    """Uniform dice over [1, sides].

    Example:
        >>> roller = DiceRoller(seed=42)
        >>> 1 <= roller.roll_die(12) <= 12
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        if seed is not None:
            random.seed(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    def roll(self, expression: str) -> DiceResult:
        """Roll a dice expression such as ``1d12`` or ``2d6+1``.

        Raises:
            DiceRollError: If the expression is empty or invalid.
        """
        if not expression or not expression.strip():
            raise DiceRollError("Empty dice expression", expression=expression)

        try:
            result = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(f"Invalid dice expression: {exc}", expression=expression) from exc

        return DiceResult(expression=expression, total=result.total)

    def roll_die(self, sides: int) -> int:
        """Roll a single die with ``sides`` faces.

        Raises:
            DiceRollError: If ``sides`` is not a positive integer.
        """
        if isinstance(sides, bool) or not isinstance(sides, int) or sides < 1:
            raise DiceRollError("Die size must be a positive integer", expression=f"1d{sides}")
        return self.roll(f"1d{sides}").total


__all__ = ["DiceResult", "DiceRoller"]
