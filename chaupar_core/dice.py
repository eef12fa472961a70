from __future__ import annotations

import random
from typing import Optional

from .state import DiceRoll

SPECIAL_DOUBLES = ((1, 1), (6, 6))


def roll_dice(rng: Optional[random.Random] = None) -> DiceRoll:
    """Rolls two six-sided dice."""
    rng = rng or random.Random()
    return DiceRoll(dice1=rng.randint(1, 6), dice2=rng.randint(1, 6))


def is_special_double(roll: DiceRoll) -> bool:
    return (roll.dice1, roll.dice2) in SPECIAL_DOUBLES
