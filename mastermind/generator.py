"""
Secret codes for new games.
Each of the 4 digits is drawn on its own, uniformly from 1..6 (duplicates allowed).
By default we use the OS secure random source; tests pass a seeded random.Random.
"""

import random
from secrets import SystemRandom
from typing import Optional

from .types import Code, CODE_LENGTH, MIN_DIGIT, MAX_DIGIT

_system_random = SystemRandom()


def generate_code(rng: Optional[random.Random] = None) -> Code:
    source = rng if rng is not None else _system_random
    return tuple(source.randint(MIN_DIGIT, MAX_DIGIT) for _ in range(CODE_LENGTH))
