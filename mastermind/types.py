"""
Labels for clarity.
"""

from typing import Literal, Tuple

Digit = int  # 1 -> 6
Code = Tuple[Digit, ...]  # always 4 digits

CODE_LENGTH = 4
MIN_DIGIT = 1
MAX_DIGIT = 6

Backend = Literal["json", "sql"]
