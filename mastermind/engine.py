"""
Pure game logic (no terminal, no HTTP, no storage).
We compute two feedback numbers for each guess:
- black: how many positions are exactly correct (right digit, right place)
- white: how many of the remaining guess digits appear somewhere else in the secret,
  counted once per secret digit so duplicates in the guess are not over-counted.
"""

from typing import Dict, Tuple

from .types import Code, CODE_LENGTH, MIN_DIGIT, MAX_DIGIT

VALID_DIGITS = "".join(str(d) for d in range(MIN_DIGIT, MAX_DIGIT + 1))  # "123456"
INVALID_GUESS = f"Guess must be {CODE_LENGTH} digits, each in {MIN_DIGIT}..{MAX_DIGIT}"


def evaluate(secret: Code, guess: Code) -> Tuple[int, int]:
    """
    Example:
      secret = (1, 1, 2, 3)
      guess  = (1, 2, 2, 2)
      black = 2  (positions 0 and 2)
      left over: secret (1, 3), guess (2, 2) -> nothing in common
      white = 0
      Returns a tuple: (black, white)
    """

    # 0. Validate lengths match
    n = len(secret)
    if n != CODE_LENGTH or len(guess) != n:
        raise ValueError(f"Secret and guess must both have {CODE_LENGTH} digits.")

    # 1. Count exact position matches --> black
    #    and keep the unmatched digits of both sides
    black = 0
    secret_rest = []
    guess_rest = []
    for s, g in zip(secret, guess):
        if s == g:
            black += 1
        else:
            secret_rest.append(s)
            guess_rest.append(g)

    # 2. Frequency table of the secret digits nobody matched yet
    counts: Dict[int, int] = {}
    for digit in secret_rest:
        counts[digit] = counts.get(digit, 0) + 1

    # 3. Each leftover guess digit consumes one matching secret digit --> white
    white = 0
    for digit in guess_rest:
        if counts.get(digit, 0) > 0:
            white += 1
            counts[digit] -= 1

    return (black, white)


def is_win(secret: Code, guess: Code) -> bool:
    """
    Win = all digits match in order.
    """
    if len(secret) == 0 or len(guess) != len(secret):
        return False
    return tuple(secret) == tuple(guess)


def parse_code(text: str) -> Code:
    """
    Turn user text like "1234" into a Code.
    Anything that is not exactly 4 characters from '1'..'6' raises ValueError,
    so a bad guess never reaches evaluate().
    """
    if len(text) != CODE_LENGTH:
        raise ValueError(INVALID_GUESS)
    for ch in text:
        if ch not in VALID_DIGITS:
            raise ValueError(INVALID_GUESS)
    return tuple(int(ch) for ch in text)


def format_code(code: Code) -> str:
    # (1, 2, 3, 4) -> "1234"
    return "".join(str(d) for d in code)
