"""Random password generation."""

from __future__ import annotations

import secrets

UPPER = "ABCDEFGHIJKMNPQRSTUVWXYZ"
LOWER = "abcdefghijkmnopqrstuvwxyz"
NUMBER = "123456789"
SYMBOL = "!@#$%^&*_"

MAX_LENGTH = 255

_rng = secrets.SystemRandom()


def generate_password(
    length: int = 16,
    uppercase: bool = True,
    lowercase: bool = True,
    numbers: bool = True,
    symbol: bool = True,
) -> str:
    """Return a random password with at least one character of each chosen class."""
    if not 0 <= length <= MAX_LENGTH:
        raise ValueError(f"password length must be between 0 and {MAX_LENGTH}")
    groups = [
        group
        for group, wanted in (
            (UPPER, uppercase),
            (LOWER, lowercase),
            (NUMBER, numbers),
            (SYMBOL, symbol),
        )
        if wanted
    ]
    if length < len(groups):
        raise ValueError(
            f"password length {length} is shorter than the {len(groups)} "
            "character classes it must contain"
        )
    pool = "".join(groups)
    password = [_rng.choice(group) for group in groups]
    remaining = length - len(password)
    if remaining and not pool:
        raise ValueError("no character classes selected")
    if remaining:
        password.extend(_rng.choices(pool, k=remaining))
    _rng.shuffle(password)
    return "".join(password)