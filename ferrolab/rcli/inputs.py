"""Opening a command's input: a file path, or ``-`` for standard input."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import BinaryIO

STDIN = "-"


@contextmanager
def open_input(path: str | os.PathLike) -> Iterator[BinaryIO]:
    """Yield a binary stream for ``path``; ``-`` is standard input, left open."""
    if path == STDIN:
        yield sys.stdin.buffer
    else:
        with open(path, "rb") as handle:
            yield handle


def read_input(path: str | os.PathLike) -> bytes:
    """Return all the bytes of the input named by ``path``."""
    with open_input(path) as handle:
        return handle.read()