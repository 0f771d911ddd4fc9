"""Base64 encoding and decoding of a command's input."""

from __future__ import annotations

import base64
import binascii
import os
import re
from enum import Enum

from .inputs import read_input


class Base64Format(Enum):
    """The base64 alphabet and padding to use."""

    STANDARD = "standard"
    URL_SAFE = "urlsafe"

    @classmethod
    def parse(cls, value: str) -> Base64Format:
        """Return the format named by ``value``."""
        try:
            return cls(value)
        except ValueError:
            raise ValueError("Invalid format") from None

    def __str__(self) -> str:
        return self.value


_STANDARD_RE = re.compile(r"[A-Za-z0-9+/]*={0,2}")
_URL_SAFE_RE = re.compile(r"[A-Za-z0-9_-]*")


def _b64_encode(data: bytes, fmt: Base64Format) -> str:
    if fmt is Base64Format.STANDARD:
        return base64.b64encode(data).decode("ascii")
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64_decode(text: str, fmt: Base64Format) -> bytes:
    """Decode ``text`` strictly: only the canonical encoding is accepted."""
    try:
        if fmt is Base64Format.STANDARD:
            if not _STANDARD_RE.fullmatch(text) or len(text) % 4:
                raise ValueError("invalid base64 input")
            decoded = base64.b64decode(text, validate=True)
        else:
            if not _URL_SAFE_RE.fullmatch(text) or len(text) % 4 == 1:
                raise ValueError("invalid base64 input")
            decoded = base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 input: {exc}") from exc
    if _b64_encode(decoded, fmt) != text:
        raise ValueError("invalid base64 input: non-canonical encoding")
    return decoded


def encode_base64(
    input_path: str | os.PathLike, fmt: Base64Format = Base64Format.STANDARD
) -> str:
    """Return the base64 text of the input's bytes."""
    return _b64_encode(read_input(input_path), fmt)


def decode_base64(
    input_path: str | os.PathLike, fmt: Base64Format = Base64Format.STANDARD
) -> bytes:
    """Return the bytes of the base64 text held by the input, ignoring outer whitespace."""
    text = read_input(input_path).decode("utf-8").strip()
    return _b64_decode(text, fmt)