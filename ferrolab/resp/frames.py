"""RESP frame types, the errors of the protocol, and frame encoding."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, MutableMapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Union

CRLF = b"\r\n"


class RespError(Exception):
    """Base class of every error raised while handling RESP frames."""


class NotComplete(RespError):
    """The buffer does not hold a whole frame yet."""

    def __init__(self) -> None:
        super().__init__("Frame is not complete")


class InvalidFrame(RespError):
    """The frame is malformed."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid frame: {detail}")
        self.detail = detail


class InvalidFrameType(RespError):
    """The frame starts with an unexpected type marker."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Invalid frame type: {detail}")
        self.detail = detail


class InvalidFrameLength(RespError):
    """The frame announces a length that cannot be used."""

    def __init__(self, length: int) -> None:
        super().__init__(f"Invalid frame length: {length}")
        self.length = length


class ParseError(RespError):
    """A number or text inside a frame could not be parsed."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Parse error: {detail}")
        self.detail = detail


@dataclass(frozen=True)
class SimpleString:
    """A RESP simple string: ``+text``."""

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SimpleError:
    """A RESP simple error: ``-message``."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class BulkString:
    """A RESP bulk string holding arbitrary bytes."""

    data: bytes

    def __post_init__(self) -> None:
        value = self.data
        if isinstance(value, str):
            value = value.encode("utf-8")
        elif not isinstance(value, bytes):
            value = bytes(value)
        object.__setattr__(self, "data", value)

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return self.data


@dataclass(frozen=True)
class NullBulkString:
    """The null bulk string: ``$-1``."""


@dataclass(frozen=True)
class RespNull:
    """The RESP3 null: ``_``."""


@dataclass(frozen=True)
class RespNullArray:
    """The null array: ``*-1``."""


class _FrameSequence:
    """An ordered collection of frames."""

    __slots__ = ("items",)

    def __init__(self, items: Iterable[RespFrame] = ()) -> None:
        self.items: list[RespFrame] = list(items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[RespFrame]:
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.items == other.items

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.items!r})"


class RespArray(_FrameSequence):
    """A RESP array: ``*n`` followed by n frames."""

    __slots__ = ()


class RespSet(_FrameSequence):
    """A RESP3 set: ``~n`` followed by n frames."""

    __slots__ = ()


class RespMap(MutableMapping):
    """A RESP3 map with string keys, kept in key order."""

    def __init__(self, entries=None, **kwargs: RespFrame) -> None:
        self._entries: dict[str, RespFrame] = {}
        if entries is not None:
            self.update(entries)
        self.update(kwargs)

    def __setitem__(self, key: str, value: RespFrame) -> None:
        if not isinstance(key, str):
            raise TypeError(f"map keys must be str, not {type(key).__name__}")
        self._entries[key] = value

    def __getitem__(self, key: str) -> RespFrame:
        return self._entries[key]

    def __delitem__(self, key: str) -> None:
        if key not in self._entries:
            raise KeyError(key)
        self._entries.pop(key)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RespMap):
            return NotImplemented
        return self._entries == other._entries

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"RespMap({dict(self.items())!r})"


RespFrame = Union[
    int,
    bool,
    float,
    SimpleString,
    SimpleError,
    BulkString,
    NullBulkString,
    RespArray,
    RespNullArray,
    RespNull,
    RespMap,
    RespSet,
]


def _plain_decimal(value: float) -> str:
    """Shortest round-trip digits of a finite non-negative float, no exponent."""
    return format(Decimal(repr(value)).normalize(), "f")


def _exponent_decimal(value: float) -> str:
    """Shortest round-trip digits of a finite non-negative float as ``d.ddde<n>``."""
    _, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    text = "".join(str(d) for d in digits)
    sci_exponent = exponent + len(digits) - 1
    mantissa = text[0] + ("." + text[1:] if len(text) > 1 else "")
    return f"{mantissa}e{sci_exponent}"


def _format_double(value: float) -> str:
    if math.isnan(value):
        return "+NaN"
    sign = "-" if math.copysign(1.0, value) < 0 else "+"
    magnitude = abs(value)
    if math.isinf(value):
        return f"{sign}inf"
    if magnitude > 1e8 or magnitude < 1e-8:
        return sign + _exponent_decimal(magnitude)
    return ("-" if value < 0 else "+") + _plain_decimal(magnitude)


def _encode_aggregate(marker: str, items: Iterable[RespFrame], count: int) -> bytes:
    return f"{marker}{count}\r\n".encode() + b"".join(encode(item) for item in items)


def encode(frame) -> bytes:
    """Serialise a frame to its RESP wire form."""
    match frame:
        case bool():
            return b"#t\r\n" if frame else b"#f\r\n"
        case int():
            sign = "" if frame < 0 else "+"
            return f":{sign}{frame}\r\n".encode()
        case float():
            return f",{_format_double(frame)}\r\n".encode()
        case SimpleString():
            return f"+{frame.value}\r\n".encode()
        case SimpleError():
            return f"-{frame.message}\r\n".encode()
        case BulkString():
            return f"${len(frame.data)}\r\n".encode() + frame.data + CRLF
        case NullBulkString() | None:
            return b"$-1\r\n"
        case RespNull():
            return b"_\r\n"
        case RespNullArray():
            return b"*-1\r\n"
        case RespArray():
            return _encode_aggregate("*", frame, len(frame))
        case RespSet():
            return _encode_aggregate("~", frame, len(frame))
        case RespMap():
            parts = [f"%{len(frame)}\r\n".encode()]
            for key, value in frame.items():
                parts.append(encode(SimpleString(key)))
                parts.append(encode(value))
            return b"".join(parts)
        case _:
            raise TypeError(f"cannot encode {type(frame).__name__} as a RESP frame")