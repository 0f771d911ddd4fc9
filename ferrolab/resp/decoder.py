"""Decoding of RESP frames from a growing byte buffer.

The ``decode*`` functions take a ``bytearray`` and remove from its front the
bytes of the frame they return. When the buffer does not hold a whole frame
yet they raise :class:`NotComplete` and leave the buffer as it was.
"""

from __future__ import annotations

import re

from .frames import (
    CRLF,
    BulkString,
    InvalidFrameType,
    NotComplete,
    NullBulkString,
    ParseError,
    RespArray,
    RespFrame,
    RespMap,
    RespNull,
    RespNullArray,
    RespSet,
    SimpleError,
    SimpleString,
)

CRLF_LEN = len(CRLF)

_LENGTH_RE = re.compile(r"\+?[0-9]+")
_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DOUBLE_RE = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)",
    re.IGNORECASE,
)
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


def _as_bytes(value: str | bytes) -> bytes:
    return value.encode() if isinstance(value, str) else bytes(value)


def _text(data) -> str:
    return bytes(data).decode("utf-8", errors="replace")


def find_crlf(buf, nth: int) -> int | None:
    """Return the index of the ``nth`` CRLF found after the first byte, or None."""
    count = 0
    position = 1
    while True:
        index = buf.find(CRLF, position)
        if index < 0:
            return None
        count += 1
        if count == nth:
            return index
        position = index + 1


def extract_simple_frame_data(buf, prefix: str) -> int:
    """Return the index of the CRLF ending a one-line frame starting with ``prefix``."""
    if len(buf) < 3:
        raise NotComplete()
    if not buf.startswith(_as_bytes(prefix)):
        raise InvalidFrameType(f"expect: SimpleString({prefix}), got: {bytes(buf)!r}")
    end = find_crlf(buf, 1)
    if end is None:
        raise NotComplete()
    return end


def extract_fixed_data(buf: bytearray, expect: str | bytes, expect_type: str) -> None:
    """Remove the exact bytes ``expect`` from the front of ``buf``."""
    expected = _as_bytes(expect)
    if len(buf) < len(expected):
        raise NotComplete()
    if not buf.startswith(expected):
        raise InvalidFrameType(f"expect: {expect_type}, got: {bytes(buf)!r}")
    del buf[: len(expected)]


def parse_length(buf, prefix: str) -> tuple[int, int]:
    """Return the end of the header line and the length it announces."""
    end = extract_simple_frame_data(buf, prefix)
    text = _text(buf[len(_as_bytes(prefix)) : end])
    if not _LENGTH_RE.fullmatch(text):
        raise ParseError(f"invalid length {text!r}")
    return end, int(text)


def calc_total_length(buf, end: int, length: int, prefix: str) -> int:
    """Return the number of bytes the aggregate frame at the front of ``buf`` spans."""
    total = end + CRLF_LEN
    data = bytes(buf[total:])
    if prefix in ("*", "~"):
        for _ in range(length):
            size = expect_length(data)
            data = data[size:]
            total += size
        return total
    if prefix == "%":
        for _ in range(length):
            size = extract_simple_frame_data(data, "+") + CRLF_LEN
            data = data[size:]
            total += size
            size = expect_length(data)
            data = data[size:]
            total += size
        return total
    return length + CRLF_LEN


def _simple_length(buf, prefix: str) -> int:
    return extract_simple_frame_data(buf, prefix) + CRLF_LEN


def _aggregate_length(buf, prefix: str) -> int:
    end, length = parse_length(buf, prefix)
    return calc_total_length(buf, end, length, prefix)


def _bulk_string_length(buf) -> int:
    end, length = parse_length(buf, "$")
    return end + CRLF_LEN + length + CRLF_LEN


def expect_length(buf) -> int:
    """Return how many bytes the frame at the front of ``buf`` takes."""
    marker = buf[:1]
    if marker in (b"*", b"~", b"%"):
        return _aggregate_length(buf, marker.decode())
    if marker == b"$":
        return _bulk_string_length(buf)
    if marker in (b":", b"+", b"-", b","):
        return _simple_length(buf, marker.decode())
    if marker == b"#":
        return 4
    if marker == b"_":
        return 3
    raise NotComplete()


def _take_line(buf: bytearray, prefix: str) -> str:
    end = extract_simple_frame_data(buf, prefix)
    data = bytes(buf[: end + CRLF_LEN])
    del buf[: end + CRLF_LEN]
    return _text(data[len(prefix) : end])


def decode_simple_string(buf: bytearray) -> SimpleString:
    """Decode ``+text\\r\\n``."""
    return SimpleString(_take_line(buf, "+"))


def decode_simple_error(buf: bytearray) -> SimpleError:
    """Decode ``-message\\r\\n``."""
    return SimpleError(_take_line(buf, "-"))


def decode_integer(buf: bytearray) -> int:
    """Decode ``:[+-]n\\r\\n`` as a signed 64-bit integer."""
    text = _take_line(buf, ":")
    if not _INTEGER_RE.fullmatch(text):
        raise ParseError(f"invalid integer {text!r}")
    value = int(text)
    if not _I64_MIN <= value <= _I64_MAX:
        raise ParseError(f"integer out of range {text!r}")
    return value


def decode_double(buf: bytearray) -> float:
    """Decode ``,number\\r\\n`` as a float."""
    text = _take_line(buf, ",")
    if not _DOUBLE_RE.fullmatch(text):
        raise ParseError(f"invalid float {text!r}")
    return float(text)


def decode_boolean(buf: bytearray) -> bool:
    """Decode ``#t\\r\\n`` or ``#f\\r\\n``."""
    try:
        extract_fixed_data(buf, "#t\r\n", "Bool")
        return True
    except NotComplete:
        raise
    except InvalidFrameType:
        extract_fixed_data(buf, "#f\r\n", "Bool")
        return False


def decode_null(buf: bytearray) -> RespNull:
    """Decode ``_\\r\\n``."""
    extract_fixed_data(buf, "_\r\n", "Null")
    return RespNull()


def decode_null_bulk_string(buf: bytearray) -> NullBulkString:
    """Decode ``$-1\\r\\n``."""
    extract_fixed_data(buf, "$-1\r\n", "NullBulkString")
    return NullBulkString()


def decode_null_array(buf: bytearray) -> RespNullArray:
    """Decode ``*-1\\r\\n``."""
    extract_fixed_data(buf, "*-1\r\n", "NullArray")
    return RespNullArray()


def decode_bulk_string(buf: bytearray) -> BulkString:
    """Decode ``$n\\r\\n<n bytes>\\r\\n``."""
    end, length = parse_length(buf, "$")
    if len(buf) - (end + CRLF_LEN) < length + CRLF_LEN:
        raise NotComplete()
    del buf[: end + CRLF_LEN]
    data = bytes(buf[:length])
    del buf[: length + CRLF_LEN]
    return BulkString(data)


def _decode_items(buf: bytearray, prefix: str) -> list[RespFrame]:
    end, length = parse_length(buf, prefix)
    total = calc_total_length(buf, end, length, prefix)
    if len(buf) < total:
        raise NotComplete()
    del buf[: end + CRLF_LEN]
    return [decode(buf) for _ in range(length)]


def decode_array(buf: bytearray) -> RespArray:
    """Decode ``*n\\r\\n`` followed by n frames."""
    return RespArray(_decode_items(buf, "*"))


def decode_set(buf: bytearray) -> RespSet:
    """Decode ``~n\\r\\n`` followed by n frames."""
    return RespSet(_decode_items(buf, "~"))


def decode_map(buf: bytearray) -> RespMap:
    """Decode ``%n\\r\\n`` followed by n simple-string keys each with a value."""
    end, length = parse_length(buf, "%")
    total = calc_total_length(buf, end, length, "%")
    if len(buf) < total:
        raise NotComplete()
    del buf[: end + CRLF_LEN]
    result = RespMap()
    for _ in range(length):
        key = decode_simple_string(buf)
        result[key.value] = decode(buf)
    return result


def _null_or(buf: bytearray, null_decoder, decoder):
    try:
        return null_decoder(buf)
    except NotComplete:
        raise
    except InvalidFrameType:
        return decoder(buf)


def decode(buf: bytearray) -> RespFrame:
    """Decode whatever frame is at the front of ``buf``."""
    marker = buf[:1]
    if not marker:
        raise NotComplete()
    if marker == b"+":
        return decode_simple_string(buf)
    if marker == b"-":
        return decode_simple_error(buf)
    if marker == b":":
        return decode_integer(buf)
    if marker == b"$":
        return _null_or(buf, decode_null_bulk_string, decode_bulk_string)
    if marker == b"*":
        return _null_or(buf, decode_null_array, decode_array)
    if marker == b"_":
        return decode_null(buf)
    if marker == b"#":
        return decode_boolean(buf)
    if marker == b",":
        return decode_double(buf)
    if marker == b"%":
        return decode_map(buf)
    if marker == b"~":
        return decode_set(buf)
    raise InvalidFrameType(f"expect_length: unknown frame type: {bytes(buf)!r}")