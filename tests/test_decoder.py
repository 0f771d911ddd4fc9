import pytest

from ferrolab.resp.decoder import (
    calc_total_length,
    decode,
    decode_array,
    decode_boolean,
    decode_bulk_string,
    decode_double,
    decode_integer,
    decode_map,
    decode_null,
    decode_null_array,
    decode_null_bulk_string,
    decode_set,
    decode_simple_error,
    decode_simple_string,
    expect_length,
    extract_fixed_data,
    extract_simple_frame_data,
    find_crlf,
    parse_length,
)
from ferrolab.resp.frames import (
    BulkString,
    InvalidFrameType,
    NotComplete,
    NullBulkString,
    ParseError,
    RespArray,
    RespMap,
    RespNull,
    RespNullArray,
    RespSet,
    SimpleError,
    SimpleString,
    encode,
)


def test_calc_array_length():
    buf = b"*2\r\n$3\r\nset\r\n$5\r\nhello\r\n"
    end, length = parse_length(buf, "*")
    assert calc_total_length(buf, end, length, "*") == len(buf)

    buf = b"*2\r\n$3\r\nset\r\n"
    end, length = parse_length(buf, "*")
    with pytest.raises(NotComplete):
        calc_total_length(buf, end, length, "*")


def test_find_crlf():
    buf = b"+a\r\nb\r\nc\r\n"
    assert find_crlf(buf, 1) == 2
    assert find_crlf(buf, 2) == 5
    assert find_crlf(buf, 3) == 8
    assert find_crlf(buf, 4) is None


def test_extract_simple_frame_data_errors():
    with pytest.raises(NotComplete):
        extract_simple_frame_data(b"+a", "+")
    with pytest.raises(InvalidFrameType):
        extract_simple_frame_data(b":12\r\n", "+")
    assert extract_simple_frame_data(b"+OK\r\n", "+") == 3


def test_extract_fixed_data_consumes():
    buf = bytearray(b"_\r\nrest")
    extract_fixed_data(buf, "_\r\n", "Null")
    assert buf == bytearray(b"rest")


def test_expect_length_values():
    assert expect_length(b"#t\r\n") == 4
    assert expect_length(b"_\r\n") == 3
    assert expect_length(b"$5\r\nhello\r\n") == 11
    assert expect_length(b":+123\r\n") == 7
    with pytest.raises(NotComplete):
        expect_length(b"")


def test_simple_string_decode():
    buf = bytearray(b"+OK\r\n")
    assert decode_simple_string(buf) == SimpleString("OK")

    buf.extend(b"+hello\r")
    with pytest.raises(NotComplete):
        decode_simple_string(buf)

    buf.append(ord("\n"))
    assert decode_simple_string(buf) == SimpleString("hello")


def test_simple_error_decode():
    buf = bytearray(b"-Error message\r\n")
    assert decode_simple_error(buf) == SimpleError("Error message")


def test_integer_decode():
    buf = bytearray(b":+123\r\n")
    assert decode_integer(buf) == 123
    buf.extend(b":-123\r\n")
    assert decode_integer(buf) == -123


def test_integer_decode_invalid():
    with pytest.raises(ParseError):
        decode_integer(bytearray(b":abc\r\n"))


def test_boolean_decode():
    buf = bytearray(b"#t\r\n")
    assert decode_boolean(buf) is True

    buf.extend(b"#f\r\n")
    assert decode_boolean(buf) is False

    buf.extend(b"#f\r")
    with pytest.raises(NotComplete):
        decode_boolean(buf)

    buf.append(ord("\n"))
    assert decode_boolean(buf) is False


def test_null_decode():
    assert decode_null(bytearray(b"_\r\n")) == RespNull()


def test_double_decode():
    buf = bytearray(b",123.45\r\n")
    assert decode_double(buf) == 123.45
    buf.extend(b",+1.23456e-9\r\n")
    assert decode_double(buf) == 1.23456e-9


def test_bulk_string_decode():
    buf = bytearray(b"$5\r\nhello\r\n")
    assert decode_bulk_string(buf) == BulkString(b"hello")

    buf.extend(b"$5\r\nhello")
    with pytest.raises(NotComplete):
        decode_bulk_string(buf)
    assert buf == bytearray(b"$5\r\nhello")

    buf.extend(b"\r\n")
    assert decode_bulk_string(buf) == BulkString(b"hello")
    assert buf == bytearray()


def test_null_bulk_string_decode():
    assert decode_null_bulk_string(bytearray(b"$-1\r\n")) == NullBulkString()


def test_array_decode():
    buf = bytearray(b"*2\r\n$3\r\nset\r\n$5\r\nhello\r\n")
    expected = RespArray([BulkString(b"set"), BulkString(b"hello")])
    assert decode_array(buf) == expected

    buf.extend(b"*2\r\n$3\r\nset\r\n")
    with pytest.raises(NotComplete):
        decode_array(buf)

    buf.extend(b"$5\r\nhello\r\n")
    assert decode_array(buf) == expected


def test_null_array_decode():
    assert decode_null_array(bytearray(b"*-1\r\n")) == RespNullArray()


def test_map_decode():
    buf = bytearray(b"%2\r\n+hello\r\n$5\r\nworld\r\n+foo\r\n$3\r\nbar\r\n")
    expected = RespMap()
    expected["hello"] = BulkString(b"world")
    expected["foo"] = BulkString(b"bar")
    assert decode_map(buf) == expected


def test_set_decode():
    buf = bytearray(b"~2\r\n$3\r\nset\r\n$5\r\nhello\r\n")
    assert decode_set(buf) == RespSet([BulkString(b"set"), BulkString(b"hello")])


def test_decode_nested_set():
    buf = bytearray(b"~2\r\n*2\r\n:+1234\r\n#t\r\n$5\r\nworld\r\n")
    frame = decode(buf)
    assert frame == RespSet([RespArray([1234, True]), BulkString(b"world")])


def test_decode_map_with_double():
    buf = bytearray(b"%2\r\n+foo\r\n,-123456.789\r\n+hello\r\n$5\r\nworld\r\n")
    frame = decode(buf)
    assert frame["foo"] == -123456.789
    assert frame["hello"] == BulkString(b"world")


@pytest.mark.parametrize(
    "frame",
    [
        SimpleString("OK"),
        SimpleError("Error message"),
        123,
        -123,
        True,
        False,
        123.456,
        -1.23456e-9,
        RespNull(),
        NullBulkString(),
        RespNullArray(),
        BulkString(b"hello"),
        RespArray([BulkString(b"set"), BulkString(b"hello"), 7]),
        RespSet([RespArray([1234, True]), BulkString(b"world")]),
    ],
)
def test_round_trip(frame):
    buf = bytearray(encode(frame))
    assert decode(buf) == frame
    assert buf == bytearray()


def test_decode_leaves_trailing_bytes():
    buf = bytearray(b"+OK\r\n:+1\r\n")
    assert decode(buf) == SimpleString("OK")
    assert buf == bytearray(b":+1\r\n")
    assert decode(buf) == 1


def test_decode_empty_is_not_complete():
    with pytest.raises(NotComplete):
        decode(bytearray())


def test_decode_unknown_type():
    with pytest.raises(InvalidFrameType):
        decode(bytearray(b"?what\r\n"))


def test_decode_partial_null_bulk_is_not_complete():
    with pytest.raises(NotComplete):
        decode(bytearray(b"$-1"))