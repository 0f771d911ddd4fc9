"""BLAKE3 hashing: the plain 32-byte digest and the keyed mode."""

from __future__ import annotations

import struct
from dataclasses import dataclass

OUT_LEN = 32
KEY_LEN = 32
BLOCK_LEN = 64
CHUNK_LEN = 1024

_CHUNK_START = 1 << 0
_CHUNK_END = 1 << 1
_PARENT = 1 << 2
_ROOT = 1 << 3
_KEYED_HASH = 1 << 4

_M32 = 0xFFFFFFFF

_IV = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

_PERMUTATION = (2, 6, 3, 10, 7, 0, 4, 13, 1, 11, 12, 5, 9, 14, 15, 8)


def _rotr(value: int, shift: int) -> int:
    return ((value >> shift) | (value << (32 - shift))) & _M32


def _g(s: list[int], a: int, b: int, c: int, d: int, mx: int, my: int) -> None:
    s[a] = (s[a] + s[b] + mx) & _M32
    s[d] = _rotr(s[d] ^ s[a], 16)
    s[c] = (s[c] + s[d]) & _M32
    s[b] = _rotr(s[b] ^ s[c], 12)
    s[a] = (s[a] + s[b] + my) & _M32
    s[d] = _rotr(s[d] ^ s[a], 8)
    s[c] = (s[c] + s[d]) & _M32
    s[b] = _rotr(s[b] ^ s[c], 7)


def _round(s: list[int], m: list[int]) -> None:
    _g(s, 0, 4, 8, 12, m[0], m[1])
    _g(s, 1, 5, 9, 13, m[2], m[3])
    _g(s, 2, 6, 10, 14, m[4], m[5])
    _g(s, 3, 7, 11, 15, m[6], m[7])
    _g(s, 0, 5, 10, 15, m[8], m[9])
    _g(s, 1, 6, 11, 12, m[10], m[11])
    _g(s, 2, 7, 8, 13, m[12], m[13])
    _g(s, 3, 4, 9, 14, m[14], m[15])


def _compress(
    cv: tuple[int, ...], block: tuple[int, ...], counter: int, block_len: int, flags: int
) -> list[int]:
    state = [*cv, *_IV[:4], counter & _M32, (counter >> 32) & _M32, block_len, flags]
    message = list(block)
    for round_no in range(7):
        _round(state, message)
        if round_no < 6:
            message = [message[i] for i in _PERMUTATION]
    for i, word in enumerate(cv):
        state[i] ^= state[i + 8]
        state[i + 8] ^= word
    return state


def _words(block: bytes) -> tuple[int, ...]:
    return struct.unpack("<16I", block.ljust(BLOCK_LEN, b"\0"))


@dataclass(frozen=True)
class _Output:
    cv: tuple[int, ...]
    block: tuple[int, ...]
    counter: int
    block_len: int
    flags: int

    def chaining_value(self) -> tuple[int, ...]:
        return tuple(_compress(self.cv, self.block, self.counter, self.block_len, self.flags)[:8])

    def root_bytes(self, length: int = OUT_LEN) -> bytes:
        out = bytearray()
        counter = 0
        while len(out) < length:
            words = _compress(self.cv, self.block, counter, self.block_len, self.flags | _ROOT)
            out += struct.pack("<16I", *words)
            counter += 1
        return bytes(out[:length])


def _chunk_output(key: tuple[int, ...], chunk: bytes, counter: int, flags: int) -> _Output:
    blocks = [chunk[i : i + BLOCK_LEN] for i in range(0, len(chunk), BLOCK_LEN)] or [b""]
    cv = key
    for index, block in enumerate(blocks[:-1]):
        start = _CHUNK_START if index == 0 else 0
        cv = tuple(_compress(cv, _words(block), counter, BLOCK_LEN, flags | start)[:8])
    last = blocks[-1]
    start = _CHUNK_START if len(blocks) == 1 else 0
    return _Output(cv, _words(last), counter, len(last), flags | start | _CHUNK_END)


def _parent_output(
    left: tuple[int, ...], right: tuple[int, ...], key: tuple[int, ...], flags: int
) -> _Output:
    return _Output(key, (*left, *right), 0, BLOCK_LEN, _PARENT | flags)


def _hash(data: bytes, key: tuple[int, ...], flags: int) -> bytes:
    chunks = [data[i : i + CHUNK_LEN] for i in range(0, len(data), CHUNK_LEN)] or [b""]
    stack: list[tuple[int, ...]] = []
    for counter, chunk in enumerate(chunks[:-1]):
        cv = _chunk_output(key, chunk, counter, flags).chaining_value()
        total = counter + 1
        while total & 1 == 0:
            cv = _parent_output(stack.pop(), cv, key, flags).chaining_value()
            total >>= 1
        stack.append(cv)
    output = _chunk_output(key, chunks[-1], len(chunks) - 1, flags)
    while stack:
        output = _parent_output(stack.pop(), output.chaining_value(), key, flags)
    return output.root_bytes(OUT_LEN)


def hash_bytes(data) -> bytes:
    """Return the 32-byte BLAKE3 digest of ``data``."""
    return _hash(bytes(data), _IV, 0)


def keyed_hash(key, data) -> bytes:
    """Return the 32-byte keyed BLAKE3 digest of ``data`` under a 32-byte key."""
    key = bytes(key)
    if len(key) != KEY_LEN:
        raise ValueError(f"key must be {KEY_LEN} bytes, got {len(key)}")
    return _hash(bytes(data), struct.unpack("<8I", key), _KEYED_HASH)