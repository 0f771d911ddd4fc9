import pytest

from ferrolab.rcli.blake3 import hash_bytes, keyed_hash

KEY = bytes(range(32))


def test_empty_input_digest():
    assert hash_bytes(b"").hex() == (
        "af1349b9f5f9a1a6a0404dea36dcc9499bcb25c9adc112b7cc9a93cae41f3262"
    )


def test_abc_digest():
    assert hash_bytes(b"abc").hex() == (
        "6437b3ac38465133ffb63b75273a8db548c558465d79db03fd359c6cd5bd9d85"
    )


def test_digests_across_block_and_chunk_boundaries_are_distinct():
    sizes = (0, 1, 63, 64, 65, 1023, 1024, 1025, 2048, 2049, 3073, 5000)
    digests = [hash_bytes(bytes(i % 251 for i in range(size))) for size in sizes]
    assert all(len(d) == 32 for d in digests)
    assert len(set(digests)) == len(sizes)


def test_hash_is_deterministic_for_multi_chunk_input():
    data = bytes(i % 251 for i in range(4500))
    assert hash_bytes(data) == hash_bytes(bytes(data))


def test_change_in_later_chunk_changes_digest():
    data = bytearray(3000)
    original = hash_bytes(data)
    data[2500] = 1
    changed = hash_bytes(data)
    assert len(changed) == 32
    assert original != changed


def test_accepts_bytearray_and_memoryview():
    expected = hash_bytes(b"abc")
    assert hash_bytes(bytearray(b"abc")) == expected
    assert hash_bytes(memoryview(b"abc")) == expected


def test_keyed_hash_differs_from_plain_hash():
    digest = keyed_hash(KEY, b"abc")
    assert len(digest) == 32
    assert digest == keyed_hash(KEY, b"abc")
    assert digest != hash_bytes(b"abc")


def test_keyed_hash_depends_on_key():
    other = bytes(reversed(KEY))
    assert keyed_hash(KEY, b"payload") == keyed_hash(KEY, b"payload")
    assert keyed_hash(KEY, b"payload") != keyed_hash(other, b"payload")


@pytest.mark.parametrize("size", [0, 16, 31, 33])
def test_keyed_hash_rejects_bad_key_length(size):
    with pytest.raises(ValueError):
        keyed_hash(bytes(size), b"data")