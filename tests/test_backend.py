import threading

from ferrolab.redis.backend import Backend
from ferrolab.resp.frames import BulkString, SimpleString


def test_set_then_get_returns_value():
    backend = Backend()
    backend.set("hello", BulkString(b"world"))
    assert backend.get("hello") == BulkString(b"world")


def test_get_missing_key_is_none():
    assert Backend().get("missing") is None


def test_set_overwrites():
    backend = Backend()
    backend.set("k", BulkString(b"a"))
    backend.set("k", BulkString(b"b"))
    assert backend.get("k") == BulkString(b"b")


def test_hset_then_hget():
    backend = Backend()
    backend.hset("map", "hello", BulkString(b"world"))
    assert backend.hget("map", "hello") == BulkString(b"world")
    assert backend.hget("map", "other") is None
    assert backend.hget("nomap", "hello") is None


def test_hgetall_returns_all_fields():
    backend = Backend()
    backend.hset("map", "hello", BulkString(b"world"))
    backend.hset("map", "hello1", BulkString(b"world1"))
    assert backend.hgetall("map") == {
        "hello": BulkString(b"world"),
        "hello1": BulkString(b"world1"),
    }


def test_hgetall_missing_is_none():
    assert Backend().hgetall("map") is None


def test_hgetall_is_a_copy():
    backend = Backend()
    backend.hset("map", "hello", BulkString(b"world"))
    snapshot = backend.hgetall("map")
    snapshot["extra"] = SimpleString("OK")
    assert "extra" not in backend.hgetall("map")


def test_plain_and_hash_keys_are_separate():
    backend = Backend()
    backend.set("key", BulkString(b"v"))
    assert backend.hgetall("key") is None
    backend.hset("hkey", "f", BulkString(b"v"))
    assert backend.get("hkey") is None


def test_concurrent_hset_keeps_every_field():
    backend = Backend()

    def worker(offset):
        for i in range(100):
            backend.hset("map", f"{offset}-{i}", i)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(backend.hgetall("map")) == 400