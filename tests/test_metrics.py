import threading

import pytest

from ferrolab.concurrency.metrics import AmapMetrics, CmapMetrics

NAMES = [
    "call.thread.worker.0",
    "call.thread.worker.1",
    "req.page.1",
    "req.page.2",
]


def _run_threads(target, count):
    threads = [threading.Thread(target=target) for _ in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()


def test_amap_starts_with_every_name():
    metrics = AmapMetrics(NAMES)
    assert set(metrics.snapshot()) == set(NAMES)
    assert set(metrics.snapshot().values()) == {0}


def test_amap_inc_counts():
    metrics = AmapMetrics(NAMES)
    times = 5
    for _ in range(times):
        metrics.inc("req.page.1")
    assert metrics.snapshot()["req.page.1"] == times
    assert metrics.snapshot()["req.page.2"] == 0


def test_amap_unknown_key_raises():
    metrics = AmapMetrics(NAMES)
    with pytest.raises(KeyError, match="req.page.9 not found"):
        metrics.inc("req.page.9")


def test_amap_concurrent_increments_are_not_lost():
    metrics = AmapMetrics(NAMES)
    per_thread, threads = 1000, 8

    def work():
        for _ in range(per_thread):
            metrics.inc("call.thread.worker.0")

    _run_threads(work, threads)
    assert metrics.snapshot()["call.thread.worker.0"] == per_thread * threads


def test_amap_display():
    metrics = AmapMetrics(["req.page.1", "req.page.2"])
    metrics.inc("req.page.1")
    assert str(metrics) == "req.page.1: 1\nreq.page.2: 0\n"


def test_cmap_creates_keys_on_demand():
    metrics = CmapMetrics()
    assert metrics.snapshot() == {}
    metrics.inc("req.page.3")
    assert list(metrics.snapshot()) == ["req.page.3"]


def test_cmap_inc_then_dec_returns_to_zero():
    metrics = CmapMetrics()
    times = 7
    for _ in range(times):
        metrics.inc("req.page.4")
    for _ in range(times):
        metrics.dec("req.page.4")
    assert metrics.snapshot()["req.page.4"] == 0


def test_cmap_dec_on_new_key_goes_negative():
    metrics = CmapMetrics()
    metrics.dec("req.page.1")
    metrics.inc("req.page.2")
    snapshot = metrics.snapshot()
    assert snapshot["req.page.1"] == -snapshot["req.page.2"]


def test_cmap_concurrent_increments_are_not_lost():
    metrics = CmapMetrics()
    per_thread, threads = 1000, 8

    def work():
        for _ in range(per_thread):
            metrics.inc("call.thread.worker.1")

    _run_threads(work, threads)
    assert metrics.snapshot()["call.thread.worker.1"] == per_thread * threads


def test_cmap_display_lists_each_counter_on_its_own_line():
    metrics = CmapMetrics()
    metrics.inc("call.thread.worker.0")
    metrics.inc("req.page.2")
    lines = str(metrics).splitlines()
    expected = [f"{key}: {value}" for key, value in metrics.snapshot().items()]
    assert lines == expected
    assert str(metrics).endswith("\n")