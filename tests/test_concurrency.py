from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from ipmatcher.services.matcher import Matcher

pytestmark = [pytest.mark.unit]


def test_concurrent_adds_of_same_network_keep_one_entry():
    matcher = Matcher()
    barrier = threading.Barrier(8)

    def add() -> None:
        barrier.wait()
        for _ in range(50):
            matcher.add("10.0.0.0", "255.0.0.0")

    with ThreadPoolExecutor(max_workers=8) as pool:
        for future in [pool.submit(add) for _ in range(8)]:
            future.result()

    assert matcher.all() == ["10.0.0.0/255.0.0.0"]


def test_concurrent_mixed_operations_stay_consistent():
    matcher = Matcher()
    matcher.add("192.168.0.0", "255.255.0.0")

    def churn(worker: int) -> None:
        network = f"10.{worker}.0.0"
        for i in range(100):
            matcher.add(network, "255.255.0.0")
            assert matcher.match_exists(f"192.168.{worker}.{i % 250}") is True
            matcher.match_exists(f"10.{worker}.1.{i % 250}")
            matcher.exists(network, "255.255.0.0")
            matcher.remove(network)

    with ThreadPoolExecutor(max_workers=6) as pool:
        for future in [pool.submit(churn, worker) for worker in range(6)]:
            future.result()

    assert matcher.all() == ["192.168.0.0/255.255.0.0"]
    assert all(key.startswith("192.168.") for key in matcher.cache.snapshot())
