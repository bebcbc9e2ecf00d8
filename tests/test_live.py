# tests/test_live.py
"""Tests for the LiveData publish/subscribe primitive."""

import asyncio
import threading

import pytest

from devbytes.storage.live import LiveData


class TestObserve:
    def test_current_value_delivered_on_observe(self, emissions):
        live = LiveData([1, 2])
        live.observe(emissions)
        assert emissions == [[1, 2]]

    def test_posts_delivered_in_order(self, emissions):
        live = LiveData(0)
        live.observe(emissions)
        for i in range(1, 5):
            live.post(i)
        assert emissions == [0, 1, 2, 3, 4]
        assert live.value == 4

    def test_cancel_stops_delivery(self, emissions):
        live = LiveData(0)
        subscription = live.observe(emissions)
        subscription.cancel()
        live.post(1)
        assert emissions == [0]
        assert subscription.active is False

    def test_cancel_twice_is_harmless(self, emissions):
        live = LiveData(0)
        subscription = live.observe(emissions)
        subscription.cancel()
        subscription.cancel()

    def test_subscription_context_manager(self, emissions):
        live = LiveData(0)
        with live.observe(emissions):
            live.post(1)
        live.post(2)
        assert emissions == [0, 1]

    def test_failing_observer_does_not_block_others(self, emissions):
        live = LiveData(0)

        def broken(value):
            raise RuntimeError("boom")

        live.observe(broken)
        live.observe(emissions)
        live.post(1)
        assert emissions == [0, 1]
        assert live.value == 1

    def test_concurrent_posts_seen_in_same_order_by_all_observers(self):
        live = LiveData(0)
        first, second = [], []
        live.observe(first.append)
        live.observe(second.append)

        threads = [threading.Thread(target=live.post, args=(i,)) for i in range(1, 21)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert first == second
        assert sorted(first) == list(range(21))
        assert first[-1] == live.value


class TestMap:
    def test_mapped_value(self):
        live = LiveData([1, 2, 3])
        doubled = live.map(lambda xs: [x * 2 for x in xs])
        assert doubled.value == [2, 4, 6]

    def test_one_derived_emission_per_upstream_emission(self, emissions):
        live = LiveData(1)
        live.map(lambda x: x * 10).observe(emissions)
        live.post(2)
        live.post(2)
        assert emissions == [10, 20, 20]

    def test_recomputed_every_emission(self):
        calls = []
        live = LiveData(1)
        mapped = live.map(lambda x: calls.append(x) or x)
        mapped.observe(lambda v: None)
        live.post(2)
        live.post(3)
        assert calls == [1, 2, 3]

    def test_mapped_is_read_only(self):
        mapped = LiveData(1).map(str)
        with pytest.raises(TypeError):
            mapped.post("2")

    def test_mapped_supports_base_operations(self, emissions):
        live = LiveData(1)
        mapped = live.map(lambda x: x + 1)
        chained = mapped.map(str)
        subscription = chained.observe(emissions)
        live.post(5)
        subscription.cancel()
        mapped._remove(emissions)  # no observers of its own; must not raise
        live.post(9)
        assert emissions == ["2", "6"]
        assert chained.value == "10"

    def test_mapped_stream(self):
        live = LiveData(1)

        async def first_value():
            stream = live.map(lambda x: x * 3).stream()
            value = await stream.__anext__()
            await stream.aclose()
            return value

        assert asyncio.run(first_value()) == 3
        assert live._observers == []

    def test_cancel_mapped_subscription(self, emissions):
        live = LiveData(1)
        subscription = live.map(str).observe(emissions)
        subscription.cancel()
        live.post(2)
        assert emissions == ["1"]


class TestStream:
    def test_stream_receives_values_posted_from_other_thread(self):
        live = LiveData(0)

        async def consume():
            received = []
            stream = live.stream()
            received.append(await stream.__anext__())
            poster = threading.Thread(target=lambda: [live.post(i) for i in (1, 2, 3)])
            poster.start()
            for _ in range(3):
                received.append(await asyncio.wait_for(stream.__anext__(), timeout=5))
            await stream.aclose()
            poster.join()
            return received

        assert asyncio.run(consume()) == [0, 1, 2, 3]

    def test_closing_stream_unsubscribes(self, emissions):
        live = LiveData(0)

        async def consume_one():
            stream = live.stream()
            value = await stream.__anext__()
            await stream.aclose()
            return value

        assert asyncio.run(consume_one()) == 0
        live.observe(emissions)
        live.post(1)
        assert emissions == [0, 1]
        assert len(live._observers) == 1
