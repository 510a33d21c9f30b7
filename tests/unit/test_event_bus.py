"""Tests for the EventBus — fan-out, failure isolation."""

from __future__ import annotations

from nftmarket.core.event_bus import EventBus
from nftmarket.models.events import MarketItemCreated


def _event(token_id: int = 1) -> MarketItemCreated:
    return MarketItemCreated(
        token_id=token_id, seller="0xalice", owner="0xmarket", price=100
    )


class TestEventBus:
    def test_publish_to_all_subscribers(self):
        bus = EventBus()
        first, second = [], []
        bus.subscribe(first.append)
        bus.subscribe(second.append)

        delivered = bus.publish(_event())

        assert delivered == 2
        assert len(first) == len(second) == 1

    def test_duplicate_subscription_ignored(self):
        bus = EventBus()
        received = []
        bus.subscribe(received.append)
        bus.subscribe(received.append)
        bus.publish(_event())
        assert len(received) == 1

    def test_failing_handler_does_not_block_others(self):
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("indexer offline")

        bus.subscribe(broken)
        bus.subscribe(received.append)

        assert bus.publish(_event()) == 1
        assert len(received) == 1

    def test_history(self):
        bus = EventBus()
        bus.publish(_event(1))
        bus.publish(_event(2))
        assert [e.token_id for e in bus.history] == [1, 2]
