"""Unit tests for BoundedBuffer and ChangeChannel."""

from __future__ import annotations

import threading
import time

import pytest

from memtable import OverflowPolicy, SubscriptionClosedError
from memtable.domain.services import BoundedBuffer, ChangeChannel


@pytest.mark.unit
class TestBoundedBuffer:
    """Tests for the bounded buffer."""

    def test_fifo(self) -> None:
        buffer: BoundedBuffer[int] = BoundedBuffer(4)
        for i in range(3):
            assert buffer.put(i) is True

        assert [buffer.get(), buffer.get(), buffer.get()] == [0, 1, 2]

    def test_invalid_capacity(self) -> None:
        with pytest.raises(ValueError):
            BoundedBuffer(0)

    def test_drop_newest(self) -> None:
        buffer: BoundedBuffer[int] = BoundedBuffer(2, OverflowPolicy.DROP_NEWEST)

        results = [buffer.put(i) for i in range(4)]

        assert results == [True, True, False, False]
        assert buffer.drain() == [0, 1]
        assert buffer.dropped == 2

    def test_drop_oldest(self) -> None:
        buffer: BoundedBuffer[int] = BoundedBuffer(2, OverflowPolicy.DROP_OLDEST)

        results = [buffer.put(i) for i in range(4)]

        assert results == [True, True, False, False]
        assert buffer.drain() == [2, 3]
        assert buffer.dropped == 2

    def test_policy_accepts_string_value(self) -> None:
        buffer: BoundedBuffer[int] = BoundedBuffer(1, "drop_oldest")  # type: ignore[arg-type]

        assert buffer.overflow_policy is OverflowPolicy.DROP_OLDEST

    def test_get_timeout_returns_none(self) -> None:
        buffer: BoundedBuffer[int] = BoundedBuffer(1)

        start = time.monotonic()
        assert buffer.get(timeout=0.05) is None
        assert time.monotonic() - start >= 0.04

    def test_closed_buffer_drains_then_raises(self) -> None:
        buffer: BoundedBuffer[int] = BoundedBuffer(4)
        buffer.put(1)
        buffer.close()

        assert buffer.put(2) is False
        assert buffer.get() == 1
        with pytest.raises(SubscriptionClosedError):
            buffer.get()

    def test_iteration_ends_on_close(self) -> None:
        buffer: BoundedBuffer[int] = BoundedBuffer(4)
        buffer.put(1)
        buffer.put(2)
        buffer.close()

        assert list(buffer) == [1, 2]

    def test_close_wakes_blocked_consumer(self) -> None:
        buffer: BoundedBuffer[int] = BoundedBuffer(1)
        errors: list[Exception] = []

        def consume() -> None:
            try:
                buffer.get()
            except SubscriptionClosedError as e:
                errors.append(e)

        consumer = threading.Thread(target=consume)
        consumer.start()
        time.sleep(0.05)
        buffer.close()
        consumer.join(timeout=2.0)

        assert not consumer.is_alive()
        assert len(errors) == 1

    def test_blocked_consumer_receives_item(self) -> None:
        buffer: BoundedBuffer[str] = BoundedBuffer(1)
        received: list[str] = []

        consumer = threading.Thread(target=lambda: received.append(buffer.get(timeout=2.0)))
        consumer.start()
        buffer.put("hello")
        consumer.join(timeout=2.0)

        assert received == ["hello"]


@pytest.mark.unit
class TestChangeChannel:
    """Tests for multicast delivery."""

    def test_fan_out(self) -> None:
        channel: ChangeChannel[str] = ChangeChannel(buffer_size=4)
        a = channel.subscribe()
        b = channel.subscribe()

        assert channel.publish("x") == 0

        assert a.drain() == ["x"]
        assert b.drain() == ["x"]

    def test_publish_without_subscribers(self) -> None:
        channel: ChangeChannel[str] = ChangeChannel()

        assert channel.publish("x") == 0

    def test_slow_subscriber_does_not_affect_others(self) -> None:
        channel: ChangeChannel[int] = ChangeChannel(buffer_size=1)
        slow = channel.subscribe()
        fast = channel.subscribe(buffer_size=10)

        dropped = [channel.publish(i) for i in range(3)]

        assert dropped == [0, 1, 1]
        assert slow.drain() == [0]
        assert fast.drain() == [0, 1, 2]

    def test_unsubscribe_on_close(self) -> None:
        channel: ChangeChannel[int] = ChangeChannel()
        subscription = channel.subscribe()

        subscription.close()
        subscription.close()

        assert channel.subscriber_count == 0
        assert channel.publish(1) == 0

    def test_close_channel_closes_subscriptions(self) -> None:
        channel: ChangeChannel[int] = ChangeChannel()
        subscription = channel.subscribe()

        channel.close()

        assert channel.closed
        assert subscription.closed
        assert channel.subscriber_count == 0

    def test_subscribe_after_close_is_closed(self) -> None:
        channel: ChangeChannel[int] = ChangeChannel()
        channel.close()

        subscription = channel.subscribe()

        assert subscription.closed
        assert list(subscription) == []

    def test_invalid_buffer_size(self) -> None:
        with pytest.raises(ValueError):
            ChangeChannel(buffer_size=0)
