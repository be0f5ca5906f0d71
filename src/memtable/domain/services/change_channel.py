"""Multicast change channel with bounded, non-blocking delivery.

Each subscriber owns a bounded buffer. Publishing never waits: when a
subscriber's buffer is full the configured OverflowPolicy decides which
item is lost, and the loss is counted on the subscriber.

    Table --publish--> ChangeChannel --+--> ChangeSubscription (buffer)
                                       +--> ChangeSubscription (buffer)
                                       +--> ...
"""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Generic, Iterator, TypeVar

from memtable.domain.errors import SubscriptionClosedError
from memtable.domain.value_objects import OverflowPolicy

T = TypeVar("T")


class BoundedBuffer(Generic[T]):
    """Thread-safe bounded FIFO with an explicit overflow policy.

    Producers call ``put`` and never block. Consumers call ``get`` or
    iterate; iteration ends once the buffer is closed and drained.

    Thread Safety:
        All methods are thread-safe. A single condition variable guards
        the queue and the closed flag.
    """

    def __init__(
        self,
        capacity: int,
        overflow_policy: OverflowPolicy = OverflowPolicy.DROP_NEWEST,
    ) -> None:
        """Initialize the buffer.

        Args:
            capacity: Maximum number of buffered items (>= 1).
            overflow_policy: What a full buffer does with a new item.
        """
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._policy = OverflowPolicy(overflow_policy)
        self._items: deque[T] = deque()
        self._cond = threading.Condition()
        self._closed = False
        self._dropped = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def overflow_policy(self) -> OverflowPolicy:
        return self._policy

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    @property
    def dropped(self) -> int:
        """Number of items lost to overflow."""
        with self._cond:
            return self._dropped

    def put(self, item: T) -> bool:
        """Offer an item without blocking.

        Returns:
            True if the item was buffered without losing anything, False
            if an item (incoming or oldest) was dropped or the buffer is
            closed.
        """
        with self._cond:
            if self._closed:
                return False
            lost = False
            if len(self._items) >= self._capacity:
                self._dropped += 1
                lost = True
                if self._policy is OverflowPolicy.DROP_NEWEST:
                    return False
                self._items.popleft()
            self._items.append(item)
            self._cond.notify()
            return not lost

    def get(self, timeout: float | None = None) -> T | None:
        """Take the next item, waiting up to ``timeout`` seconds.

        Returns:
            The next item, or None if the timeout expired first.

        Raises:
            SubscriptionClosedError: If the buffer is closed and drained.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            while not self._items:
                if self._closed:
                    raise SubscriptionClosedError("Subscription is closed")
                if deadline is None:
                    self._cond.wait()
                else:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        return None
                    self._cond.wait(remaining)
            return self._items.popleft()

    def drain(self) -> list[T]:
        """Take every buffered item without waiting."""
        with self._cond:
            items = list(self._items)
            self._items.clear()
            return items

    def close(self) -> None:
        """Stop accepting items and wake every waiting consumer.

        Items already buffered stay readable.
        """
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                item = self.get()
            except SubscriptionClosedError:
                return
            yield item


class ChangeSubscription(BoundedBuffer[T]):
    """One subscriber's view of a ChangeChannel.

    Closing the subscription detaches it from its channel; the channel
    stops delivering to it and releases its reference.

    Example:
        with table.changes() as changes:
            table.add({"name": "Alice", "age": 30})
            event = changes.get(timeout=1.0)
    """

    def __init__(
        self,
        channel: ChangeChannel[T] | None,
        capacity: int,
        overflow_policy: OverflowPolicy = OverflowPolicy.DROP_NEWEST,
    ) -> None:
        super().__init__(capacity, overflow_policy)
        self._channel = channel

    def close(self) -> None:
        """Detach from the channel and close the buffer. Idempotent."""
        channel, self._channel = self._channel, None
        if channel is not None:
            channel._unsubscribe(self)
        super().close()

    def __enter__(self) -> ChangeSubscription[T]:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class ChangeChannel(Generic[T]):
    """Multicast fan-out of items to independent subscriptions.

    Thread Safety:
        Subscribe, unsubscribe and publish may be called from any thread.
        Publish delivers to a copy of the subscriber list, so a subscriber
        closing mid-publish is safe.
    """

    def __init__(
        self,
        buffer_size: int = 64,
        overflow_policy: OverflowPolicy = OverflowPolicy.DROP_NEWEST,
    ) -> None:
        """Initialize the channel.

        Args:
            buffer_size: Capacity of each new subscription's buffer.
            overflow_policy: Overflow policy of each new subscription.
        """
        if buffer_size < 1:
            raise ValueError(f"buffer_size must be at least 1, got {buffer_size}")
        self._buffer_size = buffer_size
        self._policy = OverflowPolicy(overflow_policy)
        self._lock = threading.Lock()
        self._subscribers: list[ChangeSubscription[T]] = []
        self._closed = False

    @property
    def buffer_size(self) -> int:
        return self._buffer_size

    @property
    def overflow_policy(self) -> OverflowPolicy:
        return self._policy

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(
        self,
        buffer_size: int | None = None,
        overflow_policy: OverflowPolicy | None = None,
    ) -> ChangeSubscription[T]:
        """Attach a new subscriber.

        A closed channel hands out an already-closed subscription, so
        consumers see the terminal signal instead of waiting forever.

        Args:
            buffer_size: Buffer capacity (channel default if None)
            overflow_policy: Overflow policy (channel default if None)
        """
        capacity = self._buffer_size if buffer_size is None else buffer_size
        policy = self._policy if overflow_policy is None else overflow_policy
        with self._lock:
            if self._closed:
                subscription: ChangeSubscription[T] = ChangeSubscription(None, capacity, policy)
                subscription.close()
                return subscription
            subscription = ChangeSubscription(self, capacity, policy)
            self._subscribers.append(subscription)
            return subscription

    def publish(self, item: T) -> int:
        """Deliver an item to every subscriber without blocking.

        Returns:
            Number of subscribers that lost an item to overflow.
        """
        with self._lock:
            subscribers = list(self._subscribers)
        dropped = 0
        for subscription in subscribers:
            if not subscription.put(item) and not subscription.closed:
                dropped += 1
        return dropped

    def close(self) -> None:
        """Close every subscription and refuse new ones."""
        with self._lock:
            self._closed = True
            subscribers, self._subscribers = self._subscribers, []
        for subscription in subscribers:
            subscription.close()

    def _unsubscribe(self, subscription: ChangeSubscription[T]) -> None:
        with self._lock:
            try:
                self._subscribers.remove(subscription)
            except ValueError:
                pass
