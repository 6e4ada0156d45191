"""
Reactive state containers.

A ``Publisher`` holds a current value and synchronously notifies its
subscribers whenever the value changes. Publishers compose with
``combine_latest``, ``map`` and ``debounce`` into pipelines that
recompute derived state whenever an upstream value changes.

All deliveries run under a single re-entrant lock, so values sent from a
debounce timer thread and from the caller's thread never interleave.
"""

import logging
import threading
from concurrent.futures import Future
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)

_dispatch_lock = threading.RLock()


class _Empty:
    def __repr__(self) -> str:
        return "<empty>"


EMPTY = _Empty()


class Subscription:
    """Handle for a registered callback. ``cancel()`` is idempotent."""

    def __init__(self, publisher: "Publisher", callback: Callable[[Any], None]):
        self._publisher = publisher
        self._callback = callback
        self.active = True

    def _deliver(self, value: Any) -> None:
        if self.active:
            self._callback(value)

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        self._publisher._remove(self)


class SubscriptionSet:
    """Keeps subscriptions alive and cancels them together."""

    def __init__(self):
        self._subscriptions: List[Subscription] = []

    def add(self, subscription: Subscription) -> Subscription:
        self._subscriptions.append(subscription)
        return subscription

    def cancel_all(self) -> None:
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()

    def __len__(self) -> int:
        return len(self._subscriptions)


class Publisher:
    """
    Observable value.

    Subscribing delivers the current value immediately (when one exists)
    and every later value in order.
    """

    def __init__(self, value: Any = EMPTY):
        self._value = value
        self._subscribers: List[Subscription] = []
        # Subscriptions this publisher holds on its sources
        self._upstream: List[Subscription] = []

    @property
    def has_value(self) -> bool:
        return self._value is not EMPTY

    @property
    def value(self) -> Any:
        return None if self._value is EMPTY else self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        self.send(new_value)

    def send(self, value: Any) -> None:
        """Store ``value`` and notify subscribers in registration order."""
        with _dispatch_lock:
            self._value = value
            for subscription in list(self._subscribers):
                subscription._deliver(value)

    def subscribe(self, callback: Callable[[Any], None]) -> Subscription:
        """
        Register ``callback`` for this publisher's values.

        Args:
            callback: Called with each value

        Returns:
            Subscription that detaches the callback when cancelled
        """
        subscription = Subscription(self, callback)
        with _dispatch_lock:
            self._subscribers.append(subscription)
            if self.has_value:
                subscription._deliver(self._value)
        return subscription

    sink = subscribe

    def _remove(self, subscription: Subscription) -> None:
        with _dispatch_lock:
            if subscription in self._subscribers:
                self._subscribers.remove(subscription)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def first(self, callback: Callable[[Any], None]) -> Subscription:
        """
        Deliver the first non-None value to ``callback``, then cancel.

        Returns:
            The (possibly already cancelled) subscription
        """
        subscription: Optional[Subscription] = None
        delivered = False

        def deliver_once(value: Any) -> None:
            nonlocal delivered
            if value is None or delivered:
                return
            delivered = True
            if subscription is not None:
                subscription.cancel()
            callback(value)

        subscription = self.subscribe(deliver_once)
        if delivered:
            subscription.cancel()
        return subscription

    def next_value(self) -> Future:
        """Return a future resolved once with the first non-None value."""
        future: Future = Future()
        self.first(future.set_result)
        return future

    def map(self, transform: Callable[..., Any]) -> "Publisher":
        """Derived publisher of ``transform(value)``."""
        derived = Publisher()
        derived._upstream.append(
            self.subscribe(lambda value: derived.send(transform(value)))
        )
        return derived

    def combine_latest(self, *others: "Publisher") -> "CombinedPublisher":
        return combine_latest(self, *others)

    def debounce(
        self,
        seconds: float,
        scheduler: Optional["Scheduler"] = None
    ) -> "Publisher":
        """
        Derived publisher that emits a value only after ``seconds`` pass
        without a newer one.

        Args:
            seconds: Quiet window
            scheduler: Runs the delayed emission (default: timers for a
                positive window, immediate otherwise)
        """
        if scheduler is None:
            scheduler = TimerScheduler() if seconds > 0 else ImmediateScheduler()

        derived = Publisher()
        pending: List[Any] = []

        def on_value(value: Any) -> None:
            for handle in pending:
                handle.cancel()
            pending.clear()
            pending.append(scheduler.call_later(seconds, lambda: derived.send(value)))

        derived._upstream.append(self.subscribe(on_value))
        return derived

    def detach(self) -> None:
        """
        Cancel the subscriptions this publisher holds on its sources.

        Derived sources left without subscribers are detached in turn.
        """
        upstream, self._upstream = self._upstream, []
        for subscription in upstream:
            subscription.cancel()
            source = subscription._publisher
            if source._upstream and not source._subscribers:
                source.detach()

    def __repr__(self) -> str:
        return f"Publisher(value={self._value!r}, subscribers={len(self._subscribers)})"


class CombinedPublisher(Publisher):
    """Publisher of tuples; ``map`` spreads the tuple over the arguments."""

    def map(self, transform: Callable[..., Any]) -> Publisher:
        return super().map(lambda values: transform(*values))


def combine_latest(*publishers: Publisher) -> CombinedPublisher:
    """
    Combine publishers into one emitting the tuple of their latest values.

    Nothing is emitted until every source has a value; afterwards any
    source change emits a new tuple.
    """
    if not publishers:
        raise ValueError("combine_latest needs at least one publisher")

    combined = CombinedPublisher()
    latest: List[Any] = [EMPTY] * len(publishers)

    def make_callback(index: int) -> Callable[[Any], None]:
        def on_value(value: Any) -> None:
            latest[index] = value
            if all(v is not EMPTY for v in latest):
                combined.send(tuple(latest))
        return on_value

    for index, publisher in enumerate(publishers):
        combined._upstream.append(publisher.subscribe(make_callback(index)))

    return combined


# =============================================================================
# Schedulers
# =============================================================================

class _NoopHandle:
    def cancel(self) -> None:
        pass


class Scheduler:
    """Runs a callback after a delay and returns a cancellable handle."""

    def call_later(self, delay: float, action: Callable[[], None]) -> Any:
        raise NotImplementedError


class ImmediateScheduler(Scheduler):
    """Runs every action synchronously, ignoring the delay."""

    def call_later(self, delay: float, action: Callable[[], None]) -> _NoopHandle:
        action()
        return _NoopHandle()


class TimerScheduler(Scheduler):
    """Runs actions on ``threading.Timer`` threads, serialized by the dispatch lock."""

    def call_later(self, delay: float, action: Callable[[], None]) -> threading.Timer:
        def run() -> None:
            with _dispatch_lock:
                try:
                    action()
                except Exception:
                    logger.exception("Scheduled action failed")

        timer = threading.Timer(delay, run)
        timer.daemon = True
        timer.start()
        return timer
