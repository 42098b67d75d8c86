"""Very small synchronous publish/subscribe streams for inter-module communication."""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class Subscription:
    """Token returned by ``EventStream.subscribe``; cancel it to stop delivery."""

    def __init__(self, stream: EventStream, handler: Callable) -> None:
        self._stream = stream
        self._handler = handler
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._stream._remove(self)

    def _deliver(self, value) -> None:
        if self._active:
            self._handler(value)


class EventStream(Generic[T]):
    def __init__(self, name: str = "") -> None:
        self.name = name
        self._subscriptions: list[Subscription] = []

    def subscribe(self, handler: Callable[[T], None]) -> Subscription:
        subscription = Subscription(self, handler)
        self._subscriptions.append(subscription)
        return subscription

    def publish(self, value: T) -> None:
        # Snapshot so handlers may subscribe/cancel while we deliver.
        for subscription in list(self._subscriptions):
            subscription._deliver(value)

    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def clear(self) -> None:
        for subscription in list(self._subscriptions):
            subscription.cancel()

    def _remove(self, subscription: Subscription) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            pass
