"""
Observable single-writer state container.

Only the task that owns a view-model writes its state; any number of
subscribers are called synchronously with every new value, in
subscription order.
"""

import logging
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Subscriber = Callable[[T], None]


class StateHolder(Generic[T]):
    """Holds the latest state and notifies subscribers on change."""

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subscribers: list[Subscriber] = []

    @property
    def value(self) -> T:
        return self._value

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register subscriber, call it once with the current value.

        Returns:
            A callable that removes the subscription.
        """
        self._subscribers.append(subscriber)
        subscriber(self._value)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def set(self, value: T) -> None:
        self._value = value
        for subscriber in list(self._subscribers):
            try:
                subscriber(value)
            except Exception:
                logger.error("State subscriber failed", exc_info=True)
