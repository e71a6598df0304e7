"""Subscribe/unsubscribe event channel.

Each consumer holds at most one active subscription per channel.
Subscribing again replaces the previous handler.
"""

import logging
from typing import Any, Callable, Dict, Hashable

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class Subscription:
    """Handle returned by EventChannel.subscribe. Usable as a context manager."""

    def __init__(self, channel: "EventChannel", consumer: Hashable):
        self._channel = channel
        self.consumer = consumer
        self.active = True

    def unsubscribe(self):
        if self.active:
            self._channel._remove(self)
            self.active = False

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.unsubscribe()


class EventChannel:
    """Named channel delivering events to subscribed consumers in order."""

    def __init__(self, name: str):
        self.name = name
        self._handlers: Dict[Hashable, Handler] = {}
        self._subscriptions: Dict[Hashable, Subscription] = {}

    def subscribe(self, consumer: Hashable, handler: Handler) -> Subscription:
        previous = self._subscriptions.get(consumer)
        if previous is not None:
            logger.debug(
                "Replacing subscription of %r on channel %s", consumer, self.name
            )
            previous.unsubscribe()

        subscription = Subscription(self, consumer)
        self._handlers[consumer] = handler
        self._subscriptions[consumer] = subscription
        return subscription

    def publish(self, event: Any):
        # Copy so handlers may unsubscribe while being notified
        for handler in list(self._handlers.values()):
            handler(event)

    def is_subscribed(self, consumer: Hashable) -> bool:
        return consumer in self._handlers

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)

    def _remove(self, subscription: Subscription):
        if self._subscriptions.get(subscription.consumer) is subscription:
            del self._subscriptions[subscription.consumer]
            del self._handlers[subscription.consumer]
