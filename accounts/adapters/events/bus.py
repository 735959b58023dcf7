"""In-process event bus adapter.

Implements EventPublisherPort by dispatching each event to async
subscribers registered for its event name. Subscribers registered for
``"*"`` receive every event.
"""

import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable

from accounts.core.events import DomainEvent
from accounts.core.ports import EventPublisherPort

logger = logging.getLogger(__name__)

EventSubscriber = Callable[[DomainEvent], Awaitable[None]]

WILDCARD = "*"


class InProcessEventBus(EventPublisherPort):
    """Routes events to subscribers within the current process.

    Subscribers are awaited one at a time in registration order: first
    those registered for the specific event name, then the wildcard ones.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[EventSubscriber]] = defaultdict(list)

    def subscribe(self, event_name: str, subscriber: EventSubscriber) -> None:
        """Register a subscriber for an event name (or ``"*"`` for all)."""
        if not event_name:
            raise ValueError("event_name must be a non-empty string")
        self._subscribers[event_name].append(subscriber)

    def unsubscribe(self, event_name: str, subscriber: EventSubscriber) -> None:
        """Remove a subscriber. Unknown subscribers are ignored."""
        subscribers = self._subscribers.get(event_name, [])
        if subscriber in subscribers:
            subscribers.remove(subscriber)

    def subscribers_for(self, event_name: str) -> list[EventSubscriber]:
        return [*self._subscribers.get(event_name, []), *self._subscribers.get(WILDCARD, [])]

    async def publish(self, event: DomainEvent) -> None:
        """Deliver the event to every matching subscriber.

        Raises:
            Exception: The first subscriber failure, after it is logged.
                Later subscribers are not called.
        """
        subscribers = self.subscribers_for(event.event_name)
        if not subscribers:
            logger.debug(f"No subscribers for {event.event_name}")
            return

        for subscriber in subscribers:
            try:
                await subscriber(event)
            except Exception as e:
                logger.error(
                    f"Subscriber failed for {event.event_name}: {e}",
                    exc_info=True,
                )
                raise
