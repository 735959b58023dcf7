"""Logging event publisher adapter.

Implements EventPublisherPort by writing each domain event to the
application log.
"""

import json
import logging

from accounts.core.events import DomainEvent
from accounts.core.ports import EventPublisherPort

logger = logging.getLogger(__name__)


class LoggingEventPublisher(EventPublisherPort):
    """Writes domain events to the log at a configurable level."""

    def __init__(self, level: int = logging.INFO):
        """Initialize the publisher.

        Args:
            level: Logging level used for event records.
        """
        self.level = level

    async def publish(self, event: DomainEvent) -> None:
        """Log the event name and its JSON payload."""
        payload = event.to_dict()
        logger.log(
            self.level,
            f"Domain event {event.event_name}: {json.dumps(payload, sort_keys=True)}",
            extra={"event_name": event.event_name},
        )
