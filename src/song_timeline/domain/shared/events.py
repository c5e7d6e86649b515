"""Domain event base class and the in-memory event bus."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from song_timeline.domain.shared.messages import LogTemplates
from song_timeline.domain.shared.types import NonEmptyStr, UtcDatetimeField, utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="DomainEvent")
EventHandler = Callable[[T], Awaitable[None]]


class DomainEvent(BaseModel):
    """Base class for all domain events."""

    model_config = ConfigDict(frozen=True)

    event_id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))
    occurred_at: UtcDatetimeField = Field(default_factory=utcnow)

    @property
    def event_name(self) -> str:
        return type(self).__name__


class EventBus:
    """In-memory pub/sub event bus for domain events.

    Handlers are called concurrently. Exceptions in handlers are logged
    but do not prevent other handlers from running. Subscribing to
    ``DomainEvent`` itself receives every event.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler[Any]]] = defaultdict(list)

    def subscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        self._handlers[event_type].append(handler)
        logger.debug(LogTemplates.EVENT_SUBSCRIBED, event_type.__name__)

    def unsubscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)
            logger.debug(LogTemplates.EVENT_UNSUBSCRIBED, event_type.__name__)

    def handler_count(self, event_type: type[DomainEvent]) -> int:
        return len(self._handlers.get(event_type, []))

    async def publish(self, event: DomainEvent) -> None:
        event_type = type(event)
        handlers = [*self._handlers.get(event_type, [])]
        if event_type is not DomainEvent:
            handlers.extend(self._handlers.get(DomainEvent, []))

        if not handlers:
            logger.debug(LogTemplates.EVENT_NO_HANDLERS, event_type.__name__)
            return

        logger.debug(LogTemplates.EVENT_PUBLISHING, event_type.__name__, len(handlers))

        async def safe_call(handler: EventHandler[Any]) -> None:
            try:
                await handler(event)
            except Exception as e:
                logger.exception(LogTemplates.EVENT_HANDLER_ERROR, event_type.__name__, e)

        async with asyncio.TaskGroup() as tg:
            for handler in handlers:
                tg.create_task(safe_call(handler))

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
