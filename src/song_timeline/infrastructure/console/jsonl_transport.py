"""JSON-lines transport: one action per input line, replies and events as output lines."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TextIO

from song_timeline.domain.shared.events import DomainEvent
from song_timeline.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from song_timeline.application.commands.dispatcher import ActionDispatcher
    from song_timeline.domain.shared.events import EventBus

logger = logging.getLogger(__name__)


class JsonLinesSession:
    """Drives the dispatcher from a line-oriented stream.

    Every reply is written as ``{"type": "reply", ...}`` and every published
    event as ``{"type": "event", "event": <name>, "payload": {...}}``. Blank
    input lines are skipped; end of input ends the session.
    """

    def __init__(
        self,
        dispatcher: ActionDispatcher,
        event_bus: EventBus,
        *,
        readline: Callable[[], str] | None = None,
        output: TextIO | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._bus = event_bus
        self._readline = readline or sys.stdin.readline
        self._output = output or sys.stdout
        self._lines_handled = 0

    @property
    def lines_handled(self) -> int:
        return self._lines_handled

    async def run(self) -> None:
        self._bus.subscribe(DomainEvent, self._on_event)
        try:
            while True:
                line = await asyncio.to_thread(self._readline)
                if not line:
                    break
                if not line.strip():
                    continue

                reply = await self._dispatcher.dispatch_line(line)
                self._lines_handled += 1
                self._emit({"type": "reply", **reply.model_dump(mode="json")})
        finally:
            self._bus.unsubscribe(DomainEvent, self._on_event)
            logger.info(LogTemplates.SESSION_ENDED, self._lines_handled)

    async def _on_event(self, event: DomainEvent) -> None:
        self._emit(
            {"type": "event", "event": event.event_name, "payload": event.model_dump(mode="json")}
        )

    def _emit(self, message: dict[str, Any]) -> None:
        self._output.write(json.dumps(message, ensure_ascii=False) + "\n")
        self._output.flush()
