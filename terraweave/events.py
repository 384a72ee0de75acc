"""Progress and status events published by the solver.

Each engine owns its own EventBus; there is no global instance, so two
engines running side by side never see each other's events.

USE FOR:
- Progress bars (resolved-cell fraction after each step)
- Status lines for logs or a host UI (attempt starts, backtracks, failures)

DO NOT USE FOR:
- Influencing the search (use the adjustment hook)
- Anything that needs a return value

The bus is fire-and-forget: handlers run synchronously in subscription order,
and an exception in one handler is logged and never reaches the solver.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class SolverEvent:
    """Base class for all solver events."""

    pass


@dataclass
class ProgressEvent(SolverEvent):
    """Published after every step.

    Attributes:
        progress: Fraction of resolved cells, in [0, 1].
        attempt: Current attempt number.
        step: Steps taken in the current attempt.
    """

    progress: float
    attempt: int = 1
    step: int = 0


@dataclass
class StatusEvent(SolverEvent):
    """Human readable status line for significant steps."""

    message: str


class EventBus:
    """Simple event bus for publish/subscribe pattern."""

    def __init__(self) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = {}

    def subscribe(self, event_type: type, handler: Callable[[Any], None]) -> None:
        """Subscribe a handler to an event type."""
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: type, handler: Callable[[Any], None]) -> None:
        """Unsubscribe a handler from an event type."""
        if event_type in self._handlers:
            with suppress(ValueError):
                self._handlers[event_type].remove(handler)

    def publish(self, event: SolverEvent) -> None:
        """Publish an event to all subscribed handlers."""
        event_type = type(event)
        if event_type in self._handlers:
            # Copy the handler list to allow safe subscribe/unsubscribe during dispatch
            for handler in list(self._handlers[event_type]):
                try:
                    handler(event)
                except Exception:
                    logger.exception("Error handling event %s", event_type.__name__)
