"""Event polling.

Every v1 mutation returns an event id instead of the final state. The
poller drives such an event to completion: it fetches ``/events/{id}``
with exponential backoff until the event is done, fails fast when the
event reports an error, and gives up once the budget for the kind of
operation has elapsed.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Protocol

from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_before_delay,
    wait_exponential,
)

from dropkit.core.exceptions import OperationFailedError, TimeoutError

from .config import Polling, Timeouts
from .model import Event, EventStatus


class EventKind(Enum):
    """What an event is expected to bring about. Selects the time budget."""

    NODE_RUNNING = "node-running"
    NODE_SUSPENDED = "node-suspended"
    NODE_TERMINATED = "node-terminated"
    IMAGE_AVAILABLE = "image-available"

    def timeout(self, timeouts: Timeouts) -> float:
        match self:
            case EventKind.NODE_RUNNING:
                return timeouts.node_running
            case EventKind.NODE_SUSPENDED:
                return timeouts.node_suspended
            case EventKind.NODE_TERMINATED:
                return timeouts.node_terminated
            case EventKind.IMAGE_AVAILABLE:
                return timeouts.image_available


class EventSource(Protocol):
    async def get(self, id: int) -> Event: ...


class _EventPendingError(Exception):
    """Event not done yet - poll again."""


class EventPoller:
    """Waits for events to complete.

    Holds no state besides its collaborators, so concurrent ``wait_for``
    calls on different events are independent. The pause between polls
    starts at ``polling.initial_period`` and doubles up to
    ``polling.max_period``. No poll is scheduled past the deadline.
    """

    def __init__(
        self,
        events: EventSource,
        timeouts: Timeouts,
        polling: Polling,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._events = events
        self._timeouts = timeouts
        self._polling = polling
        self._sleep = sleep
        self._log = logger.bind(provider="digitalocean", component="events")

    async def _check(self, event_id: int, kind: EventKind) -> Event:
        event = await self._events.get(event_id)
        self._log.trace(
            "Event {event_id} is {status} ({percentage}%)",
            event_id=event_id, status=event.status.value, percentage=event.percentage,
            kind=kind.value,
        )
        match event.status:
            case EventStatus.DONE:
                return event
            case EventStatus.ERROR:
                raise OperationFailedError(event_id)
            case _:
                raise _EventPendingError()

    async def wait_for(self, event_id: int, kind: EventKind) -> Event:
        """Block until the event is done.

        Raises:
            OperationFailedError: The event finished with an error.
            TimeoutError: The event was still pending when the budget for
                ``kind`` ran out.
        """
        timeout = kind.timeout(self._timeouts)
        log = self._log.bind(event_id=event_id, kind=kind.value)
        log.debug("Waiting up to {timeout}s for event {event_id}", timeout=timeout, event_id=event_id)

        retrying = AsyncRetrying(
            stop=stop_before_delay(timeout),
            wait=wait_exponential(
                multiplier=self._polling.initial_period,
                max=self._polling.max_period,
            ),
            retry=retry_if_exception_type(_EventPendingError),
            sleep=self._sleep,
        )
        try:
            event = await retrying(self._check, event_id, kind)
        except RetryError as e:
            log.warning("Event {event_id} timed out after {timeout}s", event_id=event_id, timeout=timeout)
            raise TimeoutError(kind, event_id, timeout) from e
        except OperationFailedError:
            log.warning("Event {event_id} failed", event_id=event_id)
            raise

        log.debug("Event {event_id} done", event_id=event_id)
        return event


__all__ = ["EventKind", "EventPoller", "EventSource"]
