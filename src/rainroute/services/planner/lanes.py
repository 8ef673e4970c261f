"""Cancellable request lanes: at most one authoritative request per category."""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from enum import Enum
from typing import Awaitable, Callable, Iterator, Optional

from ...models.domain import LocationRole
from .errors import Cancelled, RequestFailed

logger = logging.getLogger(__name__)


class LaneCategory(str, Enum):
    ROUTE = "route"
    START_WEATHER = "start-weather"
    END_WEATHER = "end-weather"
    INTEREST_POINTS = "interest-points"

    @classmethod
    def weather_for(cls, role: LocationRole) -> "LaneCategory":
        return cls.START_WEATHER if role is LocationRole.START else cls.END_WEATHER


class LaneToken:
    """Identity of one request within a lane.

    Tokens compare by identity. Cancelling a token marks it stale and, if it
    is bound to a task, asks that task to stop.
    """

    __slots__ = ("category", "generation", "_cancelled", "_task")

    def __init__(self, category: LaneCategory, generation: int) -> None:
        self.category = category
        self.generation = generation
        self._cancelled = False
        self._task: Optional[asyncio.Task] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def task(self) -> Optional[asyncio.Task]:
        return self._task

    def bind(self, task: asyncio.Task) -> None:
        self._task = task
        if self._cancelled:
            task.cancel()

    def cancel(self) -> None:
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "live"
        return f"LaneToken({self.category.value}#{self.generation}, {state})"


class RequestLanes:
    """Holds zero or one live token per lane category."""

    def __init__(self) -> None:
        self._tokens: dict[LaneCategory, LaneToken] = {}
        self._generations: dict[LaneCategory, int] = {}

    def start(self, category: LaneCategory) -> LaneToken:
        """Cancel whatever the lane holds and hand out a fresh token."""
        previous = self._tokens.pop(category, None)
        if previous is not None:
            logger.debug(f"Superseding {previous!r}")
            previous.cancel()
        generation = self._generations.get(category, 0) + 1
        self._generations[category] = generation
        token = LaneToken(category, generation)
        self._tokens[category] = token
        return token

    def spawn(
        self,
        category: LaneCategory,
        work: Callable[[LaneToken], Awaitable[object]],
    ) -> LaneToken:
        """Start a new token and run ``work(token)`` as a task bound to it."""
        token = self.start(category)
        task = asyncio.get_running_loop().create_task(work(token), name=f"lane-{category.value}-{token.generation}")
        token.bind(task)
        return token

    def is_current(self, token: LaneToken) -> bool:
        return not token.cancelled and self._tokens.get(token.category) is token

    def current(self, category: LaneCategory) -> Optional[LaneToken]:
        return self._tokens.get(category)

    def abort(self, category: LaneCategory) -> None:
        token = self._tokens.pop(category, None)
        if token is not None:
            token.cancel()

    def abort_all(self) -> None:
        for category in list(self._tokens):
            self.abort(category)

    def pending(self) -> list[LaneCategory]:
        return [token.category for token in self._tokens.values() if token.task is not None and not token.task.done()]

    def tasks(self) -> list[asyncio.Task]:
        return [
            token.task
            for token in self._tokens.values()
            if token.task is not None and not token.task.done()
        ]

    async def join(self) -> None:
        """Wait until every task currently held by a lane has finished."""
        while True:
            tasks = self.tasks()
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)


@contextmanager
def lane_failures(token: LaneToken) -> Iterator[None]:
    """Translate failures raised inside lane work into the planner taxonomy."""
    try:
        yield
    except asyncio.CancelledError as exc:
        raise Cancelled(token.category.value) from exc
    except RequestFailed as exc:
        if token.cancelled:
            raise Cancelled(token.category.value) from exc
        exc.category = exc.category or token.category.value
        raise
