"""Record snapshot passed to the aggregators and the stale-response gate."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, TypeVar

from college_tracker.schema import Application, MySchool, Task

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class DashboardSnapshot:
    """Immutable set of rows the dashboard is derived from."""

    my_schools: tuple[MySchool, ...] = ()
    applications: tuple[Application, ...] = ()
    tasks: tuple[Task, ...] = ()

    def completion_times(self) -> list:
        return [task.completed_at for task in self.tasks if task.completed_at is not None]

    def submission_times(self) -> list:
        return [app.submitted_at for app in self.applications if app.submitted_at is not None]


@dataclass(frozen=True)
class RequestToken:
    channel: str
    generation: int


@dataclass
class RequestGate:
    """Generation counter per fetch channel.

    Every fetch takes a token from :meth:`begin`; a response is only used if
    no newer fetch on the same channel has started since.
    """

    _generations: dict[str, int] = field(default_factory=dict)

    def begin(self, channel: str) -> RequestToken:
        generation = self._generations.get(channel, 0) + 1
        self._generations[channel] = generation
        return RequestToken(channel=channel, generation=generation)

    def is_current(self, token: RequestToken) -> bool:
        return self._generations.get(token.channel) == token.generation

    def accept(self, token: RequestToken, value: T) -> Optional[T]:
        """Return ``value`` if ``token`` is still current, else ``None``."""

        if self.is_current(token):
            return value
        logger.debug(
            "Discarding stale %s response (generation %d, current %d)",
            token.channel,
            token.generation,
            self._generations.get(token.channel, 0),
        )
        return None
