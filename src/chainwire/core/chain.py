"""Continuation object threaded through subscribers and the target service."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Any

from .handle import ServiceHandle
from .models import NO_RESULT

LOGGER = logging.getLogger(__name__)


class ChainState(str, Enum):
    """Where a chain is in its run."""

    PENDING = "pending"
    TERMINAL = "terminal"
    DONE = "done"


class Chain:
    """Remaining work for one invocation.

    Calling the chain runs the next subscriber with the chain prepended to the
    arguments, or the terminal service once no subscribers remain. Arguments
    passed to the call replace the captured ones for every later link. A
    subscriber that never calls the chain stops it there.
    """

    def __init__(
        self,
        subscribers: Iterable[ServiceHandle],
        args: Sequence[Any] = (),
        terminal: ServiceHandle | None = None,
        *,
        service_name: str = "",
    ) -> None:
        self._subscribers: deque[ServiceHandle] = deque(subscribers)
        self._args: tuple[Any, ...] = tuple(args)
        self._terminal = terminal
        self.service_name = service_name

    @classmethod
    def invoke(
        cls,
        service_name: str,
        subscribers: Iterable[ServiceHandle],
        args: Sequence[Any],
        terminal: ServiceHandle | None = None,
    ) -> Any:
        """Build a chain and run it from the first link."""
        return cls(subscribers, args, terminal, service_name=service_name)()

    def __call__(self, *args: Any) -> Any:
        if args:
            self._args = args

        if self._subscribers:
            subscriber = self._subscribers.popleft()
            LOGGER.debug(
                "Chain %s -> subscriber %s", self.service_name, subscriber.service_name
            )
            return subscriber.subscribe(self, *self._args)

        if self._terminal is not None:
            terminal, self._terminal = self._terminal, None
            LOGGER.debug("Chain %s -> terminal %s", self.service_name, terminal.type_name)
            return terminal.handle(*self._args)

        return NO_RESULT

    @property
    def args(self) -> tuple[Any, ...]:
        return self._args

    @property
    def remaining(self) -> int:
        """Number of subscribers that have not run yet."""
        return len(self._subscribers)

    @property
    def state(self) -> ChainState:
        if self._subscribers:
            return ChainState.PENDING
        if self._terminal is not None:
            return ChainState.TERMINAL
        return ChainState.DONE

    def __repr__(self) -> str:
        return (
            f"Chain({self.service_name!r}, state={self.state.value}, "
            f"remaining={self.remaining})"
        )


__all__ = ["Chain", "ChainState"]
