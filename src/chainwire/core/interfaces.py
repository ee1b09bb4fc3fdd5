"""Protocol interfaces implemented by services and subscribers."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

Next = Callable[..., Any]


class Service(Protocol):
    """A service invoked as the target of ``Registry.exec``."""

    def handle(self, *args: Any) -> Any:
        """Run the service and return its result."""
        raise NotImplementedError


class Subscriber(Protocol):
    """A service that intercepts other services.

    ``next`` continues the chain; calling it with arguments replaces the
    arguments seen by every later link. Not calling it short-circuits the
    chain and the subscriber's return value becomes the result.
    """

    def subscribe(self, next: Next, *args: Any) -> Any:
        """Intercept one invocation."""
        raise NotImplementedError


__all__ = ["Next", "Service", "Subscriber"]
