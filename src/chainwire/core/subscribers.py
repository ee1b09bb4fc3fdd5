"""Wildcard matching of subscribers against service names."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence

from .handle import ServiceHandle

LOGGER = logging.getLogger(__name__)

WILDCARD = "*"


def candidate_queries(service_name: str) -> list[str]:
    """Return the queries that can match ``service_name``, broadest first.

    ``a.b.c`` yields ``*``, ``a.*``, ``a.b.*`` and finally ``a.b.c``.
    """
    segments = service_name.split(".")
    queries = [WILDCARD]
    for index in range(1, len(segments)):
        queries.append(".".join(segments[:index]) + ".*")
    queries.append(service_name)
    return queries


class SubscriberMatcher:
    """Resolve and memoize the ordered subscribers of each service name."""

    def __init__(
        self,
        resolve: Callable[[str], ServiceHandle],
        subscribers: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        self._resolve = resolve
        self._subscribers: dict[str, list[str]] = {}
        self._observers: dict[str, tuple[ServiceHandle, ...]] = {}
        if subscribers:
            self.add(subscribers)

    def add(self, subscribers: Mapping[str, Sequence[str]]) -> None:
        """Append subscriber names per query, keeping registration order."""
        for query, names in subscribers.items():
            if isinstance(names, str):
                names = [names]
            self._subscribers.setdefault(query, []).extend(names)
        self._observers.clear()

    @property
    def queries(self) -> dict[str, list[str]]:
        return {query: list(names) for query, names in self._subscribers.items()}

    def names_for(self, service_name: str) -> tuple[str, ...]:
        """Return matching subscriber names, deduplicated on first sight."""
        seen: dict[str, None] = {}
        for query in candidate_queries(service_name):
            for name in self._subscribers.get(query, ()):
                seen.setdefault(name, None)
        return tuple(seen)

    def subscribers_for(self, service_name: str) -> tuple[ServiceHandle, ...]:
        cached = self._observers.get(service_name)
        if cached is not None:
            return cached

        names = self.names_for(service_name)
        handles = tuple(self._resolve(name) for name in names)
        if names:
            LOGGER.debug("Subscribers for %s: %s", service_name, ", ".join(names))
        self._observers[service_name] = handles
        return handles


__all__ = ["SubscriberMatcher", "WILDCARD", "candidate_queries"]
