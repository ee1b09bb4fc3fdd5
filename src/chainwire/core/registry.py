"""Service registry: name resolution, memoized instances and dispatch."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from .builder import InstanceBuilder
from .catalog import ServiceCatalog, type_name_for
from .chain import Chain
from .errors import ResolutionError
from .handle import ServiceHandle
from .models import NO_RESULT, ServiceInput
from .subscribers import SubscriberMatcher

if TYPE_CHECKING:
    from .config import RegistrySettings

LOGGER = logging.getLogger(__name__)


class Registry:
    """Resolve service names into shared instances and invoke them.

    A registry owns its instance cache and lives for one logical execution,
    typically one request. Build a new one per concurrent request; the
    catalog it reads from can be shared.
    """

    def __init__(
        self,
        catalog: ServiceCatalog,
        *,
        aliases: Mapping[str, str] | None = None,
        subscribers: Mapping[str, Sequence[str]] | None = None,
        auto_init: Iterable[str] = (),
    ) -> None:
        self._catalog = catalog
        self._aliases: dict[str, str] = dict(aliases or {})
        self._instances: dict[str, ServiceHandle] = {}
        self._builder = InstanceBuilder(self, catalog)
        self._matcher = SubscriberMatcher(self.resolve, subscribers)
        for service_name in auto_init:
            self.init(service_name)

    @classmethod
    def from_settings(cls, catalog: ServiceCatalog, settings: RegistrySettings) -> Registry:
        """Create a registry configured from ``RegistrySettings``."""
        return cls(
            catalog,
            aliases=settings.aliases,
            subscribers=settings.subscribers,
            auto_init=settings.auto_init,
        )

    @property
    def catalog(self) -> ServiceCatalog:
        return self._catalog

    @property
    def aliases(self) -> dict[str, str]:
        return dict(self._aliases)

    def resolve(self, service_name: str) -> ServiceHandle:
        """Return the shared handle for ``service_name``, building it on first use."""
        name = self._aliases.get(service_name, service_name)

        handle = self._instances.get(name)
        if handle is not None:
            self._instances.setdefault(service_name, handle)
            return handle

        type_name = type_name_for(name)
        handle = self._instances.get(type_name)
        if handle is None:
            definition = self._catalog.lookup(type_name)
            if definition is None:
                msg = f"Attempted to load unknown class ({type_name}) for service ({service_name})"
                raise ResolutionError(msg, type_name=type_name, service_name=service_name)
            instance = self._builder.build(definition, service_name)
            handle = ServiceHandle(instance, type_name=type_name, service_name=name)
            self._instances[type_name] = handle

        self._instances[name] = handle
        self._instances[service_name] = handle
        return handle

    def get(self, service_name: str) -> Any:
        """Return the service instance itself rather than its handle."""
        return self.resolve(service_name).instance

    def init(self, service_name: str) -> None:
        """Build a service without invoking it."""
        self.resolve(service_name)

    def exec(self, service_name: str, *args: Any) -> Any:
        """Invoke ``service_name`` with ``args`` through its subscribers."""
        return self.exec_args(service_name, args)

    def exec_args(self, service_name: str, args: Sequence[Any]) -> Any:
        service = self.resolve(service_name)
        subscribers = self.subscribers_for(service_name)
        if not subscribers:
            return service.handle(*args)
        return Chain.invoke(service_name, subscribers, args, service)

    def broadcast(self, service_name: str, *args: Any) -> Any:
        """Run only the subscribers of ``service_name``."""
        return self.broadcast_args(service_name, args)

    def broadcast_args(self, service_name: str, args: Sequence[Any]) -> Any:
        result = Chain.invoke(service_name, self.subscribers_for(service_name), args)
        return None if result is NO_RESULT else result

    def call(
        self,
        service_name: str,
        args: Sequence[Any] = (),
        input: Mapping[str, Any] | None = None,
    ) -> Any:
        """Top-level invocation: a ``ServiceInput`` is passed ahead of ``args``."""
        return self.exec_args(service_name, (ServiceInput(service_name, input), *args))

    def publish(
        self,
        service_name: str,
        args: Sequence[Any] = (),
        input: Mapping[str, Any] | None = None,
    ) -> Any:
        """Top-level broadcast: a ``ServiceInput`` is passed ahead of ``args``."""
        return self.broadcast_args(service_name, (ServiceInput(service_name, input), *args))

    def subscribers_for(self, service_name: str) -> tuple[ServiceHandle, ...]:
        return self._matcher.subscribers_for(service_name)

    def subscriber_names(self, service_name: str) -> tuple[str, ...]:
        return self._matcher.names_for(service_name)

    def add_subscribers(self, subscribers: Mapping[str, Sequence[str]]) -> None:
        self._matcher.add(subscribers)

    def __contains__(self, service_name: object) -> bool:
        return service_name in self._instances

    def __repr__(self) -> str:
        built = sorted({handle.type_name for handle in self._instances.values()})
        return f"Registry(built={built!r})"


__all__ = ["Registry"]
