"""Construct service instances and resolve their injected arguments."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from .catalog import ServiceCatalog, ServiceDefinition, is_abstract
from .errors import ResolutionError
from .models import Directive, DirectiveKind

if TYPE_CHECKING:
    from .registry import Registry

LOGGER = logging.getLogger(__name__)


class InstanceBuilder:
    """Build instances for one registry.

    Every injected value is produced by invoking another service through the
    registry (or by handing over the registry itself), so dependencies are
    themselves built lazily and shared.
    """

    def __init__(self, registry: Registry, catalog: ServiceCatalog) -> None:
        self._registry = registry
        self._catalog = catalog
        self._building: list[str] = []

    def build(self, definition: ServiceDefinition, service_name: str) -> Any:
        type_name = definition.type_name
        if type_name in self._building:
            cycle = " -> ".join([*self._building, type_name])
            msg = f"Circular dependency while building ({type_name}) for service ({service_name}): {cycle}"
            raise ResolutionError(msg, type_name=type_name, service_name=service_name)
        if is_abstract(definition):
            msg = f"Attempted to load abstract class ({type_name}) for service ({service_name})"
            raise ResolutionError(msg, type_name=type_name, service_name=service_name)

        self._building.append(type_name)
        try:
            instance = self._construct(definition, service_name)
            if definition.is_class:
                self._inject_properties(definition.factory, instance)
                self._run_init_methods(definition.factory, instance)
        finally:
            self._building.pop()

        LOGGER.debug("Built %s for service %s", type_name, service_name)
        return instance

    def resolve_arguments(self, directives: Iterable[Directive]) -> list[Any]:
        """Resolve PARAM directives into a positional argument list."""
        return [
            self.resolve_value(directive)
            for directive in directives
            if directive.kind is DirectiveKind.PARAM
        ]

    def resolve_value(self, directive: Directive) -> Any:
        """Invoke the directive's target, or return the registry for an empty target."""
        if directive.injects_container:
            return self._registry
        return self._registry.exec_args(directive.target, directive.args)

    def _construct(self, definition: ServiceDefinition, service_name: str) -> Any:
        directives = self._catalog.constructor_directives(definition)
        args = self.resolve_arguments(directives)
        factory = definition.factory
        try:
            signature = inspect.signature(factory)
        except (TypeError, ValueError):
            signature = None
        if signature is not None:
            try:
                signature.bind(*args)
            except TypeError as exc:
                msg = (
                    f"Attempted to load uninstantiable class ({definition.type_name}) "
                    f"for service ({service_name}): {exc}"
                )
                raise ResolutionError(
                    msg, type_name=definition.type_name, service_name=service_name
                ) from exc
        return factory(*args)

    def _inject_properties(self, cls: type, instance: Any) -> None:
        for name, directive in self._catalog.property_directives(cls):
            value = self.resolve_value(directive)
            object.__setattr__(instance, name, value)

    def _run_init_methods(self, cls: type, instance: Any) -> None:
        for method in self._catalog.init_methods(cls):
            for call in method.calls:
                self.resolve_value(call)
            args = self.resolve_arguments(method.params)
            getattr(instance, method.name)(*args)


__all__ = ["InstanceBuilder"]
