"""Catalog of service factories keyed by type name."""

from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any, TypeVar, overload

from .directives import (
    DirectiveDeclaration,
    DirectiveParser,
    Inject,
    declarations_of,
)
from .models import Directive, DirectiveKind

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

ServiceFactory = Callable[..., Any]


def type_name_for(service_name: str) -> str:
    """Map ``app.greeting`` to ``App.Greeting``.

    Each dot-delimited segment gets its first letter upper-cased; the rest of
    the segment is left alone so ``user.createUser`` becomes ``User.CreateUser``.
    """
    return ".".join(segment[:1].upper() + segment[1:] for segment in service_name.split("."))


@dataclass(frozen=True, slots=True)
class ServiceDefinition:
    """A registered factory and the type name it answers to."""

    type_name: str
    factory: ServiceFactory

    @property
    def is_class(self) -> bool:
        return isinstance(self.factory, type)

    @property
    def label(self) -> str:
        return getattr(self.factory, "__qualname__", repr(self.factory))


@dataclass(frozen=True, slots=True)
class InitMethod:
    """An ``init*`` method and its directives."""

    name: str
    directives: tuple[Directive, ...]

    @property
    def calls(self) -> tuple[Directive, ...]:
        return tuple(d for d in self.directives if d.kind is DirectiveKind.INIT)

    @property
    def params(self) -> tuple[Directive, ...]:
        return tuple(d for d in self.directives if d.kind is DirectiveKind.PARAM)


class ServiceCatalog:
    """Explicit factory registry shared by every registry built from it.

    Directive parsing results are cached here, keyed by the declaring class
    (or factory) and member name, so a type is only parsed once no matter how
    many service names or registries end up building it.
    """

    def __init__(self, parser: DirectiveParser | None = None) -> None:
        self._definitions: dict[str, ServiceDefinition] = {}
        self._parser = parser or DirectiveParser()
        self._directives: dict[tuple[Hashable, str], tuple[Directive, ...]] = {}
        self._properties: dict[type, tuple[tuple[str, Directive], ...]] = {}
        self._init_methods: dict[type, tuple[InitMethod, ...]] = {}
        self._lock = threading.Lock()

    @overload
    def register(self, target: T, *, type_name: str | None = ..., service: str | None = ...) -> T: ...

    @overload
    def register(
        self, target: None = ..., *, type_name: str | None = ..., service: str | None = ...
    ) -> Callable[[T], T]: ...

    def register(
        self,
        target: Any = None,
        *,
        type_name: str | None = None,
        service: str | None = None,
    ) -> Any:
        """Register a class or factory callable.

        Usable directly, as ``@catalog.register`` or as
        ``@catalog.register(service="app.greeting")``. Without a name the
        class or function ``__name__`` is used as the type name.
        """
        if type_name is not None and service is not None:
            raise ValueError("Pass either type_name or service, not both.")

        def wrap(factory: T) -> T:
            if not callable(factory):
                raise TypeError(f"{factory!r} is not a class or callable factory.")
            resolved = type_name
            if resolved is None and service is not None:
                resolved = type_name_for(service)
            if resolved is None:
                resolved = factory.__name__
            self.add(ServiceDefinition(type_name=resolved, factory=factory))
            return factory

        if target is None:
            return wrap
        return wrap(target)

    def add(self, definition: ServiceDefinition) -> None:
        """File ``definition`` under its type name, rejecting duplicates."""
        if definition.type_name in self._definitions:
            raise ValueError(f"type {definition.type_name!r} already registered")
        self._definitions[definition.type_name] = definition
        LOGGER.debug("Registered %s as %s", definition.label, definition.type_name)

    def lookup(self, type_name: str) -> ServiceDefinition | None:
        return self._definitions.get(type_name)

    def type_names(self) -> tuple[str, ...]:
        return tuple(sorted(self._definitions))

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    # directive metadata -------------------------------------------------

    def constructor_directives(self, definition: ServiceDefinition) -> tuple[Directive, ...]:
        """Return PARAM directives for the factory or the class ``__init__``."""
        factory = definition.factory
        if not definition.is_class:
            return self._parsed(factory, factory.__name__, declarations_of(factory))

        owner = _declaring_class(factory, "__init__")
        if owner is None or owner is object:
            return ()
        member = owner.__dict__["__init__"]
        directives = self._parsed(owner, "__init__", declarations_of(member))
        return tuple(d for d in directives if d.kind is DirectiveKind.PARAM)

    def property_directives(self, cls: type) -> tuple[tuple[str, Directive], ...]:
        """Return ``(attribute, directive)`` pairs for every ``Inject`` in the MRO."""
        cached = self._properties.get(cls)
        if cached is not None:
            return cached

        collected: dict[str, Directive] = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if isinstance(value, Inject):
                    declaration: DirectiveDeclaration = value.declaration
                    (directive,) = self._parsed(klass, name, (declaration,))
                    collected[name] = directive
                elif name in collected:
                    # shadowed by a plain attribute in a subclass
                    del collected[name]
        result = tuple(collected.items())
        return self._store(self._properties, cls, result)

    def init_methods(self, cls: type) -> tuple[InitMethod, ...]:
        """Return ``init*`` methods in definition order, bases first."""
        cached = self._init_methods.get(cls)
        if cached is not None:
            return cached

        names: list[str] = []
        for klass in reversed(cls.__mro__):
            if klass is object:
                continue
            for name in vars(klass):
                if name.startswith("init") and name not in names:
                    names.append(name)

        methods: list[InitMethod] = []
        for name in names:
            owner = _declaring_class(cls, name)
            if owner is None:
                continue
            member = owner.__dict__[name]
            if not callable(getattr(member, "__func__", member)):
                continue
            directives = self._parsed(owner, name, declarations_of(member))
            methods.append(InitMethod(name=name, directives=directives))
        return self._store(self._init_methods, cls, tuple(methods))

    def _parsed(
        self,
        owner: Any,
        member: str,
        declarations: tuple[DirectiveDeclaration, ...],
    ) -> tuple[Directive, ...]:
        key = (owner, member)
        cached = self._directives.get(key)
        if cached is not None:
            return cached
        owner_name = getattr(owner, "__qualname__", repr(owner))
        parsed = self._parser.parse_all(declarations, owner=owner_name, member=member)
        return self._store(self._directives, key, parsed)

    def _store(self, cache: dict[Any, Any], key: Any, value: Any) -> Any:
        with self._lock:
            return cache.setdefault(key, value)


def _declaring_class(cls: type, name: str) -> type | None:
    for klass in cls.__mro__:
        if name in vars(klass):
            return klass
    return None


def is_abstract(definition: ServiceDefinition) -> bool:
    return definition.is_class and inspect.isabstract(definition.factory)


__all__ = [
    "InitMethod",
    "ServiceCatalog",
    "ServiceDefinition",
    "ServiceFactory",
    "is_abstract",
    "type_name_for",
]
