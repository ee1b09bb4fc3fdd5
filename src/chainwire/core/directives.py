"""Declarative injection descriptors and the directive parser.

Services declare what they need with a compact reference syntax::

    @param("~db.connection")
    @param("~db.query(\"users\", 10)")
    @param("~")
    def __init__(self, connection, users, registry): ...

A reference is ``~`` followed by a dot-delimited service name and an optional
parenthesised, comma-separated list of JSON literals that are passed to that
service. An empty name injects the registry itself. The leading ``~`` may be
omitted when the arguments are supplied as Python values instead::

    @init("cache.warm", ["users", "groups"])

Descriptors only record the text. Parsing happens the first time a type is
built, so a malformed literal is reported against the declaring class and
member at build time.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, overload

from .errors import ConfigurationError
from .models import Directive, DirectiveKind

DIRECTIVES_ATTR = "__chainwire_directives__"

_REFERENCE_PATTERN = re.compile(
    r"""
    ^\s*
    (?:@(?P<marker>param|init|set)\s+)?
    (?P<tilde>~)?
    (?P<name>[\w.]*)
    \s*
    (?:\((?P<args>.*)\))?
    \s*$
    """,
    re.VERBOSE | re.DOTALL,
)

F = TypeVar("F", bound=Callable[..., Any])
T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class DirectiveDeclaration:
    """Unparsed directive as written on a class member."""

    kind: DirectiveKind
    reference: str
    values: tuple[Any, ...] | None = None


class DirectiveParser:
    """Turn directive declarations into :class:`Directive` instances."""

    def parse(
        self, declaration: DirectiveDeclaration, *, owner: str, member: str
    ) -> Directive:
        """Parse one declaration, naming ``owner.member`` on failure."""
        match = _REFERENCE_PATTERN.match(declaration.reference)
        if match is None:
            msg = (
                f"Invalid directive reference ({declaration.reference}) "
                f"on {owner}.{member}"
            )
            raise ConfigurationError(msg)

        marker = match.group("marker")
        if marker is not None and marker != declaration.kind.value:
            msg = (
                f"Directive marker @{marker} does not match @{declaration.kind.value} "
                f"on {owner}.{member}"
            )
            raise ConfigurationError(msg)

        arg_string = match.group("args")
        if declaration.values is not None:
            args = declaration.values
        elif arg_string is not None:
            args = self.parse_arguments(arg_string, owner=owner, member=member)
        else:
            args = ()
        return Directive(kind=declaration.kind, target=match.group("name"), args=args)

    def parse_all(
        self,
        declarations: tuple[DirectiveDeclaration, ...],
        *,
        owner: str,
        member: str,
    ) -> tuple[Directive, ...]:
        return tuple(
            self.parse(declaration, owner=owner, member=member)
            for declaration in declarations
        )

    @staticmethod
    def parse_arguments(arg_string: str, *, owner: str, member: str) -> tuple[Any, ...]:
        """Decode a comma-separated JSON literal list."""
        try:
            decoded = json.loads(f"[{arg_string}]")
        except json.JSONDecodeError as exc:
            msg = f"Invalid argument signature ({arg_string}) on {owner}.{member}"
            raise ConfigurationError(msg) from exc
        return tuple(decoded)


def _declare(kind: DirectiveKind, reference: str, values: tuple[Any, ...]) -> DirectiveDeclaration:
    if not isinstance(reference, str):
        raise TypeError("Directive reference must be a string.")
    if values and "(" in reference:
        raise TypeError(
            "Directive arguments must be given either inline or as values, not both."
        )
    return DirectiveDeclaration(
        kind=kind, reference=reference, values=values if values else None
    )


def _stamp(target: F, declaration: DirectiveDeclaration) -> F:
    existing: tuple[DirectiveDeclaration, ...] = getattr(target, DIRECTIVES_ATTR, ())
    # decorators apply bottom-up; prepend so declaration order is kept
    setattr(target, DIRECTIVES_ATTR, (declaration, *existing))
    return target


def param(reference: str, *values: Any) -> Callable[[F], F]:
    """Inject one positional argument into ``__init__``, an ``init*`` method or a factory."""
    declaration = _declare(DirectiveKind.PARAM, reference, values)

    def decorator(target: F) -> F:
        return _stamp(target, declaration)

    return decorator


def init(reference: str, *values: Any) -> Callable[[F], F]:
    """Invoke a service for its side effects before an ``init*`` method runs."""
    declaration = _declare(DirectiveKind.INIT, reference, values)

    def decorator(target: F) -> F:
        if not target.__name__.startswith("init"):
            raise TypeError(
                f"@init can only decorate init* methods, not {target.__name__}."
            )
        return _stamp(target, declaration)

    return decorator


def declarations_of(member: Any) -> tuple[DirectiveDeclaration, ...]:
    """Return the declarations stamped onto a function or method."""
    function = getattr(member, "__func__", member)
    return getattr(function, DIRECTIVES_ATTR, ())


class Inject(Generic[T]):
    """Property-set directive declared as a class attribute.

    ``connection = Inject("~db.connection")`` assigns the result of invoking
    ``db.connection`` to the attribute once the instance is constructed.
    """

    __slots__ = ("declaration", "name", "owner")

    def __init__(self, reference: str, *values: Any) -> None:
        self.declaration = _declare(DirectiveKind.SET, reference, values)
        self.name: str | None = None
        self.owner: type | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.owner = owner
        self.name = name

    @overload
    def __get__(self, obj: None, owner: type) -> Inject[T]: ...

    @overload
    def __get__(self, obj: object, owner: type) -> T: ...

    def __get__(self, obj: object | None, owner: type) -> Inject[T] | T:
        if obj is None:
            return self
        owner_name = owner.__qualname__
        raise AttributeError(
            f"{owner_name}.{self.name} has not been injected; "
            "build the instance through a Registry"
        )

    def __repr__(self) -> str:
        return f"Inject({self.declaration.reference!r})"


__all__ = [
    "DIRECTIVES_ATTR",
    "DirectiveDeclaration",
    "DirectiveParser",
    "Inject",
    "declarations_of",
    "init",
    "param",
]
