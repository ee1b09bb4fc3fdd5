"""Core data models shared across the runtime."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Final

from .errors import DictKeyError


class DirectiveKind(str, Enum):
    """Kind of injection a directive performs."""

    PARAM = "param"
    INIT = "init"
    SET = "set"


@dataclass(frozen=True, slots=True)
class Directive:
    """A parsed injection instruction.

    ``target`` is the service to invoke for the value; an empty target means
    the registry itself is injected. ``args`` are passed to the target service.
    """

    kind: DirectiveKind
    target: str
    args: tuple[Any, ...] = ()

    @property
    def injects_container(self) -> bool:
        return not self.target


class _NoResult:
    """Marker returned by a chain that ran out of links without a terminal."""

    _instance: _NoResult | None = None

    def __new__(cls) -> _NoResult:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_RESULT"

    def __reduce__(self) -> str:
        return "NO_RESULT"


NO_RESULT: Final = _NoResult()


class Dict(Mapping[str, Any]):
    """Read-mostly key/value holder with strict and defaulted lookups.

    A key holding ``None`` counts as unset: strict reads raise, ``get`` falls
    back to its default and iteration skips it. ``data()`` still returns it.
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        object.__setattr__(self, "_data", dict(data or {}))

    def __getitem__(self, key: str) -> Any:
        value = self._data.get(key)
        if value is None:
            raise DictKeyError(key)
        return value

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __setattr__(self, name: str, value: Any) -> None:
        self._data[name] = value

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __iter__(self) -> Iterator[str]:
        return (key for key, value in self._data.items() if value is not None)

    def __len__(self) -> int:
        return sum(1 for value in self._data.values() if value is not None)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value for ``key`` or ``default`` when it is unset."""
        value = self._data.get(key)
        return default if value is None else value

    def has(self, key: str) -> bool:
        """Return ``True`` when ``key`` holds a value."""
        return self._data.get(key) is not None

    def has_value(self, value: Any) -> bool:
        """Return ``True`` when any key holds ``value``."""
        return value in self._data.values()

    def data(self) -> dict[str, Any]:
        """Return a shallow copy of the underlying mapping."""
        return dict(self._data)


class ServiceInput(Dict):
    """Request input handed to a top-level service invocation."""

    def __init__(self, service_name: str, data: Mapping[str, Any] | None = None) -> None:
        super().__init__(data)
        object.__setattr__(self, "_service_name", service_name)

    @property
    def service_name(self) -> str:
        """Name of the service this input was built for."""
        return self._service_name

    def __repr__(self) -> str:
        return f"ServiceInput({self._service_name!r}, {self._data!r})"


__all__ = [
    "Dict",
    "Directive",
    "DirectiveKind",
    "NO_RESULT",
    "ServiceInput",
]
