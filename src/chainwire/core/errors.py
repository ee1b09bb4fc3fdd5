"""Error types raised by the chainwire runtime."""

from __future__ import annotations


class ChainwireError(RuntimeError):
    """Base class for every error raised by the runtime."""


class ConfigurationError(ChainwireError):
    """Raised for malformed directives, config files, sections or keys."""


class ResolutionError(ChainwireError):
    """Raised when a service name cannot be turned into a usable instance."""

    def __init__(self, message: str, *, type_name: str, service_name: str) -> None:
        super().__init__(message)
        self.type_name = type_name
        self.service_name = service_name


class InvocationArityError(ChainwireError):
    """Raised when a service method is invoked with too few arguments."""

    def __init__(
        self, *, service_name: str, method: str, required: int, given: int
    ) -> None:
        message = (
            f"Service '{service_name}' {method}() requires {required} "
            f"argument(s), {given} given"
        )
        super().__init__(message)
        self.service_name = service_name
        self.method = method
        self.required = required
        self.given = given


class DictKeyError(ChainwireError, KeyError):
    """Raised when a required key is missing from a ``Dict``."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Missing input key '{key}'")
        self.key = key

    def __str__(self) -> str:
        return str(self.args[0])


__all__ = [
    "ChainwireError",
    "ConfigurationError",
    "DictKeyError",
    "InvocationArityError",
    "ResolutionError",
]
