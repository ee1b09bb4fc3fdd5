"""Wrapper that invokes a built service instance."""

from __future__ import annotations

import inspect
from typing import Any

from .errors import InvocationArityError, ResolutionError

HANDLE_METHOD = "handle"
SUBSCRIBE_METHOD = "subscribe"


class ServiceHandle:
    """One shared instance plus the checks made before each invocation."""

    __slots__ = ("_instance", "_required", "service_name", "type_name")

    def __init__(self, instance: Any, *, type_name: str, service_name: str) -> None:
        self._instance = instance
        self._required: dict[str, int] = {}
        self.type_name = type_name
        self.service_name = service_name

    @property
    def instance(self) -> Any:
        return self._instance

    def handle(self, *args: Any) -> Any:
        """Invoke the instance as the target of a call."""
        return self._invoke(HANDLE_METHOD, args)

    def subscribe(self, chain: Any, *args: Any) -> Any:
        """Invoke the instance as a subscriber, ``chain`` first."""
        return self._invoke(SUBSCRIBE_METHOD, (chain, *args))

    def supports(self, method_name: str) -> bool:
        return callable(getattr(self._instance, method_name, None))

    def _invoke(self, method_name: str, args: tuple[Any, ...]) -> Any:
        method = getattr(self._instance, method_name, None)
        if not callable(method):
            msg = (
                f"Invalid class ({self.type_name}) for service ({self.service_name}) "
                f"- must implement {method_name}()"
            )
            raise ResolutionError(
                msg, type_name=self.type_name, service_name=self.service_name
            )

        required = self._required_count(method_name, method)
        if len(args) < required:
            raise InvocationArityError(
                service_name=self.service_name,
                method=method_name,
                required=required,
                given=len(args),
            )
        return method(*args)

    def _required_count(self, method_name: str, method: Any) -> int:
        cached = self._required.get(method_name)
        if cached is not None:
            return cached
        try:
            signature = inspect.signature(method)
        except (TypeError, ValueError):
            count = 0
        else:
            count = sum(
                1
                for parameter in signature.parameters.values()
                if parameter.kind
                in (
                    inspect.Parameter.POSITIONAL_ONLY,
                    inspect.Parameter.POSITIONAL_OR_KEYWORD,
                )
                and parameter.default is inspect.Parameter.empty
            )
        self._required[method_name] = count
        return count

    def __repr__(self) -> str:
        return f"ServiceHandle({self.type_name!r}, service={self.service_name!r})"


__all__ = ["HANDLE_METHOD", "SUBSCRIBE_METHOD", "ServiceHandle"]
