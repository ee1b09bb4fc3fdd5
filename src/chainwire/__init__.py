"""Service resolution, dependency injection and subscriber chains."""

from .core import (
    NO_RESULT,
    Chain,
    ChainwireError,
    ConfigurationError,
    Inject,
    InvocationArityError,
    Registry,
    ResolutionError,
    ServiceCatalog,
    ServiceInput,
    init,
    param,
)

__all__ = [
    "Chain",
    "ChainwireError",
    "ConfigurationError",
    "Inject",
    "InvocationArityError",
    "NO_RESULT",
    "Registry",
    "ResolutionError",
    "ServiceCatalog",
    "ServiceInput",
    "init",
    "param",
]
