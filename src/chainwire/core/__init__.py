"""Core runtime: configuration, logging, injection and dispatch."""

from .catalog import ServiceCatalog, ServiceDefinition, type_name_for
from .chain import Chain, ChainState
from .config import (
    AppSettings,
    ConfigFile,
    HttpSettings,
    LoggingSettings,
    RegistrySettings,
    load_app_settings,
)
from .directives import DirectiveParser, Inject, init, param
from .errors import (
    ChainwireError,
    ConfigurationError,
    DictKeyError,
    InvocationArityError,
    ResolutionError,
)
from .handle import ServiceHandle
from .interfaces import Next, Service, Subscriber
from .logging import configure_logging, log_value
from .models import NO_RESULT, Dict, Directive, DirectiveKind, ServiceInput
from .registry import Registry

__all__ = [
    "AppSettings",
    "Chain",
    "ChainState",
    "ChainwireError",
    "ConfigFile",
    "ConfigurationError",
    "Dict",
    "DictKeyError",
    "Directive",
    "DirectiveKind",
    "DirectiveParser",
    "HttpSettings",
    "Inject",
    "InvocationArityError",
    "LoggingSettings",
    "NO_RESULT",
    "Next",
    "Registry",
    "RegistrySettings",
    "ResolutionError",
    "Service",
    "ServiceCatalog",
    "ServiceDefinition",
    "ServiceHandle",
    "ServiceInput",
    "Subscriber",
    "configure_logging",
    "init",
    "load_app_settings",
    "log_value",
    "param",
    "type_name_for",
]
