"""Ready-made services that can be added to any catalog."""

from chainwire.core.catalog import ServiceCatalog

from .log import LogSubscriber
from .output import JsonException, JsonOutput

LOG_SUBSCRIBER = "log.subscriber"
JSON_OUTPUT = "json.output"
JSON_EXCEPTION = "json.exception"


def register_stock_services(catalog: ServiceCatalog) -> ServiceCatalog:
    """Register the stock services under their default names."""
    catalog.register(LogSubscriber, service=LOG_SUBSCRIBER)
    catalog.register(JsonOutput, service=JSON_OUTPUT)
    catalog.register(JsonException, service=JSON_EXCEPTION)
    return catalog


__all__ = [
    "JSON_EXCEPTION",
    "JSON_OUTPUT",
    "JsonException",
    "JsonOutput",
    "LOG_SUBSCRIBER",
    "LogSubscriber",
    "register_stock_services",
]
