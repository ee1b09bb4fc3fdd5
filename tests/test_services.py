"""Tests for the stock services."""

from __future__ import annotations

import json
import logging

import pytest

from chainwire.core import Registry, ResolutionError, ServiceCatalog
from chainwire.core.logging import VALUE_LOGGER_NAME
from chainwire.services import LOG_SUBSCRIBER, JsonException, JsonOutput, register_stock_services
from chainwire.web import HttpError, HttpRequestInfo


class Echo:
    def handle(self, value):
        return {"echo": value}


class Explode:
    def handle(self):
        raise RuntimeError("kaboom")


def _registry() -> Registry:
    catalog = register_stock_services(ServiceCatalog())
    catalog.register(Echo, service="app.echo")
    catalog.register(Explode, service="app.explode")
    return Registry(catalog, subscribers={"app.*": [LOG_SUBSCRIBER]})


def _request() -> HttpRequestInfo:
    return HttpRequestInfo(
        method="GET",
        uri="/app/echo",
        host="testserver",
        port=None,
        referer="",
        raw_input=b"",
        content_type="form",
    )


def test_log_subscriber_records_result(caplog: pytest.LogCaptureFixture) -> None:
    registry = _registry()

    with caplog.at_level(logging.INFO, logger=VALUE_LOGGER_NAME):
        result = registry.exec("app.echo", "hi")

    assert result == {"echo": "hi"}
    messages = [r.getMessage() for r in caplog.records if r.name == VALUE_LOGGER_NAME]
    assert len(messages) == 1
    assert messages[0].startswith("[app.echo]")
    assert "'result': {'echo': 'hi'}" in messages[0]


def test_log_subscriber_reraises(caplog: pytest.LogCaptureFixture) -> None:
    registry = _registry()

    with caplog.at_level(logging.ERROR), pytest.raises(RuntimeError, match="kaboom"):
        registry.exec("app.explode")

    assert any("app.explode" in r.getMessage() for r in caplog.records)


def test_json_output_renders_payload() -> None:
    response = JsonOutput().handle(_request(), {"ok": True})

    assert response.status_code == 200
    assert json.loads(response.body) == {"ok": True}


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (RuntimeError("boom"), 500),
        (ResolutionError("missing", type_name="X", service_name="x"), 404),
        (HttpError("bad input", 400), 400),
    ],
)
def test_json_exception_status_codes(error: Exception, status_code: int) -> None:
    response = JsonException().handle(error, _request())

    assert response.status_code == status_code
    assert json.loads(response.body)["error"] == type(error).__name__
