"""Tests for the command-line entry point."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from chainwire.cli import decode_argument, load_catalog, main, parse_input
from chainwire.core.config import load_app_settings

CATALOG_MODULE = '''\
from chainwire import ServiceCatalog

catalog = ServiceCatalog()


@catalog.register(service="math.add")
class Add:
    def handle(self, service_input, left, right):
        return {"sum": left + right, "scale": service_input.get("scale", 1)}


@catalog.register(service="audit")
class Audit:
    def subscribe(self, next, *args):
        return next()


not_a_catalog = object()
'''


@pytest.fixture(autouse=True)
def clear_settings_cache() -> None:
    load_app_settings.cache_clear()


@pytest.fixture()
def catalog_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    (tmp_path / "cli_services.py").write_text(CATALOG_MODULE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delenv("CHAINWIRE_REGISTRY__SUBSCRIBERS", raising=False)
    return "cli_services:catalog"


def test_decode_argument_and_input() -> None:
    assert decode_argument("3") == 3
    assert decode_argument('{"a": 1}') == {"a": 1}
    assert decode_argument("plain") == "plain"
    assert parse_input(["scale=2", "name=ada"]) == {"scale": 2, "name": "ada"}
    with pytest.raises(ValueError):
        parse_input(["broken"])


def test_load_catalog_rejects_other_objects(catalog_module: str) -> None:
    assert len(load_catalog(catalog_module)) == 2
    with pytest.raises(ValueError):
        load_catalog("cli_services:not_a_catalog")


def test_exec_prints_json_result(
    catalog_module: str, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(["--catalog", catalog_module, "exec", "math.add", "2", "3", "--input", "scale=10"])

    assert exit_code == 0
    assert json.loads(capsys.readouterr().out) == {"sum": 5, "scale": 10}


def test_subscribers_command_lists_matches(
    catalog_module: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    ini = tmp_path / "services.ini"
    ini.write_text("[subscribers]\nmath.* = audit\n", encoding="utf-8")

    exit_code = main(["--catalog", catalog_module, "--config", str(ini), "subscribers", "math.add"])

    assert exit_code == 0
    assert "audit" in capsys.readouterr().out


def test_unknown_service_reports_error(
    catalog_module: str, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = main(["--catalog", catalog_module, "exec", "math.sub"])

    assert exit_code == 1
    assert "Attempted to load unknown class" in capsys.readouterr().err


def test_missing_service_name_is_usage_error(
    catalog_module: str, capsys: pytest.CaptureFixture[str]
) -> None:
    assert main(["--catalog", catalog_module, "exec"]) == 2
    assert "needs a service name" in capsys.readouterr().err


def test_info_lists_types(catalog_module: str, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--catalog", catalog_module, "info"]) == 0
    out = capsys.readouterr().out
    assert "Math.Add" in out
    assert "Audit" in out
