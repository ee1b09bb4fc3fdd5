"""Application configuration models and loader utilities."""

from __future__ import annotations

import configparser
import json
import os
from collections.abc import Iterable, Sequence
from functools import lru_cache
from pathlib import Path
from typing import Any, cast

from dotenv import dotenv_values
from pydantic import AliasChoices, BaseModel, Field, field_validator

from .errors import ConfigurationError

ALIASES_SECTION = "aliases"
SUBSCRIBERS_SECTIONS = ("subscribers", "observers")
REGISTRY_SECTION = "registry"


def _split_names(value: Any) -> Any:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class RegistrySettings(BaseModel):
    """Settings consumed by ``Registry`` at construction."""

    aliases: dict[str, str] = Field(
        default_factory=dict, description="Service name redirections"
    )
    subscribers: dict[str, list[str]] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("subscribers", "observers"),
        description="Match query (name, prefix.* or *) to subscriber service names",
    )
    auto_init: list[str] = Field(
        default_factory=list, description="Services built eagerly at startup"
    )
    config_files: list[Path] = Field(
        default_factory=list, description="INI files merged into these settings"
    )

    @field_validator("auto_init", "config_files", mode="before")
    @classmethod
    def _split_list(cls, value: Any) -> Any:
        return _split_names(value)

    @field_validator("subscribers", mode="before")
    @classmethod
    def _split_subscribers(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {query: _split_names(names) for query, names in value.items()}
        return value


class LoggingSettings(BaseModel):
    """Logging preferences."""

    level: str = Field(default="INFO", description="Root logging level")
    structured: bool = Field(
        default=False, description="Toggle JSON structured logging"
    )
    value_level: str = Field(
        default="INFO", description="Level of the tagged value logger used by log_value"
    )
    loggers: dict[str, str] = Field(
        default_factory=dict, description="Per-logger level overrides, e.g. chainwire.core.chain=DEBUG"
    )


class HttpSettings(BaseModel):
    """Settings for the HTTP dispatcher."""

    controller_prefix: str = Field(
        default="", description="Prefix prepended to controller service names"
    )
    index_service: str = Field(
        default="index", description="Controller used for the root path"
    )
    output_service: str | None = Field(
        default=None, description="Service rendering controller results"
    )
    exception_service: str | None = Field(
        default=None, description="Service rendering uncaught exceptions"
    )
    hmac_key: str = Field(default="", description="Shared secret for request HMACs")


class AppSettings(BaseModel):
    """Aggregated application configuration."""

    registry: RegistrySettings = Field(default_factory=RegistrySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)


class ConfigFile:
    """Values read from one or more INI files.

    Sections with the same name are merged; keys already defined by an
    earlier file win.
    """

    def __init__(self, paths: Iterable[Path | str]) -> None:
        self._data: dict[str, dict[str, str]] = {}
        for raw_path in paths:
            self._load(Path(raw_path))

    def _load(self, path: Path) -> None:
        if not path.is_file():
            raise ConfigurationError(f"Unknown config file path ({path})")

        parser = configparser.ConfigParser(interpolation=None, delimiters=("=",))
        parser.optionxform = str  # type: ignore[assignment,method-assign]
        try:
            parser.read_string(path.read_text(encoding="utf-8"), source=str(path))
        except configparser.Error as exc:
            raise ConfigurationError(f"Malformed config file data ({path})") from exc

        for section in parser.sections():
            target = self._data.setdefault(section, {})
            for key, value in parser.items(section):
                target.setdefault(key, value)

    def has_section(self, name: str) -> bool:
        return name in self._data

    def section(self, name: str) -> dict[str, str]:
        """Return a copy of section ``name``."""
        if name not in self._data:
            raise ConfigurationError(f"Invalid config section ({name})")
        return dict(self._data[name])

    def get(self, name: str, *keys: str) -> list[str]:
        """Return the values of ``keys`` from section ``name``, in order.

        ``user, password = config.get("database", "user", "password")``
        """
        data = self.section(name)
        values: list[str] = []
        for key in keys:
            if key not in data:
                raise ConfigurationError(f"Invalid config key ({name}) ({key})")
            values.append(data[key])
        return values

    def registry_data(self) -> dict[str, Any]:
        """Return registry settings declared in the ``aliases``, ``subscribers`` and ``registry`` sections."""
        data: dict[str, Any] = {}
        if self.has_section(ALIASES_SECTION):
            data["aliases"] = self.section(ALIASES_SECTION)
        subscribers: dict[str, list[str]] = {}
        for section in SUBSCRIBERS_SECTIONS:
            if self.has_section(section):
                for query, names in self.section(section).items():
                    subscribers.setdefault(query, []).extend(_split_names(names))
        if subscribers:
            data["subscribers"] = subscribers
        if self.has_section(REGISTRY_SECTION):
            auto_init = self.section(REGISTRY_SECTION).get("auto_init")
            if auto_init is not None:
                data["auto_init"] = _split_names(auto_init)
        return data


ENV_PREFIX = "CHAINWIRE_"


def _normalize_key(raw_key: str) -> list[str]:
    """Convert an environment variable key into a nested attribute path."""
    trimmed = raw_key.removeprefix(ENV_PREFIX)
    return [segment.lower() for segment in trimmed.split("__") if segment]


def _merge_into_tree(tree: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign a value to a nested dictionary given a path."""
    cursor = tree
    for segment in path[:-1]:
        next_node = cursor.setdefault(segment, {})
        cursor = cast(dict[str, Any], next_node)
    cursor[path[-1]] = value


def _normalize_value(value: str | None) -> Any:
    if value is None or value == "":
        return None
    lowercase_value = value.lower()
    if lowercase_value == "true":
        return True
    if lowercase_value == "false":
        return False
    if value[:1] in "[{":
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    return value


def _collect_env_values(
    env_file: Path | str | None, *, include_environment: bool = True
) -> dict[str, Any]:
    """Load configuration values from environment variables and optional file."""
    collected: dict[str, Any] = {}

    file_values = {}
    if env_file:
        env_path = Path(env_file)
        if env_path.is_file():
            file_values = {
                key: value
                for key, value in dotenv_values(env_path).items()
                if key and key.startswith(ENV_PREFIX)
            }

    env_values = {}
    if include_environment:
        env_values = {
            key: value for key, value in os.environ.items() if key.startswith(ENV_PREFIX)
        }

    combined: dict[str, Any] = {**file_values, **env_values}

    for key, value in combined.items():
        path = _normalize_key(key)
        if not path:
            continue
        _merge_into_tree(collected, path, _normalize_value(value))

    return collected


def merge_config_files(
    settings: RegistrySettings, paths: Sequence[Path | str] = ()
) -> RegistrySettings:
    """Fold INI files into ``settings``; explicit settings take precedence."""
    files = [*settings.config_files, *(Path(path) for path in paths)]
    if not files:
        return settings

    file_data = RegistrySettings.model_validate(ConfigFile(files).registry_data())
    auto_init = list(dict.fromkeys([*file_data.auto_init, *settings.auto_init]))
    return settings.model_copy(
        update={
            "aliases": {**file_data.aliases, **settings.aliases},
            "subscribers": {**file_data.subscribers, **settings.subscribers},
            "auto_init": auto_init,
            "config_files": files,
        }
    )


@lru_cache(maxsize=1)
def load_app_settings(
    env_file: Path | str | None = None,
    *,
    config_files: tuple[Path | str, ...] = (),
    include_environment: bool = True,
    **overrides: Any,
) -> AppSettings:
    """Load application settings, applying env files, INI files and overrides."""
    collected = _collect_env_values(env_file, include_environment=include_environment)
    if overrides:
        collected.update(overrides)
    settings = AppSettings.model_validate(collected)
    registry = merge_config_files(settings.registry, config_files)
    return settings.model_copy(update={"registry": registry})


__all__ = [
    "AppSettings",
    "ConfigFile",
    "HttpSettings",
    "LoggingSettings",
    "RegistrySettings",
    "load_app_settings",
    "merge_config_files",
]
