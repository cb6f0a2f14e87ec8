"""Pydantic settings and checks-file models loaded from YAML configuration."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator, model_validator

from src.core.exceptions import ConfigInvalid

_settings: Settings | None = None

_DEFAULT_CONFIG_PATH = Path("config/settings.yaml")

DEFAULT_CHECKS_PATH = Path("config.yml")

# Closed catalog of check kinds accepted in the ``checks`` list.
CheckKind = Literal[
    "disk",
    "disk_all",
    "inode",
    "memory",
    "memory_per_cluster",
    "load_per_cluster",
    "load_per_cluster_minus_n",
    "load_per_cpu",
    "service",
    "predict_disk_all",
    "custom",
]


# ── Settings ────────────────────────────────────────────────────


class PrometheusConfig(BaseModel):
    """Metrics backend connection configuration."""

    endpoint: str = "localhost:9090"
    connect_timeout_secs: float = 3.0
    read_timeout_secs: float = 3.0

    @property
    def base_url(self) -> str:
        if "://" in self.endpoint:
            return self.endpoint.rstrip("/")
        return f"http://{self.endpoint}"


class SensuConfig(BaseModel):
    """Event backend (Sensu client socket) configuration."""

    host: str = "localhost"
    port: int = 3030
    timeout_secs: float = 3.0


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class Settings(BaseModel):
    """Root settings container."""

    prometheus: PrometheusConfig = PrometheusConfig()
    sensu: SensuConfig = SensuConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Translate the supported environment variables into a settings patch."""
    patch: dict[str, Any] = {}

    if environ.get("PROMETHEUS_ENDPOINT"):
        patch.setdefault("prometheus", {})["endpoint"] = environ["PROMETHEUS_ENDPOINT"]
    if environ.get("SENSU_SOCKET_ADDRESS"):
        patch.setdefault("sensu", {})["host"] = environ["SENSU_SOCKET_ADDRESS"]
    if environ.get("SENSU_SOCKET_PORT"):
        patch.setdefault("sensu", {})["port"] = environ["SENSU_SOCKET_PORT"]
    if environ.get("LOG_LEVEL"):
        patch.setdefault("logging", {})["level"] = environ["LOG_LEVEL"]
    if environ.get("PROM_DEBUG"):
        patch["debug"] = True

    return patch


def _merge(base: dict[str, Any], patch: Mapping[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in patch.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = _merge(dict(merged[key]), value)
        else:
            merged[key] = value
    return merged


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigInvalid(f"Invalid YAML in {path}: {exc}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigInvalid(f"Top level of {path} must be a mapping")
    return raw


def load_settings(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from a YAML file, apply environment overrides and cache globally.

    Args:
        path: Path to YAML config. Defaults to config/settings.yaml.
        environ: Environment mapping. Defaults to ``os.environ``.

    Returns:
        Parsed Settings instance.

    Raises:
        ConfigInvalid: If the file is not valid YAML or fails validation.
    """
    global _settings  # noqa: PLW0603

    config_path = Path(path) if path else _DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        data = _read_yaml(config_path)

    data = _merge(data, _env_overrides(os.environ if environ is None else environ))

    try:
        _settings = Settings(**data)
    except ValidationError as exc:
        raise ConfigInvalid(f"Invalid settings in {config_path}: {exc}") from exc
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None


# ── Checks file ─────────────────────────────────────────────────


class ClassifierSpec(BaseModel):
    """Classifier chosen by a custom check: ``check`` (thresholds) or ``equals``."""

    model_config = {"extra": "forbid"}

    type: Literal["check", "equals"]
    value: Any = None

    @model_validator(mode="after")
    def _validate_value(self) -> ClassifierSpec:
        if self.type == "check":
            value = self.value
            if isinstance(value, dict):
                if not {"warn", "crit"} <= set(value):
                    raise ValueError("'check' classifier mapping needs 'warn' and 'crit'")
            elif not (isinstance(value, list) and len(value) == 2):
                raise ValueError("'check' classifier value must be [warn, crit] or {warn, crit}")
        return self

    def thresholds(self) -> tuple[Any, ...]:
        """Positional classifier arguments after the observed value."""
        if self.type == "equals":
            return (self.value,)
        if isinstance(self.value, dict):
            return (self.value["warn"], self.value["crit"])
        return tuple(self.value)


class CheckConfig(BaseModel):
    """Options for one check invocation; each kind reads the subset it needs."""

    model_config = {"extra": "forbid", "frozen": True}

    name: str | None = None
    mount: str | None = None
    warn: float | str | None = None
    crit: float | str | None = None
    cluster: str | None = None
    minus_n: int | None = None
    days: int = 0
    sample_size: str = "24h"
    filter: str = ""
    exit_code: int = Field(default=1, ge=0, le=3)
    ignore_fs: str = "tmpfs"
    state: str = "active"
    state_required: float | str = 1
    query: str | None = None
    check: ClassifierSpec | None = None
    msg: list[str] = Field(default_factory=list)
    source: str | None = None


class CustomCheckConfig(CheckConfig):
    """A custom check: arbitrary expression folded through a chosen classifier."""

    name: str
    query: str
    check: ClassifierSpec


class CheckEntry(BaseModel):
    """One element of the ``checks`` list: a catalog kind and its options."""

    check: CheckKind
    cfg: CheckConfig = Field(default_factory=CheckConfig)

    @field_validator("cfg", mode="before")
    @classmethod
    def _empty_cfg(cls, v: Any) -> Any:
        return {} if v is None else v


class RunConfig(BaseModel):
    """Run-wide defaults threaded through event building and dispatch filtering."""

    model_config = {"frozen": True, "populate_by_name": True}

    reported_by: str | None = None
    occurrences: int = Field(
        default=1,
        validation_alias=AliasChoices("occurences", "occurrences"),
    )
    domain: str = ""
    whitelist: str = ".*"

    @field_validator("occurrences", mode="before")
    @classmethod
    def _default_occurrences(cls, v: Any) -> Any:
        return 1 if v is None else v

    @field_validator("whitelist", mode="before")
    @classmethod
    def _compile_whitelist(cls, v: Any) -> Any:
        if v is None:
            return ".*"
        try:
            re.compile(str(v))
        except re.error as exc:
            raise ValueError(f"whitelist is not a valid regular expression: {exc}") from exc
        return str(v)

    def allows(self, source: str) -> bool:
        """Whether an (already canonicalized) event source passes the whitelist."""
        return re.search(self.whitelist, source) is not None


class ChecksFile(BaseModel):
    """Declarative check list: run defaults, catalog checks and custom checks."""

    model_config = {"populate_by_name": True}

    run: RunConfig = Field(default_factory=RunConfig, alias="config")
    checks: list[CheckEntry] = Field(default_factory=list)
    custom: list[CustomCheckConfig] = Field(default_factory=list)

    @field_validator("run", mode="before")
    @classmethod
    def _empty_run(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("checks", "custom", mode="before")
    @classmethod
    def _empty_list(cls, v: Any) -> Any:
        return [] if v is None else v


def load_checks(path: str | Path | None = None) -> ChecksFile:
    """Load and validate the declarative checks file.

    Args:
        path: Path to the checks YAML. Defaults to ``config.yml``.

    Returns:
        Parsed ChecksFile.

    Raises:
        ConfigInvalid: If the file is missing, not valid YAML, or fails validation
            (including unknown check kinds and classifier types).
    """
    checks_path = Path(path) if path else DEFAULT_CHECKS_PATH
    if not checks_path.exists():
        raise ConfigInvalid(f"Checks file not found: {checks_path}")

    data = _read_yaml(checks_path)
    try:
        return ChecksFile.model_validate(data)
    except ValidationError as exc:
        raise ConfigInvalid(f"Invalid checks file {checks_path}: {exc}") from exc
