"""Configuration loading: YAML file, environment overrides, defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from ..contracts.ids import CONFIG
from ..contracts.schema.validate import validate
from ..core.errors import ConfigError, ContractViolation

DEFAULT_CONFIG_FILE = "aclaudit.yaml"
PROVIDERS = ("snapshot", "powershell")


@dataclass(frozen=True)
class PowerShellConfig:
    executable: str = "pwsh"
    timeout_seconds: int = 30


@dataclass(frozen=True)
class AuditConfig:
    provider: str = "snapshot"
    snapshot: Path | None = None
    powershell: PowerShellConfig = field(default_factory=PowerShellConfig)
    case_sensitive_identities: bool = False
    strict_owner: bool = False
    jobs: int = 1
    csv_delimiter: str = ","
    output_dir: Path = Path("artifacts/aclaudit")
    source: Path | None = None

    def with_overrides(self, **overrides: Any) -> "AuditConfig":
        changes = {key: value for key, value in overrides.items() if value is not None}
        if "snapshot" in changes:
            changes["snapshot"] = Path(changes["snapshot"])
        if "output_dir" in changes:
            changes["output_dir"] = Path(changes["output_dir"])
        updated = replace(self, **changes)
        _check_semantics(updated)
        return updated


def _check_semantics(config: AuditConfig) -> None:
    if config.provider not in PROVIDERS:
        raise ConfigError(f"unknown provider `{config.provider}`: expected one of {', '.join(PROVIDERS)}")
    if config.jobs < 1:
        raise ConfigError(f"jobs must be >= 1 (got {config.jobs})")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc.strerror or exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in config file {path}: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError(f"config file {path}: root must be a mapping")
    return payload


def _from_mapping(payload: Mapping[str, Any], base_dir: Path) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key in ("provider", "case_sensitive_identities", "strict_owner", "jobs", "csv_delimiter"):
        if key in payload:
            values[key] = payload[key]
    if "snapshot" in payload:
        values["snapshot"] = (base_dir / str(payload["snapshot"])).resolve()
    if "output_dir" in payload:
        values["output_dir"] = base_dir / str(payload["output_dir"])
    ps = payload.get("powershell")
    if isinstance(ps, dict):
        values["powershell"] = PowerShellConfig(
            executable=str(ps.get("executable", PowerShellConfig.executable)),
            timeout_seconds=int(ps.get("timeout_seconds", PowerShellConfig.timeout_seconds)),
        )
    return values


def _from_env(env: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    if env.get("ACLAUDIT_PROVIDER"):
        values["provider"] = env["ACLAUDIT_PROVIDER"].strip()
    if env.get("ACLAUDIT_SNAPSHOT"):
        values["snapshot"] = Path(env["ACLAUDIT_SNAPSHOT"])
    raw_jobs = env.get("ACLAUDIT_JOBS")
    if raw_jobs:
        try:
            values["jobs"] = int(raw_jobs)
        except ValueError as exc:
            raise ConfigError(f"ACLAUDIT_JOBS must be an integer (got `{raw_jobs}`)") from exc
    return values


def resolve_config_path(explicit: str | Path | None, env: Mapping[str, str], cwd: Path) -> Path | None:
    if explicit:
        path = Path(explicit)
        if not path.is_file():
            raise ConfigError(f"config file not found: {path}")
        return path
    from_env = env.get("ACLAUDIT_CONFIG")
    if from_env:
        path = Path(from_env)
        if not path.is_file():
            raise ConfigError(f"ACLAUDIT_CONFIG points to a missing file: {path}")
        return path
    default = cwd / DEFAULT_CONFIG_FILE
    return default if default.is_file() else None


def load_config(
    path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> AuditConfig:
    environ = os.environ if env is None else env
    workdir = cwd or Path.cwd()
    config_path = resolve_config_path(path, environ, workdir)
    values: dict[str, Any] = {}
    if config_path is not None:
        payload = _read_yaml(config_path)
        try:
            validate(CONFIG, payload)
        except ContractViolation as exc:
            raise ConfigError(f"{config_path}: {exc}") from exc
        values.update(_from_mapping(payload, config_path.parent))
        values["source"] = config_path
    values.update(_from_env(environ))
    config = AuditConfig(**values)
    _check_semantics(config)
    return config
