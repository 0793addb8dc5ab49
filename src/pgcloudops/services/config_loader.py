"""Configuration loading and resolution for pgcloudops."""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import dotenv_values

from pgcloudops import constants
from pgcloudops.errors import ConfigurationError
from pgcloudops.errors_catalog import actionable_error
from pgcloudops.models import ConnectionSettings, DeployConfig, SyncConfig


class EnvFileLoader:
    """Reads an optional KEY=VALUE file such as the project's .env."""

    def load(self, env_path: Optional[str]) -> Dict[str, str]:
        if not env_path:
            return {}

        path = Path(env_path)
        if not path.is_file():
            return {}

        try:
            parsed = dotenv_values(path, interpolate=False, encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Could not read env file '{env_path}': {exc}") from exc

        return {key: value for key, value in parsed.items() if value is not None}


class ConfigLoader:
    """Loads YAML overrides for the deployment settings."""

    SUPPORTED_KEYS = set(DeployConfig.field_names())

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ConfigurationError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise ConfigurationError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise ConfigurationError(f"Unknown configuration keys: {unknown_list}")

        return parsed


def _required(values: Mapping[str, str], key: str) -> str:
    value = (values.get(key) or "").strip()
    if not value:
        raise ConfigurationError(actionable_error("missing_setting", key=key))
    return value


def _optional(values: Mapping[str, str], key: str, default: str) -> str:
    value = values.get(key)
    if value is None or value == "":
        return default
    return value


def resolve_sync_config(
    env_file_values: Mapping[str, str],
    environ: Mapping[str, str],
    dump_dir: Path,
) -> SyncConfig:
    # Entries from the env file are exported over the process environment.
    values: Dict[str, str] = dict(environ)
    values.update(env_file_values)

    source = ConnectionSettings(
        host=_required(values, "PROD_POSTGRES_HOST"),
        port=_optional(values, "PROD_POSTGRES_PORT", constants.DEFAULT_POSTGRES_PORT),
        database=_required(values, "PROD_POSTGRES_DB"),
        user=_required(values, "PROD_POSTGRES_USER"),
        password=values.get("PROD_POSTGRES_PASSWORD"),
    )
    target = ConnectionSettings(
        host=_optional(values, "POSTGRES_HOST", constants.DEFAULT_LOCAL_HOST),
        port=_optional(values, "POSTGRES_PORT", constants.DEFAULT_POSTGRES_PORT),
        database=_optional(values, "POSTGRES_DB", constants.DEFAULT_LOCAL_DB),
        user=_optional(values, "POSTGRES_USER", constants.DEFAULT_LOCAL_USER),
        password=values.get("POSTGRES_PASSWORD"),
    )
    return SyncConfig(source=source, target=target, dump_dir=dump_dir)


def resolve_deploy_config(overrides: Optional[Mapping[str, Any]] = None) -> DeployConfig:
    overrides = dict(overrides or {})

    env_vars = overrides.get("env_vars")
    if env_vars is not None:
        if not isinstance(env_vars, dict):
            raise ConfigurationError("Config key 'env_vars' must be a mapping.")
        overrides["env_vars"] = {str(key): str(value) for key, value in env_vars.items()}

    try:
        config = DeployConfig(**overrides)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid deploy configuration: {exc}") from exc

    if not str(config.project_id).strip():
        raise ConfigurationError(actionable_error("missing_setting", key="project_id"))
    return config
