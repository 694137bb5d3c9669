from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import AppConfig, SheetSourceConfig

"""Config loader.

Responsibilities:
- Load YAML config (default ``config/sheetedit.yml``)
- Apply environment overrides (``.env`` is loaded by the CLI beforehand)
- Validate against ``config_schema.json``
- Build the frozen ``AppConfig``
"""

__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "load_config",
]

DEFAULT_CONFIG_PATH = Path("config/sheetedit.yml")
SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

ENV_CSV_URL = "SHEETEDIT_CSV_URL"
ENV_WEBHOOK_URL = "SHEETEDIT_WEBHOOK_URL"
ENV_USER_EMAIL = "SHEETEDIT_USER_EMAIL"


class ConfigError(Exception):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing / not JSON, or config violates the schema
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    # 環境変数 (.env 含む) を YAML より優先
    merged = dict(data)
    sheet = dict(merged.get("sheet") or {})
    csv_url = os.getenv(ENV_CSV_URL)
    if csv_url:
        sheet["csv_url"] = csv_url
    if sheet:
        merged["sheet"] = sheet
    webhook = os.getenv(ENV_WEBHOOK_URL)
    if webhook:
        merged["webhook_url"] = webhook
    email = os.getenv(ENV_USER_EMAIL)
    if email:
        merged["user_email"] = email
    return merged


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("config root must be a mapping")

    data = _apply_env_overrides(data)
    _validate_config_schema(data)

    sheet_raw = data["sheet"]
    sheet = SheetSourceConfig(
        sheet_id=sheet_raw.get("sheet_id"),
        gid=sheet_raw.get("gid", 0),
        csv_url=sheet_raw.get("csv_url"),
    )
    return AppConfig(
        sheet=sheet,
        webhook_url=data["webhook_url"],
        user_email=data.get("user_email"),
        timeout_seconds=data.get("timeout_seconds"),
    )
