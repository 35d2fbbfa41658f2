"""
core/config.py - 중앙 설정 관리

프로세스 전역 기본값(Settings), 타입별 환경 변수 헬퍼, 로깅 설정,
수집기 생성 시 전달되는 불변 설정(CollectorConfig)을 제공합니다.

Usage:
    from core.config import CollectorConfig, settings, setup_logging

    setup_logging()
    config = CollectorConfig.from_env()
    limit = config.limit_for("vms")
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any

import yaml

from core.exceptions import ConfigError

logger = logging.getLogger(__name__)

ENV_PREFIX = "AIC_"

# botocore loggers that flood INFO output
NOISY_LOGGERS = (
    "botocore.credentials",
    "botocore.httpchecksum",
    "botocore.loaders",
    "botocore.session",
    "urllib3.connectionpool",
)


@dataclass(frozen=True)
class Settings:
    """프로세스 전역 기본값"""

    DEFAULT_REGION: str = "us-east-1"
    INVENTORY_NAME: str = "Amazon"
    SCHEMA_NAME: str = "Default"
    DEFAULT_LIMIT: int = 1_000
    POLL_TIME: int = 30
    INGRESS_PATH: str = "/api/ingress/v1/inventory"
    INGRESS_TIMEOUT: int = 30
    INGRESS_MAX_BYTES: int = 1_000_000
    ASSUMED_ROLE_DURATION_SECONDS: int = 3600
    ASSUMED_ROLE_REFRESH_MARGIN_SECONDS: int = 300


settings = Settings()


def get_version() -> str:
    """Installed package version ("0.0.0" when running from a checkout)"""
    try:
        return version("aws-inventory-collector")
    except PackageNotFoundError:
        return "0.0.0"


# =============================================================================
# Environment helpers
# =============================================================================


def get_env_bool(name: str, default: bool = False) -> bool:
    """Read a boolean environment variable

    Accepts 1/true/yes/on and 0/false/no/off (case-insensitive). Anything
    else falls back to the default.
    """
    value = os.environ.get(name)
    if value is None:
        return default

    value = value.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    return default


def get_env_int(name: str, default: int = 0) -> int:
    """Read an integer environment variable, default on missing/invalid"""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, value)
        return default


def get_env_str(name: str, default: str | None = None) -> str | None:
    """Read a string environment variable, empty counts as missing"""
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _split_list(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


# =============================================================================
# Logging
# =============================================================================


@dataclass
class LogConfig:
    """로깅 설정"""

    level: str = "INFO"
    format: str = "%(message)s"
    datefmt: str = "[%X]"
    plain: bool = False

    @classmethod
    def from_env(cls) -> LogConfig:
        return cls(
            level=(get_env_str(f"{ENV_PREFIX}LOG_LEVEL", "INFO") or "INFO").upper(),
            plain=get_env_bool(f"{ENV_PREFIX}LOG_PLAIN", False),
        )


def setup_logging(config: LogConfig | None = None) -> None:
    """Configure the root logger

    Uses rich's RichHandler for interactive output; plain mode writes
    timestamped lines to stderr (containers, log shippers).
    """
    config = config or LogConfig.from_env()

    if config.plain:
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    else:
        from rich.logging import RichHandler

        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter(config.format, datefmt=config.datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(config.level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


# =============================================================================
# Collector configuration
# =============================================================================

DEFAULT_ENTITY_TYPES: tuple[str, ...] = (
    "source_regions",
    "subscriptions",
    "flavors",
    "volume_types",
    "orchestration_stacks",
    "vms",
    "volumes",
    "networks",
    "subnets",
    "security_groups",
)


INT_FIELDS = ("default_limit", "poll_time", "ingress_timeout", "ingress_max_bytes", "metrics_port")


def _to_int(key: str, value: Any) -> int:
    """Integer value of a config key; ConfigError when it is not one"""
    if isinstance(value, bool):
        raise ConfigError(key, f"must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(key, f"must be an integer, got {value!r}") from None


@dataclass(frozen=True)
class CollectorConfig:
    """수집기 프로세스의 불변 설정

    Attributes:
        source: uid of the source the inventory belongs to
        access_key_id: static access key of the master account
        secret_access_key: static secret key of the master account
        sub_account_role: role name assumed in non-master accounts
        entity_types: top-level entity types, processed in this order
        limits: per entity type batch limit overrides
        default_limit: batch limit for types without an override
        poll_time: seconds to sleep between cycles (standalone mode)
        standalone_mode: loop until stopped (False = single-shot)
        default_region: region used for probes, region and account listing
        regions: fnmatch patterns restricting the region list (empty = all)
        inventory_name: inventory name reported to the store
        schema_name: schema name reported to the store
        ingress_url: base URL of the inventory store ingress API
        ingress_path: path of the inventory endpoint
        ingress_timeout: per-request timeout in seconds
        ingress_max_bytes: payload size above which uploads are split
        metrics_port: port of the metrics HTTP server (0 = disabled)
        isolate_entity_failures: a failed entity type does not abandon the cycle
    """

    source: str = ""
    access_key_id: str | None = None
    secret_access_key: str | None = None
    sub_account_role: str = "OrganizationAccountAccessRole"
    entity_types: tuple[str, ...] = DEFAULT_ENTITY_TYPES
    limits: dict[str, int] = field(default_factory=dict)
    default_limit: int = settings.DEFAULT_LIMIT
    poll_time: int = settings.POLL_TIME
    standalone_mode: bool = True
    default_region: str = settings.DEFAULT_REGION
    regions: tuple[str, ...] = ()
    inventory_name: str = settings.INVENTORY_NAME
    schema_name: str = settings.SCHEMA_NAME
    ingress_url: str = "http://localhost:8080"
    ingress_path: str = settings.INGRESS_PATH
    ingress_timeout: int = settings.INGRESS_TIMEOUT
    ingress_max_bytes: int = settings.INGRESS_MAX_BYTES
    metrics_port: int = 0
    isolate_entity_failures: bool = False

    def __post_init__(self) -> None:
        # YAML may carry numbers as strings
        for name in INT_FIELDS:
            object.__setattr__(self, name, _to_int(name, getattr(self, name)))
        if not isinstance(self.limits, dict):
            raise ConfigError("limits", f"must be a mapping of entity type to limit, got {self.limits!r}")
        object.__setattr__(
            self, "limits", {str(k): _to_int(f"limits.{k}", v) for k, v in self.limits.items()}
        )

        if self.default_limit < 1:
            raise ConfigError("default_limit", f"must be >= 1, got {self.default_limit}")
        for entity_type, limit in self.limits.items():
            if limit < 1:
                raise ConfigError(f"limits.{entity_type}", f"must be >= 1, got {limit}")
        if self.poll_time < 0:
            raise ConfigError("poll_time", f"must be >= 0, got {self.poll_time}")
        if not self.entity_types:
            raise ConfigError("entity_types", "at least one entity type is required")
        if len(set(self.entity_types)) != len(self.entity_types):
            raise ConfigError("entity_types", "entity types must be unique")
        if self.ingress_max_bytes < 1:
            raise ConfigError("ingress_max_bytes", f"must be >= 1, got {self.ingress_max_bytes}")

    def limit_for(self, entity_type: str) -> int:
        """Batch limit of an entity type"""
        return self.limits.get(str(entity_type), self.default_limit)

    def with_overrides(self, **overrides: Any) -> CollectorConfig:
        """Copy with the non-None overrides applied (CLI options)"""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_env(cls) -> CollectorConfig:
        """Build from AIC_* variables and the standard AWS credentials variables"""
        return cls(**_env_values())

    @classmethod
    def from_file(cls, path: str | Path) -> CollectorConfig:
        """Build from a YAML file; environment variables fill missing keys

        Example file:
            source: 2a4f...
            sub_account_role: InventoryReader
            entity_types: [vms, volumes]
            limits: {vms: 500}
            standalone_mode: false
        """
        path = Path(path)
        try:
            with path.open(encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except OSError as e:
            raise ConfigError("config_file", f"cannot read {path}", cause=e) from e
        except yaml.YAMLError as e:
            raise ConfigError("config_file", f"invalid YAML in {path}", cause=e) from e

        if not isinstance(data, dict):
            raise ConfigError("config_file", f"{path} must contain a mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError("config_file", f"unknown keys: {', '.join(unknown)}")

        values = _env_values()
        values.update(data)
        for key in ("entity_types", "regions"):
            if key in values and isinstance(values[key], list):
                values[key] = tuple(values[key])
        return cls(**values)


def _env_values() -> dict[str, Any]:
    """Collect the configuration values present in the environment"""
    values: dict[str, Any] = {}

    string_keys = {
        "source": f"{ENV_PREFIX}SOURCE",
        "sub_account_role": f"{ENV_PREFIX}SUB_ACCOUNT_ROLE",
        "default_region": f"{ENV_PREFIX}DEFAULT_REGION",
        "inventory_name": f"{ENV_PREFIX}INVENTORY_NAME",
        "schema_name": f"{ENV_PREFIX}SCHEMA_NAME",
        "ingress_url": f"{ENV_PREFIX}INGRESS_URL",
        "ingress_path": f"{ENV_PREFIX}INGRESS_PATH",
    }
    for key, env_name in string_keys.items():
        value = get_env_str(env_name)
        if value is not None:
            values[key] = value

    access_key_id = get_env_str("AWS_ACCESS_KEY_ID")
    secret_access_key = get_env_str("AWS_SECRET_ACCESS_KEY")
    if access_key_id and secret_access_key:
        values["access_key_id"] = access_key_id
        values["secret_access_key"] = secret_access_key

    int_keys = {
        "default_limit": f"{ENV_PREFIX}DEFAULT_LIMIT",
        "poll_time": f"{ENV_PREFIX}POLL_TIME",
        "ingress_timeout": f"{ENV_PREFIX}INGRESS_TIMEOUT",
        "ingress_max_bytes": f"{ENV_PREFIX}INGRESS_MAX_BYTES",
        "metrics_port": f"{ENV_PREFIX}METRICS_PORT",
    }
    for key, env_name in int_keys.items():
        if env_name in os.environ:
            values[key] = get_env_int(env_name, getattr(CollectorConfig, key))

    if f"{ENV_PREFIX}STANDALONE_MODE" in os.environ:
        values["standalone_mode"] = get_env_bool(f"{ENV_PREFIX}STANDALONE_MODE", True)
    if f"{ENV_PREFIX}ISOLATE_ENTITY_FAILURES" in os.environ:
        values["isolate_entity_failures"] = get_env_bool(f"{ENV_PREFIX}ISOLATE_ENTITY_FAILURES", False)

    entity_types = _split_list(get_env_str(f"{ENV_PREFIX}ENTITY_TYPES"))
    if entity_types:
        values["entity_types"] = entity_types

    regions = _split_list(get_env_str(f"{ENV_PREFIX}REGIONS"))
    if regions:
        values["regions"] = regions

    # AIC_LIMITS="vms=500,volumes=2000"
    limits: dict[str, int] = {}
    for item in _split_list(get_env_str(f"{ENV_PREFIX}LIMITS")):
        name, _, raw = item.partition("=")
        try:
            limits[name.strip()] = int(raw)
        except ValueError as e:
            raise ConfigError(f"{ENV_PREFIX}LIMITS", f"invalid entry {item!r}", cause=e) from e
    if limits:
        values["limits"] = limits

    return values
