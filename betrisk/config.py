"""Client configuration, resolved once at startup."""

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, Dict
from urllib.parse import urlparse
import json
import os

from betrisk.constants import DEFAULT_MODEL, MODEL_NAMES
from betrisk.exceptions import ConfigurationError


_DEFAULT_API_BASE = "http://localhost:8000"
_DEFAULT_TRANSPORT = "aiohttp"
_DEFAULT_LOG_LEVEL = "INFO"

TRANSPORTS = ("aiohttp", "requests")


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _coerce_optional_float(value: Optional[str], default: Optional[float]) -> Optional[float]:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError("request_timeout", f"not a number: {value!r}")


def _parse_env_file(path: Path) -> Dict[str, str]:
    data: Dict[str, str] = {}
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export "):]
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        data[key.strip()] = _strip_quotes(value.strip())
    return data


def _load_config_data(path: Path) -> Dict[str, str]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    if path.suffix.lower() == ".json":
        payload = json.loads(path.read_text(encoding="utf-8"))
        return {str(k): str(v) for k, v in payload.items() if v is not None}
    return _parse_env_file(path)


@dataclass(frozen=True)
class Config:
    api_base: str = _DEFAULT_API_BASE
    request_timeout: Optional[float] = None
    transport: str = _DEFAULT_TRANSPORT
    default_model: str = DEFAULT_MODEL
    log_level: str = _DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "Config":
        return cls._from_mapping(os.environ, cls())

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """Environment settings, overridden by a .env or JSON file if given."""
        env_config = cls.from_env()
        if not config_path:
            return env_config.validate()
        file_data = _load_config_data(Path(config_path))
        return cls._from_mapping(file_data, env_config).validate()

    @classmethod
    def _from_mapping(cls, data, fallback: "Config") -> "Config":
        return cls(
            api_base=(data.get("BETRISK_API_BASE") or fallback.api_base).rstrip("/"),
            request_timeout=_coerce_optional_float(
                data.get("BETRISK_REQUEST_TIMEOUT"),
                fallback.request_timeout,
            ),
            transport=(data.get("BETRISK_TRANSPORT") or fallback.transport).lower(),
            default_model=data.get("BETRISK_DEFAULT_MODEL") or fallback.default_model,
            log_level=(data.get("BETRISK_LOG_LEVEL") or fallback.log_level).upper(),
        )

    def validate(self) -> "Config":
        parsed = urlparse(self.api_base)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError("api_base", f"expected an http(s) URL, got {self.api_base!r}")
        if self.transport not in TRANSPORTS:
            raise ConfigurationError(
                "transport",
                f"unknown transport {self.transport!r}; choose from {', '.join(TRANSPORTS)}",
            )
        if self.default_model not in MODEL_NAMES:
            raise ConfigurationError("default_model", f"unknown model {self.default_model!r}")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ConfigurationError("request_timeout", "must be greater than zero")
        return self

    def to_dict(self) -> Dict[str, str]:
        return {k: str(v) for k, v in asdict(self).items()}
