"""
SDK configuration: proxy endpoint, timeouts, polling cadence and network
constants.

- Loads sane defaults and supports overrides via environment variables (ERD_*).
- Provides helpers for building HTTP headers and validating endpoints.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .version import user_agent

_DEFAULT_PROXY = "http://localhost:7950"
_DEFAULT_HRP = "erd"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None and v != "" else default


def _ensure_scheme(url: Optional[str], allowed: tuple[str, ...]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url


def _positive(name: str, value: float) -> float:
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return value


@dataclass(slots=True)
class SDKConfig:
    # Node API
    proxy_url: str = _DEFAULT_PROXY
    request_timeout: float = 10.0
    # Transaction tracking
    poll_interval: float = 5.0
    # Network constants
    num_shards: int = 3
    hrp: str = _DEFAULT_HRP
    decimals: int = 18
    # Ambient
    log_level: str = "INFO"
    user_agent: str = field(default_factory=user_agent)

    def __post_init__(self) -> None:
        _ensure_scheme(self.proxy_url, ("http", "https"))
        _positive("request_timeout", float(self.request_timeout))
        if float(self.poll_interval) < 0:
            raise ValueError("poll_interval must be non-negative")
        if int(self.num_shards) < 1:
            raise ValueError("num_shards must be at least 1")
        if int(self.decimals) < 0:
            raise ValueError("decimals must be non-negative")
        self.log_level = str(self.log_level).upper()
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}")

    @classmethod
    def from_env(cls, prefix: str = "ERD_") -> "SDKConfig":
        """
        Create config from environment variables:

        ERD_PROXY_URL       (http/https)
        ERD_TIMEOUT         (float seconds, HTTP)
        ERD_POLL_INTERVAL   (float seconds between transaction status polls)
        ERD_NUM_SHARDS      (int)
        ERD_HRP             (bech32 human-readable prefix)
        ERD_DECIMALS        (int, decimals of the native token)
        ERD_LOG_LEVEL       (DEBUG/INFO/WARNING/ERROR)
        ERD_USER_AGENT      (str)
        """
        return cls(
            proxy_url=_env(f"{prefix}PROXY_URL", _DEFAULT_PROXY) or _DEFAULT_PROXY,
            request_timeout=float(_env(f"{prefix}TIMEOUT", "10.0")),
            poll_interval=float(_env(f"{prefix}POLL_INTERVAL", "5.0")),
            num_shards=int(_env(f"{prefix}NUM_SHARDS", "3")),
            hrp=_env(f"{prefix}HRP", _DEFAULT_HRP) or _DEFAULT_HRP,
            decimals=int(_env(f"{prefix}DECIMALS", "18")),
            log_level=_env(f"{prefix}LOG_LEVEL", "INFO") or "INFO",
            user_agent=_env(f"{prefix}USER_AGENT", user_agent()) or user_agent(),
        )

    @classmethod
    def with_overrides(
        cls, base: Optional["SDKConfig"] = None, **overrides: Any
    ) -> "SDKConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys and `None` values are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data and v is not None})
        return cls(**data)

    def http_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "proxy_url": self.proxy_url,
            "request_timeout": float(self.request_timeout),
            "poll_interval": float(self.poll_interval),
            "num_shards": int(self.num_shards),
            "hrp": self.hrp,
            "decimals": int(self.decimals),
            "log_level": self.log_level,
            "user_agent": self.user_agent,
        }


__all__ = ["SDKConfig"]
