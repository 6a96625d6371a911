from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError
from .fetch_gateway import DEFAULT_PROXY_TEMPLATES, DEFAULT_TIMEOUT_SECONDS, FetchConfig

SOURCE_URL_ENV = "LEADERBOARD_SHEET_URL"
MODES = ("remote", "synthetic")
DEFAULT_REFRESH_MINUTES = 60
DEFAULT_FALLBACK_SIZE = 25


@dataclass
class Config:
    raw: Dict[str, Any]

    @property
    def source(self) -> Dict[str, Any]:
        return self.raw.get("source") or {}

    @property
    def source_url(self) -> Optional[str]:
        return os.getenv(SOURCE_URL_ENV) or self.source.get("url") or None

    @property
    def mode(self) -> str:
        return self.source.get("mode", "remote")

    @property
    def fetch(self) -> FetchConfig:
        fetch = self.raw.get("fetch") or {}
        proxies = fetch.get("proxies")
        if proxies is None:
            proxies = DEFAULT_PROXY_TEMPLATES
        elif not isinstance(proxies, list):
            proxies = [proxies]
        return FetchConfig(
            timeout_seconds=float(fetch.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)),
            proxies=list(proxies),
        )

    @property
    def refresh_interval_seconds(self) -> float:
        refresh = self.raw.get("refresh") or {}
        return float(refresh.get("interval_minutes", DEFAULT_REFRESH_MINUTES)) * 60

    @property
    def fallback_size(self) -> int:
        return int((self.raw.get("fallback") or {}).get("size", DEFAULT_FALLBACK_SIZE))

    @property
    def fallback_seed(self) -> Optional[int]:
        return (self.raw.get("fallback") or {}).get("seed")


def validate_config(cfg: Config) -> Config:
    if cfg.mode not in MODES:
        raise ConfigError(f"source.mode must be one of {', '.join(MODES)}; got {cfg.mode!r}")
    if cfg.mode == "remote" and not cfg.source_url:
        raise ConfigError(f"source.url (or {SOURCE_URL_ENV}) is required in remote mode")
    if cfg.fetch.timeout_seconds <= 0:
        raise ConfigError("fetch.timeout_seconds must be positive")
    if cfg.refresh_interval_seconds <= 0:
        raise ConfigError("refresh.interval_minutes must be positive")
    if cfg.fallback_size <= 0:
        raise ConfigError("fallback.size must be positive")
    bad: List[object] = [
        t for t in cfg.fetch.proxies
        if not isinstance(t, str) or ("{url}" not in t and "{url_encoded}" not in t)
    ]
    if bad:
        raise ConfigError(f"proxy templates need a {{url}} or {{url_encoded}} placeholder: {bad}")
    return cfg


def load_config(path: str = "config.yaml") -> Config:
    raw: Dict[str, Any] = {}
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    return validate_config(Config(raw))
