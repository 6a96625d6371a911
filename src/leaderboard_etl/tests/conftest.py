"""Shared fixtures for the leaderboard_etl test suite.

The network is never touched: gateways are built on ``httpx.MockTransport``
with per-test handlers.
"""

from __future__ import annotations

import logging
import textwrap
from typing import Callable

import httpx
import pytest

from leaderboard_etl.config import Config
from leaderboard_etl.fetch_gateway import FetchConfig, FetchGateway

SHEET_URL = "https://docs.google.com/spreadsheets/d/abc123/edit#gid=42"


@pytest.fixture(autouse=True)
def _no_source_env(monkeypatch):
    monkeypatch.delenv("LEADERBOARD_SHEET_URL", raising=False)


@pytest.fixture()
def sample_csv() -> str:
    return textwrap.dedent("""\
        rank,username,wagered
        1,alice,1000
        2,bob,500
    """)


@pytest.fixture()
def sample_config() -> Config:
    """Remote-mode config with fast timeouts and two relay templates."""
    return Config({
        "source": {"url": SHEET_URL, "mode": "remote"},
        "fetch": {
            "timeout_seconds": 2,
            "proxies": [
                "https://relay-one.test/{url}",
                "https://relay-two.test/raw?url={url_encoded}",
            ],
        },
        "refresh": {"interval_minutes": 60},
        "fallback": {"size": 3, "seed": 7},
    })


@pytest.fixture()
def quiet_logger() -> logging.Logger:
    logger = logging.getLogger("leaderboard_etl.tests")
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


@pytest.fixture()
def make_gateway() -> Callable[..., FetchGateway]:
    """Factory: ``make_gateway(handler, cfg=None)`` -> gateway on a mock transport."""

    def _make(handler, cfg: FetchConfig | None = None) -> FetchGateway:
        cfg = cfg or FetchConfig(
            timeout_seconds=2,
            proxies=["https://relay-one.test/{url}", "https://relay-two.test/raw?url={url_encoded}"],
        )
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return FetchGateway(cfg, client=client)

    return _make
