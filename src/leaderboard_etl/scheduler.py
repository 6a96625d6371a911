"""Keeps the published leaderboard dataset fresh.

Three triggers reuse the same pipeline (normalize -> fetch -> tokenize ->
detect -> coerce -> order):

* ``load_initial`` falls back to synthetic data when ingestion fails.
* ``refresh`` (timer driven) keeps the previous dataset on failure.
* ``refresh_now`` (on demand) behaves like ``refresh`` and also re-raises
  the failure to the caller.

The dataset slot is only ever replaced by whole-value assignment. Manual and
periodic refreshes are not coalesced; the last one to finish wins.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Union

from .assemble import Dataset, SourceMode, assemble_text
from .config import Config
from .errors import ConfigError, IngestError
from .fallback import synthetic_dataset
from .fetch_gateway import FetchGateway
from .file_import import import_csv_file
from .logging_utils import log_json
from .sheet_url import normalize_sheet_url

FALLBACK_MESSAGE = "Could not reach the spreadsheet. Showing generated data."
AUTO_REFRESH_MESSAGE = "Auto-refresh failed (still showing last data)."
MANUAL_REFRESH_MESSAGE = "Failed to refresh from sheet. Check the URL and sharing settings."
NO_SOURCE_MESSAGE = "No source URL configured."

Listener = Callable[[Dataset], None]


@dataclass(frozen=True)
class Advisory:
    kind: str
    message: str
    detail: Optional[str] = None


class RefreshScheduler:
    def __init__(
        self,
        cfg: Config,
        gateway: Optional[FetchGateway] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.cfg = cfg
        self.logger = logger or logging.getLogger("leaderboard_etl")
        self._owns_gateway = gateway is None
        self.gateway = gateway or FetchGateway(cfg.fetch)
        self.gateway.set_logger(self.logger)
        self._dataset: Optional[Dataset] = None
        self._advisory: Optional[Advisory] = None
        self._task: Optional[asyncio.Task] = None
        self._listeners: List[Listener] = []

    @property
    def dataset(self) -> Optional[Dataset]:
        return self._dataset

    @property
    def advisory(self) -> Optional[Advisory]:
        return self._advisory

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _publish(self, dataset: Dataset, advisory: Optional[Advisory] = None) -> None:
        self._dataset = dataset
        self._advisory = advisory
        log_json(self.logger, "dataset_published", mode=dataset.mode.value, records=len(dataset))
        for listener in self._listeners:
            try:
                listener(dataset)
            except Exception:
                self.logger.exception("listener_failed")

    def _advise(self, kind: str, message: str, exc: BaseException) -> None:
        self._advisory = Advisory(kind=kind, message=message, detail=str(exc))
        log_json(self.logger, "refresh_failed", logging.WARNING, kind=kind, error=str(exc))

    async def ingest(self) -> Dataset:
        """Run the pipeline once without publishing."""
        url = self.cfg.source_url
        if not url:
            raise ConfigError(NO_SOURCE_MESSAGE)
        result = await self.gateway.fetch_text(normalize_sheet_url(url))
        mode = SourceMode.PROXIED if result.proxied else SourceMode.REMOTE
        dataset = assemble_text(result.text, mode)
        log_json(self.logger, "ingest_success", mode=mode.value, records=len(dataset), url=result.url)
        return dataset

    async def load_initial(self) -> Dataset:
        if self.cfg.mode == "synthetic":
            self._publish(synthetic_dataset(self.cfg.fallback_size, self.cfg.fallback_seed))
            return self._dataset
        try:
            dataset = await self.ingest()
        except (IngestError, ConfigError) as exc:
            log_json(self.logger, "fallback_used", logging.WARNING, error=str(exc))
            self._publish(
                synthetic_dataset(self.cfg.fallback_size, self.cfg.fallback_seed),
                Advisory(kind="fallback", message=FALLBACK_MESSAGE, detail=str(exc)),
            )
        else:
            self._publish(dataset)
        return self._dataset

    async def refresh(self) -> bool:
        """Timer-driven refresh. Returns False when the last dataset was kept."""
        try:
            dataset = await self.ingest()
        except (IngestError, ConfigError) as exc:
            self._advise("refresh_failed", AUTO_REFRESH_MESSAGE, exc)
            return False
        self._publish(dataset)
        return True

    async def refresh_now(self) -> Dataset:
        try:
            dataset = await self.ingest()
        except ConfigError as exc:
            self._advise("config", NO_SOURCE_MESSAGE, exc)
            raise
        except IngestError as exc:
            self._advise("manual_refresh_failed", MANUAL_REFRESH_MESSAGE, exc)
            raise
        self._publish(dataset)
        return dataset

    def import_csv(self, path: Union[str, Path]) -> Dataset:
        dataset = import_csv_file(path)
        log_json(self.logger, "csv_import", path=str(path), records=len(dataset))
        self._publish(dataset)
        return dataset

    async def _run_periodic(self) -> None:
        interval = self.cfg.refresh_interval_seconds
        while True:
            await asyncio.sleep(interval)
            await self.refresh()

    async def start(self) -> Dataset:
        """Initial load, then the periodic timer (remote mode only)."""
        dataset = await self.load_initial()
        if self.cfg.mode == "remote" and not self.running:
            self._task = asyncio.create_task(self._run_periodic())
        log_json(self.logger, "scheduler_started", mode=self.cfg.mode, interval=self.cfg.refresh_interval_seconds)
        return dataset

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self._owns_gateway:
            await self.gateway.close()
        log_json(self.logger, "scheduler_stopped")
