from __future__ import annotations

import argparse
import asyncio
import json
import signal
import sys
from typing import List, Optional

from .config import load_config
from .errors import ConfigError, IngestError
from .file_import import import_csv_file
from .logging_utils import log_json, setup_logging
from .media_import import import_media_file
from .scheduler import RefreshScheduler
from .sheet_url import normalize_sheet_url


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="leaderboard_etl")
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    parser.add_argument("--log-level", default="INFO")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("fetch", help="Run the pipeline once and print the dataset as JSON")
    sub.add_parser("watch", help="Initial load plus periodic refresh until interrupted")

    import_csv = sub.add_parser("import-csv")
    import_csv.add_argument("path")

    import_media = sub.add_parser("import-media")
    import_media.add_argument("path")

    normalize = sub.add_parser("normalize-url")
    normalize.add_argument("url")

    return parser.parse_args(argv)


def _emit(payload) -> None:
    json.dump(payload, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


async def _fetch(scheduler: RefreshScheduler) -> int:
    try:
        if scheduler.cfg.mode == "synthetic":
            dataset = await scheduler.load_initial()
        else:
            dataset = await scheduler.refresh_now()
    except (IngestError, ConfigError) as exc:
        log_json(scheduler.logger, "ingest_failed", error=str(exc))
        return 1
    finally:
        await scheduler.stop()
    _emit(dataset.to_dict())
    return 0


async def _watch(scheduler: RefreshScheduler) -> int:
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            pass
    scheduler.subscribe(lambda ds: _emit(ds.to_dict()))
    try:
        await scheduler.start()
        if scheduler.advisory:
            log_json(scheduler.logger, "advisory", kind=scheduler.advisory.kind, message=scheduler.advisory.message)
        await stop.wait()
    finally:
        await scheduler.stop()
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    logger = setup_logging(args.log_level)

    if args.command == "normalize-url":
        print(normalize_sheet_url(args.url))
        return

    if args.command == "import-csv":
        try:
            dataset = import_csv_file(args.path)
        except IngestError as exc:
            log_json(logger, "csv_import", error=str(exc))
            sys.exit(1)
        log_json(logger, "csv_import", path=args.path, records=len(dataset))
        _emit(dataset.to_dict())
        return

    if args.command == "import-media":
        try:
            items = import_media_file(args.path)
        except IngestError as exc:
            log_json(logger, "media_import", error=str(exc))
            sys.exit(1)
        log_json(logger, "media_import", path=args.path, items=len(items))
        _emit([item.to_dict() for item in items])
        return

    try:
        cfg = load_config(args.config)
    except ConfigError as exc:
        logger.error(str(exc))
        sys.exit(2)
    scheduler = RefreshScheduler(cfg, logger=logger)
    if args.command == "fetch":
        sys.exit(asyncio.run(_fetch(scheduler)))
    sys.exit(asyncio.run(_watch(scheduler)))
