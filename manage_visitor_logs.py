#!/usr/bin/env python3
"""
Visitor log management script.

Lists, summarizes, exports and clears the visitor log held by the
configured storage backend.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from config_manager import ConfigManager
from visitor_log.errors import StorageUnavailable
from visitor_log.event_log_store import EventLogStore
from visitor_log.stats_aggregator import StatsAggregator
from visitor_log.storage import create_storage

# Set up logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).parent


def build_store(config_manager: ConfigManager, backend: Optional[str] = None) -> EventLogStore:
    """Create an EventLogStore for the configured (or overridden) backend."""
    storage_config = config_manager.get_storage_config()
    log_config = config_manager.get_visitor_log_config()
    # Relative log paths are anchored at the project root
    file_path = Path(storage_config.file_path)
    if not file_path.is_absolute():
        file_path = BASE_DIR / file_path
    storage = create_storage(
        backend or storage_config.backend,
        file_path=file_path,
        redis_url=storage_config.redis_url,
        timeout_seconds=storage_config.timeout_seconds,
    )
    return EventLogStore(
        storage,
        max_logs=log_config.max_logs,
        search_window=log_config.search_window,
        logs_key=log_config.logs_key,
    )


def export_logs(store: EventLogStore, output: Path) -> int:
    """Write the whole log to ``output`` as a JSON array; returns the entry count."""
    events = store.read_all()
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(
        json.dumps([event.to_dict() for event in events], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    logger.info(f"Exported {len(events)} entries to {output}")
    return len(events)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Visitor log management script")
    parser.add_argument("--config", default="visitor_log_config.json",
                        help="Configuration file")
    parser.add_argument("--backend", choices=["file", "redis"],
                        help="Override the configured storage backend")
    parser.add_argument("--list", action="store_true",
                        help="Print logged visits, most recent first")
    parser.add_argument("--limit", type=int, default=None,
                        help="Maximum number of visits to print with --list")
    parser.add_argument("--stats", action="store_true",
                        help="Print summary statistics")
    parser.add_argument("--export", type=Path,
                        help="Write the log to a JSON file")
    parser.add_argument("--clear", action="store_true",
                        help="Delete every logged visit")

    args = parser.parse_args(argv)
    store = build_store(ConfigManager(args.config), args.backend)

    try:
        if args.list:
            events = store.read_all()
            if args.limit is not None:
                events = events[:args.limit]
            print(json.dumps([e.to_dict() for e in events], indent=2, ensure_ascii=False))

        if args.stats:
            stats = StatsAggregator().summarize(store.read_all())
            print(json.dumps(stats.to_dict(), indent=2, ensure_ascii=False))

        if args.export:
            export_logs(store, args.export)

        if args.clear:
            store.clear()
            logger.info("Visitor log cleared")
    except StorageUnavailable as exc:
        logger.error(f"Storage unavailable: {exc}")
        return 1

    if not (args.list or args.stats or args.export or args.clear):
        parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
