"""CLI entry point for the weather collector."""

import argparse
import json
import logging

from collector.config.loader import get_config_value, load_config, set_config_value
from collector.config.schema import CollectorConfig, FailurePolicy
from collector.ingest.errors import CityDirectoryError, RetryExhaustedError
from collector.models.common import local_now
from collector.models.snapshot import CityEntry, CityRecord
from collector.pipeline.collect_pipeline import CollectPipeline
from collector.reporting.formatters import format_summary_json
from collector.storage.archiver import archive_months

DEFAULT_CONFIG = "ops/configs/default.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="weather-collector",
        description="Collect weather.com.cn realtime and forecast snapshots",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument(
        "--output-dir", default=None, help="Override storage.output_dir"
    )

    sub = parser.add_subparsers(dest="command")

    # collect
    collect_p = sub.add_parser("collect", help="Run one collection batch")
    collect_p.add_argument(
        "--abort-on-error",
        action="store_true",
        help="Fail the run on the first city that exhausts its retries",
    )
    collect_p.add_argument(
        "--archive", action="store_true", help="Archive finished months afterwards"
    )
    collect_p.add_argument(
        "--json", action="store_true", help="Print the run summary as JSON"
    )

    # fetch
    fetch_p = sub.add_parser("fetch", help="Fetch a single location id")
    fetch_p.add_argument("location_id", help="weather.com.cn location id")

    # cities
    sub.add_parser("cities", help="List the cities a run would collect")

    # archive
    sub.add_parser("archive", help="Compact finished months into zip archives")

    # config show / config set
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    set_p = config_sub.add_parser("set", help="Set a config value")
    set_p.add_argument("keyvalue", help="key=value to set")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.output_dir:
        config = set_config_value(config, "storage.output_dir", args.output_dir)

    if args.command == "collect":
        return _cmd_collect(config, args)
    elif args.command == "fetch":
        return _cmd_fetch(config, args)
    elif args.command == "cities":
        return _cmd_cities(config)
    elif args.command == "archive":
        return _cmd_archive(config)
    elif args.command == "config":
        return _cmd_config(config, args)
    else:
        parser.print_help()
        return 1


def _cmd_collect(config: CollectorConfig, args) -> int:
    if args.abort_on_error:
        config = set_config_value(
            config, "batch.failure_policy", FailurePolicy.ABORT.value
        )
    pipeline = CollectPipeline(config)
    summary = pipeline.run(archive=args.archive)
    if args.json:
        print(format_summary_json(summary))
        return 0 if not summary.errors else 1
    if summary.snapshot_path:
        print(f"Snapshot: {summary.snapshot_path}")
    print(
        f"Cities: {summary.cities_complete}/{summary.cities_total} complete, "
        f"{summary.cities_failed} failed"
    )
    return 0 if not summary.errors else 1


def _cmd_fetch(config: CollectorConfig, args) -> int:
    location_id = args.location_id
    known = {c.id: c for c in config.cities}
    entry = known.get(location_id)
    record = CityRecord.from_entry(
        CityEntry(
            id=location_id,
            province=entry.province if entry else "",
            city=entry.city if entry else "",
        )
    )
    pipeline = CollectPipeline(config)
    try:
        pipeline.fetch_city(record)
    except RetryExhaustedError as e:
        print(f"Error: {e}")
        return 1
    print(json.dumps(record.to_dict(), ensure_ascii=False, indent=2))
    return 0


def _cmd_cities(config: CollectorConfig) -> int:
    pipeline = CollectPipeline(config)
    try:
        cities = pipeline.load_cities()
    except CityDirectoryError as e:
        print(f"Error: {e}")
        return 1
    for c in cities:
        print(f"{c.id}\t{c.province}\t{c.city}")
    print(f"{len(cities)} cities")
    return 0


def _cmd_archive(config: CollectorConfig) -> int:
    storage = config.storage
    today = local_now(storage.timezone).date()
    written = archive_months(storage.output_dir, today, storage.archive_dir)
    for path in written:
        print(f"Archived: {path}")
    if not written:
        print("Nothing to archive")
    return 0


def _cmd_config(config: CollectorConfig, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "set":
        kv = args.keyvalue
        if "=" not in kv:
            print("Error: use key=value format")
            return 1
        key, value = kv.split("=", 1)
        try:
            new_config = set_config_value(config, key.strip(), value.strip())
            print(f"Set {key} = {get_config_value(new_config, key.strip())}")
            return 0
        except Exception as e:
            print(f"Error: {e}")
            return 1
    else:
        print("Use: config show | config set key=value")
        return 1
