"""Writes batch snapshots into the dated folder layout."""

import json
import logging
from datetime import datetime
from pathlib import Path

from collector.models.common import format_date, format_last_update
from collector.models.snapshot import Snapshot

logger = logging.getLogger(__name__)

LATEST_NAME = "latest.json"


class SnapshotWriter:
    """Lays out snapshots as ``<root>/<YYYY-MM-DD>/<YYYY-MM-DD_HH_MM_SS>.json``.

    Every write also refreshes ``latest.json`` in the day folder and in the
    root folder.
    """

    def __init__(self, output_dir: str | Path = "weathers"):
        self.output_dir = Path(output_dir)

    def write(self, snapshot: Snapshot, now: datetime) -> Path:
        """Write the snapshot and return the path of the timestamped file."""
        day_dir = self.output_dir / format_date(now)
        day_dir.mkdir(parents=True, exist_ok=True)

        content = json.dumps(snapshot.to_dict(), ensure_ascii=False, indent=2)
        path = day_dir / f"{snapshot_file_stem(now)}.json"
        for target in (path, day_dir / LATEST_NAME, self.output_dir / LATEST_NAME):
            target.write_text(content, encoding="utf-8")

        logger.info(
            "Wrote snapshot with %d cities to %s", len(snapshot.data), path
        )
        return path


def snapshot_file_stem(now: datetime) -> str:
    # "2026-10-19 08:30:00" -> "2026-10-19_08_30_00"
    return format_last_update(now).replace(" ", "_").replace(":", "_")
