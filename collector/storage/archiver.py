"""Compacts finished months of dated snapshot folders into zip archives."""

import logging
import re
import shutil
import zipfile
from datetime import date
from pathlib import Path

logger = logging.getLogger(__name__)

DAY_DIR_PATTERN = re.compile(r"^(\d{4}-\d{2})-\d{2}$")


def find_archivable_days(output_dir: Path, today: date) -> dict[str, list[Path]]:
    """Group day folders from months before ``today``'s month by YYYY-MM."""
    current_month = today.strftime("%Y-%m")
    groups: dict[str, list[Path]] = {}
    if not output_dir.is_dir():
        return groups
    for child in sorted(output_dir.iterdir()):
        if not child.is_dir():
            continue
        m = DAY_DIR_PATTERN.match(child.name)
        if m is None:
            continue
        month = m.group(1)
        if month >= current_month:
            continue
        groups.setdefault(month, []).append(child)
    return groups


def archive_months(
    output_dir: str | Path, today: date, archive_dir: str = "archives"
) -> list[Path]:
    """Zip every finished month into ``<output_dir>/<archive_dir>/<YYYY-MM>.zip``.

    Existing archives are appended to without duplicating entries. Day
    folders are removed once their month is written, except those holding a
    file that differs from the entry already archived under its name.
    Returns archive paths.
    """
    output_dir = Path(output_dir)
    groups = find_archivable_days(output_dir, today)
    if not groups:
        logger.info("Nothing to archive in %s", output_dir)
        return []

    target_dir = output_dir / archive_dir
    target_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for month, day_dirs in groups.items():
        archive_path = target_dir / f"{month}.zip"
        added = 0
        kept: list[Path] = []
        with zipfile.ZipFile(archive_path, "a", zipfile.ZIP_DEFLATED) as zf:
            existing = set(zf.namelist())
            for day_dir in day_dirs:
                conflicts = 0
                for file in sorted(p for p in day_dir.rglob("*") if p.is_file()):
                    arcname = file.relative_to(output_dir).as_posix()
                    if arcname not in existing:
                        zf.write(file, arcname)
                        added += 1
                    elif zf.read(arcname) != file.read_bytes():
                        logger.warning(
                            "%s differs from the copy in %s; leaving %s in place",
                            file, archive_path, day_dir,
                        )
                        conflicts += 1
                if conflicts:
                    kept.append(day_dir)
        for day_dir in day_dirs:
            if day_dir not in kept:
                shutil.rmtree(day_dir)
        logger.info(
            "Archived %d days (%d files) into %s",
            len(day_dirs) - len(kept), added, archive_path,
        )
        written.append(archive_path)
    return written
