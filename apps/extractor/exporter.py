"""
Exporter - Write Collected Entries to Disk

Writes the complete, ordered entry collection to a file. The format follows
the destination suffix:
- .jsonl: one JSON object per line (orjson)
- anything else: CSV with a header row of Entry field names, in model order

Output is written to a temporary file next to the destination and renamed
into place only once every row has been written, so a failed export never
leaves a partial file behind.

Usage:
    from apps.extractor.exporter import export_entries

    path = export_entries(entries, settings.CSV_PATH)
"""

import csv
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, Optional, TextIO

import orjson
from pydantic import ValidationError

from utils.errors import ExportError
from utils.schemas import ENTRY_FIELDS, Entry

logger = logging.getLogger(__name__)


def _write_csv(entries: Iterable[Entry], f: TextIO) -> int:
    writer = csv.DictWriter(f, fieldnames=ENTRY_FIELDS)
    writer.writeheader()
    written = 0
    for entry in entries:
        writer.writerow(entry.model_dump(mode="json"))
        written += 1
    return written


def _write_jsonl(entries: Iterable[Entry], f: TextIO) -> int:
    written = 0
    for entry in entries:
        f.write(orjson.dumps(entry.model_dump(mode="json")).decode("utf-8") + "\n")
        written += 1
    return written


def _output_mode(destination: Path) -> int:
    """Mode for the exported file: keep an existing file's mode, else 0o666 minus the umask."""
    try:
        return stat.S_IMODE(destination.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def export_entries(entries: Iterable[Entry], destination: Optional[Path]) -> Optional[Path]:
    """
    Write entries to `destination`.

    Args:
        entries: Entries in export order
        destination: Output file; None skips the export

    Returns:
        The written path, or None when skipped

    Raises:
        ExportError: If the file cannot be written
    """
    if destination is None:
        logger.info("No output destination configured, skipping export")
        return None

    destination = Path(destination)
    write = _write_jsonl if destination.suffix.lower() == ".jsonl" else _write_csv

    tmp_path: Optional[Path] = None
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            dir=destination.parent,
            prefix=f".{destination.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            written = write(entries, f)

        # NamedTemporaryFile creates 0o600
        os.chmod(tmp_path, _output_mode(destination))
        os.replace(tmp_path, destination)
        tmp_path = None

    except (OSError, csv.Error, UnicodeError, orjson.JSONEncodeError) as e:
        raise ExportError(f"Failed to write {destination}: {e}", path=destination) from e

    finally:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)

    logger.info("Entries written to file %s (rows=%d)", str(destination), written)
    return destination


def read_csv_entries(path: Path) -> list[Entry]:
    """
    Parse a CSV export back into entries.

    Raises:
        ValueError: If a row does not form a valid Entry
    """
    entries: list[Entry] = []

    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row_num, row in enumerate(reader, 2):  # Start at 2 for header line
            try:
                row["disasterNumber"] = int(row["disasterNumber"])
                entries.append(Entry.model_validate(row))
            except (KeyError, TypeError, ValueError, ValidationError) as e:
                raise ValueError(f"Invalid entry at {path}:{row_num}: {e}") from e

    return entries
