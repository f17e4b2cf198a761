"""Output folder preparation and file rotation.

Daily files (yyyymmdd.csv / yyyymmdd.bin) are always created fresh.
Yearly sunrise/sunset files (srs-yyyy.csv / srs-yyyy.bin) are created when
absent and appended to otherwise, so runs spanning or repeating a year
accumulate in them.
"""

import datetime
import logging
from enum import StrEnum
from pathlib import Path
from typing import IO

from .errors import DatasetWriteError

logger = logging.getLogger(__name__)


class FileKind(StrEnum):
    CSV = "csv"
    BIN = "bin"


def daily_name(day: datetime.date, kind: FileKind) -> str:
    """yyyymmdd.csv or yyyymmdd.bin."""
    return f"{day:%Y%m%d}.{kind}"


def yearly_name(year: int, kind: FileKind) -> str:
    """srs-yyyy.csv or srs-yyyy.bin."""
    return f"srs-{year:04d}.{kind}"


def prepare_output_dir(path: Path, clean: bool = True) -> Path:
    """Create the output folder, or delete old dataset files from it."""
    path = Path(path)
    try:
        if not path.exists():
            path.mkdir(parents=True)
            logger.info("Created new output folder [%s]", path)
        elif clean:
            logger.debug("Found output folder [%s], overwriting data.", path)
            for entry in path.iterdir():
                if entry.is_file():
                    logger.debug("delete old dataset file %s", entry)
                    entry.unlink()
    except OSError as e:
        raise DatasetWriteError(path, "preparing", e) from e
    return path


def _open(path: Path, mode: str, action: str) -> IO:
    """Open a dataset file, wrapping OSError in DatasetWriteError."""
    try:
        if "b" in mode:
            return open(path, mode)
        return open(path, mode, newline="")
    except OSError as e:
        raise DatasetWriteError(path, action, e) from e


class FileRotator:
    """Owns the four open output handles of a run.

    Use as a context manager: every handle is closed on exit, including
    when a write fails.
    """

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.daily: dict[FileKind, IO] = {}
        self.yearly: dict[FileKind, IO] = {}
        self.years: dict[FileKind, int] = {}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def open_or_append_yearly(self, kind: FileKind, year: int) -> IO:
        """Return the yearly file handle, rotating it on a year change."""
        handle = self.yearly.get(kind)
        if handle is not None and self.years[kind] == year:
            return handle
        if handle is not None:
            handle.close()
        path = self.output_dir / yearly_name(year, kind)
        mode = "b" if kind is FileKind.BIN else ""
        if path.exists():
            handle = _open(path, "a" + mode, "appending")
            logger.info("Update srs %s file [%s]", kind, path)
        else:
            handle = _open(path, "w" + mode, "writing")
            logger.info("Create srs %s file [%s]", kind, path)
        self.yearly[kind] = handle
        self.years[kind] = year
        return handle

    def create_daily(self, kind: FileKind, day: datetime.date) -> IO:
        """Open a fresh daily file, closing the previous day's handle."""
        previous = self.daily.pop(kind, None)
        if previous is not None:
            previous.close()
        path = self.output_dir / daily_name(day, kind)
        mode = "wb" if kind is FileKind.BIN else "w"
        handle = _open(path, mode, "writing")
        logger.info("Create day %s file [%s]", kind, path)
        self.daily[kind] = handle
        return handle

    def close_daily(self):
        """Close both daily handles."""
        for handle in self.daily.values():
            handle.close()
        self.daily.clear()

    def close(self):
        """Close every open handle; safe to call twice."""
        self.close_daily()
        for handle in self.yearly.values():
            handle.close()
        self.yearly.clear()
        self.years.clear()

    def write(self, handle: IO, data):
        """Write one record and flush it."""
        try:
            handle.write(data)
            handle.flush()
        except OSError as e:
            raise DatasetWriteError(handle.name, "writing", e) from e
