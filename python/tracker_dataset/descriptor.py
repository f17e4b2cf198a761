"""Dataset description file (dset.txt).

Written once per run before sampling. The tracker controller reads it to
check that its record layouts match the writer's program version.
"""

import logging
from pathlib import Path

from ._types import DatasetDescriptor
from .errors import DatasetWriteError

logger = logging.getLogger(__name__)

DESCRIPTOR_FILE = "dset.txt"
RUN_STATUS_KEY = "run-status"


def format_descriptor(d: DatasetDescriptor) -> str:
    """Render the ten "key: value" lines of dset.txt."""
    loc = d.location
    lines = [
        f"prgversion: {d.program_version}",
        f"prgrundate: {d.run_date}",
        f"start-date: {d.start_date:%Y%m%d}",
        f"locationlg: {loc.longitude:f}",
        f"locationla: {loc.latitude:f}",
        f"locationtz: {loc.timezone:f}",
        f"mag-declin: {loc.magnetic_declination:f}",
        f"dayfiles-#: {d.day_count}",
        f"daybinsize: {d.sample_record_size} Bytes",
        f"srsbinsize: {d.day_record_size} Bytes",
    ]
    return "\n".join(lines) + "\n"


def write_descriptor(output_dir: Path, descriptor: DatasetDescriptor) -> Path:
    """Write dset.txt into output_dir, replacing any previous one."""
    path = Path(output_dir) / DESCRIPTOR_FILE
    try:
        path.write_text(format_descriptor(descriptor), newline="")
    except OSError as e:
        raise DatasetWriteError(path, "writing", e) from e
    logger.info("Create dataset file [%s]", path)
    return path


def mark_incomplete(output_dir: Path) -> None:
    """Flag the dataset as incomplete after a failed run."""
    path = Path(output_dir) / DESCRIPTOR_FILE
    try:
        with open(path, "a", newline="") as f:
            f.write(f"{RUN_STATUS_KEY}: incomplete\n")
    except OSError:
        logger.exception("Could not mark %s as incomplete", path)


def read_descriptor(path: Path) -> dict[str, str]:
    """Parse a dset.txt file into a key -> value mapping."""
    values = {}
    for line in Path(path).read_text().splitlines():
        if not line.strip():
            continue
        key, _, value = line.partition(":")
        values[key.strip()] = value.strip()
    return values
