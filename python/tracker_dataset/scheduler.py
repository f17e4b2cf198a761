"""Fixed-interval sampling loop that writes a tracker dataset.

A cursor walks the [start, end) range in interval steps, one oracle call
per tick. The first tick of each calendar day extracts that day's sun
events, appends them to the yearly srs files and rotates the daily files;
every tick then appends one sample to the daily files.
"""

import datetime
import logging
from enum import StrEnum
from typing import Iterator

from ._types import DatasetDescriptor, DayEvents, RunConfig, RunSummary, SampleRecord
from .descriptor import mark_incomplete, write_descriptor
from .encoding import (
    DAY_RECORD_SIZE,
    SAMPLE_RECORD_SIZE,
    day_events_to_bytes,
    day_events_to_csv,
    sample_to_bytes,
    sample_to_csv,
)
from .errors import DatasetWriteError
from .events import extract_day_events, is_daylight
from .files import FileKind, FileRotator, prepare_output_dir
from .oracle import SunOracle, SunOracleAdapter
from .periods import day_count, resolve_period

logger = logging.getLogger(__name__)

# Must match the tracker controller's reader version.
PROGRAM_VERSION = "1.2"
RUN_DATE_FORMAT = "%a %Y-%m-%d"


class SchedulerState(StrEnum):
    AWAITING_FIRST_TICK = "awaiting-first-tick"
    SAMPLING = "sampling"
    DAY_BOUNDARY = "day-boundary"
    DONE = "done"


class SampleScheduler:
    """Walks a period tick by tick, writing samples and day records."""

    def __init__(
        self,
        config: RunConfig,
        start: datetime.datetime,
        end: datetime.datetime,
        adapter: SunOracleAdapter,
        rotator: FileRotator,
    ):
        self.config = config
        self.start = start
        self.end = end
        self.adapter = adapter
        self.rotator = rotator
        self.state = SchedulerState.AWAITING_FIRST_TICK
        self.current_day: datetime.date | None = None
        self.events: DayEvents | None = None
        self.days_written = 0
        self.samples_written = 0

    def ticks(self) -> Iterator[datetime.datetime]:
        """Local sample instants from start up to, not including, end."""
        step = datetime.timedelta(seconds=self.config.interval)
        cursor = self.start
        while cursor < self.end:
            yield cursor
            cursor += step

    def is_day_boundary(self, cursor: datetime.datetime) -> bool:
        """True when cursor falls on a new calendar day."""
        return cursor.date() != self.current_day

    def start_day(self, cursor: datetime.datetime, position) -> None:
        """Write the day's srs records and open its daily files."""
        self.state = SchedulerState.DAY_BOUNDARY
        day = cursor.date()
        self.rotator.close_daily()

        events = extract_day_events(self.adapter, day, position)
        logger.debug(
            "sunrise %02d:%02d:%02d az %d, transit %02d:%02d elevation %d, "
            "sunset %02d:%02d:%02d az %d",
            events.sunrise.hour, events.sunrise.minute, events.sunrise.second,
            events.sunrise_azimuth,
            events.transit.hour, events.transit.minute, events.transit_elevation,
            events.sunset.hour, events.sunset.minute, events.sunset.second,
            events.sunset_azimuth,
        )

        srs_csv = self.rotator.open_or_append_yearly(FileKind.CSV, day.year)
        srs_bin = self.rotator.open_or_append_yearly(FileKind.BIN, day.year)
        self.rotator.write(srs_csv, day_events_to_csv(events))
        self.rotator.write(srs_bin, day_events_to_bytes(events))

        self.rotator.create_daily(FileKind.CSV, day)
        self.rotator.create_daily(FileKind.BIN, day)

        self.current_day = day
        self.events = events
        self.days_written += 1

    def tick(self, cursor: datetime.datetime) -> SampleRecord:
        """Compute and write one sample."""
        position = self.adapter.position_for(cursor)
        if self.is_day_boundary(cursor):
            self.start_day(cursor, position)
        self.state = SchedulerState.SAMPLING

        record = SampleRecord(
            hour=cursor.hour,
            minute=cursor.minute,
            daylight=is_daylight(self.events, cursor, position.zenith),
            azimuth=position.azimuth,
            zenith=position.zenith,
        )
        logger.debug(
            "calc data set [%s] Z[%07.3f] A[%07.3f] DF[%d]",
            cursor.strftime("%Y-%m-%d %H:%M:%S"),
            record.zenith, record.azimuth, record.daylight,
        )
        self.rotator.write(self.rotator.daily[FileKind.CSV], sample_to_csv(record))
        self.rotator.write(self.rotator.daily[FileKind.BIN], sample_to_bytes(record))
        self.samples_written += 1
        return record

    def run(self) -> None:
        """Sample every tick of the period."""
        for cursor in self.ticks():
            self.tick(cursor)
        self.rotator.close_daily()
        self.state = SchedulerState.DONE


def generate_dataset(
    config: RunConfig,
    today: datetime.date | None = None,
    oracle: SunOracle | None = None,
    now: datetime.datetime | None = None,
) -> RunSummary:
    """Generate the daily and yearly files of a dataset into config.output_dir.

    today defaults to the current date at the configured location. The
    output folder is created if missing but not cleaned.
    """
    tz = config.location.tzinfo
    now = now if now is not None else datetime.datetime.now(tz)
    today = today if today is not None else now.date()
    start, end = resolve_period(config.period, today, tz)
    days = day_count(start, end)
    logger.debug("Data set start [%s]", start.strftime("%Y-%m-%d %H:%M:%S"))
    logger.debug("Data set end   [%s]", end.strftime("%Y-%m-%d %H:%M:%S"))
    logger.debug("data days/rows [%d/%d]", days, config.samples_per_day)

    output_dir = prepare_output_dir(config.output_dir, clean=False)
    write_descriptor(
        output_dir,
        DatasetDescriptor(
            program_version=PROGRAM_VERSION,
            run_date=now.strftime(RUN_DATE_FORMAT),
            start_date=start.date(),
            location=config.location,
            day_count=days,
            sample_record_size=SAMPLE_RECORD_SIZE,
            day_record_size=DAY_RECORD_SIZE,
        ),
    )

    adapter = SunOracleAdapter(config, oracle)
    try:
        with FileRotator(output_dir) as rotator:
            scheduler = SampleScheduler(config, start, end, adapter, rotator)
            scheduler.run()
    except DatasetWriteError:
        mark_incomplete(output_dir)
        raise

    summary = RunSummary(
        start=start,
        end=end,
        day_count=scheduler.days_written,
        samples_written=scheduler.samples_written,
        oracle_errors=len(adapter.errors),
        output_dir=output_dir,
    )
    logger.info(
        "Wrote %d samples over %d days into [%s], %d oracle errors",
        summary.samples_written, summary.day_count, output_dir, summary.oracle_errors,
    )
    return summary
