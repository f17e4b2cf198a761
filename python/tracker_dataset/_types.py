"""Frozen dataclasses for all structured values of a dataset run."""

import datetime
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from .errors import InvalidInterval, InvalidPeriod

SECONDS_PER_DAY = 86400
MIN_INTERVAL = 60
MAX_INTERVAL = 3600


class Period(StrEnum):
    NEXT_DAY = "nd"
    NEXT_MONTH = "nm"
    NEXT_QUARTER = "nq"
    NEXT_YEAR = "ny"
    THIS_DAY = "td"
    THIS_MONTH = "tm"
    THIS_QUARTER = "tq"
    THIS_YEAR = "ty"
    TWO_YEARS = "2y"
    TEN_YEARS = "tf"


def parse_period(code) -> Period:
    """Coerce a period code string into a Period, raising InvalidPeriod."""
    try:
        return Period(code)
    except ValueError:
        raise InvalidPeriod(code) from None


def check_interval(interval: int) -> int:
    """Return interval if it splits a day into whole samples, else raise."""
    if isinstance(interval, bool) or not isinstance(interval, int):
        raise InvalidInterval(interval, "must be an integer number of seconds")
    if interval < MIN_INTERVAL or interval > MAX_INTERVAL:
        raise InvalidInterval(
            interval, f"valid range is {MIN_INTERVAL} to {MAX_INTERVAL} seconds"
        )
    if SECONDS_PER_DAY % interval != 0:
        raise InvalidInterval(interval, f"must divide {SECONDS_PER_DAY} (1 day)")
    return interval


@dataclass(frozen=True)
class Location:
    longitude: float = 139.628999
    latitude: float = 35.610381
    timezone: float = 9.0
    elevation: float = 1000.0
    pressure: float = 1000.0
    temperature: float = 19.0
    slope: float = 0.0
    azimuth_rotation: float = 0.0
    atmospheric_refraction: float = 0.5667
    magnetic_declination: float = -7.583

    def __post_init__(self):
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Invalid longitude: {self.longitude}")
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Invalid latitude: {self.latitude}")
        if not -11.0 <= self.timezone <= 11.0:
            raise ValueError(f"Invalid timezone offset: {self.timezone}")

    @property
    def tzinfo(self) -> datetime.timezone:
        """Fixed-offset timezone of the location."""
        return datetime.timezone(datetime.timedelta(hours=self.timezone))


@dataclass(frozen=True)
class RunConfig:
    location: Location = field(default_factory=Location)
    interval: int = 60
    period: Period = Period.NEXT_DAY
    output_dir: Path = Path("./tracker-data")
    delta_ut1: float = 0.0
    delta_t: float = 67.0

    def __post_init__(self):
        check_interval(self.interval)
        # frozen: normalize through object.__setattr__
        object.__setattr__(self, "period", parse_period(self.period))
        object.__setattr__(self, "output_dir", Path(self.output_dir))

    @property
    def samples_per_day(self) -> int:
        """Number of ticks in one day."""
        return SECONDS_PER_DAY // self.interval


@dataclass(frozen=True)
class SunRequest:
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: float
    timezone: float
    delta_ut1: float
    delta_t: float
    longitude: float
    latitude: float
    elevation: float
    pressure: float
    temperature: float
    slope: float
    azimuth_rotation: float
    atmospheric_refraction: float


@dataclass(frozen=True)
class SunPosition:
    azimuth: float
    zenith: float
    sunrise: float
    transit: float
    sunset: float


@dataclass(frozen=True)
class EventTime:
    hour: int
    minute: int
    second: int
    present: bool = True


@dataclass(frozen=True)
class DayEvents:
    date: datetime.date
    sunrise: EventTime
    sunrise_azimuth: int
    transit: EventTime
    transit_elevation: int
    sunset: EventTime
    sunset_azimuth: int


@dataclass(frozen=True)
class SampleRecord:
    hour: int
    minute: int
    daylight: bool
    azimuth: float
    zenith: float


@dataclass(frozen=True)
class DatasetDescriptor:
    program_version: str
    run_date: str
    start_date: datetime.date
    location: Location
    day_count: int
    sample_record_size: int
    day_record_size: int


@dataclass(frozen=True)
class RunSummary:
    start: datetime.datetime
    end: datetime.datetime
    day_count: int
    samples_written: int
    oracle_errors: int
    output_dir: Path
