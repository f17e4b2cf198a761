"""Daily sunrise, transit and sunset extraction.

The oracle reports the day's events as fractional local hours. These are
split into truncated (hour, minute, second) times, then the oracle is
queried again at those exact times for the sunrise/sunset azimuth and the
transit (solar noon) elevation.
"""

import datetime
import math

from ._types import DayEvents, EventTime, SunPosition
from .oracle import SunOracleAdapter, truncate_fractional_hour

ABSENT_EVENT = EventTime(hour=0, minute=0, second=0, present=False)
LAST_SECOND_OF_DAY = EventTime(hour=23, minute=59, second=59)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (C round())."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def split_fractional_hour(value: float) -> EventTime:
    """Truncate a fractional hour into (hour, minute, second).

    5.75 -> 05:45:00. Non-finite values give an absent event; values
    outside the day are clamped to 00:00:00 or 23:59:59.
    """
    if not math.isfinite(value):
        return ABSENT_EVENT
    if value < 0.0:
        return EventTime(hour=0, minute=0, second=0)
    if value >= 24.0:
        return LAST_SECOND_OF_DAY
    hour, minute, second = truncate_fractional_hour(value)
    return EventTime(hour=hour, minute=minute, second=second)


def event_instant(
    day: datetime.date, event: EventTime, tzinfo: datetime.tzinfo
) -> datetime.datetime | None:
    """Local datetime of an event on day, or None if it is absent."""
    if not event.present:
        return None
    return datetime.datetime(
        day.year, day.month, day.day, event.hour, event.minute, event.second,
        tzinfo=tzinfo,
    )


def _azimuth_degrees(azimuth: float) -> int:
    """Whole-degree azimuth in 0..359, 0 if undefined."""
    if not math.isfinite(azimuth):
        return 0
    return round_half_away(azimuth) % 360


def _elevation_degrees(zenith: float) -> int:
    """Whole-degree elevation 90 - round(zenith), 0 if undefined."""
    if not math.isfinite(zenith):
        return 0
    elevation = 90 - round_half_away(zenith)
    return max(-90, min(90, elevation))


def extract_day_events(
    adapter: SunOracleAdapter, day: datetime.date, position: SunPosition
) -> DayEvents:
    """Build the day's event record from its first sample's oracle result."""
    sunrise = split_fractional_hour(position.sunrise)
    transit = split_fractional_hour(position.transit)
    sunset = split_fractional_hour(position.sunset)

    def angle_at(event: EventTime, convert):
        if not event.present:
            return 0
        pos = adapter.position_at(day, event.hour, event.minute, event.second)
        return convert(pos)

    return DayEvents(
        date=day,
        sunrise=sunrise,
        sunrise_azimuth=angle_at(sunrise, lambda p: _azimuth_degrees(p.azimuth)),
        transit=transit,
        transit_elevation=angle_at(transit, lambda p: _elevation_degrees(p.zenith)),
        sunset=sunset,
        sunset_azimuth=angle_at(sunset, lambda p: _azimuth_degrees(p.azimuth)),
    )


def is_daylight(
    events: DayEvents,
    when: datetime.datetime,
    zenith: float,
) -> bool:
    """Classify a sample as daylight: sunrise <= when <= sunset.

    Without a sunrise or sunset (polar day or night) the sample's own
    zenith decides.
    """
    rise = event_instant(events.date, events.sunrise, when.tzinfo)
    set_ = event_instant(events.date, events.sunset, when.tzinfo)
    if rise is None or set_ is None:
        return math.isfinite(zenith) and zenith <= 90.0
    return rise <= when <= set_
