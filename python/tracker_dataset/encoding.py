"""CSV and fixed-width binary encodings of sample and day-event records.

Binary records are little-endian with no padding, parsed by the tracker
controller at fixed offsets:

  sample (19 bytes): hour u8, minute u8, daylight u8,
                     azimuth f64, zenith f64
  day (14 bytes):    month u8, day u8,
                     rise hour u8, rise minute u8, rise azimuth u16,
                     transit hour u8, transit minute u8, transit elevation i16,
                     set hour u8, set minute u8, set azimuth u16
"""

import datetime
import struct
from typing import BinaryIO, Iterator

from ._types import DayEvents, EventTime, SampleRecord

SAMPLE_FORMAT = struct.Struct("<BBBdd")
DAY_FORMAT = struct.Struct("<BBBBHBBhBBH")

SAMPLE_RECORD_SIZE = SAMPLE_FORMAT.size
DAY_RECORD_SIZE = DAY_FORMAT.size


def sample_to_csv(record: SampleRecord) -> str:
    """One sample line: HH:MM,daylight,azimuth,zenith."""
    return (
        f"{record.hour:02d}:{record.minute:02d},{int(record.daylight)},"
        f"{record.azimuth:.3f},{record.zenith:.3f}\n"
    )


def sample_to_bytes(record: SampleRecord) -> bytes:
    """Pack a sample into its 19-byte record."""
    return SAMPLE_FORMAT.pack(
        record.hour, record.minute, int(record.daylight), record.azimuth, record.zenith
    )


def decode_sample(data: bytes) -> SampleRecord:
    """Unpack a 19-byte sample record."""
    hour, minute, flag, azimuth, zenith = SAMPLE_FORMAT.unpack(data)
    return SampleRecord(
        hour=hour, minute=minute, daylight=bool(flag), azimuth=azimuth, zenith=zenith
    )


def _hhmm(event: EventTime) -> str:
    """HH:MM of an event time."""
    return f"{event.hour:02d}:{event.minute:02d}"


def day_events_to_csv(events: DayEvents) -> str:
    """One srs line: date, then time and angle of sunrise, transit and sunset."""
    return (
        f"{events.date:%Y-%m-%d},"
        f"{_hhmm(events.sunrise)},{events.sunrise_azimuth},"
        f"{_hhmm(events.transit)},{events.transit_elevation},"
        f"{_hhmm(events.sunset)},{events.sunset_azimuth}\n"
    )


def day_events_to_bytes(events: DayEvents) -> bytes:
    """Pack a day's events into its 14-byte record."""
    return DAY_FORMAT.pack(
        events.date.month,
        events.date.day,
        events.sunrise.hour,
        events.sunrise.minute,
        events.sunrise_azimuth,
        events.transit.hour,
        events.transit.minute,
        events.transit_elevation,
        events.sunset.hour,
        events.sunset.minute,
        events.sunset_azimuth,
    )


def decode_day_events(data: bytes, year: int) -> DayEvents:
    """Decode a 14-byte day record; the year comes from the srs file name.

    Seconds are not stored, so decoded event times carry second 0.
    """
    (month, day, rise_h, rise_m, rise_az, transit_h, transit_m, elevation,
     set_h, set_m, set_az) = DAY_FORMAT.unpack(data)
    return DayEvents(
        date=datetime.date(year, month, day),
        sunrise=EventTime(rise_h, rise_m, 0),
        sunrise_azimuth=rise_az,
        transit=EventTime(transit_h, transit_m, 0),
        transit_elevation=elevation,
        sunset=EventTime(set_h, set_m, 0),
        sunset_azimuth=set_az,
    )


def _iter_chunks(stream: BinaryIO, size: int) -> Iterator[bytes]:
    """Yield fixed-size chunks, raising ValueError on a short final one."""
    while chunk := stream.read(size):
        if len(chunk) != size:
            raise ValueError(f"Truncated record: expected {size} bytes, got {len(chunk)}")
        yield chunk


def iter_samples(stream: BinaryIO) -> Iterator[SampleRecord]:
    """Decode every sample record in a daily .bin stream."""
    for chunk in _iter_chunks(stream, SAMPLE_RECORD_SIZE):
        yield decode_sample(chunk)


def iter_day_events(stream: BinaryIO, year: int) -> Iterator[DayEvents]:
    """Decode every day record in a yearly srs .bin stream."""
    for chunk in _iter_chunks(stream, DAY_RECORD_SIZE):
        yield decode_day_events(chunk, year)
