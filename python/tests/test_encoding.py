"""CSV and binary record layout tests."""

import dataclasses
import datetime
import io
import struct

import pytest

from tracker_dataset._types import DayEvents, EventTime, SampleRecord
from tracker_dataset.encoding import (
    DAY_RECORD_SIZE,
    SAMPLE_RECORD_SIZE,
    day_events_to_bytes,
    day_events_to_csv,
    decode_day_events,
    decode_sample,
    iter_day_events,
    iter_samples,
    sample_to_bytes,
    sample_to_csv,
)


@pytest.fixture
def sample():
    return SampleRecord(hour=6, minute=5, daylight=True, azimuth=93.87654321, zenith=88.1234)


@pytest.fixture
def events():
    return DayEvents(
        date=datetime.date(2024, 3, 15),
        sunrise=EventTime(5, 48, 12),
        sunrise_azimuth=92,
        transit=EventTime(11, 41, 3),
        transit_elevation=53,
        sunset=EventTime(17, 35, 59),
        sunset_azimuth=268,
    )


class TestRecordSizes:
    def test_sizes(self):
        assert SAMPLE_RECORD_SIZE == 19
        assert DAY_RECORD_SIZE == 14


class TestSampleEncoding:
    def test_csv_line(self, sample):
        assert sample_to_csv(sample) == "06:05,1,93.877,88.123\n"

    def test_csv_night(self):
        rec = SampleRecord(hour=23, minute=59, daylight=False, azimuth=0.0, zenith=120.5)
        assert sample_to_csv(rec) == "23:59,0,0.000,120.500\n"

    def test_binary_layout(self, sample):
        data = sample_to_bytes(sample)
        assert len(data) == 19
        assert data[0] == 6
        assert data[1] == 5
        assert data[2] == 1
        assert data[3:11] == struct.pack("<d", 93.87654321)
        assert data[11:19] == struct.pack("<d", 88.1234)

    def test_doubles_are_little_endian(self):
        rec = SampleRecord(hour=0, minute=0, daylight=False, azimuth=1.0, zenith=2.0)
        data = sample_to_bytes(rec)
        # 1.0 == 0x3FF0000000000000
        assert data[3:11] == bytes([0, 0, 0, 0, 0, 0, 0xF0, 0x3F])

    def test_decode_keeps_full_precision(self, sample):
        assert decode_sample(sample_to_bytes(sample)) == sample

    def test_out_of_range_hour_rejected(self):
        rec = SampleRecord(hour=256, minute=0, daylight=False, azimuth=0.0, zenith=0.0)
        with pytest.raises(struct.error):
            sample_to_bytes(rec)


class TestDayEventsEncoding:
    def test_csv_line(self, events):
        assert day_events_to_csv(events) == "2024-03-15,05:48,92,11:41,53,17:35,268\n"

    def test_binary_layout(self, events):
        data = day_events_to_bytes(events)
        assert len(data) == 14
        assert data[0:4] == bytes([3, 15, 5, 48])
        assert data[4:6] == (92).to_bytes(2, "little")
        assert data[6:8] == bytes([11, 41])
        assert data[8:10] == (53).to_bytes(2, "little", signed=True)
        assert data[10:12] == bytes([17, 35])
        assert data[12:14] == (268).to_bytes(2, "little")

    def test_negative_transit_elevation(self, events):
        polar = dataclasses.replace(events, transit_elevation=-12)
        data = day_events_to_bytes(polar)
        assert data[8:10] == (-12).to_bytes(2, "little", signed=True)
        assert decode_day_events(data, 2024).transit_elevation == -12

    def test_decode_drops_seconds(self, events):
        decoded = decode_day_events(day_events_to_bytes(events), 2024)
        assert decoded.date == events.date
        assert decoded.sunrise == EventTime(5, 48, 0)
        assert decoded.sunset_azimuth == 268


class TestStreams:
    def test_iter_samples(self, sample):
        other = SampleRecord(hour=6, minute=6, daylight=False, azimuth=1.5, zenith=91.0)
        stream = io.BytesIO(sample_to_bytes(sample) + sample_to_bytes(other))
        assert list(iter_samples(stream)) == [sample, other]

    def test_iter_day_events(self, events):
        stream = io.BytesIO(day_events_to_bytes(events) * 3)
        assert len(list(iter_day_events(stream, 2024))) == 3

    def test_truncated_stream(self, sample):
        stream = io.BytesIO(sample_to_bytes(sample)[:-1])
        with pytest.raises(ValueError):
            list(iter_samples(stream))
