"""Shared fixtures: a deterministic stand-in for the SPA oracle."""

import pytest

from tracker_dataset._types import Location, RunConfig, SunPosition


class FakeOracle:
    """Pure function of the request time; optionally fails on one hour."""

    # 06:15:00, 12:00:00 and 18:30:00
    SUNRISE = 6.25
    TRANSIT = 12.0
    SUNSET = 18.5

    def __init__(self, fail_hour=None, fail_code=4):
        self.fail_hour = fail_hour
        self.fail_code = fail_code
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        hours = request.hour + request.minute / 60.0 + request.second / 3600.0
        position = SunPosition(
            azimuth=(15.0 * hours + 0.123456) % 360.0,
            zenith=abs(12.0 - hours) * 10.0 + 0.5,
            sunrise=self.SUNRISE,
            transit=self.TRANSIT,
            sunset=self.SUNSET,
        )
        if self.fail_hour is not None and request.hour == self.fail_hour:
            return position, self.fail_code
        return position, 0


@pytest.fixture
def fake_oracle_factory():
    """The FakeOracle class, for tests that need failing or several oracles."""
    return FakeOracle


@pytest.fixture
def fake_oracle(fake_oracle_factory):
    return fake_oracle_factory()


@pytest.fixture
def make_config(tmp_path):
    def make(period="td", interval=900, **location):
        return RunConfig(
            location=Location(**location),
            interval=interval,
            period=period,
            output_dir=tmp_path / "tracker-data",
        )

    return make
