"""Sun position oracle adapter.

The oracle is any callable taking a SunRequest and returning a
(SunPosition, error_code) pair, where error_code 0 means success and
1-6 name the out-of-range input field (year, month, day, hour, minute,
second). The default oracle is NREL's SPA as implemented by pvlib.
"""

import datetime
import logging
import math
from typing import Protocol

import pandas as pd
from pvlib import solarposition

from ._types import (
    MIN_INTERVAL,
    SECONDS_PER_DAY,
    Location,
    RunConfig,
    SunPosition,
    SunRequest,
    check_interval,
)
from .errors import OracleValidationError

logger = logging.getLogger(__name__)

PASCALS_PER_MILLIBAR = 100.0

# code -> (field, low, high, high is inclusive)
REQUEST_LIMITS = {
    1: ("year", -2000, 6000, True),
    2: ("month", 1, 12, True),
    3: ("day", 1, 31, True),
    4: ("hour", 0, 24, True),
    5: ("minute", 0, 59, True),
    6: ("second", 0, 60, False),
}

_ERROR_MESSAGES = {
    1: "Dataset year error, value {value} - valid range -2000 to 6000.",
    2: "Dataset month error, value {value} - valid range: 1 to 12.",
    3: "Dataset day error, value {value} - valid range: 1 to 31.",
    4: "Dataset hour error, value {value} - valid range: 0 to 24.",
    5: "Dataset minute error, value {value} - valid range: 0 to 59.",
    6: "Dataset second error, value {value:e} - valid range: 0 to <60.",
}

UNDEFINED_POSITION = SunPosition(
    azimuth=math.nan, zenith=math.nan, sunrise=math.nan, transit=math.nan, sunset=math.nan
)


class SunOracle(Protocol):
    """Callable mapping a request to (position, error code)."""

    def __call__(self, request: SunRequest) -> tuple[SunPosition, int]: ...


def validate_request(request: SunRequest) -> int:
    """Return the error code of the first out-of-range time field, or 0."""
    for code, (name, low, high, inclusive) in REQUEST_LIMITS.items():
        value = getattr(request, name)
        too_high = value > high if inclusive else value >= high
        if value < low or too_high:
            return code
    return 0


def describe_oracle_error(code: int, request: SunRequest) -> str:
    """Human-readable message for an oracle error code."""
    if code not in _ERROR_MESSAGES:
        return f"Unknown oracle error code {code}."
    name = REQUEST_LIMITS[code][0]
    return _ERROR_MESSAGES[code].format(value=getattr(request, name))


def build_request(
    config: RunConfig,
    day: datetime.date,
    hour: int = 0,
    minute: int = 0,
    second: float = 0,
) -> SunRequest:
    """Oracle request for a local date and time at the configured location."""
    loc: Location = config.location
    return SunRequest(
        year=day.year,
        month=day.month,
        day=day.day,
        hour=hour,
        minute=minute,
        second=second,
        timezone=loc.timezone,
        delta_ut1=config.delta_ut1,
        delta_t=config.delta_t,
        longitude=loc.longitude,
        latitude=loc.latitude,
        elevation=loc.elevation,
        pressure=loc.pressure,
        temperature=loc.temperature,
        slope=loc.slope,
        azimuth_rotation=loc.azimuth_rotation,
        atmospheric_refraction=loc.atmospheric_refraction,
    )


def request_midnight(request: SunRequest) -> pd.Timestamp:
    """Local midnight of the request's date as a tz-aware Timestamp.

    Day overflow (e.g. June 31) rolls into the next month.
    """
    tz = datetime.timezone(datetime.timedelta(hours=request.timezone))
    first = pd.Timestamp(year=request.year, month=request.month, day=1, tz=tz)
    return first + pd.Timedelta(days=request.day - 1)


def request_instant(request: SunRequest) -> pd.Timestamp:
    """Local instant of a request as a tz-aware Timestamp."""
    return request_midnight(request) + pd.Timedelta(
        hours=request.hour, minutes=request.minute, seconds=request.second
    )


def truncate_fractional_hour(value: float) -> tuple[int, int, int]:
    """Split a fractional hour in [0, 24) into truncated (hour, minute, second)."""
    hour = math.floor(value)
    minutes = 60.0 * (value - hour)
    minute = math.floor(minutes)
    second = math.floor(60.0 * (minutes - minute))
    return hour, min(minute, 59), min(second, 59)


def _fractional_hours(event, midnight: pd.Timestamp) -> float:
    """Local hour of an event, wrapped into [0, 24) as SPA reports it."""
    if pd.isna(event):
        return math.nan
    return ((event - midnight).total_seconds() / 3600.0) % 24.0


def _spa_positions(request: SunRequest, instants: pd.DatetimeIndex) -> pd.DataFrame:
    """Run SPA over local instants, shifted by delta-UT1 (UT1 = UTC + DUT1)."""
    return solarposition.spa_python(
        instants + pd.Timedelta(seconds=request.delta_ut1),
        request.latitude,
        request.longitude,
        altitude=request.elevation,
        pressure=request.pressure * PASCALS_PER_MILLIBAR,
        temperature=request.temperature,
        delta_t=request.delta_t,
        atmos_refract=request.atmospheric_refraction,
        how="numpy",
    )


class SpaOracle:
    """pvlib SPA oracle answering per-tick requests from a one-day cache.

    The first request for a date computes the day's rise/transit/set times
    and, in one vectorized SPA call, the positions at every tick of the
    day plus the truncated event times. Requests off that grid fall back
    to a single SPA call. Only the most recent day is kept.
    """

    def __init__(self, interval: int = MIN_INTERVAL):
        self.interval = check_interval(interval)
        self._day_key = None
        self._events = (math.nan, math.nan, math.nan)
        self._positions: dict[float, tuple[float, float]] = {}

    def _day_offsets(self, events) -> list[int]:
        """Seconds after midnight of every tick plus each present event."""
        offsets = set(range(0, SECONDS_PER_DAY, self.interval))
        for hours in events:
            if math.isfinite(hours):
                hour, minute, second = truncate_fractional_hour(hours)
                offsets.add(3600 * hour + 60 * minute + second)
        return sorted(offsets)

    def _load_day(self, request: SunRequest, midnight: pd.Timestamp) -> None:
        """Fill the cache for the request's date unless it is already loaded."""
        key = (
            midnight, request.latitude, request.longitude, request.elevation,
            request.pressure, request.temperature, request.delta_t,
            request.delta_ut1, request.atmospheric_refraction,
        )
        if key == self._day_key:
            return
        df = solarposition.sun_rise_set_transit_spa(
            pd.DatetimeIndex([midnight]),
            request.latitude,
            request.longitude,
            how="numpy",
            delta_t=request.delta_t,
        )
        events = tuple(
            _fractional_hours(df[name].iloc[0], midnight)
            for name in ("sunrise", "transit", "sunset")
        )
        offsets = self._day_offsets(events)
        positions = _spa_positions(request, midnight + pd.to_timedelta(offsets, unit="s"))
        self._positions = dict(
            zip(
                offsets,
                zip(
                    positions["azimuth"].to_numpy(dtype=float),
                    positions["apparent_zenith"].to_numpy(dtype=float),
                ),
            )
        )
        self._events = events
        self._day_key = key
        logger.debug("SPA day cache [%s] %d positions", midnight.date(), len(offsets))

    def __call__(self, request: SunRequest) -> tuple[SunPosition, int]:
        """Position and day events for one request, or error code 1-6."""
        code = validate_request(request)
        if code:
            return UNDEFINED_POSITION, code

        midnight = request_midnight(request)
        self._load_day(request, midnight)
        instant = request_instant(request)
        cached = self._positions.get((instant - midnight).total_seconds())
        if cached is None:
            df = _spa_positions(request, pd.DatetimeIndex([instant]))
            cached = float(df["azimuth"].iloc[0]), float(df["apparent_zenith"].iloc[0])
        azimuth, zenith = cached
        sunrise, transit, sunset = self._events
        position = SunPosition(
            azimuth=float(azimuth),
            zenith=float(zenith),
            sunrise=sunrise,
            transit=transit,
            sunset=sunset,
        )
        return position, 0


class SunOracleAdapter:
    """Builds requests from the run configuration and invokes the oracle.

    Oracle validation errors are logged and counted, never raised: the
    oracle's returned values are used as-is.
    """

    def __init__(self, config: RunConfig, oracle: SunOracle | None = None):
        self.config = config
        self.oracle = oracle if oracle is not None else SpaOracle(config.interval)
        self.errors: list[OracleValidationError] = []

    def calculate(self, request: SunRequest) -> SunPosition:
        """Invoke the oracle, recording any validation error."""
        logger.debug("sun request %s", request)
        position, code = self.oracle(request)
        if code:
            err = OracleValidationError(
                code, describe_oracle_error(code, request), request
            )
            self.errors.append(err)
            logger.warning("%s", err)
        return position

    def position_at(
        self, day: datetime.date, hour: int, minute: int, second: float = 0
    ) -> SunPosition:
        """Position at a local date and time of day."""
        return self.calculate(build_request(self.config, day, hour, minute, second))

    def position_for(self, when: datetime.datetime) -> SunPosition:
        """Position at a local datetime."""
        return self.position_at(when.date(), when.hour, when.minute, when.second)
