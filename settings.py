"""Runtime settings: observer position, time zone and timing.

Values come from the environment (a ``.env`` file in the working directory is
loaded first) and can be overridden on the command line.
"""

import argparse
import logging
import os
from dataclasses import dataclass, replace
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from timezonefinder import TimezoneFinder

from errors import ConfigError

logger = logging.getLogger(__name__)

# Los Angeles; west longitudes are negative
DEFAULT_LATITUDE = 34.0522
DEFAULT_LONGITUDE = -118.2437
CIVIL_DEPRESSION = 6.0
DEFAULT_TICK_SECONDS = 30.0
DEFAULT_ASSETS = 'resources'

ENV_PREFIX = 'SOLUNAR_'


def local_now(tzinfo):
    """Current time in ``tzinfo``, or in the machine's local zone when it is None."""
    if tzinfo is None:
        return datetime.now().astimezone()
    return datetime.now(tzinfo)


@dataclass(frozen=True)
class ClockSettings:
    latitude: float = DEFAULT_LATITUDE
    longitude: float = DEFAULT_LONGITUDE
    timezone: str = None  # IANA name; inferred from the position when None
    twilight_depression: float = CIVIL_DEPRESSION
    tick_seconds: float = DEFAULT_TICK_SECONDS
    assets: str = DEFAULT_ASSETS

    def validate(self):
        if not -90.0 <= self.latitude <= 90.0:
            raise ConfigError(f"latitude must be within [-90, 90], got {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ConfigError(f"longitude must be within [-180, 180], got {self.longitude}")
        if not 0.0 < self.twilight_depression < 90.0:
            raise ConfigError(f"twilight depression must be within (0, 90), got {self.twilight_depression}")
        if self.tick_seconds <= 0:
            raise ConfigError(f"tick interval must be positive, got {self.tick_seconds}")
        return self

    def tzinfo(self):
        """The time zone events and the clock are shown in.

        Uses the configured zone, else the zone at the observer's position,
        else None, meaning the machine's local zone, looked up again on every
        reading so daylight saving changes are followed (see local_now).
        """
        name = self.timezone
        if name is None:
            name = TimezoneFinder().timezone_at(lat=self.latitude, lng=self.longitude)
            if name is None:
                logger.warning("No time zone found at %s, %s; using local time", self.latitude, self.longitude)
                return None
            logger.info("Using time zone %s for %s, %s", name, self.latitude, self.longitude)
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigError(f"unknown time zone: {name}") from exc


def _env_float(environ, name, default):
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from None


def from_env(environ=None):
    """Read settings from ``environ`` (defaults to ``os.environ`` after loading ``.env``)."""
    if environ is None:
        load_dotenv()
        environ = os.environ
    return ClockSettings(
        latitude=_env_float(environ, 'LATITUDE', DEFAULT_LATITUDE),
        longitude=_env_float(environ, 'LONGITUDE', DEFAULT_LONGITUDE),
        timezone=environ.get(ENV_PREFIX + 'TIMEZONE') or None,
        twilight_depression=_env_float(environ, 'TWILIGHT_DEPRESSION', CIVIL_DEPRESSION),
        tick_seconds=_env_float(environ, 'TICK_SECONDS', DEFAULT_TICK_SECONDS),
        assets=environ.get(ENV_PREFIX + 'ASSETS') or DEFAULT_ASSETS,
    )


def build_parser():
    parser = argparse.ArgumentParser(
        prog='solunar-clock',
        description="24-hour clock face showing sun and moon events.",
    )
    parser.add_argument('--lat', type=float, dest='latitude', help="observer latitude, degrees north")
    parser.add_argument('--lon', type=float, dest='longitude', help="observer longitude, degrees east (west is negative)")
    parser.add_argument('--tz', dest='timezone', help="IANA time zone, e.g. America/Los_Angeles")
    parser.add_argument('--twilight', type=float, dest='twilight_depression',
                        help="sun depression in degrees bounding the twilight bands (6 civil, 12 nautical)")
    parser.add_argument('--tick', type=float, dest='tick_seconds', help="seconds between clock checks")
    parser.add_argument('--assets', help="directory holding the moon phase images")
    parser.add_argument('--snapshot', metavar='PATH', help="render one frame to an image file and exit")
    parser.add_argument('--size', type=int, default=600, help="frame size in pixels for --snapshot")
    parser.add_argument('-v', '--verbose', action='store_true', help="log every computed event")
    return parser


def apply_args(settings, args):
    """Override ``settings`` with the options given on the command line."""
    overrides = {}
    for name in ('latitude', 'longitude', 'timezone', 'twilight_depression', 'tick_seconds', 'assets'):
        value = getattr(args, name, None)
        if value is not None:
            overrides[name] = value
    return replace(settings, **overrides)
