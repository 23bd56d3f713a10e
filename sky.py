"""Daily sun and moon events, computed with astral."""

import enum
import logging
from dataclasses import dataclass, fields, replace
from datetime import date, datetime, time, timedelta, timezone

from astral import Observer
from astral import moon, sun

from errors import ProviderFailure

logger = logging.getLogger(__name__)

# Length of astral's lunar age scale: 0 = new, 7 = first quarter, 14 = full, 21 = last quarter
LUNAR_AGE_SCALE = 28.0

# Depression of the sun's centre at sunrise and sunset (refraction plus apparent radius)
SUN_HORIZON = 0.833
SCAN_STEP = timedelta(minutes=10)


class LunarPhase(enum.Enum):
    NEW_MOON = 0
    WAXING_CRESCENT = 1
    FIRST_QUARTER = 2
    WAXING_GIBBOUS = 3
    FULL_MOON = 4
    WANING_GIBBOUS = 5
    LAST_QUARTER = 6
    WANING_CRESCENT = 7

    @property
    def asset(self):
        """File name of the icon for this phase."""
        return PHASE_ASSETS[self]

    @property
    def label(self):
        return self.name.replace('_', ' ').capitalize()


PHASE_ASSETS = {
    LunarPhase.NEW_MOON: 'new_moon.png',
    LunarPhase.WAXING_CRESCENT: 'waxing_crescent_moon.png',
    LunarPhase.FIRST_QUARTER: 'first_quarter_moon.png',
    LunarPhase.WAXING_GIBBOUS: 'waxing_gibbous_moon.png',
    LunarPhase.FULL_MOON: 'full_moon.png',
    LunarPhase.WANING_GIBBOUS: 'waning_gibbous_moon.png',
    LunarPhase.LAST_QUARTER: 'last_quarter_moon.png',
    LunarPhase.WANING_CRESCENT: 'waning_crescent_moon.png',
}


def phase_for_age(age):
    """Map a lunar age on astral's 0-28 scale to one of the eight phases.

    Each phase covers an eighth of the cycle, centred on its principal point,
    so the new moon bucket straddles the end and start of the cycle.
    """
    index = int((age % LUNAR_AGE_SCALE) / LUNAR_AGE_SCALE * 8 + 0.5) % 8
    return LunarPhase(index)


@dataclass(frozen=True)
class EventSet:
    """The sun and moon events of one calendar day.

    Any event may be None when it does not happen on that day at the
    observer's position (continuous day or night, or a moonless date).
    """

    day: date
    nautical_sunrise: datetime = None
    sunrise: datetime = None
    noon: datetime = None
    sunset: datetime = None
    nautical_sunset: datetime = None
    midnight: datetime = None
    moonrise: datetime = None
    moonset: datetime = None

    def items(self):
        """(name, instant) pairs for all eight events, in daily order."""
        return [(f.name, getattr(self, f.name)) for f in fields(self) if f.name != 'day']

    def missing(self):
        return [name for name, value in self.items() if value is None]


class AstralProvider:
    """Computes event sets and lunar phases for a fixed observer.

    Args:
        latitude: Observer latitude in degrees, north positive
        longitude: Observer longitude in degrees, east positive
        tzinfo: Time zone the returned instants are expressed in; None means
            the machine's local zone, resolved per instant so that daylight
            saving changes are followed
        twilight_depression: Sun depression below the horizon, in degrees, that
            bounds the twilight bands (6 = civil, 12 = nautical)
    """

    def __init__(self, latitude, longitude, tzinfo, twilight_depression=6.0):
        self.observer = Observer(latitude=latitude, longitude=longitude)
        self.tzinfo = tzinfo
        self.twilight_depression = twilight_depression

    def zone(self, day):
        """Zone used to compute ``day``: the configured one, or the local offset at noon."""
        if self.tzinfo is not None:
            return self.tzinfo
        return datetime.combine(day, time(12)).astimezone().tzinfo

    def event_set(self, day):
        """Compute the EventSet of ``day``.

        Raises:
            ProviderFailure: if astral fails for any reason other than the event
                not happening on this day
        """
        obs, tz, dep = self.observer, self.zone(day), self.twilight_depression
        events = EventSet(
            day=day,
            nautical_sunrise=self._sun_event('dawn', day, sun.dawn, -dep, True, depression=dep),
            sunrise=self._sun_event('sunrise', day, sun.sunrise, -SUN_HORIZON, True),
            noon=self._event('noon', day, sun.noon, obs, day, tzinfo=tz),
            sunset=self._sun_event('sunset', day, sun.sunset, -SUN_HORIZON, False),
            nautical_sunset=self._sun_event('dusk', day, sun.dusk, -dep, False, depression=dep),
            midnight=self._event('midnight', day, sun.midnight, obs, day, tzinfo=tz),
            moonrise=self._event('moonrise', day, moon.moonrise, obs, day, tzinfo=tz),
            moonset=self._event('moonset', day, moon.moonset, obs, day, tzinfo=tz),
        )
        if self.tzinfo is None:
            events = replace(events, **{
                name: value.astimezone() for name, value in events.items() if value is not None
            })
        for name, value in events.items():
            logger.debug("%s %s: %s", day, name, value.strftime('%H:%M') if value else 'does not occur')
        return events

    def lunar_phase(self, day):
        try:
            age = moon.phase(day)
        except Exception as exc:
            raise ProviderFailure('lunar phase', day, exc) from exc
        return phase_for_age(age)

    def _sun_event(self, what, day, func, elevation, rising, **kwargs):
        """A sun event, checked against the sun's path when astral can't place it.

        astral raises ValueError both when the sun never reaches ``elevation``
        and, near the polar circles, when the event falls on the neighbouring
        UTC date. Only the first case means the event does not occur.
        """
        try:
            return func(self.observer, day, tzinfo=self.zone(day), **kwargs)
        except ValueError as exc:
            try:
                found = self.find_crossing(day, elevation, rising)
            except Exception as scan_exc:
                raise ProviderFailure(what, day, scan_exc) from scan_exc
            if found is None:
                logger.debug("%s does not occur on %s: %s", what, day, exc)
            else:
                logger.debug("%s on %s located at %s by elevation scan (%s)", what, day, found, exc)
            return found
        except Exception as exc:
            raise ProviderFailure(what, day, exc) from exc

    def find_crossing(self, day, elevation, rising):
        """First time during local ``day`` the sun's centre rises above (or sets below) ``elevation`` degrees.

        The day is sampled every SCAN_STEP and the crossing bisected to a second.

        Returns:
            aware datetime in the day's zone, or None if there is no such crossing
        """
        tz = self.zone(day)
        start = datetime.combine(day, time(0), tzinfo=tz).astimezone(timezone.utc)
        end = datetime.combine(day + timedelta(days=1), time(0), tzinfo=tz).astimezone(timezone.utc)

        def above(t):
            return sun.elevation(self.observer, t, with_refraction=False) > elevation

        prev_t, prev = start, above(start)
        t = start
        while t < end:
            t = min(t + SCAN_STEP, end)
            cur = above(t)
            if cur != prev and cur == rising:
                lo, hi = prev_t, t
                while hi - lo > timedelta(seconds=1):
                    mid = lo + (hi - lo) / 2
                    if above(mid) == rising:
                        hi = mid
                    else:
                        lo = mid
                return hi.astimezone(tz)
            prev_t, prev = t, cur
        return None

    @staticmethod
    def _event(what, day, func, *args, **kwargs):
        # astral signals an event that never happens with ValueError
        # (or None for the moon); anything else is a genuine failure.
        try:
            return func(*args, **kwargs)
        except ValueError as exc:
            logger.debug("%s does not occur on %s: %s", what, day, exc)
            return None
        except Exception as exc:
            raise ProviderFailure(what, day, exc) from exc
