"""Dial layout: maps times of day onto the 24-hour face.

Angles are in radians, measured clockwise from the +x axis of a y-down canvas.
Two reference conventions are used on the same dial:

* ``angle_for`` adds a quarter turn, so that minute 0 lands at the bottom of
  the dial. Arcs are laid out with it.
* ``offset_angle_for`` / ``clock_hand_angle`` have no offset. They are rotations
  applied to a reference line that already points straight down, so midnight
  again lands at the bottom.

Both must be kept; mixing them up moves the bands a quarter of a day.
"""

import math
from dataclasses import dataclass

TURN = 2 * math.pi
MINUTES_PER_DAY = 1440
QUARTER_TURN = math.pi / 2

# Padding added on each side of the day band (5 degrees)
DAY_BAND_PADDING = math.pi / 36

HOURS = 24
SUB_TICKS = ((0.25, 'quarter'), (0.5, 'half'), (0.75, 'quarter'))


@dataclass(frozen=True, order=True)
class TimeOfDay:
    """A local time truncated to the minute."""

    hour: int
    minute: int

    def __post_init__(self):
        if not 0 <= self.hour < 24:
            raise ValueError(f"hour out of range: {self.hour}")
        if not 0 <= self.minute < 60:
            raise ValueError(f"minute out of range: {self.minute}")

    @classmethod
    def from_datetime(cls, dt):
        return cls(dt.hour, dt.minute)

    @property
    def minutes(self):
        """Minutes since midnight."""
        return self.hour * 60 + self.minute


def minutes_of(t):
    """Minutes since midnight for anything with ``hour`` and ``minute`` attributes."""
    return t.hour * 60 + t.minute


def minutes_angle(minutes, offset=0.0):
    return TURN * (minutes / MINUTES_PER_DAY) + offset


def angle_for(t):
    """Dial angle of a time of day, quarter-turn convention (arcs, event positions)."""
    return minutes_angle(minutes_of(t), QUARTER_TURN)


def offset_angle_for(t):
    """Dial angle of a time of day, zero-offset convention (noon and midnight markers)."""
    return minutes_angle(minutes_of(t))


def clock_hand_angle(now):
    """Rotation of the clock hand for the displayed minute."""
    return minutes_angle(minutes_of(now))


def hour_tick_angle(n):
    """Rotation of hour position ``n``; fractional hours give the sub-ticks."""
    return TURN * n / HOURS


def sweep(start, end):
    """Angular distance from ``start`` to ``end`` going in the increasing direction.

    The dial is always traversed the way the sun and moon cross the sky, so an
    arc ending "before" it starts wraps through angle 0 instead of being
    drawn the short way round.
    """
    return (end - start) % TURN


@dataclass(frozen=True)
class Tick:
    angle: float
    kind: str  # 'hour', 'half' or 'quarter'
    label: int = None


def hour_ticks():
    """The 24 hour ticks, each followed by its quarter, half and three-quarter sub-ticks."""
    ticks = []
    for n in range(1, HOURS + 1):
        ticks.append(Tick(hour_tick_angle(n), 'hour', n))
        for frac, kind in SUB_TICKS:
            ticks.append(Tick(hour_tick_angle(n + frac), kind))
    return ticks


@dataclass(frozen=True)
class RingRadii:
    """Radius tiers of the dial, from the outside in."""

    number: float
    moon: float
    noon: float
    sun: float
    hand_center: float

    @classmethod
    def for_size(cls, width, height):
        side = min(width, height)
        return cls(
            number=side / 2.1,
            moon=side / 2.3,
            noon=side / 2.56,
            sun=side / 2.6,
            hand_center=side / 36.0,
        )

    @property
    def moon_band(self):
        """(radius, width) of the moon visibility band, between the moon and sun rings."""
        return (self.moon + self.sun) / 2.0 - 1.0, self.moon - self.sun + 2.0

    @property
    def sun_band(self):
        """(radius, width) of the day and twilight bands; the stroke fills the sun disc."""
        return self.sun / 2.0, self.sun


@dataclass(frozen=True)
class ArcSpan:
    name: str
    start_angle: float
    end_angle: float
    ring_radius: float
    width: float

    @property
    def sweep(self):
        return sweep(self.start_angle, self.end_angle)


def arc_spans(events, radii):
    """Lay out the bands of an event set, in draw order.

    The moon band comes first (outermost), then the day band and the morning
    and evening twilight bands. A band whose start or end event does not occur
    on this day is left out.

    Args:
        events: object with ``moonrise``, ``moonset``, ``nautical_sunrise``,
            ``sunrise``, ``sunset`` and ``nautical_sunset`` attributes, each a
            datetime or None
        radii: RingRadii of the frame being drawn

    Returns:
        tuple of ArcSpan
    """
    spans = []

    if events.moonrise is not None and events.moonset is not None:
        radius, width = radii.moon_band
        spans.append(ArcSpan('moon', angle_for(events.moonrise), angle_for(events.moonset), radius, width))

    radius, width = radii.sun_band
    if events.sunrise is not None and events.sunset is not None:
        spans.append(ArcSpan(
            'day',
            angle_for(events.sunrise) - DAY_BAND_PADDING,
            angle_for(events.sunset) + DAY_BAND_PADDING,
            radius, width,
        ))
    if events.nautical_sunrise is not None and events.sunrise is not None:
        spans.append(ArcSpan(
            'morning_twilight', angle_for(events.nautical_sunrise), angle_for(events.sunrise), radius, width,
        ))
    if events.nautical_sunset is not None and events.sunset is not None:
        # Start and end are swapped against the dusk-to-sunset naming: sweeping
        # forward from dusk would wrap nearly a full turn, so the band runs
        # sunset -> dusk, the order the sun crosses it.
        spans.append(ArcSpan(
            'evening_twilight', angle_for(events.sunset), angle_for(events.nautical_sunset), radius, width,
        ))

    return tuple(spans)
