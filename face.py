"""Renderer-independent drawing commands for one frame of the dial.

``build_face`` turns the day's events and the displayed minute into a flat list
of commands with absolute coordinates. The Qt and Pillow front-ends only have
to paint them in order.
"""

import math
from dataclasses import dataclass

import dial

MOON_BACKGROUND = (0x52, 0x4b, 0xb3)
MOON_BAND = (0x57, 0x96, 0xa1)
SUN_BACKGROUND = (0x47, 0x1b, 0x6e)
DAY_BAND = (0x8b, 0xc7, 0xbf)
TWILIGHT_BAND = (0xde, 0x8b, 0x6f)
HAND = (0xeb, 0xd6, 0x94)
NOTCH = (0x70, 0x27, 0x82)
LABEL = (0xff, 0xff, 0xff)
WINDOW_BACKGROUND = (0x36, 0x39, 0x3f)

BAND_COLORS = {
    'moon': MOON_BAND,
    'day': DAY_BAND,
    'morning_twilight': TWILIGHT_BAND,
    'evening_twilight': TWILIGHT_BAND,
}

LABEL_SIZE = 16


@dataclass(frozen=True)
class Disc:
    center: tuple
    radius: float
    color: tuple


@dataclass(frozen=True)
class ArcStroke:
    center: tuple
    radius: float
    start_angle: float
    sweep: float  # always >= 0, clockwise on screen
    width: float
    color: tuple
    name: str = ''


@dataclass(frozen=True)
class LineStroke:
    start: tuple
    end: tuple
    width: float
    color: tuple
    round_cap: bool = True


@dataclass(frozen=True)
class Label:
    position: tuple
    text: str
    size: int
    color: tuple


def rotated(center, radius, angle):
    """Point at ``radius`` below ``center`` after rotating clockwise by ``angle``."""
    cx, cy = center
    return (cx - radius * math.sin(angle), cy + radius * math.cos(angle))


def radial_line(center, inner, outer, angle, width, color):
    return LineStroke(rotated(center, inner, angle), rotated(center, outer, angle), width, color)


def build_face(events, now, width, height):
    """Build the command list for a ``width`` x ``height`` frame.

    Args:
        events: EventSet of the displayed day
        now: displayed time (only hour and minute are used)
        width, height: frame size in pixels

    Returns:
        list of Disc, ArcStroke, LineStroke and Label, in paint order
    """
    center = (width / 2.0, height / 2.0)
    radii = dial.RingRadii.for_size(width, height)
    spans = dial.arc_spans(events, radii)
    cmds = []

    cmds.append(Disc(center, radii.moon, MOON_BACKGROUND))
    for span in spans:
        if span.name == 'moon':
            cmds.append(_arc(center, span))

    cmds.append(Disc(center, radii.sun * 1.03, SUN_BACKGROUND))
    for span in spans:
        if span.name != 'moon':
            cmds.append(_arc(center, span))

    cmds.append(Disc(center, radii.hand_center, HAND))

    # Noon and midnight markers are zero-length round strokes, i.e. dots
    noon_width = radii.sun / 20.0
    for instant in (events.noon, events.midnight):
        if instant is not None:
            cmds.append(radial_line(center, radii.noon, radii.noon, dial.offset_angle_for(instant), noon_width, HAND))

    notch_width = radii.sun / 30.0
    tick_outer = {
        'hour': radii.number,
        'half': (radii.number + radii.moon) / 2.0,
        'quarter': (radii.number + radii.moon * 2.0) / 3.0,
    }
    ticks = dial.hour_ticks()
    for tick in ticks:
        cmds.append(radial_line(center, radii.moon, tick_outer[tick.kind], tick.angle, notch_width, NOTCH))
    for tick in ticks:
        if tick.label is not None:
            cmds.append(Label(rotated(center, radii.number * 1.05, tick.angle), str(tick.label), LABEL_SIZE, LABEL))

    cmds.append(radial_line(center, 0.0, radii.number, dial.clock_hand_angle(now), radii.sun / 36.0, HAND))
    return cmds


def _arc(center, span):
    return ArcStroke(
        center=center,
        radius=span.ring_radius,
        start_angle=span.start_angle,
        sweep=span.sweep,
        width=span.width,
        color=BAND_COLORS[span.name],
        name=span.name,
    )
