# tests/test_clock_pil.py

import math
from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest
from PIL import Image

import clock_pil
import face
from clockstate import ClockState
from sky import EventSet, LunarPhase

TZ = ZoneInfo('UTC')


class StaticProvider:
    def event_set(self, day):
        def at(hour, minute=0):
            return datetime(day.year, day.month, day.day, hour, minute, tzinfo=TZ)

        return EventSet(
            day=day,
            nautical_sunrise=at(5, 30), sunrise=at(6, 0), noon=at(12, 0),
            sunset=at(18, 0), nautical_sunset=at(18, 30), midnight=at(0, 0),
            moonrise=at(20, 0), moonset=at(8, 0),
        )

    def lunar_phase(self, day):
        return LunarPhase.FIRST_QUARTER


@pytest.fixture
def state():
    return ClockState.start(StaticProvider(), datetime(2024, 4, 2, 9, 15, tzinfo=TZ))


def test_band_polygon_shape():
    points = clock_pil.band_polygon((0, 0), 10.0, 2.0, 0.0, math.pi / 2)
    assert points[0] == pytest.approx((11.0, 0.0))
    # outer edge ends at 6 o'clock on a y-down canvas
    assert points[len(points) // 2 - 1] == pytest.approx((0.0, 11.0))
    assert points[-1] == pytest.approx((9.0, 0.0))


def test_band_polygon_inner_radius_never_negative():
    points = clock_pil.band_polygon((0, 0), 5.0, 20.0, 0.0, math.pi)
    assert points[-1] == pytest.approx((0.0, 0.0))


def test_render_size_and_colors(state):
    image = clock_pil.render(state, 300)
    assert image.size == (300, 300 + clock_pil.PHASE_STRIP)
    assert image.getpixel((2, 2))[:3] == face.WINDOW_BACKGROUND
    # noon is at the top of the dial: the day band covers the point just above the hub
    assert image.getpixel((150, 150 - 40))[:3] == face.DAY_BAND
    # midnight is at the bottom, outside the day band
    assert image.getpixel((150, 150 + 40))[:3] == face.SUN_BACKGROUND


def test_render_uses_phase_icon(tmp_path, state):
    Image.new('RGBA', (64, 64), (255, 0, 0, 255)).save(tmp_path / LunarPhase.FIRST_QUARTER.asset)
    image = clock_pil.render(state, 300, assets=str(tmp_path))
    assert image.getpixel((150, 300 + clock_pil.PHASE_STRIP // 2))[:3] == (255, 0, 0)


def test_save_snapshot(tmp_path, state):
    path = tmp_path / 'dial.png'
    clock_pil.save_snapshot(state, str(path), 200)
    with Image.open(path) as saved:
        assert saved.size == (200, 200 + clock_pil.PHASE_STRIP)


def test_moon_band_crosses_midnight_at_the_bottom(state):
    # moonrise 20:00, moonset 08:00: the band runs through midnight at the bottom
    image = clock_pil.render(state, 300)
    band_radius = 122
    assert image.getpixel((150, 150 + band_radius))[:3] == face.MOON_BAND
    assert image.getpixel((150, 150 - band_radius))[:3] == face.MOON_BACKGROUND
