# tests/test_dial.py

import math
from datetime import date, datetime

import pytest

import dial
from dial import TimeOfDay, RingRadii
from sky import EventSet

RADII = RingRadii.for_size(600, 600)


def at(hour, minute=0):
    return datetime(2024, 3, 20, hour, minute)


def event_set(**kwargs):
    return EventSet(day=date(2024, 3, 20), **kwargs)


def full_day():
    return event_set(
        nautical_sunrise=at(6, 30),
        sunrise=at(7, 0),
        noon=at(13, 0),
        sunset=at(19, 0),
        nautical_sunset=at(19, 30),
        midnight=at(1, 0),
        moonrise=at(22, 0),
        moonset=at(6, 0),
    )


def test_time_of_day_from_datetime_discards_seconds():
    t = TimeOfDay.from_datetime(datetime(2024, 1, 1, 13, 45, 59, 999999))
    assert t == TimeOfDay(13, 45)
    assert t.minutes == 13 * 60 + 45


def test_time_of_day_is_ordered_by_minutes():
    assert TimeOfDay(9, 59) < TimeOfDay(10, 0) < TimeOfDay(23, 59)


@pytest.mark.parametrize("hour, minute", [(24, 0), (-1, 0), (0, 60)])
def test_time_of_day_rejects_out_of_range(hour, minute):
    with pytest.raises(ValueError):
        TimeOfDay(hour, minute)


def test_angle_for_formula():
    assert dial.angle_for(TimeOfDay(0, 0)) == pytest.approx(math.pi / 2)
    assert dial.angle_for(TimeOfDay(6, 0)) == pytest.approx(math.pi)
    assert dial.angle_for(TimeOfDay(12, 0)) == pytest.approx(3 * math.pi / 2)
    assert dial.offset_angle_for(TimeOfDay(12, 0)) == pytest.approx(math.pi)


def test_conventions_differ_by_a_quarter_turn():
    for m in range(0, 1440, 37):
        t = TimeOfDay(m // 60, m % 60)
        assert dial.angle_for(t) - dial.offset_angle_for(t) == pytest.approx(math.pi / 2)


def test_angle_is_monotonic_and_wraps_at_a_full_day():
    angles = [dial.angle_for(TimeOfDay(m // 60, m % 60)) for m in range(1440)]
    assert all(b > a for a, b in zip(angles, angles[1:]))
    step = dial.TURN / 1440
    assert all(b - a == pytest.approx(step) for a, b in zip(angles, angles[1:]))
    # minute 1440 is minute 0 again
    assert dial.minutes_angle(1440, dial.QUARTER_TURN) % dial.TURN == pytest.approx(angles[0])


def test_hour_ticks_are_evenly_spaced():
    hours = [dial.hour_tick_angle(n) for n in range(1, 25)]
    assert len(set(hours)) == 24
    assert all(b - a == pytest.approx(math.pi / 12) for a, b in zip(hours, hours[1:]))


def test_sub_ticks_are_evenly_spaced():
    ticks = dial.hour_ticks()
    assert len(ticks) == 96
    assert [t.kind for t in ticks[:4]] == ['hour', 'quarter', 'half', 'quarter']
    assert [t.label for t in ticks if t.kind == 'hour'] == list(range(1, 25))
    angles = [t.angle for t in ticks]
    assert all(b - a == pytest.approx(math.pi / 48) for a, b in zip(angles, angles[1:]))


def test_clock_hand_angle():
    assert dial.clock_hand_angle(at(0, 0)) == 0.0
    assert dial.clock_hand_angle(at(18, 0)) == pytest.approx(3 * math.pi / 2)


def test_sweep_goes_the_long_way_when_needed():
    assert dial.sweep(1.0, 2.0) == pytest.approx(1.0)
    assert dial.sweep(2.0, 1.0) == pytest.approx(dial.TURN - 1.0)


def test_arc_spans_draw_order():
    names = [s.name for s in dial.arc_spans(full_day(), RADII)]
    assert names == ['moon', 'day', 'morning_twilight', 'evening_twilight']


def test_day_band_padding():
    events = full_day()
    day = dial.arc_spans(events, RADII)[1]
    assert day.start_angle == pytest.approx(dial.angle_for(events.sunrise) - math.pi / 36)
    assert day.end_angle == pytest.approx(dial.angle_for(events.sunset) + math.pi / 36)
    assert day.ring_radius == pytest.approx(RADII.sun / 2)
    assert day.width == pytest.approx(RADII.sun)


def test_moon_band_crossing_midnight_sweeps_forward():
    moon = dial.arc_spans(full_day(), RADII)[0]
    assert moon.start_angle == pytest.approx(dial.angle_for(at(22)))
    assert moon.end_angle == pytest.approx(dial.angle_for(at(6)))
    assert moon.sweep == pytest.approx(dial.TURN * 8 / 24)
    assert moon.ring_radius == pytest.approx((RADII.moon + RADII.sun) / 2 - 1)
    assert moon.width == pytest.approx(RADII.moon - RADII.sun + 2)


def test_twilight_bands_cover_only_twilight():
    _, _, morning, evening = dial.arc_spans(full_day(), RADII)
    assert morning.sweep == pytest.approx(dial.TURN * 30 / 1440)
    assert evening.sweep == pytest.approx(dial.TURN * 30 / 1440)
    assert evening.start_angle == pytest.approx(dial.angle_for(at(19, 0)))
    assert evening.end_angle == pytest.approx(dial.angle_for(at(19, 30)))


def test_arc_spans_is_idempotent():
    events = full_day()
    assert dial.arc_spans(events, RADII) == dial.arc_spans(events, RADII)


def test_polar_day_omits_sun_bands():
    events = event_set(noon=at(12, 0), midnight=at(0, 0), moonrise=at(22, 0), moonset=at(6, 0))
    spans = dial.arc_spans(events, RADII)
    assert [s.name for s in spans] == ['moon']


def test_missing_twilight_keeps_day_band():
    # White nights: the sun rises and sets but never gets deep enough for twilight to end
    events = event_set(sunrise=at(3, 0), sunset=at(23, 0))
    assert [s.name for s in dial.arc_spans(events, RADII)] == ['day']


def test_no_events_at_all():
    assert dial.arc_spans(event_set(), RADII) == ()


def test_ring_radii_use_the_smaller_side():
    r = RingRadii.for_size(800, 420)
    assert r.number == pytest.approx(420 / 2.1)
    assert r.number > r.moon > r.noon > r.sun > r.hand_center
