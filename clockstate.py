"""Application state of the clock and its per-tick update."""

import logging
from dataclasses import dataclass, field

from errors import ProviderFailure
from face import build_face

logger = logging.getLogger(__name__)


def truncate_to_minute(now):
    return now.replace(second=0, microsecond=0)


def same_minute(a, b):
    # Aware datetimes sharing a tzinfo compare as wall time, which would merge
    # the repeated hour when daylight saving ends; the offset tells them apart.
    return a.utcoffset() == b.utcoffset() and a.replace(tzinfo=None) == b.replace(tzinfo=None)


@dataclass
class ClockState:
    """Everything the clock displays.

    ``events`` and ``phase`` change once per calendar day; ``now`` changes once
    per minute. The face cache holds the last built command list and is
    dropped whenever the displayed minute changes.
    """

    now: object
    today: object
    events: object
    phase: object
    dirty: bool = True
    _face_key: tuple = field(default=None, repr=False)
    _face: list = field(default=None, repr=False)

    @classmethod
    def start(cls, provider, now):
        """Compute the first day's events and phase.

        There is no previous day to fall back on here, so a ProviderFailure
        propagates to the caller.
        """
        now = truncate_to_minute(now)
        day = now.date()
        events = provider.event_set(day)
        phase = provider.lunar_phase(day)
        logger.info("Events computed for %s, moon phase %s", day, phase.label)
        return cls(now=now, today=day, events=events, phase=phase)

    def invalidate(self):
        self.dirty = True
        self._face = None
        self._face_key = None


def handle_tick(state, now, provider):
    """Advance ``state`` to the time reported by a timer tick.

    Args:
        state: ClockState to update in place
        now: current local time, timezone-aware
        provider: object with ``event_set(day)`` and ``lunar_phase(day)``

    Returns:
        True if the displayed minute changed and the face must be redrawn
    """
    now = truncate_to_minute(now)
    if same_minute(now, state.now):
        return False

    state.now = now
    state.invalidate()
    if now.date() != state.today:
        refresh_day(state, now.date(), provider)
    return True


def refresh_day(state, day, provider, attempts=2):
    """Recompute events and phase for a new calendar day.

    A failing provider is retried once; if it still fails, the previous day's
    events and phase stay on screen until the next rollover.
    """
    state.today = day
    for attempt in range(1, attempts + 1):
        try:
            events = provider.event_set(day)
            phase = provider.lunar_phase(day)
        except ProviderFailure as exc:
            logger.warning("Attempt %d/%d to refresh events failed: %s", attempt, attempts, exc)
            continue
        state.events = events
        state.phase = phase
        logger.info("Events computed for %s, moon phase %s", day, phase.label)
        return True

    logger.warning("Keeping events of %s on %s", state.events.day, day)
    return False


def face_for(state, width, height):
    """Memoized face commands for the current state and frame size."""
    key = (width, height)
    if state.dirty or state._face is None or state._face_key != key:
        state._face = build_face(state.events, state.now, width, height)
        state._face_key = key
        state.dirty = False
    return state._face
