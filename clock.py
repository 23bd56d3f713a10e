import logging
import math
import os

from qt import QtWidgets, QtCore, QtGui, qt_enum
from clockstate import face_for, handle_tick
from settings import local_now
from face import ArcStroke, Disc, Label, LineStroke, WINDOW_BACKGROUND

logger = logging.getLogger(__name__)


def _color(rgb):
    return QtGui.QColor(*rgb)


def paint_face(painter, commands):
    """Paint a list of face commands with a QPainter.

    Args:
        painter: active QPainter
        commands: output of face.build_face
    """
    no_pen = qt_enum(QtCore.Qt, 'PenStyle', 'NoPen')
    no_brush = qt_enum(QtCore.Qt, 'BrushStyle', 'NoBrush')
    flat_cap = qt_enum(QtCore.Qt, 'PenCapStyle', 'FlatCap')
    round_cap = qt_enum(QtCore.Qt, 'PenCapStyle', 'RoundCap')
    align_center = qt_enum(QtCore.Qt, 'AlignmentFlag', 'AlignCenter')

    for cmd in commands:
        if isinstance(cmd, Disc):
            painter.setPen(no_pen)
            painter.setBrush(_color(cmd.color))
            painter.drawEllipse(QtCore.QPointF(*cmd.center), cmd.radius, cmd.radius)

        elif isinstance(cmd, ArcStroke):
            pen = QtGui.QPen(_color(cmd.color))
            pen.setWidthF(cmd.width)
            pen.setCapStyle(flat_cap)
            painter.setPen(pen)
            painter.setBrush(no_brush)
            cx, cy = cmd.center
            rect = QtCore.QRectF(cx - cmd.radius, cy - cmd.radius, 2 * cmd.radius, 2 * cmd.radius)
            # Qt counts 1/16ths of a degree, counter-clockwise; our angles run clockwise
            start = int(round(-math.degrees(cmd.start_angle % (2 * math.pi)) * 16))
            span = int(round(-math.degrees(cmd.sweep) * 16))
            painter.drawArc(rect, start, span)

        elif isinstance(cmd, LineStroke):
            if cmd.start == cmd.end:
                # A zero-length round-capped stroke is a dot
                painter.setPen(no_pen)
                painter.setBrush(_color(cmd.color))
                painter.drawEllipse(QtCore.QPointF(*cmd.start), cmd.width / 2, cmd.width / 2)
                continue
            pen = QtGui.QPen(_color(cmd.color))
            pen.setWidthF(cmd.width)
            pen.setCapStyle(round_cap if cmd.round_cap else flat_cap)
            painter.setPen(pen)
            painter.drawLine(QtCore.QPointF(*cmd.start), QtCore.QPointF(*cmd.end))

        elif isinstance(cmd, Label):
            font = painter.font()
            font.setPixelSize(cmd.size)
            painter.setFont(font)
            painter.setPen(_color(cmd.color))
            x, y = cmd.position
            box = QtCore.QRectF(x - cmd.size * 2, y - cmd.size, cmd.size * 4, cmd.size * 2)
            painter.drawText(box, align_center, cmd.text)


class DialView(QtWidgets.QWidget):
    """Canvas showing the 24-hour dial of a ClockState."""

    def __init__(self, state, parent=None):
        super().__init__(parent)
        self.state = state
        self.setMinimumSize(300, 300)

    def paintEvent(self, event):
        painter = QtGui.QPainter(self)
        painter.setRenderHint(qt_enum(QtGui.QPainter, 'RenderHint', 'Antialiasing'))
        paint_face(painter, face_for(self.state, self.width(), self.height()))
        painter.end()


class SolunarClock(QtWidgets.QWidget):
    """Main window: the dial above the current moon phase icon.

    Args:
        state: ClockState to display; updated in place on every tick
        provider: event provider used on day rollover
        settings: ClockSettings (tick interval, asset directory)
        tzinfo: time zone of the displayed clock, None for the local zone
    """

    def __init__(self, state, provider, settings, tzinfo):
        super().__init__()
        self.setWindowTitle("Solunar Clock")
        self.state = state
        self.provider = provider
        self.settings = settings
        self.tzinfo = tzinfo
        self._shown_phase = None

        r, g, b = WINDOW_BACKGROUND
        self.setStyleSheet(f"background-color: rgb({r}, {g}, {b}); color: white;")
        self.resize(600, 700)

        self.dial = DialView(state)
        self.moon = QtWidgets.QLabel()
        self.moon.setAlignment(qt_enum(QtCore.Qt, 'AlignmentFlag', 'AlignCenter'))

        layout = QtWidgets.QVBoxLayout()
        layout.setContentsMargins(20, 20, 20, 20)
        layout.addWidget(self.dial, 1)
        layout.addWidget(self.moon)
        self.setLayout(layout)
        self._update_moon()

        self.timer = QtCore.QTimer()
        self.timer.timeout.connect(self._tick)
        self.timer.start(int(settings.tick_seconds * 1000))

    def now(self):
        return local_now(self.tzinfo)

    def _tick(self):
        """Called by the timer; repaints only when the displayed minute changes."""
        if handle_tick(self.state, self.now(), self.provider):
            self._update_moon()
            self.dial.update()

    def _update_moon(self):
        phase = self.state.phase
        if phase == self._shown_phase:
            return
        self._shown_phase = phase
        path = os.path.join(self.settings.assets, phase.asset)
        pixmap = QtGui.QPixmap(path)
        if pixmap.isNull():
            logger.warning("Moon image %s not found, showing phase name", path)
            self.moon.setText(phase.label)
        else:
            self.moon.setPixmap(pixmap)
        self.moon.setToolTip(phase.label)
