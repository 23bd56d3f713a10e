import logging
import os

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from clockstate import face_for
from face import ArcStroke, Disc, Label, LineStroke, WINDOW_BACKGROUND, LABEL

logger = logging.getLogger(__name__)

# Height of the strip under the dial that holds the moon phase
PHASE_STRIP = 48
ARC_STEPS_PER_TURN = 720


def band_polygon(center, radius, width, start_angle, sweep):
    """Outline of a butt-capped arc stroke as a closed polygon.

    Args:
        center: (x, y) of the dial
        radius: radius of the middle of the stroke
        width: stroke width
        start_angle: start of the arc in radians, clockwise from 3 o'clock
        sweep: clockwise extent of the arc in radians

    Returns:
        list of (x, y) points: the outer edge forwards, then the inner edge backwards
    """
    steps = max(2, int(np.ceil(ARC_STEPS_PER_TURN * sweep / (2 * np.pi))) + 1)
    angles = np.linspace(start_angle, start_angle + sweep, steps)
    cx, cy = center
    outer = radius + width / 2.0
    inner = max(radius - width / 2.0, 0.0)
    xs = np.concatenate([cx + outer * np.cos(angles), cx + inner * np.cos(angles[::-1])])
    ys = np.concatenate([cy + outer * np.sin(angles), cy + inner * np.sin(angles[::-1])])
    return list(zip(xs.tolist(), ys.tolist()))


def _dot(draw, point, diameter, color):
    x, y = point
    r = diameter / 2.0
    draw.ellipse([(x - r, y - r), (x + r, y + r)], fill=color)


def draw_face(draw, commands):
    """Paint face commands onto a PIL ImageDraw."""
    for cmd in commands:
        if isinstance(cmd, Disc):
            _dot(draw, cmd.center, 2 * cmd.radius, cmd.color)

        elif isinstance(cmd, ArcStroke):
            if cmd.sweep <= 0:
                continue
            draw.polygon(band_polygon(cmd.center, cmd.radius, cmd.width, cmd.start_angle, cmd.sweep), fill=cmd.color)

        elif isinstance(cmd, LineStroke):
            if cmd.start != cmd.end:
                draw.line([cmd.start, cmd.end], fill=cmd.color, width=max(1, int(round(cmd.width))))
            if cmd.round_cap:
                _dot(draw, cmd.start, cmd.width, cmd.color)
                _dot(draw, cmd.end, cmd.width, cmd.color)

        elif isinstance(cmd, Label):
            font = ImageFont.load_default(size=cmd.size)
            draw.text(cmd.position, cmd.text, fill=cmd.color, font=font, anchor='mm')


def render(state, size, assets=None):
    """Render the dial of ``state`` and its moon phase to a new RGBA image.

    Args:
        state: ClockState to draw
        size: width and height of the dial in pixels
        assets: directory holding the moon phase images; the phase name is
            written instead when the image is missing

    Returns:
        PIL.Image of ``size`` x ``size + PHASE_STRIP`` pixels
    """
    image = Image.new('RGBA', (size, size + PHASE_STRIP), WINDOW_BACKGROUND + (255,))
    draw = ImageDraw.Draw(image)
    draw_face(draw, face_for(state, size, size))

    phase = state.phase
    icon_path = os.path.join(assets, phase.asset) if assets else None
    if icon_path and os.path.exists(icon_path):
        icon = Image.open(icon_path).convert('RGBA')
        icon.thumbnail((PHASE_STRIP, PHASE_STRIP), Image.BICUBIC)
        layer = Image.new('RGBA', image.size, (0, 0, 0, 0))
        layer.paste(icon, ((size - icon.width) // 2, size + (PHASE_STRIP - icon.height) // 2), icon)
        image = Image.alpha_composite(image, layer)
    else:
        if icon_path:
            logger.warning("Moon image %s not found, writing phase name", icon_path)
        font = ImageFont.load_default(size=16)
        draw.text((size / 2.0, size + PHASE_STRIP / 2.0), phase.label, fill=LABEL, font=font, anchor='mm')

    return image


def save_snapshot(state, path, size, assets=None):
    image = render(state, size, assets)
    if os.path.splitext(path)[1].lower() in ('.jpg', '.jpeg'):
        image = image.convert('RGB')
    image.save(path)
    logger.info("Saved %dx%d snapshot to %s", image.width, image.height, path)
    return image
