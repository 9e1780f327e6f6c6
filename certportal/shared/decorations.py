"""Decorative science motifs drawn onto a reportlab canvas.

Anchors are reportlab points (origin bottom-left). Offsets passed to the
local ``at`` helpers are millimetres measured right and *down* from the
anchor, multiplied by ``scale``.
"""

from __future__ import annotations

import math

from reportlab.lib.colors import HexColor, white

_MM = 72 / 25.4

SLATE = HexColor("#475569")
SLATE_LIGHT = HexColor("#94a3b8")
DEEP_CYAN = HexColor("#083344")
BRIGHT_CYAN = HexColor("#06b6d4")
EMBLEM_RING = HexColor("#164e63")

HELIX_STEPS = 12
HELIX_PHASE_STEP = 0.9


def _mm(v: float) -> float:
    return v * _MM


def _locator(x: float, y: float, scale: float):
    def at(dx: float, dy: float) -> tuple[float, float]:
        return x + _mm(dx * scale), y - _mm(dy * scale)

    return at


def draw_atom(c, x: float, y: float, scale: float) -> None:
    """Nucleus with two crossed orbits, a ring and three electrons."""
    at = _locator(x, y, scale)

    c.setLineWidth(_mm(0.4 * scale))
    c.setFillColor(DEEP_CYAN)
    c.circle(x, y, _mm(2.5 * scale), stroke=0, fill=1)

    c.setStrokeColor(DEEP_CYAN)
    rx, ry = _mm(9 * scale), _mm(3 * scale)
    c.ellipse(x - rx, y - ry, x + rx, y + ry, stroke=1, fill=0)
    c.ellipse(x - ry, y - rx, x + ry, y + rx, stroke=1, fill=0)
    c.circle(x, y, _mm(7 * scale), stroke=1, fill=0)

    c.setFillColor(BRIGHT_CYAN)
    for dx, dy in ((9, 0), (0, -9), (-5, 5)):
        ex, ey = at(dx, dy)
        c.circle(ex, ey, _mm(1 * scale), stroke=0, fill=1)


def draw_dna_helix(c, x: float, y: float, height: float, scale: float) -> None:
    """Vertical double helix running ``height`` mm downward from (x, y)."""
    at = _locator(x, y, 1.0)
    width = 14 * scale
    step_height = height / HELIX_STEPS

    for i in range(HELIX_STEPS):
        cur = i * step_height
        offset1 = math.sin(i * HELIX_PHASE_STEP) * (width / 2)
        offset2 = math.sin(i * HELIX_PHASE_STEP + math.pi) * (width / 2)
        x1, y1 = at(width / 2 + offset1, cur)
        x2, y2 = at(width / 2 + offset2, cur)

        c.setStrokeColor(SLATE_LIGHT)
        c.setLineWidth(_mm(0.5 * scale))
        c.line(x1, y1, x2, y2)

        c.setFillColor(DEEP_CYAN)
        c.circle(x1, y1, _mm(1.2 * scale), stroke=0, fill=1)
        c.circle(x2, y2, _mm(1.2 * scale), stroke=0, fill=1)


def draw_microscope(c, x: float, y: float, scale: float) -> None:
    at = _locator(x, y, scale)
    c.setStrokeColor(DEEP_CYAN)
    c.setFillColor(DEEP_CYAN)
    c.setLineWidth(_mm(0.6 * scale))

    # base plate
    bx, by = at(-6, 10)
    c.rect(bx, by, _mm(12 * scale), _mm(2 * scale), stroke=0, fill=1)
    # arm
    c.line(*at(-3, 8), *at(-3, -2))
    c.line(*at(-3, -2), *at(2, -5))
    # tube and eyepiece
    tx, ty = at(1, -2)
    c.rect(tx, ty, _mm(2.5 * scale), _mm(6 * scale), stroke=1, fill=0)
    c.line(*at(2, -8), *at(5, -8))
    # stage
    c.setLineWidth(_mm(1 * scale))
    c.line(*at(-3, 4), *at(4, 4))


def draw_emblem(c, x: float, y: float, radius: float) -> None:
    """White roundel with a microscope, used at the top of the page."""
    c.setStrokeColor(EMBLEM_RING)
    c.setFillColor(white)
    c.setLineWidth(_mm(1))
    c.circle(x, y, radius, stroke=1, fill=1)
    draw_microscope(c, x, y, 0.9)
