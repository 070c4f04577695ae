"""SVG geometry for the monthly report.

The report embeds plain SVG so the document stays self-contained and
byte-identical for the same input.  Every number written into the markup
goes through :func:`_num`, which prints a fixed two-decimal precision.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .models import MonthlyTotals

EXPENSES_COLOR = '#ef4444'
SAVED_COLOR = '#10b981'
REMAINING_COLOR = '#3b82f6'
TRACK_COLOR = '#e0e0e0'
BAR_COLOR = '#3b82f6'

RING_STROKE = 20
BAR_LABEL_SPACE = 40


@dataclass(frozen=True)
class RingSegment:
    key: str
    value: float
    length: float
    offset: float
    color: str


@dataclass(frozen=True)
class Bar:
    label: str
    value: float
    x: float
    y: float
    width: float
    height: float


def _num(value: float) -> str:
    return f"{value:.2f}"


def ring_segments(expenses: float, saved: float, remaining: float, radius: float) -> List[RingSegment]:
    """Arc segments for the budget ring, in the fixed order expenses, saved, remaining.

    ``remaining`` is clamped at zero.  Lengths are proportional to
    ``max(expenses + saved + remaining, 1)`` so an all-zero month draws
    nothing instead of dividing by zero.  Each segment's dash offset
    starts where the previous one ended.  Zero-length segments are
    omitted.
    """
    values = np.array([max(expenses, 0.0), max(saved, 0.0), max(remaining, 0.0)], dtype=float)
    circumference = 2 * math.pi * radius
    total = max(float(values.sum()), 1.0)
    lengths = values / total * circumference
    preceding = np.concatenate(([0.0], np.cumsum(lengths)[:-1]))
    offsets = circumference - lengths - preceding

    segments = []
    for key, value, length, offset, color in zip(
        ('expenses', 'saved', 'remaining'),
        values,
        lengths,
        offsets,
        (EXPENSES_COLOR, SAVED_COLOR, REMAINING_COLOR),
    ):
        if value > 0:
            segments.append(RingSegment(key, float(value), float(length), float(offset), color))
    return segments


def bar_geometry(daily: Sequence[Tuple[str, float]], width: float, height: float) -> List[Bar]:
    """Bars for ``(label, value)`` pairs scaled to the tallest value.

    The bottom :data:`BAR_LABEL_SPACE` pixels are left for day labels.
    """
    if not daily:
        return []
    values = np.array([max(float(value), 0.0) for _, value in daily], dtype=float)
    slot = width / max(len(daily), 1)
    max_height = height - BAR_LABEL_SPACE
    peak = float(values.max())
    heights = values / peak * max_height if peak > 0 else np.zeros_like(values)
    return [
        Bar(
            label=str(label),
            value=float(value),
            x=index * slot,
            y=max_height - float(bar_height),
            width=slot,
            height=float(bar_height),
        )
        for index, ((label, _), value, bar_height) in enumerate(zip(daily, values, heights))
    ]


def donut_svg(totals: MonthlyTotals, center_label: str, size: int = 200) -> str:
    """Budget ring with the formatted remaining amount in the middle."""
    radius = size / 2 - 10
    center = size / 2
    circumference = 2 * math.pi * radius
    label_color = EXPENSES_COLOR if totals.remaining < 0 else '#111827'

    parts = [
        f'<svg width="{size}" height="{size}" viewBox="0 0 {size} {size}" xmlns="http://www.w3.org/2000/svg">',
        f'<circle cx="{_num(center)}" cy="{_num(center)}" r="{_num(radius)}" fill="none" '
        f'stroke="{TRACK_COLOR}" stroke-width="{RING_STROKE}"/>',
        f'<g transform="rotate(-90 {_num(center)} {_num(center)})">',
    ]
    for segment in ring_segments(totals.expenses, totals.saved, totals.chart_remaining, radius):
        parts.append(
            f'<circle cx="{_num(center)}" cy="{_num(center)}" r="{_num(radius)}" fill="none" '
            f'stroke="{segment.color}" stroke-width="{RING_STROKE}" '
            f'stroke-dasharray="{_num(segment.length)} {_num(circumference)}" '
            f'stroke-dashoffset="{_num(segment.offset)}"/>'
        )
    parts.append('</g>')
    parts.append(
        f'<text x="{_num(center)}" y="{_num(center)}" text-anchor="middle" dominant-baseline="middle" '
        f'font-size="16" font-weight="bold" fill="{label_color}">{center_label}</text>'
    )
    parts.append('</svg>')
    return '\n'.join(parts)


def bar_chart_svg(daily: Sequence[Tuple[str, float]], width: int = 600, height: int = 200) -> str:
    """Daily spending bars; labels are the day of month taken from ``YYYY-MM-DD`` keys."""
    bars = bar_geometry(daily, width, height)
    parts = [f'<svg width="{width}" height="{height}" viewBox="0 0 {width} {height}" xmlns="http://www.w3.org/2000/svg">']
    for bar in bars:
        day = bar.label.rsplit('-', 1)[-1].lstrip('0') or '0'
        parts.append(
            f'<rect x="{_num(bar.x + 2)}" y="{_num(bar.y)}" width="{_num(max(bar.width - 4, 0.0))}" '
            f'height="{_num(bar.height)}" fill="{BAR_COLOR}" rx="2"/>'
        )
        parts.append(
            f'<text x="{_num(bar.x + bar.width / 2)}" y="{_num(height - BAR_LABEL_SPACE + 15)}" '
            f'text-anchor="middle" font-size="10" fill="#6b7280">{day}</text>'
        )
    parts.append('</svg>')
    return '\n'.join(parts)
