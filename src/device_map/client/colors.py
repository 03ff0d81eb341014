"""Signal quality to marker color."""

from __future__ import annotations

import math

MAX_SIGNAL = 10


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def signal_rgb(signal: float) -> tuple[int, int, int]:
    """Map signal quality onto a red → yellow → green gradient.

    The signal is clamped to [0, 10]. The lower half ramps green up from 0
    with red held at 255; the upper half ramps red down with green held at
    255. Blue is always 0.
    """
    ratio = min(max(signal, 0), MAX_SIGNAL) / MAX_SIGNAL
    if ratio <= 0.5:
        return 255, _round_half_up(255 * ratio * 2), 0
    return _round_half_up(255 * (1 - (ratio - 0.5) * 2)), 255, 0


def color_for_signal(signal: float) -> str:
    """Hex color (``#rrggbb``) for a signal quality value."""
    r, g, b = signal_rgb(signal)
    return f"#{r:02x}{g:02x}{b:02x}"


def signal_class(signal: float) -> str:
    """CSS class used by the popup's signal line."""
    if signal > 7:
        return "signal-high"
    if signal > 3:
        return "signal-medium"
    return "signal-low"
