"""Easing curves used by the render stage.

Functions take a normalized time t (0.0 to 1.0) and return a normalized
value.
"""


def ease_out_back(t: float) -> float:
    """Decelerate with slight overshoot, for the pastry pop-in."""
    c1 = 1.70158
    c3 = c1 + 1
    return 1 + c3 * pow(t - 1, 3) + c1 * pow(t - 1, 2)
