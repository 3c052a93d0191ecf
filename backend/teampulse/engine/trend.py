"""Linear trend estimation for score series — pure functions."""

from __future__ import annotations

TREND_WINDOW = 7


def linear_trend(scores: list[float], window: int = TREND_WINDOW) -> float:
    """Ordinary-least-squares slope of ``scores`` against their index.

    Only the trailing ``window`` points are fitted. Fewer than two points
    have no trend and return 0.0.

        slope = (nΣxy − ΣxΣy) / (nΣx² − (Σx)²)
    """
    points = list(scores)[-window:]
    n = len(points)
    if n < 2:
        return 0.0

    sum_x = n * (n - 1) / 2
    sum_y = sum(points)
    sum_xy = sum(x * y for x, y in enumerate(points))
    sum_x2 = n * (n - 1) * (2 * n - 1) / 6

    return (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
