"""Trailing time-window scan shared by the per-sample metrics."""

from typing import Callable, List, Optional, Sequence

from ..exceptions import ValidationError


def trailing_window_starts(time_s: Sequence[float], window_s: float) -> List[Optional[int]]:
    """
    Find the start of the trailing window for every index.

    For index ``i`` the start is the largest ``j < i`` with
    ``time_s[i] - time_s[j] >= window_s``: the shortest window that still
    spans ``window_s`` seconds. Where no such ``j`` exists (the window is not
    yet full, including index 0) the start is None.

    Runs in linear time; ``time_s`` must be non-decreasing.

    Args:
        time_s: Non-decreasing timestamps in seconds
        window_s: Window duration in seconds (must be positive)

    Returns:
        Start index (or None) for each index of ``time_s``

    Raises:
        ValidationError: If window_s is not positive
    """
    if window_s <= 0:
        raise ValidationError("window_s must be positive", field="window_s")

    starts: List[Optional[int]] = []
    j = -1  # largest index known to satisfy the window for the current i
    for i, t in enumerate(time_s):
        while j + 1 < i and t - time_s[j + 1] >= window_s:
            j += 1
        starts.append(j if j >= 0 and t - time_s[j] >= window_s else None)
    return starts


def apply_trailing_window(
    time_s: Sequence[float],
    window_s: float,
    aggregate: Callable[[int, int], Optional[float]],
) -> List[Optional[float]]:
    """
    Map an aggregate over the trailing window of every index.

    Args:
        time_s: Non-decreasing timestamps in seconds
        window_s: Window duration in seconds
        aggregate: Called as ``aggregate(j, i)`` with the window bounds;
            returns the metric value or None

    Returns:
        One value per index; None where the window is not yet full
    """
    return [
        None if start is None else aggregate(start, i)
        for i, start in enumerate(trailing_window_starts(time_s, window_s))
    ]
