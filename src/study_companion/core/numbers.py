# src/study_companion/core/numbers.py

from __future__ import annotations


def percent(part: int, whole: int) -> int:
    """
    Integer percentage of part/whole rounded half-up, clamped to [0, 100].

    Ties round up (12.5 -> 13). Returns 0 when whole is 0.
    """
    if whole <= 0 or part <= 0:
        return 0
    if part >= whole:
        return 100
    return (200 * part + whole) // (2 * whole)
