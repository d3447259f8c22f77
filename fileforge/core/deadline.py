"""Upload deadline shared by every network call of one operation."""

from __future__ import annotations

import time

from fileforge.core.errors import DeadlineExceededError


class Deadline:
    """A fixed point in time after which work must stop.

    Parameters
    ----------
    seconds:
        Time budget from now.  ``None`` means no deadline.
    """

    def __init__(self, seconds: float | None = None) -> None:
        self._seconds = seconds
        self._expires_at = None if seconds is None else time.monotonic() + seconds

    @property
    def expired(self) -> bool:
        return self._expires_at is not None and time.monotonic() >= self._expires_at

    def remaining(self) -> float | None:
        """Seconds left, or ``None`` when unbounded.

        Raises
        ------
        DeadlineExceededError
            If the deadline has already passed.
        """
        if self._expires_at is None:
            return None
        left = self._expires_at - time.monotonic()
        if left <= 0:
            raise DeadlineExceededError(
                f"operation exceeded its timeout of {self._seconds} seconds"
            )
        return left

    def check(self) -> None:
        """Raise ``DeadlineExceededError`` if the deadline has passed."""
        self.remaining()

    def __repr__(self) -> str:
        return f"Deadline(seconds={self._seconds!r})"
