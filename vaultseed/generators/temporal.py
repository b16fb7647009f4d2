"""
Temporal Data Generator Module

Generates bounded random calendar days for date-of-birth fields.
"""

import numpy as np
from typing import Optional, Union
from datetime import date, datetime, timedelta
import logging

logger = logging.getLogger(__name__)

DEFAULT_START = date(1985, 1, 1)


def _as_date(value: Union[str, date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value, "%Y-%m-%d").date()


class RandomDayIterator:
    """
    Infinite iterator of random days in ``[start, end)``

    Each value is ``start`` plus a uniform integer number of days drawn from
    ``[0, (end - start).days)``. The sequence never ends on its own; callers
    decide how many values to pull. A new instance starts a new sequence.
    """

    def __init__(
        self,
        start: Union[str, date, datetime] = DEFAULT_START,
        end: Optional[Union[str, date, datetime]] = None,
        seed: Optional[int] = None
    ):
        """
        Args:
            start: First possible day (default 1985-01-01)
            end: Exclusive upper bound (default today)
            seed: Seed for the random source; None draws fresh entropy
        """
        self.start = _as_date(start)
        self.end = _as_date(end) if end is not None else date.today()
        self.range_days = (self.end - self.start).days

        if self.range_days <= 0:
            raise ValueError(f"Random day range is empty: {self.start} to {self.end}")

        self.rng = np.random.default_rng(seed)
        logger.debug(f"Random days between {self.start} and {self.end} ({self.range_days} days)")

    def __iter__(self) -> "RandomDayIterator":
        return self

    def __next__(self) -> date:
        return self.start + timedelta(days=int(self.rng.integers(0, self.range_days)))
