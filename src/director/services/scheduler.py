"""Cadence computation for automation schedules.

Pure functions only: the same inputs always give the same timestamp.
"""

from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from src.director.models.enums import Frequency

DEFAULT_CUSTOM_INTERVAL = timedelta(days=7)

_FIXED_OFFSETS: dict[Frequency, timedelta] = {
    Frequency.DAILY: timedelta(hours=24),
    Frequency.WEEKLY: timedelta(days=7),
    Frequency.BIWEEKLY: timedelta(days=14),
}


def compute_next_run(
    frequency: Frequency | str,
    from_: datetime,
    custom_interval: timedelta | None = None,
) -> datetime:
    """Compute the next scheduled run after ``from_``.

    Args:
        frequency: Cadence of the automation.
        from_: Reference time, usually the start of the run just finished.
        custom_interval: Offset for ``custom`` cadences. The free-text cadence
            description is never parsed, so callers pass the configured
            offset; defaults to seven days.

    Returns:
        The next run timestamp, strictly later than ``from_``. Monthly
        cadences keep the day of month, clamped to the target month's length
        (Jan 31 -> Feb 28/29).

    Raises:
        ValueError: If ``custom_interval`` is not positive.
    """
    frequency = Frequency(frequency)

    if frequency in _FIXED_OFFSETS:
        return from_ + _FIXED_OFFSETS[frequency]

    if frequency == Frequency.MONTHLY:
        return from_ + relativedelta(months=1)

    interval = custom_interval if custom_interval is not None else DEFAULT_CUSTOM_INTERVAL
    if interval <= timedelta(0):
        raise ValueError("Custom cadence interval must be positive")
    return from_ + interval
