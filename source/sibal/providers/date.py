"""This module provides centralized date-related utilities."""

import math
from datetime import datetime, timedelta, timezone


class DateProvider:
    """Provides centralized constants and methods for date handling.

    This class centralizes date-related formats and logic to ensure
    consistency across the application. All arithmetic happens on
    timezone-aware UTC datetimes; naive values coming from the notice store
    are assumed to already be in UTC.
    """

    DISPLAY_DATE_FORMAT = "%d/%m/%Y"
    SECONDS_PER_DAY = 24 * 60 * 60

    @staticmethod
    def now() -> datetime:
        """Returns the current instant as an aware UTC datetime.

        Returns:
            The current UTC datetime.
        """
        return datetime.now(timezone.utc)

    @staticmethod
    def as_utc(value: datetime) -> datetime:
        """Normalizes a datetime to aware UTC.

        Args:
            value: A naive or aware datetime.

        Returns:
            The same instant as an aware UTC datetime.
        """
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @classmethod
    def days_until(cls, deadline: datetime, now: datetime) -> int:
        """Counts whole days until a deadline, rounding partial days up.

        A deadline exactly at ``now`` yields 0, one second later yields 1 and
        anything in the past yields zero or a negative number.

        Args:
            deadline: The deadline instant.
            now: The reference instant.

        Returns:
            ``ceil((deadline - now) / 1 day)``.
        """
        delta = cls.as_utc(deadline) - cls.as_utc(now)
        return math.ceil(delta.total_seconds() / cls.SECONDS_PER_DAY)

    @classmethod
    def format_display(cls, value: datetime | None) -> str:
        """Formats a datetime the way Brazilian notices print dates.

        Args:
            value: The datetime to format.

        Returns:
            The ``DD/MM/YYYY`` representation, or "Não informado".
        """
        if value is None:
            return "Não informado"
        return value.strftime(cls.DISPLAY_DATE_FORMAT)

    @staticmethod
    def shift_days(value: datetime, days: int) -> datetime:
        """Shifts a datetime by a number of days.

        Args:
            value: The starting datetime.
            days: The number of days, negative to go back in time.

        Returns:
            The shifted datetime.
        """
        return value + timedelta(days=days)
