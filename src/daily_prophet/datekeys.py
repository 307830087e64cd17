"""Calendar-day keys for the edition cache."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

STYLES = ("iso", "day_month")

# Genitive month names, as used in "19 октября".
MONTHS_RU = (
    "января",
    "февраля",
    "марта",
    "апреля",
    "мая",
    "июня",
    "июля",
    "августа",
    "сентября",
    "октября",
    "ноября",
    "декабря",
)


class DateKeyer:
    """
    Turn timestamps into the string key for their calendar day.

    The zone and style are fixed when the keyer is built so that the key
    written alongside a record and the key recomputed on read always agree.
    Naive datetimes are read as UTC.
    """

    def __init__(self, tz: str = "UTC", style: str = "iso"):
        if style not in STYLES:
            raise ValueError(
                f"date key style must be one of {', '.join(STYLES)}; got {style!r}."
            )
        try:
            self.zone = ZoneInfo(tz)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown time zone: {tz!r}") from exc
        self.style = style

    def _local_day(self, timestamp: datetime | date) -> date:
        if isinstance(timestamp, datetime):
            if timestamp.tzinfo is None:
                timestamp = timestamp.replace(tzinfo=timezone.utc)
            return timestamp.astimezone(self.zone).date()
        return timestamp

    def key_for(self, timestamp: datetime | date) -> str:
        day = self._local_day(timestamp)
        if self.style == "day_month":
            return f"{day.day} {MONTHS_RU[day.month - 1]}"
        return day.isoformat()

    def today(self, now: Optional[datetime] = None) -> str:
        """Key for the current instant, or for `now` when given."""
        return self.key_for(now or datetime.now(timezone.utc))


def keyer_from_settings(settings) -> DateKeyer:
    return DateKeyer(tz=settings.timezone, style=settings.date_key_style)
