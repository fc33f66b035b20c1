from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional


class Day(Enum):
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


class Month(Enum):
    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12


@dataclass(frozen=True)
class Zone:
    sign: bool
    hour_offset: int
    minute_offset: int

    def utcoffset(self) -> timedelta:
        delta = timedelta(hours=self.hour_offset, minutes=self.minute_offset)
        return delta if self.sign else -delta

    def __str__(self) -> str:
        return f"{'+' if self.sign else '-'}{self.hour_offset:02d}{self.minute_offset:02d}"


@dataclass(frozen=True)
class Time:
    hour: int
    minute: int
    second: int = 0


@dataclass(frozen=True)
class TimeWithZone:
    time: Time
    zone: Zone


@dataclass(frozen=True)
class Date:
    day: int
    month: Month
    year: int


@dataclass(frozen=True)
class DateTime:
    date: Date
    time: TimeWithZone
    day_name: Optional[Day] = None

    def to_datetime(self) -> datetime:
        """
        Aware datetime for this value. A leap second is clamped to 59.
        Raises ValueError for impossible dates such as 31 February, or for
        zone offsets of a day or more.
        """
        t = self.time.time
        return datetime(
            self.date.year,
            self.date.month.value,
            self.date.day,
            t.hour,
            t.minute,
            min(t.second, 59),
            tzinfo=timezone(self.time.zone.utcoffset()),
        )

    def to_dict(self) -> dict:
        t = self.time.time
        return {
            "day_name": self.day_name.name.capitalize() if self.day_name else None,
            "day": self.date.day,
            "month": self.date.month.value,
            "year": self.date.year,
            "hour": t.hour,
            "minute": t.minute,
            "second": t.second,
            "zone": str(self.time.zone),
        }
