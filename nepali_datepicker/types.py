"""
Value types shared by the conversion, calendar and sync services
"""
import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


ISO_DATE_RE = re.compile(r'^(\d{4})-(\d{1,2})-(\d{1,2})$')


class LocaleFormat(str, Enum):
    """Field order of slash-separated AD dates"""
    DMY = 'DMY'
    MDY = 'MDY'


# Accepted by format_ad_date() next to the LocaleFormat members
ISO = 'ISO'


class DisplayLanguage(str, Enum):
    NE = 'ne'
    EN = 'en'

    @classmethod
    def coerce(cls, value, default=None):
        """Accept a member, 'ne'/'en' in any case, or fall back to default"""
        if isinstance(value, cls):
            return value
        if value:
            try:
                return cls(str(value).strip().lower()[:2])
            except ValueError:
                pass
        return default if default is not None else cls.EN


class Failure(str, Enum):
    PARSE = 'parse'
    BRIDGE_UNAVAILABLE = 'bridge_unavailable'
    CONVERSION = 'conversion'
    PROBE_EXHAUSTED = 'probe_exhausted'


@dataclass(frozen=True)
class CalendarDate:
    """A year/month/day triple in either calendar.

    Bounds are the union of both calendars (day 1-32); AD-specific validity is
    checked by ``to_date()``.
    """
    year: int
    month: int
    day: int

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"Invalid month: {self.month}")
        if not 1 <= self.day <= 32:
            raise ValueError(f"Invalid day: {self.day}")
        if self.year < 1:
            raise ValueError(f"Invalid year: {self.year}")

    @property
    def iso(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def to_date(self) -> date:
        return date(self.year, self.month, self.day)

    @classmethod
    def from_date(cls, value: date) -> 'CalendarDate':
        return cls(value.year, value.month, value.day)

    @classmethod
    def from_iso(cls, value: Optional[str]) -> Optional['CalendarDate']:
        """Parse ``YYYY-MM-DD``; returns None when the text does not fit"""
        match = ISO_DATE_RE.match((value or '').strip())
        if not match:
            return None
        try:
            return cls(*(int(part) for part in match.groups()))
        except ValueError:
            return None

    def __str__(self):
        return self.iso


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of one bridge call: either ``value`` or ``failure`` is set"""
    value: Optional[str] = None
    failure: Optional[Failure] = None
    payload: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None and self.value is not None

    @property
    def date(self) -> Optional[CalendarDate]:
        return CalendarDate.from_iso(self.value) if self.ok else None


@dataclass(frozen=True)
class MonthLayout:
    year: int
    month: int
    day_count: int
    first_weekday: int  # 0=Sunday
    failure: Optional[Failure] = None

    @property
    def is_known(self) -> bool:
        return self.failure is None

    @classmethod
    def unknown(cls, year: int, month: int, failure: Failure = Failure.BRIDGE_UNAVAILABLE):
        return cls(year=year, month=month, day_count=0, first_weekday=0, failure=failure)
