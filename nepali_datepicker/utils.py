"""
Utility functions for numeral localization, locale conventions and AD date text
"""
import re
from datetime import date, timedelta
from typing import List, Optional, Union

from .types import ISO, ISO_DATE_RE, CalendarDate, DisplayLanguage, LocaleFormat


NEPALI_MONTHS = [
    'Baisakh', 'Jestha', 'Ashadh', 'Shrawan', 'Bhadra', 'Ashwin',
    'Kartik', 'Mangsir', 'Poush', 'Magh', 'Falgun', 'Chaitra'
]

NEPALI_MONTHS_NE = [
    'बैशाख', 'जेठ', 'असार', 'श्रावण', 'भदौ', 'असोज',
    'कार्तिक', 'मंसिर', 'पौष', 'माघ', 'फाल्गुन', 'चैत्र'
]

WEEKDAYS = ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']
WEEKDAYS_NE = ['आइत', 'सोम', 'मङ्गल', 'बुध', 'बिही', 'शुक्र', 'शनि']

DEVANAGARI_DIGITS = '०१२३४५६७८९'
_TO_DEVANAGARI = str.maketrans('0123456789', DEVANAGARI_DIGITS)
_TO_ASCII = str.maketrans(DEVANAGARI_DIGITS, '0123456789')

# Locale codes are compared lower-cased with '_' folded to '-'
DMY_LOCALES = ('en-gb', 'en-au', 'en-nz', 'en-ie', 'en-za')
DMY_LOCALE_PREFIXES = ('hi', 'ne')
MDY_LOCALES = ('en-us', 'en-ca')
DMY_REGIONS = {'GB', 'AU', 'NZ', 'IE', 'ZA', 'IN', 'NP'}
MDY_REGIONS = {'US', 'CA'}

_DIGITS_RE = re.compile(r'^\d+$', re.ASCII)

DateFormat = Union[LocaleFormat, str]


# ---------------------------------------------------------------------------
# Numerals
# ---------------------------------------------------------------------------

def to_local_digits(value, lang: DisplayLanguage) -> str:
    """Render ASCII digits in the script of ``lang``; identity for English"""
    text = '' if value is None else str(value)
    if DisplayLanguage.coerce(lang) is DisplayLanguage.NE:
        return text.translate(_TO_DEVANAGARI)
    return text


def to_ascii_digits(value) -> str:
    """Map Devanagari digits back to ASCII, leaving everything else alone"""
    text = '' if value is None else str(value)
    return text.translate(_TO_ASCII)


# ---------------------------------------------------------------------------
# Month / weekday labels
# ---------------------------------------------------------------------------

def get_nepali_month_name(month: int, lang: DisplayLanguage = DisplayLanguage.EN) -> str:
    """Get Nepali month name from month number (1-12)"""
    if 1 <= month <= 12:
        names = NEPALI_MONTHS_NE if DisplayLanguage.coerce(lang) is DisplayLanguage.NE else NEPALI_MONTHS
        return names[month - 1]
    raise ValueError(f"Invalid month: {month}")


def get_weekday_labels(lang: DisplayLanguage = DisplayLanguage.EN) -> List[str]:
    """Sunday-first weekday headers"""
    if DisplayLanguage.coerce(lang) is DisplayLanguage.NE:
        return list(WEEKDAYS_NE)
    return list(WEEKDAYS)


# ---------------------------------------------------------------------------
# Locale conventions
# ---------------------------------------------------------------------------

def _normalize_locale(code: Optional[str]) -> str:
    return (code or '').strip().replace('_', '-').lower()


def resolve_locale_format(locale_code: Optional[str] = None,
                          region_code: Optional[str] = None) -> LocaleFormat:
    """
    Decide day-first vs month-first for slash dates.

    The locale code wins over the region code; anything unrecognised
    resolves to MDY.
    """
    locale = _normalize_locale(locale_code)
    if locale:
        if any(locale == code or locale.startswith(code + '-') for code in DMY_LOCALES):
            return LocaleFormat.DMY
        if any(locale == prefix or locale.startswith(prefix + '-') for prefix in DMY_LOCALE_PREFIXES):
            return LocaleFormat.DMY
        if locale in MDY_LOCALES:
            return LocaleFormat.MDY

    region = (region_code or '').strip().upper()
    if region in DMY_REGIONS:
        return LocaleFormat.DMY
    if region in MDY_REGIONS:
        return LocaleFormat.MDY

    return LocaleFormat.MDY


# ---------------------------------------------------------------------------
# AD date text
# ---------------------------------------------------------------------------

def _utc_normalize(year: int, month: int, day: int) -> Optional[CalendarDate]:
    """Build a date the way UTC calendar arithmetic does.

    Month and day overflow roll forward (and day 0 rolls back), years 0-99
    mean 1900-1999.
    """
    if 0 <= year <= 99:
        year += 1900
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    try:
        return CalendarDate.from_date(date(year, month, 1) + timedelta(days=day - 1))
    except (ValueError, OverflowError):
        return None


def _slash_tokens(text: str) -> Optional[List[int]]:
    parts = [part.strip() for part in text.split('/')]
    if len(parts) != 3 or not all(_DIGITS_RE.match(part) for part in parts):
        return None
    return [int(part) for part in parts]


def parse_ad_date(raw: Optional[str], fmt: LocaleFormat = LocaleFormat.MDY) -> Optional[CalendarDate]:
    """
    Parse free-text AD input into a normalized date

    Args:
        raw: text such as "03/22/2026", "22/03/2026", "2026-03-22" or the
             same with Devanagari digits
        fmt: field order used for slash-separated text

    Returns:
        CalendarDate, or None when the text cannot be read as a date
    """
    text = to_ascii_digits(raw).strip()
    if len(text) < 8:
        return None

    match = ISO_DATE_RE.match(text)
    if match:
        year, month, day = (int(part) for part in match.groups())
        return _utc_normalize(year, month, day)

    tokens = _slash_tokens(text)
    if tokens is None:
        return None

    if LocaleFormat(fmt) is LocaleFormat.DMY:
        day, month, year = tokens
    else:
        month, day, year = tokens
    return _utc_normalize(year, month, day)


def format_ad_date(value: CalendarDate, fmt: DateFormat = ISO) -> str:
    """Render an AD date in ISO, DMY or MDY order with zero padding"""
    if fmt == ISO:
        return value.iso
    dd = f"{value.day:02d}"
    mm = f"{value.month:02d}"
    yyyy = f"{value.year:04d}"
    if LocaleFormat(fmt) is LocaleFormat.DMY:
        return f"{dd}/{mm}/{yyyy}"
    return f"{mm}/{dd}/{yyyy}"


def detect_ad_format(raw: Optional[str]) -> Optional[DateFormat]:
    """
    Work out which convention an existing field value uses.

    Returns ISO, a LocaleFormat when one slash token can only be a day,
    or None when the value is empty or ambiguous.
    """
    text = to_ascii_digits(raw).strip()
    if not text:
        return None
    if ISO_DATE_RE.match(text):
        return ISO
    tokens = _slash_tokens(text)
    if tokens is None:
        return None
    first, second, _ = tokens
    if first > 12 >= second:
        return LocaleFormat.DMY
    if second > 12 >= first:
        return LocaleFormat.MDY
    return None


def weekday_index(value: date) -> int:
    """Day of week with 0=Sunday"""
    return (value.weekday() + 1) % 7


def parse_bs_text(raw: Optional[str]) -> Optional[CalendarDate]:
    """
    Read a BS date typed or displayed as ``YYYY-MM-DD``

    A leading display label such as "BS:" or "बि.सं.:" is ignored and
    Devanagari digits are accepted.
    """
    text = to_ascii_digits(raw).strip()
    if ':' in text:
        text = text.rsplit(':', 1)[1].strip()
    if not re.match(r'^\d{4}-\d{2}-\d{2}$', text):
        return None
    return CalendarDate.from_iso(text)
