"""
Nepali Datepicker - Bikram Sambat display and month picker for AD date fields
"""

__version__ = '1.0.0'
__author__ = 'Nepali Datepicker Team'

# Import commonly used functions for easy access
from .types import CalendarDate, DisplayLanguage, LocaleFormat, MonthLayout
from .utils import (
    to_local_digits,
    to_ascii_digits,
    resolve_locale_format,
    parse_ad_date,
    format_ad_date,
    get_nepali_month_name,
    NEPALI_MONTHS,
)

__all__ = [
    'CalendarDate',
    'DisplayLanguage',
    'LocaleFormat',
    'MonthLayout',
    'to_local_digits',
    'to_ascii_digits',
    'resolve_locale_format',
    'parse_ad_date',
    'format_ad_date',
    'get_nepali_month_name',
    'NEPALI_MONTHS',
]
