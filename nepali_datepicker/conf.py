"""
Runtime configuration for the date picker, read from ``settings.NEPALI_DATEPICKER``
"""
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from django.conf import settings

from .types import DisplayLanguage, LocaleFormat
from .utils import resolve_locale_format


DEFAULTS = {
    'CONVERTER': None,
    'LANGUAGE': 'en',
    'LOCALE_CODE': None,
    'REGION_CODE': None,
    'RETRY_DELAY': 0.5,
    'MAX_RETRIES': 20,
    'POLL_INTERVAL': 0.25,
    'LAYOUT_CACHE_TIMEOUT': 3600,
    'FALLBACK_CURSOR': (2080, 1),
}

DISPLAY_LABELS = {
    DisplayLanguage.EN: 'BS',
    DisplayLanguage.NE: 'बि.सं.',
}


def get_setting(name):
    options = getattr(settings, 'NEPALI_DATEPICKER', None) or {}
    return options.get(name, DEFAULTS[name])


@dataclass
class DatePickerConfig:
    language: DisplayLanguage = DisplayLanguage.EN
    locale_code: Optional[str] = None
    region_code: Optional[str] = None
    retry_delay: float = 0.5
    max_retries: int = 20
    poll_interval: float = 0.25
    cache_timeout: int = 3600
    fallback_cursor: Tuple[int, int] = field(default=(2080, 1))

    @classmethod
    def from_settings(cls, **overrides) -> 'DatePickerConfig':
        config = cls(
            language=DisplayLanguage.coerce(get_setting('LANGUAGE')),
            locale_code=get_setting('LOCALE_CODE'),
            region_code=get_setting('REGION_CODE'),
            retry_delay=float(get_setting('RETRY_DELAY')),
            max_retries=int(get_setting('MAX_RETRIES')),
            poll_interval=float(get_setting('POLL_INTERVAL')),
            cache_timeout=int(get_setting('LAYOUT_CACHE_TIMEOUT')),
            fallback_cursor=tuple(get_setting('FALLBACK_CURSOR')),
        )
        return replace(config, **overrides) if overrides else config

    @property
    def locale_format(self) -> LocaleFormat:
        return resolve_locale_format(self.locale_code, self.region_code)

    @property
    def label(self) -> str:
        return DISPLAY_LABELS[self.language]

    def toggle_language(self) -> DisplayLanguage:
        """Switch between Nepali and English rendering"""
        self.language = DisplayLanguage.EN if self.language is DisplayLanguage.NE else DisplayLanguage.NE
        return self.language
