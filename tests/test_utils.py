import pytest

from nepali_datepicker.types import ISO, CalendarDate, DisplayLanguage, LocaleFormat
from nepali_datepicker.utils import (
    detect_ad_format,
    format_ad_date,
    get_nepali_month_name,
    get_weekday_labels,
    parse_ad_date,
    parse_bs_text,
    resolve_locale_format,
    to_ascii_digits,
    to_local_digits,
)


# --------------------------- NUMERALS ---------------------------

def test_local_digits_nepali():
    assert to_local_digits('2082-12-08', DisplayLanguage.NE) == '२०८२-१२-०८'


def test_local_digits_english_is_identity():
    assert to_local_digits('2082-12-08', DisplayLanguage.EN) == '2082-12-08'


def test_ascii_digits_leave_other_text_alone():
    assert to_ascii_digits('बि.सं.: २०८२-१२-०८ abc') == 'बि.सं.: 2082-12-08 abc'


@pytest.mark.parametrize('text', ['0123456789', '2082-12-08', '03/22/2026', ''])
def test_numeral_round_trip(text):
    assert to_ascii_digits(to_local_digits(text, DisplayLanguage.NE)) == text


def test_local_digits_accepts_integers():
    assert to_local_digits(32, 'ne') == '३२'


# --------------------------- LOCALE ---------------------------

@pytest.mark.parametrize('locale_code, region_code, expected', [
    ('en-GB', None, LocaleFormat.DMY),
    ('en-US', None, LocaleFormat.MDY),
    (None, 'GB', LocaleFormat.DMY),
    ('xx-XX', None, LocaleFormat.MDY),
    (None, None, LocaleFormat.MDY),
    ('en_AU', None, LocaleFormat.DMY),
    ('ne-NP', None, LocaleFormat.DMY),
    ('hi', None, LocaleFormat.DMY),
    ('en-CA', 'GB', LocaleFormat.MDY),
    ('fr-FR', 'US', LocaleFormat.MDY),
    (None, 'np', LocaleFormat.DMY),
])
def test_resolve_locale_format(locale_code, region_code, expected):
    assert resolve_locale_format(locale_code, region_code) is expected


def test_locale_takes_precedence_over_region():
    assert resolve_locale_format('en-US', 'GB') is LocaleFormat.MDY
    assert resolve_locale_format('en-GB', 'US') is LocaleFormat.DMY


def test_hindi_prefix_does_not_match_other_languages():
    # "hr" (Croatian) is not a Hindi locale
    assert resolve_locale_format('hr-HR', None) is LocaleFormat.MDY


# --------------------------- PARSING ---------------------------

def test_parse_mdy():
    assert parse_ad_date('03/22/2026', LocaleFormat.MDY) == CalendarDate(2026, 3, 22)


def test_parse_dmy():
    assert parse_ad_date('22/03/2026', LocaleFormat.DMY) == CalendarDate(2026, 3, 22)


def test_parse_iso_ignores_locale_format():
    assert parse_ad_date('2026-03-22', LocaleFormat.DMY) == CalendarDate(2026, 3, 22)
    assert parse_ad_date('2026-03-22', LocaleFormat.MDY) == CalendarDate(2026, 3, 22)


def test_parse_devanagari_digits():
    assert parse_ad_date('०३/२२/२०२६', LocaleFormat.MDY) == CalendarDate(2026, 3, 22)


@pytest.mark.parametrize('raw', ['', None, '3/2/26', '03-22-2026', '03/22', 'aa/bb/cccc', '03/22/2026/1', '03/2x/2026'])
def test_parse_rejects(raw):
    assert parse_ad_date(raw, LocaleFormat.MDY) is None


def test_parse_day_overflow_rolls_forward():
    # 31 April -> 1 May
    assert parse_ad_date('04/31/2026', LocaleFormat.MDY) == CalendarDate(2026, 5, 1)


def test_parse_month_overflow_rolls_year():
    assert parse_ad_date('13/01/2026', LocaleFormat.MDY) == CalendarDate(2027, 1, 1)


def test_parse_day_zero_rolls_back():
    assert parse_ad_date('03/00/2026', LocaleFormat.MDY) == CalendarDate(2026, 2, 28)


def test_parse_two_digit_year_is_twentieth_century():
    assert parse_ad_date('03/22/0026', LocaleFormat.MDY) == CalendarDate(1926, 3, 22)


# --------------------------- FORMATTING ---------------------------

def test_format_all_conventions():
    value = CalendarDate(2026, 3, 8)
    assert format_ad_date(value, ISO) == '2026-03-08'
    assert format_ad_date(value, LocaleFormat.DMY) == '08/03/2026'
    assert format_ad_date(value, LocaleFormat.MDY) == '03/08/2026'


@pytest.mark.parametrize('raw, fmt, normalized', [
    ('3/8/2026', LocaleFormat.MDY, '03/08/2026'),
    ('8/3/2026', LocaleFormat.DMY, '08/03/2026'),
    ('12/31/1999', LocaleFormat.MDY, '12/31/1999'),
    ('29/02/2024', LocaleFormat.DMY, '29/02/2024'),
])
def test_parse_format_round_trip(raw, fmt, normalized):
    assert format_ad_date(parse_ad_date(raw, fmt), fmt) == normalized


# --------------------------- DETECTION ---------------------------

@pytest.mark.parametrize('raw, expected', [
    ('03/22/2026', LocaleFormat.MDY),
    ('22/03/2026', LocaleFormat.DMY),
    ('2026-03-22', ISO),
    ('03/04/2026', None),
    ('', None),
    ('garbage', None),
])
def test_detect_ad_format(raw, expected):
    assert detect_ad_format(raw) == expected


# --------------------------- BS TEXT & LABELS ---------------------------

@pytest.mark.parametrize('raw', ['2082-12-08', 'BS: 2082-12-08', 'बि.सं.: २०८२-१२-०८', ' 2082-12-08 '])
def test_parse_bs_text(raw):
    assert parse_bs_text(raw) == CalendarDate(2082, 12, 8)


@pytest.mark.parametrize('raw', ['BS: --', '2082-12-8', '2082/12/08', None, 'BS: pending'])
def test_parse_bs_text_rejects(raw):
    assert parse_bs_text(raw) is None


def test_month_names():
    assert get_nepali_month_name(1) == 'Baisakh'
    assert get_nepali_month_name(12, DisplayLanguage.NE) == 'चैत्र'


@pytest.mark.parametrize('month', [0, 13])
def test_month_name_out_of_range(month):
    with pytest.raises(ValueError):
        get_nepali_month_name(month)


def test_weekday_labels():
    assert get_weekday_labels(DisplayLanguage.EN)[0] == 'Sun'
    assert len(get_weekday_labels(DisplayLanguage.NE)) == 7


def test_calendar_date_bounds():
    with pytest.raises(ValueError):
        CalendarDate(2082, 13, 1)
    with pytest.raises(ValueError):
        CalendarDate(2082, 1, 33)
    assert CalendarDate(2082, 3, 32).iso == '2082-03-32'
