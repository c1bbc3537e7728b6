"""
BS date filters and the month grid tag.

    {% load bs_dates %}
    {{ invoice.date|bs_date }}            -> "BS: 2082-12-08"
    {{ invoice.date|bs_date:"ne" }}       -> "बि.सं.: २०८२-१२-०८"
    {{ 2082|local_digits:"ne" }}          -> "२०८२"
    {% bs_calendar 2082 12 8 "ne" %}
"""
from datetime import date

from django import template
from django.utils.html import format_html, format_html_join
from django.utils.safestring import mark_safe

from nepali_datepicker.conf import DISPLAY_LABELS, DatePickerConfig
from nepali_datepicker.services import BSMonthModel, bridge, build_grid
from nepali_datepicker.services.sync import PLACEHOLDERS, DisplayState
from nepali_datepicker.types import CalendarDate, DisplayLanguage
from nepali_datepicker.utils import parse_ad_date, to_local_digits

register = template.Library()


def _language(lang):
    return DisplayLanguage.coerce(lang, DatePickerConfig.from_settings().language)


@register.filter(name='bs_date')
def bs_date(value, lang=None):
    """Display an AD ``date`` (or AD text) as ``<label>: <BS date>``"""
    lang = _language(lang)
    label = DISPLAY_LABELS[lang]

    if not value:
        return f"{label}: {PLACEHOLDERS[DisplayState.EMPTY]}"
    if isinstance(value, date):
        parsed = CalendarDate.from_date(value)
    else:
        parsed = parse_ad_date(str(value), DatePickerConfig.from_settings().locale_format)
    if parsed is None:
        return f"{label}: {PLACEHOLDERS[DisplayState.INVALID]}"

    result = bridge.ad_to_bs(parsed.iso)
    if result.ok:
        return f"{label}: {to_local_digits(result.value, lang)}"
    if not bridge.available():
        return f"{label}: {PLACEHOLDERS[DisplayState.PENDING]}"
    return f"{label}: {PLACEHOLDERS[DisplayState.ERROR]}"


@register.filter(name='local_digits')
def local_digits(value, lang=None):
    return to_local_digits(value, _language(lang))


@register.simple_tag
def bs_calendar(year, month, selected=None, lang=None):
    """
    Render a BS month as an HTML table, or a placeholder when its
    layout cannot be resolved yet.
    """
    config = DatePickerConfig.from_settings()
    lang = DisplayLanguage.coerce(lang, config.language)
    layout = BSMonthModel(bridge, timeout=config.cache_timeout).month_layout(int(year), int(month))
    if not layout.is_known:
        return format_html(
            '<div class="bs-calendar bs-calendar--{}">{}</div>',
            layout.failure.value,
            PLACEHOLDERS[DisplayState.PENDING if not bridge.available() else DisplayState.ERROR],
        )

    selected_day = int(selected) if str(selected).isdigit() else None
    grid = build_grid(layout, selected_day, lang)
    header = format_html_join('', '<th>{}</th>', ((label,) for label in grid.weekdays))
    body = format_html_join('', '<tr>{}</tr>', ((_render_row(row),) for row in grid.rows))
    return format_html(
        '<table class="bs-calendar" data-year="{}" data-month="{}">'
        '<caption>{}</caption><thead><tr>{}</tr></thead><tbody>{}</tbody></table>',
        grid.year, grid.month, grid.title, header, body,
    )


def _render_cell(cell):
    if cell.is_blank:
        return mark_safe('<td class="bs-blank"></td>')
    return format_html(
        '<td class="bs-day{}" data-day="{}">{}</td>',
        ' bs-day--selected' if cell.selected else '', cell.day, cell.label,
    )


def _render_row(row):
    return format_html_join('', '{}', ((_render_cell(cell),) for cell in row))
