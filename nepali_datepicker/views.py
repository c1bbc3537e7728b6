# nepali_datepicker/views.py
from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_GET
import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from .conf import DatePickerConfig
from .services import BSMonthModel, CalendarNavigator, bridge, build_grid
from .types import ISO, CalendarDate, DisplayLanguage, Failure, LocaleFormat
from .utils import (
    WEEKDAYS,
    format_ad_date,
    get_nepali_month_name,
    parse_ad_date,
    parse_bs_text,
    to_local_digits,
)

FAILURE_RESPONSES = {
    Failure.PARSE: ('invalid', 400),
    Failure.CONVERSION: ('error', 422),
    Failure.PROBE_EXHAUSTED: ('error', 422),
    Failure.BRIDGE_UNAVAILABLE: ('pending', 503),
}


def _config_from_request(request):
    """Per-request config: ?locale=, ?region= and ?lang= override settings"""
    config = DatePickerConfig.from_settings()
    locale_code = request.GET.get('locale')
    if not locale_code:
        accept = request.META.get('HTTP_ACCEPT_LANGUAGE', '')
        locale_code = accept.split(',')[0].split(';')[0].strip() or None
    if locale_code:
        config.locale_code = locale_code
    if request.GET.get('region'):
        config.region_code = request.GET['region']
    if request.GET.get('lang'):
        config.language = DisplayLanguage.coerce(request.GET['lang'], config.language)
    return config


def _failure_response(failure, message):
    status, code = FAILURE_RESPONSES[failure]
    return JsonResponse({'status': status, 'message': message}, status=code)


@require_GET
def ad_to_bs_view(request):
    """
    Convert ?date= (AD text in the request's locale convention) to BS.
    """
    raw = request.GET.get('date', '')
    config = _config_from_request(request)

    parsed = parse_ad_date(raw, config.locale_format)
    if parsed is None:
        return _failure_response(Failure.PARSE, f"Could not read AD date: {raw}")

    result = bridge.ad_to_bs(parsed.iso)
    if not result.ok:
        return _failure_response(result.failure, f"Conversion failed for {parsed.iso}: {result.payload}")

    return JsonResponse({
        'status': 'value',
        'ad': parsed.iso,
        'bs': result.value,
        'display': f"{config.label}: {to_local_digits(result.value, config.language)}",
    })


@require_GET
def bs_to_ad_view(request):
    """
    Convert ?date= (BS YYYY-MM-DD) to AD, rendered in ?format= (ISO/DMY/MDY)
    or the request's locale convention.
    """
    raw = request.GET.get('date', '')
    config = _config_from_request(request)

    parsed = parse_bs_text(raw)
    if parsed is None:
        return _failure_response(Failure.PARSE, 'Invalid format. Please use YYYY-MM-DD.')

    requested = (request.GET.get('format') or '').upper()
    if requested == ISO:
        fmt = ISO
    elif requested in LocaleFormat.__members__:
        fmt = LocaleFormat[requested]
    else:
        fmt = config.locale_format

    result = bridge.bs_to_ad(parsed.iso)
    if not result.ok:
        return _failure_response(result.failure, f"Conversion failed for {parsed.iso}: {result.payload}")

    return JsonResponse({
        'status': 'value',
        'bs': parsed.iso,
        'ad': result.value,
        'value': format_ad_date(result.date, fmt),
    })


@require_GET
def calendar_view(request, year, month):
    """Month grid for BS year/month, with ?selected=<day> and ?lang="""
    if not 1 <= month <= 12:
        return JsonResponse({'status': 'invalid', 'message': f"Invalid month: {month}"}, status=400)

    config = _config_from_request(request)
    selected = request.GET.get('selected')
    selected_day = int(selected) if selected and selected.isdigit() else None

    layout = BSMonthModel(bridge, timeout=config.cache_timeout).month_layout(year, month)
    if not layout.is_known:
        return _failure_response(layout.failure, f"Month layout unavailable for {year}-{month:02d}")

    grid = build_grid(layout, selected_day, config.language)
    previous = CalendarNavigator(year, month).step_month(-1)
    following = CalendarNavigator(year, month).step_month(1)

    data = grid.to_dict()
    data.update({
        'status': 'value',
        'day_count': layout.day_count,
        'first_weekday': layout.first_weekday,
        'previous': {'year': previous[0], 'month': previous[1]},
        'next': {'year': following[0], 'month': following[1]},
    })
    return JsonResponse(data)


@require_GET
def export_calendar_view(request, year):
    """Excel sheet with the layout of every month of a BS year"""
    if not bridge.available():
        return _failure_response(Failure.BRIDGE_UNAVAILABLE, 'Conversion primitive is not ready')

    config = DatePickerConfig.from_settings()
    month_model = BSMonthModel(bridge, timeout=config.cache_timeout)

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = f"BS {year}"

    font_header = Font(name='Calibri', size=10, bold=True)
    fill_header = PatternFill(start_color="F8F9FA", end_color="F8F9FA", fill_type="solid")
    align_center = Alignment(horizontal='center', vertical='center')

    headers = ['Month', 'Name', 'नाम', 'Days', 'Starts On', 'AD Start']
    for col, title in enumerate(headers, start=1):
        c = ws.cell(row=1, column=col, value=title)
        c.font = font_header
        c.fill = fill_header
        c.alignment = align_center

    for month in range(1, 13):
        layout = month_model.month_layout(year, month)
        row = month + 1
        ws.cell(row=row, column=1, value=month)
        ws.cell(row=row, column=2, value=get_nepali_month_name(month))
        ws.cell(row=row, column=3, value=get_nepali_month_name(month, DisplayLanguage.NE))
        if layout.is_known:
            ad_start = bridge.bs_to_ad(CalendarDate(year, month, 1).iso)
            ws.cell(row=row, column=4, value=layout.day_count)
            ws.cell(row=row, column=5, value=WEEKDAYS[layout.first_weekday])
            ws.cell(row=row, column=6, value=format_ad_date(ad_start.date) if ad_start.ok else '')
        else:
            ws.cell(row=row, column=4, value=layout.failure.value)

    for col in range(1, len(headers) + 1):
        ws.column_dimensions[get_column_letter(col)].width = 14

    response = HttpResponse(content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
    response['Content-Disposition'] = f'attachment; filename=BS_Calendar_{year}.xlsx'
    wb.save(response)
    return response
