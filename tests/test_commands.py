from io import StringIO

import pytest
from django.core.cache import cache
from django.core.management import call_command
from django.core.management.base import CommandError

from nepali_datepicker.models import BSMonthLayout
from nepali_datepicker.services.month_model import BSMonthModel


@pytest.mark.django_db
def test_probe_calendar_stores_layouts(installed_bridge):
    out = StringIO()
    call_command('probe_calendar', start_year=2082, end_year=2083, stdout=out)

    assert BSMonthLayout.objects.count() == 24
    chaitra = BSMonthLayout.objects.get(bs_year=2082, month=12)
    assert chaitra.days_in_month == 30
    assert chaitra.first_weekday == 0
    assert str(chaitra.ad_start_date) == '2026-03-15'
    assert str(chaitra) == 'Chaitra 2082 (30 days)'
    assert 'Created: 24 entries' in out.getvalue()


@pytest.mark.django_db
def test_probe_calendar_updates_and_skips(installed_bridge):
    call_command('probe_calendar', start_year=2082, end_year=2082, stdout=StringIO())

    out = StringIO()
    call_command('probe_calendar', start_year=2082, end_year=2084, stdout=out)

    assert 'Updated: 12 entries' in out.getvalue()
    assert 'Created: 12 entries' in out.getvalue()
    assert 'Skipped: 12 entries' in out.getvalue()
    assert not BSMonthLayout.objects.filter(bs_year=2084).exists()


@pytest.mark.django_db
def test_probe_calendar_clear(installed_bridge):
    call_command('probe_calendar', start_year=2081, end_year=2081, stdout=StringIO())
    call_command('probe_calendar', start_year=2082, end_year=2082, clear=True, stdout=StringIO())

    assert set(BSMonthLayout.objects.values_list('bs_year', flat=True)) == {2082}


@pytest.mark.django_db
def test_probe_calendar_needs_primitive():
    with pytest.raises(CommandError):
        call_command('probe_calendar', start_year=2082, end_year=2082, stdout=StringIO())


def test_probe_calendar_rejects_reversed_range(installed_bridge):
    with pytest.raises(CommandError):
        call_command('probe_calendar', start_year=2083, end_year=2082, stdout=StringIO())


@pytest.mark.django_db
def test_layout_validation():
    from django.core.exceptions import ValidationError

    layout = BSMonthLayout(bs_year=2082, month=1, days_in_month=35, first_weekday=1)
    with pytest.raises(ValidationError):
        layout.clean()


@pytest.mark.django_db
def test_probe_calendar_honours_cache_timeout(installed_bridge, settings):
    settings.NEPALI_DATEPICKER = {'LAYOUT_CACHE_TIMEOUT': 0}
    call_command('probe_calendar', start_year=2082, end_year=2082, stdout=StringIO())

    assert BSMonthLayout.objects.count() == 12
    assert cache.get(BSMonthModel.cache_key(2082, 1)) is None
