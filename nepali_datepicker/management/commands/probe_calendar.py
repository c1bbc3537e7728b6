"""
Management command to probe BS month layouts through the conversion primitive
Usage: python manage.py probe_calendar --start-year 2080 --end-year 2085
"""
from django.core.management.base import BaseCommand, CommandError
from django.db import models, transaction

from nepali_datepicker.conf import DatePickerConfig
from nepali_datepicker.models import BSMonthLayout
from nepali_datepicker.services import BSMonthModel, bridge
from nepali_datepicker.types import CalendarDate


class Command(BaseCommand):
    help = 'Probe and store BS month lengths and first weekdays'

    def add_arguments(self, parser):
        parser.add_argument(
            '--start-year',
            type=int,
            default=2080,
            help='Starting BS year (default: 2080)'
        )
        parser.add_argument(
            '--end-year',
            type=int,
            default=2085,
            help='Ending BS year (default: 2085)'
        )
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear stored layouts before probing'
        )

    def handle(self, *args, **options):
        start_year = options['start_year']
        end_year = options['end_year']

        if end_year < start_year:
            raise CommandError('--end-year must not be before --start-year')
        if not bridge.available():
            raise CommandError('Conversion primitive is not available; set NEPALI_DATEPICKER["CONVERTER"]')

        if options['clear']:
            self.stdout.write(self.style.WARNING('Clearing stored month layouts...'))
            BSMonthLayout.objects.all().delete()

        self.stdout.write(f'Probing month layouts for BS years {start_year}-{end_year}...')

        month_model = BSMonthModel(bridge, timeout=DatePickerConfig.from_settings().cache_timeout)
        created_count = 0
        updated_count = 0
        skipped_count = 0

        with transaction.atomic():
            for year in range(start_year, end_year + 1):
                for month in range(1, 13):
                    layout = month_model.month_layout(year, month)
                    if not layout.is_known:
                        skipped_count += 1
                        self.stdout.write(
                            self.style.WARNING(f'Skipping {year}/{month:02d} - {layout.failure.value}')
                        )
                        continue

                    ad_start = bridge.bs_to_ad(CalendarDate(year, month, 1).iso)

                    obj, created = BSMonthLayout.objects.update_or_create(
                        bs_year=year,
                        month=month,
                        defaults={
                            'days_in_month': layout.day_count,
                            'first_weekday': layout.first_weekday,
                            'ad_start_date': ad_start.date.to_date() if ad_start.ok else None,
                        }
                    )

                    if created:
                        created_count += 1
                    else:
                        updated_count += 1

        self.stdout.write(
            self.style.SUCCESS(
                f'Successfully probed calendar data!\n'
                f'Created: {created_count} entries\n'
                f'Updated: {updated_count} entries\n'
                f'Skipped: {skipped_count} entries'
            )
        )

        year_range = BSMonthLayout.objects.aggregate(
            min_year=models.Min('bs_year'),
            max_year=models.Max('bs_year')
        )
        self.stdout.write(
            self.style.SUCCESS(
                f'\nCalendar Summary:\n'
                f'Total entries: {BSMonthLayout.objects.count()}\n'
                f'Year range: {year_range["min_year"]} - {year_range["max_year"]}'
            )
        )
