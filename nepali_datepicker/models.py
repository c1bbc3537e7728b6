from django.core.exceptions import ValidationError
from django.db import models

from .utils import NEPALI_MONTHS, WEEKDAYS


class BSMonthLayout(models.Model):
    """Snapshot of a probed BS month (length and first weekday)"""

    MONTH_CHOICES = [(index, name) for index, name in enumerate(NEPALI_MONTHS, start=1)]
    WEEKDAY_CHOICES = [(index, name) for index, name in enumerate(WEEKDAYS)]

    bs_year = models.IntegerField(db_index=True, help_text="Bikram Sambat Year")
    month = models.IntegerField(choices=MONTH_CHOICES, db_index=True)
    days_in_month = models.IntegerField(help_text="Number of days in this month")
    first_weekday = models.IntegerField(
        choices=WEEKDAY_CHOICES,
        help_text="Weekday of day 1 (0=Sunday)"
    )
    ad_start_date = models.DateField(
        help_text="Gregorian date when this BS month starts",
        null=True,
        blank=True
    )
    probed_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['bs_year', 'month']
        unique_together = [['bs_year', 'month']]
        verbose_name = "BS Month Layout"
        verbose_name_plural = "BS Month Layouts"

    def __str__(self):
        return f"{self.get_month_display()} {self.bs_year} ({self.days_in_month} days)"

    def clean(self):
        if self.month < 1 or self.month > 12:
            raise ValidationError("Month must be between 1 and 12")
        if self.days_in_month < 29 or self.days_in_month > 32:
            raise ValidationError("Days in month must be between 29 and 32")
        if self.first_weekday < 0 or self.first_weekday > 6:
            raise ValidationError("First weekday must be between 0 and 6")

    @property
    def month_name(self):
        return self.get_month_display()
