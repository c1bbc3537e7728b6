"""
Derives BS month lengths and first weekdays by probing the conversion bridge
"""
import logging

from django.core.cache import cache as default_cache

from nepali_datepicker.types import CalendarDate, Failure, MonthLayout
from nepali_datepicker.utils import weekday_index

from .bridge import bridge as default_bridge

logger = logging.getLogger(__name__)

# No BS month is longer than 32 days
PROBE_CEILING = 35
PLAUSIBLE_DAY_COUNTS = range(29, 33)


class BSMonthModel:
    """
    Month layouts without a static calendar table.

    Day ``d`` belongs to the month when BS->AD->BS still lands in the same
    (year, month). Results are cached per (year, month); layouts that came
    back unknown because the bridge was not ready are never cached.
    """

    def __init__(self, bridge=None, cache=None, timeout=3600):
        self.bridge = bridge or default_bridge
        self.cache = cache or default_cache
        self.timeout = timeout

    @staticmethod
    def cache_key(year: int, month: int) -> str:
        return f"bs_month_layout_{year}_{month}"

    def month_layout(self, year: int, month: int) -> MonthLayout:
        """
        Get the layout of a BS month

        Returns:
            MonthLayout; check ``is_known`` before using ``day_count``
        """
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {month}")

        cache_key = self.cache_key(year, month)
        cached_result = self.cache.get(cache_key)
        if cached_result:
            return MonthLayout(**cached_result)

        layout = self._probe(year, month)

        if layout.failure is not Failure.BRIDGE_UNAVAILABLE:
            self.cache.set(cache_key, {
                'year': layout.year,
                'month': layout.month,
                'day_count': layout.day_count,
                'first_weekday': layout.first_weekday,
                'failure': layout.failure,
            }, self.timeout)

        return layout

    def invalidate(self, year: int, month: int):
        self.cache.delete(self.cache_key(year, month))

    def _probe(self, year: int, month: int) -> MonthLayout:
        first = self.bridge.bs_to_ad(CalendarDate(year, month, 1).iso)
        if first.failure is Failure.BRIDGE_UNAVAILABLE:
            return MonthLayout.unknown(year, month)
        if not first.ok:
            logger.warning("BS %s-%02d: day 1 does not convert (%s)", year, month, first.payload)
            return MonthLayout.unknown(year, month, Failure.CONVERSION)

        first_weekday = weekday_index(first.date.to_date())

        day_count = 0
        for day in range(1, PROBE_CEILING + 1):
            outcome = self._confirm_day(year, month, day)
            if outcome is Failure.BRIDGE_UNAVAILABLE:
                return MonthLayout.unknown(year, month)
            if outcome is not None:
                break
            day_count = day
        else:
            logger.warning(
                "BS %s-%02d: probing reached the ceiling of %s days", year, month, PROBE_CEILING
            )
            return MonthLayout(year, month, day_count, first_weekday, Failure.PROBE_EXHAUSTED)

        if day_count < 1:
            logger.warning("BS %s-%02d: day 1 does not round-trip into its own month", year, month)
            return MonthLayout.unknown(year, month, Failure.CONVERSION)
        if day_count not in PLAUSIBLE_DAY_COUNTS:
            logger.warning("BS %s-%02d: implausible month length %s", year, month, day_count)

        return MonthLayout(year, month, day_count, first_weekday)

    def _confirm_day(self, year: int, month: int, day: int):
        """None when the day round-trips into the same month, else the reason it does not"""
        if day > 32:
            # CalendarDate caps days at 32; anything past it is probed as raw text
            probe = f"{year:04d}-{month:02d}-{day:02d}"
        else:
            probe = CalendarDate(year, month, day).iso

        ad_result = self.bridge.bs_to_ad(probe)
        if not ad_result.ok:
            return ad_result.failure

        bs_result = self.bridge.ad_to_bs(ad_result.value)
        if not bs_result.ok:
            return bs_result.failure

        back = bs_result.date
        if (back.year, back.month) != (year, month):
            return Failure.CONVERSION
        return None
