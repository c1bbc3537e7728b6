"""
Month grid model and month/year navigation for the BS picker
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from nepali_datepicker.types import CalendarDate, DisplayLanguage, MonthLayout
from nepali_datepicker.utils import (
    format_ad_date,
    get_nepali_month_name,
    get_weekday_labels,
    parse_bs_text,
    to_local_digits,
)

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
FALLBACK_CURSOR = (2080, 1)


@dataclass(frozen=True)
class GridCell:
    day: Optional[int]
    label: str = ''
    selected: bool = False

    @property
    def is_blank(self) -> bool:
        return self.day is None


@dataclass
class GridModel:
    year: int
    month: int
    title: str
    weekdays: List[str]
    rows: List[List[GridCell]] = field(default_factory=list)

    @property
    def selected_day(self) -> Optional[int]:
        for row in self.rows:
            for cell in row:
                if cell.selected:
                    return cell.day
        return None

    def to_dict(self):
        return {
            'year': self.year,
            'month': self.month,
            'title': self.title,
            'weekdays': self.weekdays,
            'rows': [
                [{'day': cell.day, 'label': cell.label, 'selected': cell.selected} for cell in row]
                for row in self.rows
            ],
        }


def build_grid(layout: MonthLayout, selected_day: Optional[int] = None,
               lang: DisplayLanguage = DisplayLanguage.EN) -> GridModel:
    """
    Lay out one BS month as Sunday-first weeks

    Args:
        layout: a resolved MonthLayout
        selected_day: day to mark as selected, if it falls inside the month
        lang: script for day numbers, title and weekday headers

    Raises:
        ValueError: if the layout is not resolved
    """
    if not layout.is_known:
        raise ValueError(
            f"Cannot build a grid for BS {layout.year}-{layout.month:02d}: {layout.failure.value}"
        )

    lang = DisplayLanguage.coerce(lang)
    cells = [GridCell(day=None) for _ in range(layout.first_weekday)]
    for day in range(1, layout.day_count + 1):
        cells.append(GridCell(
            day=day,
            label=to_local_digits(day, lang),
            selected=(day == selected_day),
        ))

    trailing = -len(cells) % DAYS_PER_WEEK
    cells.extend(GridCell(day=None) for _ in range(trailing))

    rows = [cells[i:i + DAYS_PER_WEEK] for i in range(0, len(cells), DAYS_PER_WEEK)]
    title = f"{get_nepali_month_name(layout.month, lang)} {to_local_digits(layout.year, lang)}"

    return GridModel(
        year=layout.year,
        month=layout.month,
        title=title,
        weekdays=get_weekday_labels(lang),
        rows=rows,
    )


class CalendarNavigator:
    """Cursor over BS months; stepping past Chaitra/Baisakh rolls the year"""

    def __init__(self, year: int, month: int):
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {month}")
        self.year = year
        self.month = month

    @property
    def cursor(self) -> Tuple[int, int]:
        return self.year, self.month

    def step_month(self, delta: int = 1) -> Tuple[int, int]:
        years, month_index = divmod(self.month - 1 + delta, 12)
        self.year += years
        self.month = month_index + 1
        return self.cursor

    def step_year(self, delta: int = 1) -> Tuple[int, int]:
        self.year += delta
        return self.cursor

    @classmethod
    def initial(cls, displayed_text: Optional[str], bridge,
                today: Optional[date] = None,
                fallback: Tuple[int, int] = FALLBACK_CURSOR) -> 'CalendarNavigator':
        """
        Start from the displayed BS date, else today's BS month, else ``fallback``
        """
        shown = parse_bs_text(displayed_text)
        if shown is not None:
            return cls(shown.year, shown.month)

        today = today or date.today()
        result = bridge.ad_to_bs(format_ad_date(CalendarDate.from_date(today)))
        if result.ok:
            return cls(result.date.year, result.date.month)

        logger.debug("Navigator falling back to %s-%02d (%s)", fallback[0], fallback[1], result.failure)
        return cls(*fallback)

    def __repr__(self):
        return f"CalendarNavigator({self.year}, {self.month})"
