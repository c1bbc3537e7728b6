from .bridge import ConversionBridge, bridge
from .month_model import BSMonthModel
from .calendar_grid import CalendarNavigator, GridModel, build_grid
from .sync import (
    CalendarSession,
    FieldBinding,
    FieldRegistry,
    PollingValueSource,
    PushValueSource,
    SyncController,
)

__all__ = [
    'ConversionBridge',
    'bridge',
    'BSMonthModel',
    'CalendarNavigator',
    'GridModel',
    'build_grid',
    'CalendarSession',
    'FieldBinding',
    'FieldRegistry',
    'PollingValueSource',
    'PushValueSource',
    'SyncController',
]
