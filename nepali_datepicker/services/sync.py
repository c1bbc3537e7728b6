"""
Two-way synchronisation between an AD text field and its BS display / picker

The host supplies the field (anything with a read/write ``value``) and the
display node (anything with a writable ``text``). Change notifications reach
the controller through a ValueChangeSource, timers through a scheduler with
``call_later(delay, callback)`` returning a cancellable handle.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from nepali_datepicker.conf import DatePickerConfig
from nepali_datepicker.types import CalendarDate, ConversionResult, Failure
from nepali_datepicker.utils import (
    detect_ad_format,
    format_ad_date,
    parse_ad_date,
    parse_bs_text,
    to_ascii_digits,
    to_local_digits,
)

from .bridge import bridge as default_bridge
from .calendar_grid import CalendarNavigator, GridModel, build_grid
from .month_model import BSMonthModel

logger = logging.getLogger(__name__)


class DisplayState(str, Enum):
    EMPTY = 'empty'
    PENDING = 'pending'
    INVALID = 'invalid'
    ERROR = 'error'
    VALUE = 'value'


PLACEHOLDERS = {
    DisplayState.EMPTY: '--',
    DisplayState.PENDING: 'pending',
    DisplayState.INVALID: 'invalid',
    DisplayState.ERROR: 'error',
}


# ---------------------------------------------------------------------------
# Timers
# ---------------------------------------------------------------------------

class AsyncioScheduler:
    """
    Timers on the running asyncio loop (handles expose ``cancel()``).

    Outside a running loop a zero delay runs the callback at once and any
    other delay is skipped; both return None instead of a handle. Bindings
    left pending that way are refreshed by the bridge readiness signal.
    """

    def __init__(self, loop=None):
        self._loop = loop

    def call_later(self, delay, callback):
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                if delay <= 0:
                    callback()
                else:
                    logger.debug("No running event loop, skipped timer due in %ss", delay)
                return None
        return loop.call_later(delay, callback)


# ---------------------------------------------------------------------------
# Value-change sources
# ---------------------------------------------------------------------------

class ValueChangeSource:
    """Delivers the field's new value to subscribers"""

    def __init__(self):
        self._listeners = []

    def subscribe(self, callback: Callable[[Optional[str]], Any]):
        self._listeners.append(callback)

    def emit(self, value):
        for callback in list(self._listeners):
            callback(value)

    def start(self):
        pass

    def close(self):
        self._listeners.clear()


class PushValueSource(ValueChangeSource):
    """For hosts with reliable input/change events: forward them to ``notify``"""

    def notify(self, value=None):
        self.emit(value)


class PollingValueSource(ValueChangeSource):
    """Diffs the field value on a fixed interval, for fields that change silently"""

    def __init__(self, field, scheduler, interval: float = 0.25):
        super().__init__()
        self.field = field
        self.scheduler = scheduler
        self.interval = interval
        self.last_seen = getattr(field, 'value', None)
        self._handle = None
        self._running = False

    @classmethod
    def from_config(cls, field, scheduler, config: DatePickerConfig) -> 'PollingValueSource':
        return cls(field, scheduler, interval=config.poll_interval)

    def start(self):
        if not self._running:
            self._running = True
            self._schedule()

    def _schedule(self):
        self._handle = self.scheduler.call_later(self.interval, self._tick)

    def _tick(self):
        self._handle = None
        if not self._running:
            return
        value = self.field.value
        if value != self.last_seen:
            self.last_seen = value
            self.emit(value)
        if self._running:
            self._schedule()

    def close(self):
        self._running = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        super().close()


# ---------------------------------------------------------------------------
# Writing values back into the field
# ---------------------------------------------------------------------------

class FieldValueWriter:
    """Sets the raw value, then fires input/change when the field can dispatch events"""

    def apply(self, field, value: str):
        field.value = value
        dispatch = getattr(field, 'dispatch_event', None)
        if callable(dispatch):
            dispatch('input')
            dispatch('change')


class ExternalPickerWriter(FieldValueWriter):
    """
    For fields owned by a third-party date/range picker that ignores direct
    value writes: after the raw write, call the picker's own setter if one
    of ``setter_names`` exists on ``field.<attribute>``.
    """
    SETTER_NAMES = ('set_value', 'set_date', 'set_start_date')

    def __init__(self, attribute: str = 'picker', setter_names=None):
        self.attribute = attribute
        self.setter_names = tuple(setter_names or self.SETTER_NAMES)

    def apply(self, field, value: str):
        super().apply(field, value)
        widget = getattr(field, self.attribute, None)
        if widget is None:
            return
        for name in self.setter_names:
            setter = getattr(widget, name, None)
            if callable(setter):
                setter(value)
                return
        logger.debug("No setter found on %r, raw value written only", widget)


class LoggingNotifier:
    """Default user notification: a warning in the log"""

    def notify(self, message: str):
        logger.warning(message)


# ---------------------------------------------------------------------------
# Bindings and sessions
# ---------------------------------------------------------------------------

def field_identity(field):
    return getattr(field, 'id', None) or id(field)


@dataclass
class FieldBinding:
    field: Any
    display: Any
    source: Optional[ValueChangeSource] = None
    last_seen: Optional[str] = None
    state: DisplayState = DisplayState.EMPTY
    bs_value: Optional[str] = None
    closed: bool = False

    @property
    def identity(self):
        return field_identity(self.field)


class CalendarSession:
    """Open picker state: cursor month, selected date, pending re-render"""

    def __init__(self, navigator: CalendarNavigator, month_model: BSMonthModel,
                 config: DatePickerConfig, scheduler, selected: Optional[CalendarDate] = None,
                 anchor=None, on_render: Optional[Callable] = None):
        self.navigator = navigator
        self.month_model = month_model
        self.config = config
        self.scheduler = scheduler
        self.selected = selected
        self.anchor = anchor
        self.on_render = on_render
        self.closed = False
        self._pending_render = None
        self._render_retries = 0
        self._dismiss_hooks = []
        self._close_callbacks = []

    @property
    def cursor_year(self) -> int:
        return self.navigator.year

    @property
    def cursor_month(self) -> int:
        return self.navigator.month

    @property
    def selected_day(self) -> Optional[int]:
        """Selected day, only while the cursor shows the selected month"""
        if self.selected and (self.selected.year, self.selected.month) == self.navigator.cursor:
            return self.selected.day
        return None

    def grid(self) -> Optional[GridModel]:
        layout = self.month_model.month_layout(*self.navigator.cursor)
        if not layout.is_known:
            return None
        return build_grid(layout, self.selected_day, self.config.language)

    def next_month(self):
        self.navigator.step_month(1)
        self._schedule_render(0)

    def previous_month(self):
        self.navigator.step_month(-1)
        self._schedule_render(0)

    def _schedule_render(self, delay):
        if self.closed:
            return
        if self._pending_render is not None:
            self._pending_render.cancel()
        self._pending_render = self.scheduler.call_later(delay, self.render)

    def render(self) -> Optional[GridModel]:
        self._pending_render = None
        if self.closed:
            return None

        layout = self.month_model.month_layout(*self.navigator.cursor)
        grid = build_grid(layout, self.selected_day, self.config.language) if layout.is_known else None

        if layout.failure is Failure.BRIDGE_UNAVAILABLE and self._render_retries < self.config.max_retries:
            self._render_retries += 1
            self._schedule_render(self.config.retry_delay)
        elif grid is not None:
            self._render_retries = 0

        if self.on_render is not None:
            self.on_render(self, grid)
        return grid

    def add_dismiss_hook(self, detach: Callable[[], Any]):
        """Register the host's outside-click listener removal"""
        self._dismiss_hooks.append(detach)

    def on_close(self, callback: Callable[['CalendarSession'], Any]):
        self._close_callbacks.append(callback)

    def close(self):
        if self.closed:
            return
        self.closed = True
        if self._pending_render is not None:
            self._pending_render.cancel()
            self._pending_render = None
        hooks, self._dismiss_hooks = self._dismiss_hooks, []
        for detach in hooks:
            detach()
        callbacks, self._close_callbacks = self._close_callbacks, []
        for callback in callbacks:
            callback(self)


class SessionRegistry:
    """Keeps at most one CalendarSession open"""

    def __init__(self):
        self.active: Optional[CalendarSession] = None

    def open(self, session: CalendarSession) -> CalendarSession:
        previous = self.active
        self.active = session
        if previous is not None and previous is not session:
            previous.close()
        session.on_close(self.release)
        return session

    def release(self, session: CalendarSession):
        if self.active is session:
            self.active = None


sessions = SessionRegistry()


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class SyncController:
    """Keeps one FieldBinding's AD text and BS display consistent in both directions"""

    def __init__(self, binding: FieldBinding, bridge=None, config: Optional[DatePickerConfig] = None,
                 scheduler=None, month_model: Optional[BSMonthModel] = None, writer=None,
                 notifier=None, sessions_registry: Optional[SessionRegistry] = None):
        self.binding = binding
        self.bridge = bridge or default_bridge
        self.config = config or DatePickerConfig.from_settings()
        self.scheduler = scheduler or AsyncioScheduler()
        self.month_model = month_model or BSMonthModel(self.bridge, timeout=self.config.cache_timeout)
        self.writer = writer or FieldValueWriter()
        self.notifier = notifier or LoggingNotifier()
        self.sessions = sessions_registry or sessions
        self.session: Optional[CalendarSession] = None
        self._retry_handle = None
        self._retries = 0

        if binding.source is not None:
            binding.source.subscribe(self.on_value_change)
            binding.source.start()
        self.bridge.on_ready(self._on_bridge_ready)

    # -- forward sync -------------------------------------------------------

    def on_value_change(self, value=None):
        if value is not None and value == self.binding.last_seen \
                and self.binding.state is not DisplayState.PENDING:
            return
        self.refresh()

    def refresh(self) -> DisplayState:
        """Re-read the field and re-render the BS display"""
        binding = self.binding
        if binding.closed:
            return binding.state

        self._cancel_retry()
        value = binding.field.value or ''
        binding.last_seen = value
        text = to_ascii_digits(value).strip()

        if len(text) < 8:
            return self._render(DisplayState.EMPTY)

        parsed = parse_ad_date(text, self.config.locale_format)
        if parsed is None:
            logger.info("Invalid AD date in field %s: %r", binding.identity, value)
            return self._render(DisplayState.INVALID)

        result = self.bridge.ad_to_bs(parsed.iso)
        if result.failure is Failure.BRIDGE_UNAVAILABLE:
            self._render(DisplayState.PENDING)
            self._schedule_retry()
            return binding.state
        if not result.ok:
            logger.info("Conversion of %s returned error: %s", parsed.iso, result.payload)
            return self._render(DisplayState.ERROR)

        return self._render(DisplayState.VALUE, result.value)

    def _render(self, state: DisplayState, bs_value: Optional[str] = None) -> DisplayState:
        binding = self.binding
        label = self.config.label
        if state is DisplayState.VALUE:
            binding.display.text = f"{label}: {to_local_digits(bs_value, self.config.language)}"
        else:
            binding.display.text = f"{label}: {PLACEHOLDERS[state]}"
        if state is not DisplayState.PENDING:
            self._retries = 0
        binding.state = state
        binding.bs_value = bs_value
        return state

    def _schedule_retry(self):
        if self._retries >= self.config.max_retries:
            logger.warning(
                "Conversion primitive still not ready after %s retries, waiting for readiness",
                self._retries,
            )
            return
        self._retries += 1
        logger.debug("Conversion primitive not ready, retrying in %ss", self.config.retry_delay)
        self._retry_handle = self.scheduler.call_later(self.config.retry_delay, self._retry)

    def _retry(self):
        self._retry_handle = None
        self.refresh()

    def _cancel_retry(self):
        if self._retry_handle is not None:
            self._retry_handle.cancel()
            self._retry_handle = None

    def _on_bridge_ready(self):
        if not self.binding.closed and self.binding.state is DisplayState.PENDING:
            self.refresh()

    # -- picker -------------------------------------------------------------

    def open_calendar(self, anchor=None, on_render=None) -> CalendarSession:
        """Open the picker on the displayed BS month (replacing any open picker)"""
        displayed = self.binding.display.text if self.binding.state is DisplayState.VALUE else None
        navigator = CalendarNavigator.initial(displayed, self.bridge, fallback=self.config.fallback_cursor)
        session = CalendarSession(
            navigator,
            self.month_model,
            self.config,
            self.scheduler,
            selected=parse_bs_text(displayed),
            anchor=anchor,
            on_render=on_render,
        )
        self.sessions.open(session)
        self.session = session
        session.render()
        return session

    def close_calendar(self):
        if self.session is not None:
            self.session.close()
            self.session = None

    # -- reverse sync -------------------------------------------------------

    def select_day(self, day: int) -> ConversionResult:
        """Write the AD equivalent of ``day`` in the picker's cursor month into the field"""
        session = self.session
        if session is None or session.closed:
            raise RuntimeError("No calendar session is open for this field")
        return self._write_bs(CalendarDate(session.cursor_year, session.cursor_month, day))

    def apply_bs_text(self, text: str) -> ConversionResult:
        """Write a typed BS date (``YYYY-MM-DD``) into the field as AD"""
        parsed = parse_bs_text(text)
        if parsed is None:
            self.notifier.notify('Invalid format. Please use YYYY-MM-DD.')
            return ConversionResult(failure=Failure.PARSE, payload=text)
        return self._write_bs(parsed)

    def _write_bs(self, bs_date: CalendarDate) -> ConversionResult:
        result = self.bridge.bs_to_ad(bs_date.iso)
        if not result.ok:
            if result.failure is Failure.BRIDGE_UNAVAILABLE:
                self.notifier.notify('Date converter is not ready yet, please try again.')
            else:
                self.notifier.notify(f"Conversion failed: {result.payload}")
            return result

        field = self.binding.field
        fmt = detect_ad_format(field.value) or self.config.locale_format
        ad_text = format_ad_date(result.date, fmt)
        logger.debug("BS %s -> AD %s written as %s", bs_date.iso, result.value, ad_text)

        self.writer.apply(field, ad_text)
        self.refresh()
        self.close_calendar()
        return result

    # -- lifetime -----------------------------------------------------------

    def teardown(self):
        binding = self.binding
        if binding.closed:
            return
        binding.closed = True
        self._cancel_retry()
        if binding.source is not None:
            binding.source.close()
        self.bridge.discard_callback(self._on_bridge_ready)
        self.close_calendar()


class FieldRegistry:
    """At most one SyncController per distinct field"""

    def __init__(self, **controller_options):
        self.controller_options = controller_options
        self._controllers = {}

    def bind(self, field, display, source: Optional[ValueChangeSource] = None) -> SyncController:
        key = field_identity(field)
        existing = self._controllers.get(key)
        if existing is not None and not existing.binding.closed:
            return existing

        controller = SyncController(FieldBinding(field, display, source), **self.controller_options)
        self._controllers[key] = controller
        controller.refresh()
        return controller

    def bind_polling(self, field, display) -> SyncController:
        """Bind ``field`` with a PollingValueSource running at the configured interval"""
        existing = self._controllers.get(field_identity(field))
        if existing is not None and not existing.binding.closed:
            return existing

        config = self.controller_options.get('config') or DatePickerConfig.from_settings()
        scheduler = self.controller_options.get('scheduler') or AsyncioScheduler()
        source = PollingValueSource.from_config(field, scheduler, config)
        return self.bind(field, display, source)

    def unbind(self, field):
        controller = self._controllers.pop(field_identity(field), None)
        if controller is not None:
            controller.teardown()

    def clear(self):
        for controller in self._controllers.values():
            controller.teardown()
        self._controllers.clear()

    def __contains__(self, field):
        return field_identity(field) in self._controllers

    def __len__(self):
        return len(self._controllers)
