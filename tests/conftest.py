import pytest
from django.core.cache import cache

from nepali_datepicker.conf import DatePickerConfig
from nepali_datepicker.services.bridge import ConversionBridge, bridge as shared_bridge
from nepali_datepicker.services.sync import SessionRegistry
from nepali_datepicker.types import DisplayLanguage

from tests.fakes import ManualScheduler, RecordingNotifier, TablePrimitive


@pytest.fixture(autouse=True)
def clear_layout_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def primitive():
    return TablePrimitive()


@pytest.fixture
def bridge(primitive):
    """A private bridge with the table primitive installed"""
    return ConversionBridge(primitive)


@pytest.fixture
def empty_bridge():
    return ConversionBridge()


@pytest.fixture
def installed_bridge(primitive):
    """The process-wide bridge used by views, template tags and commands"""
    shared_bridge.install(primitive)
    yield shared_bridge
    shared_bridge.uninstall()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def config():
    return DatePickerConfig(language=DisplayLanguage.EN, retry_delay=0.5, max_retries=5)
