from nepali_datepicker.services.bridge import ConversionBridge, is_error_payload
from nepali_datepicker.types import CalendarDate, Failure

from tests.fakes import LatePrimitive, TablePrimitive


class RaisingPrimitive:
    def AD_TO_BS(self, value):
        raise RuntimeError('boom')

    def BS_TO_AD(self, value):
        raise RuntimeError('boom')


class OddFormatPrimitive:
    def AD_TO_BS(self, value):
        return '08 Chaitra 2082'

    def BS_TO_AD(self, value):
        return '2026-3-22'


def test_unavailable_bridge_reports_instead_of_raising(empty_bridge):
    assert not empty_bridge.available()
    result = empty_bridge.ad_to_bs('2026-03-22')
    assert not result.ok
    assert result.failure is Failure.BRIDGE_UNAVAILABLE


def test_known_conversions(bridge):
    assert bridge.ad_to_bs('2026-03-22').value == '2082-12-08'
    assert bridge.ad_to_bs('2026-01-24').value == '2082-10-10'
    assert bridge.bs_to_ad('2082-12-08').value == '2026-03-22'
    assert bridge.bs_to_ad('2082-12-08').date == CalendarDate(2026, 3, 22)


def test_error_payload_is_a_failure(bridge):
    result = bridge.bs_to_ad('2082-12-31')
    assert result.failure is Failure.CONVERSION
    assert 'Invalid' in result.payload


def test_raising_primitive_is_a_failure():
    result = ConversionBridge(RaisingPrimitive()).ad_to_bs('2026-03-22')
    assert result.failure is Failure.CONVERSION
    assert result.payload == 'boom'


def test_unexpected_format_is_a_failure_and_short_dates_are_padded():
    odd = ConversionBridge(OddFormatPrimitive())
    assert odd.ad_to_bs('2026-03-22').failure is Failure.CONVERSION
    assert odd.bs_to_ad('2082-12-08').value == '2026-03-22'


def test_is_error_payload():
    assert is_error_payload('Error: out of range')
    assert is_error_payload('Invalid date')
    assert is_error_payload('')
    assert is_error_payload(None)
    assert not is_error_payload('2082-12-08')


def test_on_ready_fires_once_on_install(empty_bridge):
    fired = []
    empty_bridge.on_ready(lambda: fired.append('ready'))
    assert fired == []

    empty_bridge.install(TablePrimitive())
    empty_bridge.install(TablePrimitive())
    assert fired == ['ready']


def test_on_ready_runs_immediately_when_available(bridge):
    fired = []
    bridge.on_ready(lambda: fired.append('ready'))
    assert fired == ['ready']


def test_discarded_callback_does_not_fire(empty_bridge):
    fired = []

    def callback():
        fired.append('ready')

    empty_bridge.on_ready(callback)
    empty_bridge.discard_callback(callback)
    empty_bridge.install(TablePrimitive())
    assert fired == []


def test_incomplete_primitive_is_not_available(empty_bridge):
    late = LatePrimitive(TablePrimitive())
    empty_bridge.install(late)
    assert not empty_bridge.available()

    late.arrive()
    assert empty_bridge.available()
    assert empty_bridge.ad_to_bs('2026-03-22').value == '2082-12-08'


def test_load_from_dotted_path(empty_bridge):
    assert empty_bridge.load('tests.fakes.table_primitive')
    assert empty_bridge.available()


def test_load_missing_path(empty_bridge):
    assert not empty_bridge.load('tests.fakes.does_not_exist')
    assert not empty_bridge.available()


def test_uninstall(bridge):
    bridge.uninstall()
    assert bridge.bs_to_ad('2082-12-08').failure is Failure.BRIDGE_UNAVAILABLE
