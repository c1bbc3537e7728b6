"""
Wrapper around the external day-level AD<->BS conversion primitive
"""
import logging

from django.utils.module_loading import import_string

from nepali_datepicker.types import CalendarDate, ConversionResult, Failure

logger = logging.getLogger(__name__)

ERROR_MARKERS = ('Error', 'Invalid')


def is_error_payload(payload) -> bool:
    """Primitive results that are empty or mention Error/Invalid are failures"""
    if not payload or not isinstance(payload, str):
        return True
    return any(marker in payload for marker in ERROR_MARKERS)


class ConversionBridge:
    """
    Forwards conversions to an injected primitive exposing ``AD_TO_BS`` and
    ``BS_TO_AD`` (both taking and returning ``YYYY-MM-DD`` strings).

    Until a primitive is installed every call reports
    ``Failure.BRIDGE_UNAVAILABLE`` instead of raising.
    """

    def __init__(self, primitive=None):
        self._primitive = None
        self._ready_callbacks = []
        if primitive is not None:
            self.install(primitive)

    @property
    def primitive(self):
        return self._primitive

    def available(self) -> bool:
        primitive = self._primitive
        return (
            primitive is not None
            and callable(getattr(primitive, 'AD_TO_BS', None))
            and callable(getattr(primitive, 'BS_TO_AD', None))
        )

    def install(self, primitive):
        """Make ``primitive`` the active converter and fire readiness callbacks"""
        self._primitive = primitive
        if not self.available():
            logger.warning("Conversion primitive %r lacks AD_TO_BS/BS_TO_AD", primitive)
            return

        version = getattr(primitive, 'version', None)
        if version:
            logger.info("Conversion primitive ready (version %s)", version)
        else:
            logger.info("Conversion primitive ready")

        callbacks, self._ready_callbacks = self._ready_callbacks, []
        for callback in callbacks:
            callback()

    def uninstall(self):
        self._primitive = None

    def load(self, dotted_path: str) -> bool:
        """Import and install the primitive found at ``dotted_path``"""
        try:
            primitive = import_string(dotted_path)
        except ImportError as e:
            logger.error("Failed to load conversion primitive %s: %s", dotted_path, e)
            return False
        self.install(primitive)
        return self.available()

    def on_ready(self, callback):
        """Run ``callback`` once the primitive is available (now, if it already is)"""
        if self.available():
            callback()
        else:
            self._ready_callbacks.append(callback)

    def discard_callback(self, callback):
        if callback in self._ready_callbacks:
            self._ready_callbacks.remove(callback)

    def ad_to_bs(self, iso: str) -> ConversionResult:
        return self._convert('AD_TO_BS', iso)

    def bs_to_ad(self, iso: str) -> ConversionResult:
        return self._convert('BS_TO_AD', iso)

    def _convert(self, direction: str, iso: str) -> ConversionResult:
        if not self.available():
            logger.debug("%s(%s) skipped, primitive not ready", direction, iso)
            return ConversionResult(failure=Failure.BRIDGE_UNAVAILABLE)

        try:
            payload = getattr(self._primitive, direction)(iso)
        except Exception as e:
            logger.warning("%s(%s) raised: %s", direction, iso, e)
            return ConversionResult(failure=Failure.CONVERSION, payload=str(e))

        logger.debug("%s: %s -> %s", direction, iso, payload)
        if is_error_payload(payload):
            logger.info("%s(%s) returned an error payload: %s", direction, iso, payload)
            return ConversionResult(failure=Failure.CONVERSION, payload=payload)
        parsed = CalendarDate.from_iso(payload)
        if parsed is None:
            logger.info("%s(%s) returned an unexpected format: %s", direction, iso, payload)
            return ConversionResult(failure=Failure.CONVERSION, payload=payload)
        return ConversionResult(value=parsed.iso, payload=payload)


# Process-wide bridge, populated by NepaliDatepickerConfig.ready()
bridge = ConversionBridge()
