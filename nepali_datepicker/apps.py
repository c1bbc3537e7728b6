import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class NepaliDatepickerConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'nepali_datepicker'
    verbose_name = 'Nepali Datepicker'

    def ready(self):
        """Load the configured conversion primitive into the shared bridge"""
        from .conf import get_setting
        from .services.bridge import bridge

        converter = get_setting('CONVERTER')
        if not converter:
            logger.info("No conversion primitive configured; BS dates stay pending until one is installed")
            return
        bridge.load(converter)
