"""Device detection command handler for the kindle2notion CLI."""

import logging

from ...utils.device_detection import detect_kindle_devices, format_device_list

logger = logging.getLogger(__name__)


def handle_devices(_):
    """List detected Kindle devices and where their clippings file is."""
    devices = detect_kindle_devices()
    logger.info("Detected %d Kindle device(s).", len(devices))
    print(format_device_list(devices))
