"""Luxafor Flag USB transport over HID."""

import logging

from ..errors import DeviceError
from .color import RGB
from .sink import DeviceCommandSink
from .targets import TargetId

logger = logging.getLogger(__name__)

LUXAFOR_VENDOR_ID = 0x04D8
LUXAFOR_PRODUCT_ID = 0xF372

# Report command bytes
CMD_SET_COLOR = 0x01
CMD_FADE = 0x02
CMD_STROBE = 0x03
CMD_WAVE = 0x04

REPORT_LENGTH = 8


class LuxaforSink(DeviceCommandSink):
    """
    Send commands to a Luxafor Flag via HID output reports.

    Uses the hidapi package for USB access, imported on open() so the rest
    of the package works without it.
    """

    def __init__(
        self,
        vendor_id: int = LUXAFOR_VENDOR_ID,
        product_id: int = LUXAFOR_PRODUCT_ID,
    ):
        self.vendor_id = vendor_id
        self.product_id = product_id
        self._device = None

    def open(self) -> None:
        """Open the HID device."""
        try:
            import hid
        except ImportError:
            raise ImportError(
                "hidapi is required for Luxafor devices. "
                "Install with: pip install delux[hid]"
            )

        device = hid.device()
        try:
            device.open(self.vendor_id, self.product_id)
        except OSError as e:
            raise DeviceError(
                f"Could not open Luxafor device {self.vendor_id:04x}:{self.product_id:04x}: {e}"
            ) from e
        self._device = device
        logger.info("Opened Luxafor device %04x:%04x", self.vendor_id, self.product_id)

    def close(self) -> None:
        """Close the HID device."""
        if self._device is not None:
            self._device.close()
            self._device = None

    @property
    def is_open(self) -> bool:
        return self._device is not None

    def _write(self, *report: int) -> None:
        if self._device is None:
            raise DeviceError("Luxafor device is not open")

        data = list(report) + [0] * (REPORT_LENGTH - len(report))
        try:
            # Leading 0x00 is the HID report id
            written = self._device.write([0x00] + data)
        except (OSError, ValueError) as e:
            raise DeviceError(f"HID write failed: {e}") from e
        if written < 0:
            raise DeviceError("HID write failed")

    def set_color(self, color: RGB, target: TargetId) -> None:
        self._write(CMD_SET_COLOR, int(target), color.r, color.g, color.b)

    def fade_to(self, color: RGB, target: TargetId, speed: int) -> None:
        self._write(CMD_FADE, int(target), color.r, color.g, color.b, speed)

    def flash(
        self,
        color: RGB,
        speed: int,
        repeat: int,
        target: TargetId = TargetId.ALL,
    ) -> None:
        self._write(CMD_STROBE, int(target), color.r, color.g, color.b, speed, 0, repeat)

    def wave(self, color: RGB, wave_type: int, speed: int, repeat: int) -> None:
        self._write(CMD_WAVE, wave_type, color.r, color.g, color.b, 0, repeat, speed)

    def off(self) -> None:
        self.set_color(RGB.black(), TargetId.ALL)
