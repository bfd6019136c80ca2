"""USB thermal printer transport.

Writes ESC/POS buffers to the bulk OUT endpoint of a USB printer through
pyusb. The printer is looked up by the vendor/product ids from settings
(TALLYPRINT_USB__VENDOR_ID / TALLYPRINT_USB__PRODUCT_ID).
"""

import asyncio
import logging
from typing import List, Optional

import usb.core
import usb.util

from tallyprint.config.settings import UsbSettings
from tallyprint.errors import PrinterNotFoundError, PrinterWriteError
from tallyprint.hardware.base import Printer

logger = logging.getLogger(__name__)


class UsbPrinter(Printer):
    """Raw USB bulk-endpoint printer."""

    def __init__(self, settings: Optional[UsbSettings] = None):
        self._settings = settings or UsbSettings()
        self.dev = None
        self.ep_out = None
        self._connected = False

    def _find_device(self):
        if self._settings.vendor_id is None or self._settings.product_id is None:
            raise PrinterNotFoundError("USB vendor and product ids are not configured.")
        try:
            return usb.core.find(
                idVendor=self._settings.vendor_id,
                idProduct=self._settings.product_id,
            )
        except (usb.core.USBError, ValueError) as e:
            # NoBackendError (libusb missing) is a ValueError
            raise PrinterNotFoundError(f"USB lookup failed: {e}") from e

    def _open(self) -> None:
        dev = self._find_device()
        if dev is None:
            raise PrinterNotFoundError("No USB printer found. Check it is connected and powered on.")

        interface = self._settings.interface
        logger.info(f"Found USB printer {dev.idVendor:04x}:{dev.idProduct:04x}")

        # Detach kernel driver if necessary (Linux)
        try:
            if dev.is_kernel_driver_active(interface):
                dev.detach_kernel_driver(interface)
                logger.debug("Detached kernel driver")
        except (NotImplementedError, usb.core.USBError) as e:
            logger.debug(f"Kernel driver check skipped: {e}")

        try:
            dev.set_configuration()
        except usb.core.USBError as e:
            logger.debug(f"Configuration note: {e}")

        try:
            usb.util.claim_interface(dev, interface)
        except usb.core.USBError as e:
            raise PrinterWriteError(f"Access denied to USB device: {e}") from e

        try:
            cfg = dev.get_active_configuration()
            intf = cfg[(interface, 0)]
            ep_out = usb.util.find_descriptor(
                intf,
                custom_match=lambda ep: usb.util.endpoint_direction(ep.bEndpointAddress) == usb.util.ENDPOINT_OUT,
            )
        except (usb.core.USBError, LookupError) as e:
            usb.util.release_interface(dev, interface)
            raise PrinterNotFoundError(f"Printer not supported: {e}") from e
        if ep_out is None:
            usb.util.release_interface(dev, interface)
            raise PrinterNotFoundError("Printer not supported: no OUT endpoint found.")

        self.dev = dev
        self.ep_out = ep_out.bEndpointAddress
        self._connected = True
        logger.debug(f"USB OUT endpoint: 0x{self.ep_out:02x}")

    async def connect(self) -> None:
        if self._connected:
            return
        await asyncio.to_thread(self._open)

    def _write(self, data: bytes) -> None:
        if not self.dev or self.ep_out is None:
            raise PrinterWriteError("Printer not connected")
        chunk_size = self._settings.chunk_size
        try:
            for i in range(0, len(data), chunk_size):
                self.dev.write(self.ep_out, data[i:i + chunk_size], timeout=self._settings.timeout_ms)
        except usb.core.USBError as e:
            raise PrinterWriteError(f"USB transfer failed: {e}") from e

    async def write(self, data: bytes) -> None:
        await asyncio.to_thread(self._write, data)

    async def disconnect(self) -> None:
        """Release the USB interface."""
        if self.dev:
            try:
                usb.util.release_interface(self.dev, self._settings.interface)
                usb.util.dispose_resources(self.dev)
            except usb.core.USBError as e:
                logger.error(f"Error closing USB device: {e}")
            self.dev = None
            logger.info("USB printer closed")
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected


class MockPrinter(Printer):
    """Printer that records buffers instead of sending them."""

    def __init__(self):
        self.jobs: List[bytes] = []
        self._connected = False

    async def connect(self) -> None:
        self._connected = True
        logger.info("Printer in mock mode")

    async def disconnect(self) -> None:
        self._connected = False

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def write(self, data: bytes) -> None:
        if not self._connected:
            raise PrinterWriteError("Printer not connected")
        self.jobs.append(data)
        logger.debug(f"Mock send: {len(data)} bytes")


def create_printer(mock: bool = False, settings: Optional[UsbSettings] = None) -> Printer:
    """Factory function to create the appropriate printer."""
    if mock:
        return MockPrinter()
    return UsbPrinter(settings)
