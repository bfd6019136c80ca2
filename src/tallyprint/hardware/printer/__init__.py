"""Printer transports for tallyprint."""

from tallyprint.hardware.base import Printer
from tallyprint.hardware.printer.usb import MockPrinter, UsbPrinter, create_printer

__all__ = [
    "Printer",
    "UsbPrinter",
    "MockPrinter",
    "create_printer",
]
