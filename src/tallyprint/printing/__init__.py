"""Printing module for tallyprint - ESC/POS receipt generation."""

from tallyprint.printing.encoder import ReceiptEncoder, Receipt, build_receipt, encode
from tallyprint.printing.manager import PrintManager, PrintResult
from tallyprint.printing.layout import LayoutEngine
from tallyprint.printing.raster import MonochromeBitmap, rasterize

__all__ = [
    # Encoder
    "ReceiptEncoder",
    "Receipt",
    "build_receipt",
    "encode",
    "PrintManager",
    "PrintResult",
    # Layout
    "LayoutEngine",
    # Raster
    "MonochromeBitmap",
    "rasterize",
]
