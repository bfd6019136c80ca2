"""Print manager for Tally receipts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tallyprint.config.settings import DEFAULT_PRINT_SETTINGS, PrintSettings
from tallyprint.errors import PrinterError
from tallyprint.hardware.printer import Printer, create_printer
from tallyprint.printing.encoder import Receipt, build_receipt
from tallyprint.tally.models import OrderDocument

logger = logging.getLogger(__name__)


@dataclass
class PrintResult:
    """Outcome of one print job."""

    success: bool
    copies_printed: int = 0
    error: Optional[str] = None

    @property
    def status(self) -> str:
        if self.success:
            return f"Printed {self.copies_printed} copies successfully."
        return f"Printing failed: {self.error}"


class PrintManager:
    """Encodes a document once and sends the buffer for every copy."""

    def __init__(
        self,
        printer: Optional[Printer] = None,
        mock: bool = False,
    ) -> None:
        self._printer = printer or create_printer(mock=mock)

    async def _ensure_connected(self) -> None:
        if not self._printer.is_connected:
            await self._printer.connect()

    async def print_document(
        self,
        document: OrderDocument,
        settings: PrintSettings = DEFAULT_PRINT_SETTINGS,
        copies: Optional[int] = None,
    ) -> PrintResult:
        receipt = await build_receipt(document, settings)
        return await self.print_receipt(receipt, copies or settings.copy_count)

    async def print_receipt(self, receipt: Receipt, copies: int = 1) -> PrintResult:
        printed = 0
        try:
            await self._ensure_connected()
            for i in range(copies):
                logger.info(f"Printing copy {i + 1} of {copies}")
                await self._printer.write(receipt.raw_commands)
                printed += 1
        except PrinterError as exc:
            logger.error(f"Print failed: {exc}")
            return PrintResult(success=False, copies_printed=printed, error=str(exc))
        finally:
            await self._printer.disconnect()

        return PrintResult(success=True, copies_printed=printed)
