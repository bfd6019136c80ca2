"""Receipt encoder for Tally order documents.

Walks an OrderDocument section by section and produces the ESC/POS byte
stream for one print job. The encoder keeps no state between calls: the
same document and settings always give the same bytes.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from tallyprint.config.settings import DEFAULT_PRINT_SETTINGS, PrintSettings
from tallyprint.printing.commands import (
    Align,
    Bold,
    Command,
    CommandRenderer,
    Cut,
    DoubleSize,
    Feed,
    Raster,
    Reset,
    Text,
    preview_text,
)
from tallyprint.printing.layout import LayoutEngine
from tallyprint.printing.raster import rasterize
from tallyprint.tally.models import OrderDocument

logger = logging.getLogger(__name__)

NO_VALUE = "N/A"
ZERO_AMOUNT = "0.00"
DEFAULT_SIGNATORY = "Authorized Signatory"


@dataclass
class Receipt:
    """An encoded receipt ready for printing."""

    commands: List[Command]
    raw_commands: bytes
    preview: str


class ReceiptEncoder:
    """Builds the command list for an order document.

    Only the logo step awaits; everything else is plain list building.
    """

    def __init__(self, settings: PrintSettings = DEFAULT_PRINT_SETTINGS):
        self.settings = settings
        self.layout = LayoutEngine(settings.columns, wrap_words=settings.wrap_words)
        self._renderer = CommandRenderer(settings.encoding)

    async def build(self, document: OrderDocument) -> Receipt:
        commands: List[Command] = [Reset()]
        if self.settings.logo_url:
            commands.extend(await self._logo())

        commands.extend(self._company(document))
        commands.extend(self._heading(document))
        commands.extend(self._order_info(document))
        commands.extend(self._party(document))
        commands.extend(self._items(document))
        commands.extend(self._totals(document))
        commands.extend(self._amount_in_words(document))
        commands.extend(self._narration(document))
        commands.extend(self._terms(document))
        commands.extend(self._signatory(document))
        commands.append(Feed(self.settings.trailing_feed))
        commands.append(Cut())

        raw = self._renderer.render(commands)
        logger.debug(f"Encoded {len(commands)} commands into {len(raw)} bytes")
        return Receipt(
            commands=commands,
            raw_commands=raw,
            preview=preview_text(commands, self.layout.line_width),
        )

    def _separator(self) -> Text:
        return Text(self.layout.separator(self.settings.line_separator))

    async def _logo(self) -> List[Command]:
        bitmap = await rasterize(self.settings.logo_url, self.settings.logo_width)
        return [Align("center"), Raster(bitmap), Text("")]

    def _company(self, document: OrderDocument) -> List[Command]:
        company = document.company
        commands: List[Command] = [
            Align(self.settings.header_alignment),
            Bold(True),
            DoubleSize(True),
            Text(company.name),
            DoubleSize(False),
            Bold(False),
        ]
        commands.extend(Text(line) for line in company.address.split("\n"))
        commands.append(Text(company.phone))
        if company.gstin:
            commands.append(Text(f"GSTIN: {company.gstin}"))
        commands.append(Text(""))
        return commands

    def _heading(self, document: OrderDocument) -> List[Command]:
        return [
            Align("center"),
            Bold(True),
            Text(document.heading.value),
            Bold(False),
            Text(""),
        ]

    def _order_info(self, document: OrderDocument) -> List[Command]:
        style = self.settings.section_styles.order_info
        fields: Tuple[Tuple[str, str], ...] = (
            ("Voucher No: ", document.order.number),
            ("Date: ", document.order.date),
            ("Entered By: ", document.order.user),
        )
        commands: List[Command] = [Align("left")]
        for label, value in fields:
            commands.extend([
                Bold(style.label_bold),
                Text(label, newline=False),
                Bold(style.value_bold),
                Text(value or NO_VALUE),
                Bold(False),
            ])
        commands.append(Text(""))
        return commands

    def _party(self, document: OrderDocument) -> List[Command]:
        party = document.party
        if not party.name:
            return []

        commands: List[Command] = [
            Bold(True),
            Text("PARTY DETAILS:"),
            Bold(False),
            Text(party.name),
        ]
        if party.address:
            commands.extend(Text(line) for line in party.address.split("\n"))
        if party.gstin:
            commands.append(Text(f"GSTIN: {party.gstin}"))
        commands.append(Text(""))
        return commands

    def _items(self, document: OrderDocument) -> List[Command]:
        commands: List[Command] = [
            self._separator(),
            Align("left"),
            Bold(True),
            Text(self.layout.table_header()),
            Bold(False),
            self._separator(),
        ]
        if document.items:
            for item in document.items:
                commands.extend(Text(line) for line in self.layout.item_lines(item))
                commands.append(Text(""))
        else:
            commands.append(Text("No items found."))
        commands.append(Text(""))
        return commands

    def _totals(self, document: OrderDocument) -> List[Command]:
        totals = document.totals
        commands: List[Command] = [
            self._separator(),
            Align("right"),
            Text(f"Sub Total: {totals.subtotal}"),
        ]
        for label, amount in (("CGST", totals.cgst), ("SGST", totals.sgst), ("IGST", totals.igst)):
            if amount != ZERO_AMOUNT:
                commands.append(Text(f"{label}: {amount}"))
        commands.extend([
            Bold(True),
            DoubleSize(True),
            Text(f"GRAND TOTAL: ₹{totals.total}"),
            DoubleSize(False),
            Bold(False),
            Text(""),
        ])
        return commands

    def _amount_in_words(self, document: OrderDocument) -> List[Command]:
        if not document.amount_in_words:
            return []
        return [
            Align("left"),
            Text("Amount in Words:"),
            Bold(True),
            Text(document.amount_in_words),
            Bold(False),
            Text(""),
        ]

    def _narration(self, document: OrderDocument) -> List[Command]:
        if not document.narration:
            return []
        commands: List[Command] = [
            self._separator(),
            Align("left"),
            Bold(True),
            Text("Narration:"),
            Bold(False),
        ]
        commands.extend(Text(line) for line in self.layout.chunk(document.narration))
        commands.append(Text(""))
        return commands

    def _terms(self, document: OrderDocument) -> List[Command]:
        if not document.terms_and_conditions:
            return []
        commands: List[Command] = [
            self._separator(),
            Align("center"),
            Text("Terms & Conditions:"),
            Align("left"),
        ]
        commands.extend(Text(line) for line in self.layout.chunk(document.terms_and_conditions))
        commands.append(Text(""))
        return commands

    def _signatory(self, document: OrderDocument) -> List[Command]:
        return [
            Align("right"),
            Text(""),
            Text(""),
            Text(document.authorized_signatory or DEFAULT_SIGNATORY),
            Text(""),
        ]


async def build_receipt(
    document: OrderDocument,
    settings: PrintSettings = DEFAULT_PRINT_SETTINGS,
) -> Receipt:
    return await ReceiptEncoder(settings).build(document)


async def encode(
    document: OrderDocument,
    settings: PrintSettings = DEFAULT_PRINT_SETTINGS,
) -> bytes:
    """Encode an order document into an ESC/POS byte stream."""
    receipt = await build_receipt(document, settings)
    return receipt.raw_commands
