"""Tally voucher XML extractor.

Normalizes the tag soup that Tally exports into an OrderDocument.
The source schema varies between Tally configurations and voucher types,
so every field lookup is optional: a missing tag is an empty string or a
zero amount, never an error. Only unparseable XML and a missing VOUCHER
element fail the whole extraction.
"""

import logging
import re
import xml.etree.ElementTree as ET
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from pathlib import Path
from typing import List, Optional, Tuple, Union

from tallyprint.errors import (
    ExtractionFailure,
    MalformedInputError,
    MissingVoucherError,
)
from tallyprint.tally.models import (
    Company,
    Heading,
    LineItem,
    OrderDocument,
    OrderInfo,
    Party,
    Totals,
)

logger = logging.getLogger(__name__)

# Tally emits this control character reference, which XML 1.0 forbids.
INVALID_CHAR_REF = "&#4;"

ITEM_LIST_TAGS = (
    "ALLINVENTORYENTRIES.LIST",
    "INVENTORYENTRIESIN.LIST",
    "INVENTORYENTRIESOUT.LIST",
)

# First match wins.
HEADING_RULES: Tuple[Tuple[Tuple[str, ...], Heading], ...] = (
    (("SALES ORDER",), Heading.SALES_ORDER),
    (("MATERIAL OUT", "DELIVERY"), Heading.MATERIAL_CHALLAN),
    (("SALES",), Heading.SALES_INVOICE),
)

SGST_LABELS = ("SGST", "SGST/UTGST")

_NUMBER_RE = re.compile(r"^\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_XML_DECL_RE = re.compile(r"^\s*<\?xml[^>]*\?>")
_TWO_PLACES = Decimal("0.01")

ExtractionResult = Union[OrderDocument, ExtractionFailure]


class TagReader:
    """Permissive accessor over a parsed Tally tree.

    This is the only code that touches ElementTree nodes. Lookups search
    descendants of a scope node (the voucher unless given) in document order
    and fall back to an empty result.
    """

    def __init__(self, root: ET.Element, scope: ET.Element):
        self.root = root
        self.scope = scope

    def elements(self, tag: str, node: Optional[ET.Element] = None) -> List[ET.Element]:
        node = self.scope if node is None else node
        return [el for el in node.iter(tag) if el is not node]

    def text(self, tag: str, node: Optional[ET.Element] = None, default: str = "") -> str:
        for el in self.elements(tag, node):
            return _element_text(el) or default
        return default

    def child_texts(self, list_tag: str, child_tag: str, node: Optional[ET.Element] = None) -> List[str]:
        """Text of each ``child_tag`` directly under every ``list_tag``."""
        return [
            _element_text(child)
            for parent in self.elements(list_tag, node)
            for child in parent.findall(child_tag)
        ]

    def document_text(self, anchor: str, path: str) -> str:
        """Text at ``path`` below any ``anchor`` element in the whole document."""
        for anchor_el in self.root.iter(anchor):
            found = anchor_el.find(path)
            if found is not None:
                return _element_text(found)
        return ""

    def document_child_texts(self, list_tag: str, child_tag: str) -> List[str]:
        return [
            _element_text(child)
            for parent in self.root.iter(list_tag)
            for child in parent.findall(child_tag)
        ]


def _element_text(el: ET.Element) -> str:
    return "".join(el.itertext()).strip()


def parse_number(text: str) -> Decimal:
    """Leading numeric value of ``text``, or zero.

    Mirrors how Tally values are written: "5.50/NOS", "-1200.00", "10 NOS".
    """
    match = _NUMBER_RE.match(text or "")
    if not match:
        return Decimal(0)
    return Decimal(match.group(0).strip())


def money(value: Decimal) -> str:
    """Two-decimal amount string; values too large to quantize become 0.00."""
    try:
        return str(value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        logger.warning(f"Amount out of range, using 0.00: {value}")
        return "0.00"


def format_date(value: str) -> str:
    """Convert Tally's YYYYMMDD into DD-MM-YYYY."""
    if not value:
        return ""
    return f"{value[6:8]}-{value[4:6]}-{value[0:4]}"


def parse_qty(value: str) -> str:
    """Leading quantity token: "10 NOS" -> "10"."""
    token = value.strip().split(" ")[0]
    return token if _NUMBER_RE.match(token) else "0"


def classify_heading(voucher_type: str) -> Heading:
    normalized = voucher_type.upper()
    for needles, heading in HEADING_RULES:
        if any(needle in normalized for needle in needles):
            return heading
    return Heading.DOCUMENT


def clean_xml(raw: Union[str, bytes]) -> Union[str, bytes]:
    """Remove the control character reference Tally writes into exports."""
    if isinstance(raw, bytes):
        return raw.replace(INVALID_CHAR_REF.encode("ascii"), b"")
    text = raw.lstrip("\ufeff").replace(INVALID_CHAR_REF, "")
    # The declaration may name an encoding the str has already been decoded from.
    return _XML_DECL_RE.sub("", text, count=1)


def _parse_items(reader: TagReader) -> List[LineItem]:
    items: List[LineItem] = []
    for tag in ITEM_LIST_TAGS:
        for entry in reader.elements(tag):
            rate = parse_number(reader.text("RATE", entry).split("/")[0])
            amount = abs(parse_number(reader.text("AMOUNT", entry)))
            items.append(LineItem(
                s_no=len(items) + 1,
                name=reader.text("STOCKITEMNAME", entry),
                qty=parse_qty(reader.text("ACTUALQTY", entry)),
                rate=money(rate),
                amount=money(amount),
            ))
    return items


def _ledger_amount(reader: TagReader, ledgers: List[ET.Element], ledger_name: str) -> Decimal:
    for entry in ledgers:
        if reader.text("LEDGERNAME", entry) == ledger_name:
            return abs(parse_number(reader.text("AMOUNT", entry)))
    return Decimal(0)


def _parse_totals(reader: TagReader, items: List[LineItem]) -> Totals:
    subtotal = sum((Decimal(item.amount) for item in items), Decimal(0))

    ledgers = reader.elements("LEDGERENTRIES.LIST")
    igst = _ledger_amount(reader, ledgers, "IGST")
    cgst = _ledger_amount(reader, ledgers, "CGST")
    sgst = Decimal(0)
    for label in SGST_LABELS:
        sgst = _ledger_amount(reader, ledgers, label)
        if sgst:
            break

    total = subtotal
    for entry in ledgers:
        if reader.text("ISPARTYLEDGER", entry) == "Yes":
            total = abs(parse_number(reader.text("AMOUNT", entry)))
            break

    return Totals(
        subtotal=money(subtotal),
        cgst=money(cgst),
        sgst=money(sgst),
        igst=money(igst),
        total=money(total),
    )


def _build_document(reader: TagReader) -> OrderDocument:
    items = _parse_items(reader)
    return OrderDocument(
        heading=classify_heading(reader.text("VOUCHERTYPENAME")),
        company=Company(
            name=reader.document_text("REQUESTDESC", "STATICVARIABLES/SVCURRENTCOMPANY"),
            gstin=reader.text("CMPGSTIN"),
            address="\n".join(reader.document_child_texts("CMPADDRESS.LIST", "CMPADDRESS")),
            phone=reader.text("CMPPHONE", reader.root),
        ),
        order=OrderInfo(
            number=reader.text("VOUCHERNUMBER"),
            date=format_date(reader.text("DATE")),
            user=reader.text("ENTEREDBY"),
        ),
        party=Party(
            name=reader.text("PARTYNAME"),
            address="\n".join(reader.child_texts("BASICBUYERADDRESS.LIST", "BASICBUYERADDRESS")),
            gstin=reader.text("PARTYGSTIN"),
        ),
        items=tuple(items),
        totals=_parse_totals(reader, items),
        narration=reader.text("NARRATION"),
        terms_and_conditions="\n".join(reader.child_texts("BASICORDERTERMS.LIST", "BASICORDERTERMS")),
        amount_in_words=reader.text("AMOUNTINWORDS"),
        authorized_signatory=reader.text("AUTHORISEDSIGNATORY"),
    )


def _parse_tree(raw: Union[str, bytes]) -> ET.Element:
    try:
        return ET.fromstring(clean_xml(raw))
    except (ET.ParseError, ValueError) as e:
        raise MalformedInputError(f"Invalid XML format: {e}") from e


def extract(raw: Union[str, bytes]) -> ExtractionResult:
    """Parse raw Tally XML into an OrderDocument.

    Never raises: any failure is returned as an ExtractionFailure and no
    partially populated document is ever produced.
    """
    try:
        root = _parse_tree(raw)
        voucher = next(root.iter("VOUCHER"), None)
        if voucher is None:
            raise MissingVoucherError("<VOUCHER> element not found in XML.")
        document = _build_document(TagReader(root, voucher))
    except (MalformedInputError, MissingVoucherError) as e:
        logger.error(f"XML parse error: {e}")
        return ExtractionFailure.from_error(e)
    except Exception as e:
        logger.exception("Unexpected error while extracting voucher")
        return ExtractionFailure.from_error(MalformedInputError(str(e)))

    logger.info(
        f"Extracted {document.heading.value} {document.order.number or '(no number)'} "
        f"with {len(document.items)} items"
    )
    return document


def read_export(path: Union[str, Path]) -> str:
    """Read a Tally export, honouring a UTF-16 or UTF-8 byte order mark."""
    data = Path(path).read_bytes()
    if data.startswith((b"\xff\xfe", b"\xfe\xff")):
        return data.decode("utf-16")
    return data.decode("utf-8-sig", errors="replace")


def extract_file(path: Union[str, Path]) -> ExtractionResult:
    """Read and extract a Tally export from disk."""
    try:
        raw = read_export(path)
    except OSError as e:
        logger.error(f"Failed to read {path}: {e}")
        return ExtractionFailure.from_error(MalformedInputError(str(e)))
    return extract(raw)
