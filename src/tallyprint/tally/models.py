"""Canonical order document produced from a Tally voucher export."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class Heading(str, Enum):
    """Document classification printed under the company block."""

    SALES_ORDER = "SALES ORDER"
    MATERIAL_CHALLAN = "MATERIAL CHALLAN"
    SALES_INVOICE = "SALES INVOICE"
    DOCUMENT = "DOCUMENT"


@dataclass(frozen=True)
class Company:
    name: str = ""
    gstin: str = ""
    address: str = ""
    phone: str = ""


@dataclass(frozen=True)
class Party:
    name: str = ""
    address: str = ""
    gstin: str = ""


@dataclass(frozen=True)
class OrderInfo:
    """Voucher identification. ``date`` is in DD-MM-YYYY form."""

    number: str = ""
    date: str = ""
    user: str = ""


@dataclass(frozen=True)
class LineItem:
    """A single inventory entry.

    Money and quantity fields are kept as the strings that get printed:
    ``rate`` and ``amount`` always carry exactly two decimals.
    """

    s_no: int
    name: str
    qty: str
    rate: str
    amount: str


@dataclass(frozen=True)
class Totals:
    subtotal: str = "0.00"
    cgst: str = "0.00"
    sgst: str = "0.00"
    igst: str = "0.00"
    total: str = "0.00"


@dataclass(frozen=True)
class OrderDocument:
    """Immutable snapshot of one parsed voucher."""

    heading: Heading = Heading.DOCUMENT
    company: Company = field(default_factory=Company)
    order: OrderInfo = field(default_factory=OrderInfo)
    party: Party = field(default_factory=Party)
    items: Tuple[LineItem, ...] = ()
    totals: Totals = field(default_factory=Totals)
    narration: str = ""
    terms_and_conditions: str = ""
    amount_in_words: str = ""
    authorized_signatory: str = ""
