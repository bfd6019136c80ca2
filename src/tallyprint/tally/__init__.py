"""Tally voucher extraction."""

from tallyprint.tally.extractor import extract, extract_file
from tallyprint.tally.models import (
    Company,
    Heading,
    LineItem,
    OrderDocument,
    OrderInfo,
    Party,
    Totals,
)

__all__ = [
    "extract",
    "extract_file",
    "Company",
    "Heading",
    "LineItem",
    "OrderDocument",
    "OrderInfo",
    "Party",
    "Totals",
]
