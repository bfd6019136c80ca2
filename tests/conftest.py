"""
Shared fixtures for tallyprint tests.

Voucher XML is assembled from small fragments so each test can vary just
the part it cares about.
"""

from typing import Iterable, Optional

import pytest

from tallyprint.tally.models import (
    Company,
    Heading,
    LineItem,
    OrderDocument,
    OrderInfo,
    Party,
    Totals,
)


def inventory_entry(
    name: str = "Steel Bolt M8",
    qty: str = " 10 NOS",
    rate: str = "5.5/PCS",
    amount: str = "-55.00",
    tag: str = "ALLINVENTORYENTRIES.LIST",
) -> str:
    return (
        f"<{tag}>"
        f"<STOCKITEMNAME>{name}</STOCKITEMNAME>"
        f"<RATE>{rate}</RATE>"
        f"<AMOUNT>{amount}</AMOUNT>"
        f"<ACTUALQTY>{qty}</ACTUALQTY>"
        f"</{tag}>"
    )


def ledger_entry(name: str, amount: str, party: bool = False) -> str:
    return (
        "<LEDGERENTRIES.LIST>"
        f"<LEDGERNAME>{name}</LEDGERNAME>"
        f"<ISPARTYLEDGER>{'Yes' if party else 'No'}</ISPARTYLEDGER>"
        f"<AMOUNT>{amount}</AMOUNT>"
        "</LEDGERENTRIES.LIST>"
    )


def voucher_xml(
    entries: Optional[Iterable[str]] = None,
    ledgers: Optional[Iterable[str]] = None,
    voucher_type: str = "Sales Order",
    date: str = "20250709",
    company: Optional[str] = "Acme Traders",
    extra: str = "",
) -> str:
    if entries is None:
        entries = [inventory_entry()]
    if ledgers is None:
        ledgers = [
            ledger_entry("Globex Retail", "-64.90", party=True),
            ledger_entry("CGST", "4.95"),
            ledger_entry("SGST", "4.95"),
        ]
    request_desc = ""
    if company is not None:
        request_desc = (
            "<REQUESTDESC><REPORTNAME>Vouchers</REPORTNAME>"
            f"<STATICVARIABLES><SVCURRENTCOMPANY>{company}</SVCURRENTCOMPANY></STATICVARIABLES>"
            "</REQUESTDESC>"
        )
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<ENVELOPE>
 <HEADER><TALLYREQUEST>Import Data</TALLYREQUEST></HEADER>
 <BODY>
  <IMPORTDATA>
   {request_desc}
   <REQUESTDATA>
    <TALLYMESSAGE xmlns:UDF="TallyUDF">
     <VOUCHER VCHTYPE="{voucher_type}" ACTION="Create">
      <DATE>{date}</DATE>
      <VOUCHERTYPENAME>{voucher_type}</VOUCHERTYPENAME>
      <VOUCHERNUMBER>SO542</VOUCHERNUMBER>
      <PARTYNAME>Globex Retail</PARTYNAME>
      <PARTYGSTIN>27AAACG1234F1Z5</PARTYGSTIN>
      <CMPGSTIN>27AAACA9999B1Z2</CMPGSTIN>
      <ENTEREDBY>admin</ENTEREDBY>
      <NARRATION>Deliver before noon&#4;</NARRATION>
      <BASICBUYERADDRESS.LIST TYPE="String">
       <BASICBUYERADDRESS>12 Market Road</BASICBUYERADDRESS>
       <BASICBUYERADDRESS>Pune</BASICBUYERADDRESS>
      </BASICBUYERADDRESS.LIST>
      {extra}
      {''.join(entries)}
      {''.join(ledgers)}
     </VOUCHER>
    </TALLYMESSAGE>
   </REQUESTDATA>
  </IMPORTDATA>
 </BODY>
</ENVELOPE>
"""


@pytest.fixture
def sample_xml() -> str:
    return voucher_xml()


@pytest.fixture
def sample_document() -> OrderDocument:
    """Document equivalent to what the extractor produces for sample_xml."""
    return OrderDocument(
        heading=Heading.SALES_ORDER,
        company=Company(name="Acme Traders", gstin="27AAACA9999B1Z2"),
        order=OrderInfo(number="SO542", date="09-07-2025", user="admin"),
        party=Party(
            name="Globex Retail",
            address="12 Market Road\nPune",
            gstin="27AAACG1234F1Z5",
        ),
        items=(
            LineItem(s_no=1, name="Steel Bolt M8", qty="10", rate="5.50", amount="55.00"),
        ),
        totals=Totals(
            subtotal="55.00",
            cgst="4.95",
            sgst="4.95",
            igst="0.00",
            total="64.90",
        ),
        narration="Deliver before noon",
    )
