"""
Command-line entry point for tallyprint.

Reads a Tally XML export, encodes it as ESC/POS and either writes the
bytes to a file, shows a text preview, or sends them to the USB printer.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tallyprint.config.settings import get_settings, load_print_settings
from tallyprint.errors import ExtractionFailure
from tallyprint.hardware.printer import create_printer
from tallyprint.printing.encoder import build_receipt
from tallyprint.printing.manager import PrintManager
from tallyprint.tally.extractor import extract_file

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tallyprint",
        description="Print Tally voucher exports on an ESC/POS thermal printer",
    )
    parser.add_argument("xml_file", type=Path, help="Tally XML export")
    parser.add_argument("--settings", type=Path, help="JSON file with saved print settings")
    parser.add_argument("--copies", type=int, choices=range(1, 10), metavar="N", help="Number of copies (1-9)")
    parser.add_argument("--output", "-o", type=Path, help="Write the ESC/POS bytes to this file instead of printing")
    parser.add_argument("--preview", action="store_true", help="Print a text preview to stdout")
    parser.add_argument("--mock", action="store_true", help="Use a mock printer")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


async def run(args: argparse.Namespace) -> int:
    document = extract_file(args.xml_file)
    if isinstance(document, ExtractionFailure):
        logger.error(document.status)
        print(document.status, file=sys.stderr)
        return 1

    settings = load_print_settings(args.settings)
    receipt = await build_receipt(document, settings)

    if args.preview:
        print(receipt.preview)
    if args.output:
        args.output.write_bytes(receipt.raw_commands)
        logger.info(f"Wrote {len(receipt.raw_commands)} bytes to {args.output}")
    if args.preview or args.output:
        return 0

    manager = PrintManager(create_printer(mock=args.mock, settings=get_settings().usb))
    result = await manager.print_receipt(receipt, args.copies or settings.copy_count)
    print(result.status)
    return 0 if result.success else 2


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(args.debug or get_settings().debug)
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
