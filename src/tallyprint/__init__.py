"""tallyprint - print Tally voucher exports on ESC/POS thermal printers."""

__version__ = "0.1.0"
