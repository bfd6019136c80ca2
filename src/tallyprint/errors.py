"""Error types shared across tallyprint."""

from dataclasses import dataclass
from enum import Enum


class TallyPrintError(Exception):
    """Base class for all tallyprint errors."""


class MalformedInputError(TallyPrintError):
    """XML could not be parsed or walked even after cleanup."""


class MissingVoucherError(TallyPrintError):
    """Well-formed XML without a VOUCHER element."""


class OptionalAssetUnavailable(TallyPrintError):
    """An optional asset (the logo) could not be loaded or decoded."""


class PrinterError(TallyPrintError):
    """Transport level failure."""


class PrinterNotFoundError(PrinterError):
    """No printer matching the configured USB ids."""


class PrinterWriteError(PrinterError):
    """A bulk transfer to the printer failed."""


class FailureReason(str, Enum):
    MALFORMED = "malformed"
    MISSING_VOUCHER = "missing_voucher"


@dataclass(frozen=True)
class ExtractionFailure:
    """Result returned by the extractor instead of a document.

    Callers must treat this as "no document": nothing from a previous parse
    survives a failure.
    """

    reason: FailureReason
    message: str = ""

    @classmethod
    def from_error(cls, error: Exception) -> "ExtractionFailure":
        if isinstance(error, MissingVoucherError):
            return cls(FailureReason.MISSING_VOUCHER, str(error))
        return cls(FailureReason.MALFORMED, str(error))

    @property
    def status(self) -> str:
        """User-facing status line."""
        if self.reason is FailureReason.MISSING_VOUCHER:
            return "No <VOUCHER> element found in the file."
        return f"Could not read the file as Tally XML: {self.message}"
