"""
Abstract base class for printer transports.

Both the USB driver and the mock printer follow this contract. A transport
only moves bytes; it never builds or alters the command stream.
"""

from abc import ABC, abstractmethod


class Printer(ABC):
    """Abstract base class for a raw ESC/POS printer link."""

    @abstractmethod
    async def connect(self) -> None:
        """Open the link. Raises PrinterError on failure."""
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Release the link."""
        ...

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        ...

    @abstractmethod
    async def write(self, data: bytes) -> None:
        """Send one complete print buffer."""
        ...
