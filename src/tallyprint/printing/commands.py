"""ESC/POS command opcodes and their byte rendering.

A receipt is built as an ordered list of opcodes, then rendered to bytes
in one pass. Keeping the list around lets the same receipt be previewed as
plain text.
"""

from dataclasses import dataclass
from typing import List, Literal, Sequence, Union

from tallyprint.printing.codec import encode_text
from tallyprint.printing.raster import MonochromeBitmap

AlignmentName = Literal["left", "center", "right"]


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class Align:
    alignment: AlignmentName = "left"


@dataclass(frozen=True)
class Bold:
    enabled: bool


@dataclass(frozen=True)
class DoubleSize:
    enabled: bool


@dataclass(frozen=True)
class Text:
    """Raw text; ``newline`` appends a line feed."""

    text: str
    newline: bool = True


@dataclass(frozen=True)
class Feed:
    lines: int = 1


@dataclass(frozen=True)
class Raster:
    bitmap: MonochromeBitmap


@dataclass(frozen=True)
class Cut:
    pass


Command = Union[Reset, Align, Bold, DoubleSize, Text, Feed, Raster, Cut]


class CommandRenderer:
    """Renders opcode lists to ESC/POS bytes."""

    ESC = b'\x1b'
    GS = b'\x1d'
    LF = b'\x0a'

    ALIGN_BYTES = {
        "left": b'\x00',
        "center": b'\x01',
        "right": b'\x02',
    }

    # ESC ! n: 0x30 is double height and double width, 0x00 normal font A
    DOUBLE_SIZE_ON = b'\x30'
    DOUBLE_SIZE_OFF = b'\x00'

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def render(self, commands: Sequence[Command]) -> bytes:
        return b''.join(self.render_one(command) for command in commands)

    def render_one(self, command: Command) -> bytes:
        if isinstance(command, Text):
            data = encode_text(command.text, self.encoding)
            return data + self.LF if command.newline else data
        if isinstance(command, Bold):
            return self.ESC + b'E' + (b'\x01' if command.enabled else b'\x00')
        if isinstance(command, Align):
            return self.ESC + b'a' + self.ALIGN_BYTES.get(command.alignment, b'\x00')
        if isinstance(command, DoubleSize):
            return self.ESC + b'!' + (self.DOUBLE_SIZE_ON if command.enabled else self.DOUBLE_SIZE_OFF)
        if isinstance(command, Feed):
            return self.LF * command.lines
        if isinstance(command, Raster):
            return self._raster(command.bitmap)
        if isinstance(command, Reset):
            return self.ESC + b'@'
        if isinstance(command, Cut):
            return self.GS + b'V' + b'\x00'
        raise TypeError(f"Unknown printer command: {command!r}")

    def _raster(self, bitmap: MonochromeBitmap) -> bytes:
        """GS v 0 m xL xH yL yH d1...dk with m = 0 (normal density)."""
        if bitmap.is_empty:
            return b''
        return b''.join([
            self.GS + b'v0',
            b'\x00',
            bytes([bitmap.row_bytes & 0xFF, (bitmap.row_bytes >> 8) & 0xFF]),
            bytes([bitmap.height & 0xFF, (bitmap.height >> 8) & 0xFF]),
            bitmap.data,
        ])


def preview_text(commands: Sequence[Command], width: int) -> str:
    """Plain-text rendering of a command list, for logs and dry runs."""
    lines: List[str] = []
    alignment: AlignmentName = "left"
    double = False
    current = ""

    def flush() -> None:
        nonlocal current
        text = current.upper() if double else current
        if alignment == "center":
            text = text.center(width)
        elif alignment == "right":
            text = text.rjust(width)
        lines.append(text.rstrip())
        current = ""

    for command in commands:
        if isinstance(command, Align):
            alignment = command.alignment
        elif isinstance(command, DoubleSize):
            double = command.enabled
        elif isinstance(command, Text):
            current += command.text
            if command.newline:
                flush()
        elif isinstance(command, Feed):
            for _ in range(command.lines):
                flush()
        elif isinstance(command, Raster) and not command.bitmap.is_empty:
            lines.append("[LOGO]".center(width).rstrip())
        elif isinstance(command, Cut):
            lines.append("~" * width)

    if current:
        flush()
    return "\n".join(lines)
