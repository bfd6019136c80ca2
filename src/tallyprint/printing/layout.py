"""Fixed-width text layout for the item table and free-text blocks.

All widths are in characters. The printer font is monospaced, so a line
of ``line_width`` characters fills the paper.
"""

from typing import List

from tallyprint.config.settings import ColumnPlan
from tallyprint.tally.models import LineItem


class LayoutEngine:
    """Wraps and aligns receipt text for a given column plan.

    Free text is cut into fixed-length chunks by default; ``wrap_words``
    switches to word-boundary wrapping.
    """

    def __init__(self, columns: ColumnPlan, wrap_words: bool = False):
        self.columns = columns
        self.wrap_words = wrap_words

    @property
    def line_width(self) -> int:
        return self.columns.line_width

    @property
    def name_indent(self) -> str:
        """Indent aligning continuation lines under the item name column."""
        return " " * (self.columns.sno_width + 1)

    def separator(self, glyph: str) -> str:
        glyph = glyph or "-"
        return (glyph * self.line_width)[:self.line_width]

    def table_header(self) -> str:
        cols = self.columns
        return (
            f"{'S.No':<{cols.sno_width}} "
            f"{'Item Name':<{cols.name_width}} "
            f"{'Qty/Rate':<{cols.qty_rate_width}} "
            f"{'Amount':>{cols.amount_width}}"
        )

    def name_lines(self, item: LineItem) -> List[str]:
        """Item name hard-wrapped by character count.

        The first line carries the serial number; continuations are
        indented under the name column.
        """
        width = self.columns.name_width
        name = item.name
        lines = [f"{str(item.s_no):<{self.columns.sno_width}} {name[:width]}"]
        for start in range(width, len(name), width):
            lines.append(f"{self.name_indent}{name[start:start + width]}")
        return lines

    def summary_line(self, item: LineItem) -> str:
        """Indented "qty x rate" with the amount right-aligned to the line width.

        Padding is clamped at zero, so an overlong summary pushes the amount
        right rather than being truncated.
        """
        qty_rate = f"{item.qty} x {item.rate}".ljust(self.columns.qty_rate_width)
        available = self.line_width - len(self.name_indent)
        padding = max(0, available - len(qty_rate) - 1 - len(item.amount))
        return f"{self.name_indent}{qty_rate} {' ' * padding}{item.amount}"

    def item_lines(self, item: LineItem) -> List[str]:
        return self.name_lines(item) + [self.summary_line(item)]

    def chunk(self, text: str) -> List[str]:
        """Split a free-text block into printable lines.

        By default the raw text is cut every ``line_width`` characters, line
        breaks included. With ``wrap_words`` each source line is wrapped at
        word boundaries instead.
        """
        width = self.line_width
        if not self.wrap_words:
            return [text[start:start + width] for start in range(0, len(text), width)]

        lines: List[str] = []
        for raw in text.splitlines():
            lines.extend(self._wrap_words(raw, width))
        return lines

    @staticmethod
    def _wrap_words(line: str, width: int) -> List[str]:
        """Greedy word wrap of one line; words longer than ``width`` are hard-split."""
        words = line.split()
        if not words:
            return [""]

        lines: List[str] = []
        current = ""
        for word in words:
            while len(word) > width:
                if current:
                    lines.append(current)
                    current = ""
                lines.append(word[:width])
                word = word[width:]
            if not word:
                continue
            if current and len(current) + 1 + len(word) <= width:
                current = f"{current} {word}"
            else:
                if current:
                    lines.append(current)
                current = word
        if current:
            lines.append(current)
        return lines
