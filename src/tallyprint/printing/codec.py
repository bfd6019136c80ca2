"""Text encoding for the printer's character set."""

# Glyphs the printer fonts cannot render
SUBSTITUTIONS = {
    "₹": "Rs. ",
}


def substitute(text: str) -> str:
    for glyph, replacement in SUBSTITUTIONS.items():
        text = text.replace(glyph, replacement)
    return text


def encode_text(text: str, encoding: str = "utf-8") -> bytes:
    """Encode text for the printer, replacing unprintable glyphs first."""
    return substitute(text).encode(encoding, errors="replace")
