# utils/barcode.py

import io

from barcode import Code128
from barcode.writer import ImageWriter


def barcode_png(barcode_text: str) -> io.BytesIO:
    """
    Draw a Code128 barcode for `barcode_text` (e.g. an invoice reference
    "INV-123456") and return it as an in-memory PNG stream.
    """
    if not barcode_text or not isinstance(barcode_text, str):
        raise ValueError("barcode_text must be a non-empty string")

    buf = io.BytesIO()
    Code128(barcode_text, writer=ImageWriter()).write(buf)
    buf.seek(0)
    return buf
