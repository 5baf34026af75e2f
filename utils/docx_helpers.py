# utils/docx_helpers.py
from typing import List, Optional, Sequence

from docx.document import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor

HEADER_BLUE = RGBColor(0x1E, 0x40, 0xAF)
MUTED_GREY = RGBColor(0x6B, 0x72, 0x80)

# schema order: these must follow w:bidi / w:bidiVisual inside pPr / tblPr
_PPR_AFTER_BIDI = (
    "w:adjustRightInd", "w:snapToGrid", "w:spacing", "w:ind", "w:contextualSpacing",
    "w:mirrorIndents", "w:suppressOverlap", "w:jc", "w:textDirection", "w:textAlignment",
    "w:textboxTightWrap", "w:outlineLvl", "w:divId", "w:cnfStyle", "w:rPr", "w:sectPr",
    "w:pPrChange",
)
_TBLPR_AFTER_BIDI = (
    "w:tblStyleRowBandSize", "w:tblStyleColBandSize", "w:tblW", "w:jc", "w:tblCellSpacing",
    "w:tblInd", "w:tblBorders", "w:shd", "w:tblLayout", "w:tblCellMar", "w:tblLook",
    "w:tblCaption", "w:tblDescription", "w:tblPrChange",
)


def start_alignment(rtl: bool):
    return WD_ALIGN_PARAGRAPH.RIGHT if rtl else WD_ALIGN_PARAGRAPH.LEFT


def end_alignment(rtl: bool):
    return WD_ALIGN_PARAGRAPH.LEFT if rtl else WD_ALIGN_PARAGRAPH.RIGHT


def _set_bidi(paragraph) -> None:
    pPr = paragraph._p.get_or_add_pPr()
    if pPr.find(qn("w:bidi")) is None:
        pPr.insert_element_before(OxmlElement("w:bidi"), *_PPR_AFTER_BIDI)


def _add_run(paragraph, text: str, *, rtl: bool, bold: bool = False):
    run = paragraph.add_run(text)
    run.bold = bold
    if rtl:
        run.font.rtl = True
        _set_bidi(paragraph)
    return run


def add_text(
        doc: DocxDocument,
        text: str,
        *,
        rtl: bool = False,
        bold: bool = False,
        size: Optional[float] = None,
        color: Optional[RGBColor] = None,
        align=None,
):
    """
    Append a single-run paragraph. Alignment defaults to the reading start
    side (right for RTL languages); RTL paragraphs are also marked bidi.
    """
    p = doc.add_paragraph()
    p.alignment = start_alignment(rtl) if align is None else align
    run = _add_run(p, text, rtl=rtl, bold=bold)
    if size:
        run.font.size = Pt(size)
    if color is not None:
        run.font.color.rgb = color
    return p


def _set_cell(cell, text: str, align, *, rtl: bool, bold: bool = False) -> None:
    cell.text = ""
    p = cell.paragraphs[0]
    p.alignment = align
    _add_run(p, text, rtl=rtl, bold=bold)


def add_table(
        doc: DocxDocument,
        headers: Sequence[str],
        rows: List[Sequence[str]],
        *,
        numeric_columns: Sequence[int] = (),
        rtl: bool = False,
):
    """
    Add a bordered table with a bold header row. Columns listed in
    `numeric_columns` are aligned to the reading end side. RTL tables are
    mirrored (first column on the right).
    """
    table = doc.add_table(rows=1, cols=len(headers))
    table.style = "Table Grid"
    if rtl:
        tblPr = table._tbl.tblPr
        tblPr.insert_element_before(OxmlElement("w:bidiVisual"), *_TBLPR_AFTER_BIDI)

    def align_for(col: int):
        return end_alignment(rtl) if col in numeric_columns else start_alignment(rtl)

    for col, title in enumerate(headers):
        _set_cell(table.rows[0].cells[col], title, align_for(col), rtl=rtl, bold=True)

    for row in rows:
        cells = table.add_row().cells
        for col, value in enumerate(row):
            _set_cell(cells[col], str(value), align_for(col), rtl=rtl)

    return table


def add_summary_row(table, label: str, value: str, *, rtl: bool = False) -> None:
    """
    Append a row whose label spans every column but the last one.
    """
    cells = table.add_row().cells
    label_cell = cells[0].merge(cells[-2]) if len(cells) > 2 else cells[0]
    _set_cell(label_cell, label, end_alignment(rtl), rtl=rtl, bold=True)
    _set_cell(cells[-1], value, end_alignment(rtl), rtl=rtl, bold=True)
