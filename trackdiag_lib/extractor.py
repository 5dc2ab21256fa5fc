#!/usr/bin/env python3
"""
trackdiag_lib/extractor.py: Reads the text layer of a PDF as positioned
fragments, one list per page.

pdfminer groups characters into text lines; each line is further split into
phrases wherever the horizontal gap between characters is wider than the font
size, so that table cells on the same row become separate fragments.
"""
import logging
import os
from typing import List

from pdfminer.high_level import extract_pages
from pdfminer.layout import LTChar, LTTextLine

from .models import TextFragment

log_extract = logging.getLogger("trackdiag.extract")


class PDFFragmentSource:
    """
    Supplies positioned text fragments for every page of a PDF.

    Args:
        pdf_path (str): The file path to the PDF.
        gap_factor (float): Multiple of the font size that separates phrases.
    """

    def __init__(self, pdf_path, gap_factor=1.0):
        self.pdf_path = pdf_path
        self.gap_factor = gap_factor
        if not os.path.exists(self.pdf_path):
            raise FileNotFoundError(f"PDF file not found: {self.pdf_path}")

    def read_pages(self) -> List[List[TextFragment]]:
        pages = []
        for page_layout in extract_pages(self.pdf_path):
            lines = self._find_elements_by_type(page_layout, LTTextLine)
            fragments = []
            for line in lines:
                fragments.extend(self._split_line_into_fragments(line))
            log_extract.debug(
                "Page %d: %d text lines -> %d fragments",
                page_layout.pageid,
                len(lines),
                len(fragments),
            )
            pages.append(fragments)
        log_extract.info(
            "Read %d pages (%d fragments) from %s",
            len(pages),
            sum(len(p) for p in pages),
            self.pdf_path,
        )
        return pages

    def _split_line_into_fragments(self, line) -> List[TextFragment]:
        """Splits a pdfminer text line into phrases on wide horizontal gaps."""
        objs = list(line) if hasattr(line, "_objs") else []
        if not any(isinstance(o, LTChar) for o in objs):
            text = line.get_text().strip()
            return [TextFragment(text, line.x0, line.y0)] if text else []

        fragments, buf, start_x, end_x = [], [], None, None
        for obj in objs:
            if not isinstance(obj, LTChar):
                # Virtual spaces (LTAnno) carry no position; keep them inside a phrase.
                if buf:
                    buf.append(obj.get_text().replace("\n", ""))
                continue
            if buf and obj.x0 - end_x > obj.size * self.gap_factor:
                fragments.append(TextFragment("".join(buf).strip(), start_x, line.y0))
                buf = []
            if not buf:
                start_x = obj.x0
            buf.append(obj.get_text())
            end_x = obj.x1
        if buf:
            fragments.append(TextFragment("".join(buf).strip(), start_x, line.y0))
        return [f for f in fragments if f.text]

    def _find_elements_by_type(self, obj, t):
        """Recursively finds all layout elements of a specific type."""
        e = []
        if isinstance(obj, t):
            e.append(obj)
        if hasattr(obj, "_objs"):
            for child in obj:
                e.extend(self._find_elements_by_type(child, t))
        return e
