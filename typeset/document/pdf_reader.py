"""
PDF document reading: frame trees and page images from laid-out PDFs.
"""

import logging
from typing import Callable, Optional, Tuple

import fitz  # PyMuPDF
from PIL import Image

from typeset.page.models import Document, Page
from typeset.page.text_layer import GROUP_BY_BLOCK, PageTextLayer

logger = logging.getLogger(__name__)


def open_pdf(pdf_path: str) -> fitz.Document:
    """
    Open a PDF document.

    Raises:
        RuntimeError: If fitz cannot open the file.
    """
    try:
        doc = fitz.open(pdf_path)
    except Exception as e:
        raise RuntimeError(f"Failed to open PDF '{pdf_path}': {e}") from e
    return doc


class PDFDocumentReader:
    """
    Keeps a PDF open and serves its pages as frame trees or images.

    Accepts either a path or an already open ``fitz.Document``; only
    documents opened by the reader are closed by it.
    """

    def __init__(self, source):
        if isinstance(source, fitz.Document):
            self.doc = source
            self.file_path: Optional[str] = source.name or None
            self._owns_doc = False
        else:
            self.doc = open_pdf(str(source))
            self.file_path = str(source)
            self._owns_doc = True
        self.page_count = self.doc.page_count

    def _check_index(self, page_index: int) -> None:
        if page_index < 0 or page_index >= self.page_count:
            raise IndexError(
                f"Page index {page_index} out of range "
                f"(document has {self.page_count} pages)"
            )

    # -- frames -------------------------------------------------------------

    def page_layer(
        self, page_index: int, grouping: str = GROUP_BY_BLOCK
    ) -> PageTextLayer:
        """Return the frame builder for *page_index*."""
        self._check_index(page_index)
        page = self.doc.load_page(page_index)
        return PageTextLayer(page, grouping=grouping)

    def to_document(
        self,
        page_range: Optional[Tuple[int, int]] = None,
        grouping: str = GROUP_BY_BLOCK,
        on_page: Optional[Callable[[int], None]] = None,
    ) -> Document:
        """
        Build a frame-tree document for the pages in *page_range*
        (0-based, inclusive; all pages when ``None``).

        *on_page* is called with each page index once its frame is built.
        """
        document = Document()
        for idx in self.page_indices(page_range):
            layer = self.page_layer(idx, grouping=grouping)
            logger.debug(
                "Page %d: %d text runs, %d lines skipped",
                idx,
                len(layer),
                layer.skipped_lines,
            )
            document.pages.append(Page(frame=layer.frame, number=idx + 1))
            if on_page is not None:
                on_page(idx)
        return document

    def page_indices(self, page_range: Optional[Tuple[int, int]] = None) -> range:
        """Clamp *page_range* to the document and return it as a range."""
        start = page_range[0] if page_range else 0
        end = page_range[1] if page_range else self.page_count - 1
        end = min(end, self.page_count - 1)
        return range(max(start, 0), end + 1)

    # -- rendering ----------------------------------------------------------

    def render(self, page_index: int, scale: float = 1.0) -> Image.Image:
        """Render *page_index* to a PIL RGB image at *scale* pixels per point."""
        self._check_index(page_index)
        page = self.doc.load_page(page_index)
        mat = fitz.Matrix(scale, scale)
        pix = page.get_pixmap(matrix=mat, alpha=False)
        return Image.frombytes("RGB", [pix.width, pix.height], pix.samples)

    # -- lifecycle ----------------------------------------------------------

    def close(self):
        if self.doc and self._owns_doc:
            self.doc.close()
        self.doc = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self):
        return f"PDFDocumentReader('{self.file_path}', pages={self.page_count})"
