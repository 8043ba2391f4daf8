from .pdf_reader import PDFDocumentReader, open_pdf

__all__ = ["PDFDocumentReader", "open_pdf"]
