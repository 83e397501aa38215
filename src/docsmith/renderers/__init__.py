"""Jinja2 filters and the HTML to PDF renderer interface."""

from docsmith.renderers.filters import number_format
from docsmith.renderers.pdf import PdfRenderer, WeasyPrintRenderer, page_css

__all__ = ["PdfRenderer", "WeasyPrintRenderer", "number_format", "page_css"]
