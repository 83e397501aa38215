"""HTML to PDF conversion.

The document composer treats PDF conversion as an opaque external
capability. ``PdfRenderer`` is the interface; ``WeasyPrintRenderer`` is the
default implementation.
"""

import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


def page_css(page_size: str, orientation: str) -> str:
    """Build the ``@page`` rule that fixes paper size and orientation.

    Examples:
        >>> page_css("A4", "landscape")
        '@page { size: A4 landscape; }'
    """
    return f"@page {{ size: {page_size} {orientation}; }}"


class PdfRenderer(ABC):
    """Interface for PDF rendering engines."""

    name: str = "pdf"

    @abstractmethod
    def render_html_to_pdf(
        self,
        html: str,
        *,
        page_size: str = "A4",
        orientation: str = "portrait",
        encoding: str = "UTF-8",
        base_url: str | None = None,
    ) -> bytes:
        """Render HTML to PDF.

        Args:
            html: Markup to render
            page_size: Paper size (e.g., "A4")
            orientation: "portrait" or "landscape"
            encoding: Markup encoding
            base_url: Base URL for resolving relative URLs (stylesheets, images)

        Returns:
            PDF content as bytes

        Raises:
            Exception: If rendering fails
        """


class WeasyPrintRenderer(PdfRenderer):
    """PDF renderer using the WeasyPrint engine.

    Paper size and orientation are applied through a generated ``@page``
    stylesheet, after any extra stylesheets given here.
    """

    name = "weasyprint"

    def __init__(self, stylesheets: list[str] | None = None) -> None:
        """Initialize the renderer.

        Args:
            stylesheets: Optional CSS file paths applied to every document
        """
        self.stylesheets = stylesheets or []

    def render_html_to_pdf(
        self,
        html: str,
        *,
        page_size: str = "A4",
        orientation: str = "portrait",
        encoding: str = "UTF-8",
        base_url: str | None = None,
    ) -> bytes:
        # Imported here: WeasyPrint loads native libraries on import
        from weasyprint import CSS, HTML

        html_doc = HTML(string=html, base_url=base_url, encoding=encoding)
        css_list = [CSS(filename=css) for css in self.stylesheets]
        css_list.append(CSS(string=page_css(page_size, orientation)))

        pdf_bytes = html_doc.write_pdf(stylesheets=css_list)

        logger.info("Rendered PDF: %d bytes (%s %s)", len(pdf_bytes), page_size, orientation)
        return pdf_bytes
