"""Output format strategies.

Each strategy joins a draft's fragments with its own page separator and
turns the result into an ``OutputArtifact``:

- doc: page-separated markup saved with a ``.doc`` extension. Word
  processors open HTML files named ``.doc`` and convert them, so no binary
  format is produced.
- pdf: page-separated markup converted by an external ``PdfRenderer``.
- print: markup with a ``window.print()`` trigger, shown inline.

The first fragment is never preceded by a separator. Without delimiters,
fragments are concatenated as-is (price tags, labels).
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from docsmith.config import PdfConfig
from docsmith.errors import ExternalRenderFailure
from docsmith.models.document import DocumentDraft, OutputArtifact, OutputFormat
from docsmith.renderers.pdf import PdfRenderer

logger = logging.getLogger(__name__)

# Page separator in .doc output
DELIMITER_DOC = '<br style="page-break-before: always">'

# Page separator in .pdf output
DELIMITER_PDF = (
    '<table width="100%" cellpadding="1" cellspacing="0" border="0" '
    'style="page-break-inside: avoid; page-break-before: always"></table>'
)

# Page separator for browser printing, styled by the print stylesheet
DELIMITER_PRINT = '<div class="end_line"></div>'

PRINT_SCRIPT = "<script>window.print()</script>"

LANDSCAPE_PRINT_STYLE = "<style> @media print{@page {size: landscape}} </style>"


def join_fragments(
    fragments: Sequence[str],
    delimiter: str,
    use_delimiter: bool = True,
) -> str:
    """Join fragments, placing the delimiter only between them."""
    return (delimiter if use_delimiter else "").join(fragments)


class FormatStrategy(ABC):
    """Turns a draft into an output artifact.

    Attributes:
        output_format: Format identifier
        extension: File extension appended to the draft's base name
        content_type: MIME type of the artifact
        delimiter: Separator placed between fragments
        uses_orientation: Whether build() reads the page orientation
    """

    output_format: OutputFormat
    extension: str = ""
    content_type: str = "text/html; charset=utf-8"
    delimiter: str = ""
    uses_orientation: bool = True

    def assemble(self, draft: DocumentDraft) -> str:
        """Join the draft's fragments with this format's separator."""
        return join_fragments(draft.fragments, self.delimiter, draft.use_delimiter)

    def filename_for(self, draft: DocumentDraft) -> str:
        return f"{draft.file_name}{self.extension}"

    @abstractmethod
    def build(
        self,
        draft: DocumentDraft,
        *,
        stylesheet: str,
        orientation: str,
    ) -> OutputArtifact:
        """Produce the artifact for a draft.

        Args:
            draft: Rendered fragments and composer settings
            stylesheet: Markup prepended to the document
            orientation: Page orientation of the loaded template

        Returns:
            Formatted artifact
        """


class DocFormat(FormatStrategy):
    """HTML saved with a ``.doc`` extension."""

    output_format = OutputFormat.DOC
    extension = ".doc"
    content_type = "application/msword"
    delimiter = DELIMITER_DOC
    uses_orientation = False

    def build(
        self,
        draft: DocumentDraft,
        *,
        stylesheet: str,
        orientation: str,
    ) -> OutputArtifact:
        return OutputArtifact(
            content=self.assemble(draft),
            filename=self.filename_for(draft),
            content_type=self.content_type,
        )


class PdfFormat(FormatStrategy):
    """Markup converted to PDF by an external renderer."""

    output_format = OutputFormat.PDF
    extension = ".pdf"
    content_type = "application/pdf"
    delimiter = DELIMITER_PDF

    def __init__(self, renderer: PdfRenderer, pdf_config: PdfConfig) -> None:
        """Initialize the strategy.

        Args:
            renderer: HTML to PDF renderer
            pdf_config: Page size, encoding and base URL settings
        """
        self.renderer = renderer
        self.pdf_config = pdf_config

    def build(
        self,
        draft: DocumentDraft,
        *,
        stylesheet: str,
        orientation: str,
    ) -> OutputArtifact:
        markup = stylesheet + self.assemble(draft)
        renderer_name = getattr(self.renderer, "name", type(self.renderer).__name__)

        logger.debug(
            "Converting %d fragments to PDF with %s (%s %s)",
            len(draft),
            renderer_name,
            self.pdf_config.page_size,
            orientation,
        )

        try:
            pdf_bytes = self.renderer.render_html_to_pdf(
                markup,
                page_size=self.pdf_config.page_size,
                orientation=orientation,
                encoding=self.pdf_config.encoding,
                base_url=self.pdf_config.base_url,
            )
        except Exception as e:
            logger.error("PDF conversion failed with %s: %s", renderer_name, e)
            raise ExternalRenderFailure(renderer_name, str(e)) from e

        return OutputArtifact(
            content=pdf_bytes,
            filename=self.filename_for(draft),
            content_type=self.content_type,
        )


class PrintFormat(FormatStrategy):
    """Markup shown inline that opens the browser print dialog."""

    output_format = OutputFormat.PRINT
    delimiter = DELIMITER_PRINT

    def build(
        self,
        draft: DocumentDraft,
        *,
        stylesheet: str,
        orientation: str,
    ) -> OutputArtifact:
        head = stylesheet
        if orientation == "landscape":
            head += LANDSCAPE_PRINT_STYLE

        return OutputArtifact(
            content=head + PRINT_SCRIPT + self.assemble(draft),
            filename=None,
            content_type=self.content_type,
            inline=True,
        )
