"""Document composer.

Builds a document from a template and one or many data objects, then turns
it into a downloadable ``.doc``/``.pdf`` file or a page that prints itself
in the browser.

Usage:
    document = Document(channel=MemoryChannel())

    # Print one invoice with the company stamp
    document.load_template(InvoiceTemplate()).with_params("stamp") \\
        .create_document(invoice).print_on_browser()

    # Download all invoices as one PDF named "invoices.pdf"
    document.load_template(InvoiceTemplate()) \\
        .create_document(invoices).save_as("invoices").pdf().send_response()

    # Keep the bytes instead of delivering them
    pdf_bytes = document.create_document(invoice).pdf().get_document()

Calls must follow the lifecycle ``EMPTY -> TEMPLATE_LOADED -> DRAFT_BUILT ->
FORMATTED -> DELIVERED``; an out-of-order call raises ``InvalidStateError``.
A Document serves one request and is not shared between threads.
"""

import logging
from collections.abc import Mapping
from numbers import Number
from pathlib import Path
from typing import Any

from docsmith.config import VALID_ORIENTATIONS, DocsmithConfig, get_config
from docsmith.document.delivery import FileChannel, ResponseChannel
from docsmith.document.formats import (
    DocFormat,
    FormatStrategy,
    PdfFormat,
    PrintFormat,
    join_fragments,
)
from docsmith.errors import InvalidInputError, InvalidStateError
from docsmith.models.document import (
    DocumentDraft,
    DocumentState,
    OutputArtifact,
)
from docsmith.renderers.pdf import PdfRenderer, WeasyPrintRenderer
from docsmith.templates.base import BaseTemplate

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (str, bytes, bytearray, bool, Number)


def _is_collection(data: Any) -> bool:
    """Whether data is a list of records rather than one record."""
    # A namedtuple is a single record with tuple behavior
    return isinstance(data, list) or (isinstance(data, tuple) and not hasattr(data, "_fields"))


def _is_single_object(data: Any) -> bool:
    """Whether data is a single record a template can render."""
    if data is None or isinstance(data, _SCALAR_TYPES):
        return False
    return isinstance(data, Mapping) or hasattr(data, "__dict__") or hasattr(data, "__slots__")


class Document:
    """Fluent builder that composes rendered fragments into one document.

    Attributes:
        state: Current lifecycle state
        template: Loaded template, if any
        draft: Rendered fragments and composer settings, if built
        artifact: Formatted output, if formatted
    """

    def __init__(
        self,
        config: DocsmithConfig | None = None,
        pdf_renderer: PdfRenderer | None = None,
        channel: ResponseChannel | None = None,
    ) -> None:
        """Initialize the composer.

        Args:
            config: Configuration (defaults to the process-wide config)
            pdf_renderer: HTML to PDF renderer (defaults to WeasyPrint)
            channel: Where send_response() and print_on_browser() deliver
        """
        self._config = config or get_config()
        self._pdf_renderer = pdf_renderer
        self._channel = channel

        self._state = DocumentState.EMPTY
        self._template: BaseTemplate | None = None
        self._draft: DocumentDraft | None = None
        self._artifact: OutputArtifact | None = None
        self._file_name = self._config.document.default_name
        self._use_delimiter = True

    @property
    def state(self) -> DocumentState:
        return self._state

    @property
    def template(self) -> BaseTemplate | None:
        return self._template

    @property
    def draft(self) -> DocumentDraft | None:
        return self._draft

    @property
    def artifact(self) -> OutputArtifact | None:
        return self._artifact

    def _require(self, operation: str, *allowed: DocumentState) -> None:
        if self._state not in allowed:
            raise InvalidStateError(operation, self._state.value, [s.value for s in allowed])

    # =========================================================================
    # Building
    # =========================================================================

    def load_template(self, template: BaseTemplate) -> "Document":
        """Load the template used for the next documents.

        Replaces any previously loaded template and discards its draft.

        Raises:
            InvalidInputError: If template is not a BaseTemplate
        """
        if not isinstance(template, BaseTemplate):
            raise InvalidInputError(
                f"load_template() expects a BaseTemplate, got {type(template).__name__}"
            )

        self._template = template
        self._draft = None
        self._artifact = None
        self._file_name = self._config.document.default_name
        self._state = DocumentState.TEMPLATE_LOADED

        logger.debug("Loaded template %s", template.get_template_name())
        return self

    def create_document(self, data: Any) -> "Document":
        """Render one object, or each object of a list, with the loaded template.

        Args:
            data: A mapping or object (namedtuples included), or a list/tuple
                of them

        Raises:
            InvalidInputError: If data is neither an object nor a list
            TemplateNotFoundError: If the template file does not exist
            RenderError: If rendering fails for any object
        """
        self._require(
            "create_document",
            DocumentState.TEMPLATE_LOADED,
            DocumentState.DRAFT_BUILT,
            DocumentState.FORMATTED,
        )

        if _is_collection(data):
            fragments = self._template.create_documents(data)
        elif _is_single_object(data):
            fragments = [self._template.create_document(data)]
        else:
            raise InvalidInputError(
                f"create_document() accepts an object or a list, got {type(data).__name__}"
            )

        self._draft = DocumentDraft(
            fragments=fragments,
            file_name=self._file_name,
            use_delimiter=self._use_delimiter,
        )
        self._artifact = None
        self._state = DocumentState.DRAFT_BUILT

        logger.info(
            "Created document from %s (%d fragments)",
            self._template.get_template_name(),
            len(fragments),
        )
        return self

    def with_params(self, *names: str) -> "Document":
        """Switch on render parameters for the loaded template.

        Each name is set to True in the template's attribute bag, so the
        template can test it: ``{% if template.stamp %}``.

        Raises:
            InvalidInputError: If a name is not a non-empty string
        """
        self._require(
            "with_params",
            DocumentState.TEMPLATE_LOADED,
            DocumentState.DRAFT_BUILT,
            DocumentState.FORMATTED,
            DocumentState.DELIVERED,
        )

        for name in names:
            if not isinstance(name, str) or not name:
                raise InvalidInputError(f"with_params() accepts only strings, got {name!r}")

        for name in names:
            self._template.attributes.set(name, True)
        return self

    def without_delimiter(self) -> "Document":
        """Join fragments without page breaks in every output format."""
        self._use_delimiter = False
        if self._draft is not None:
            self._draft.use_delimiter = False
        return self

    def save_as(self, file_name: Any = None) -> "Document":
        """Set the attachment base name (without extension).

        Args:
            file_name: Base name; empty or None falls back to the configured
                default ("journal")

        Raises:
            InvalidInputError: If file_name is not a string
        """
        self._require("save_as", DocumentState.DRAFT_BUILT)

        if file_name is not None and not isinstance(file_name, str):
            raise InvalidInputError(
                f"save_as() accepts only a string, got {type(file_name).__name__}"
            )

        self._file_name = file_name or self._config.document.default_name
        self._draft.file_name = self._file_name
        return self

    # =========================================================================
    # Formatting
    # =========================================================================

    def doc(self) -> "Document":
        """Format as HTML saved with a ``.doc`` extension."""
        return self._format("doc", DocFormat(), stylesheet="")

    def pdf(self, custom_stylesheet: str = "") -> "Document":
        """Format as PDF.

        Args:
            custom_stylesheet: Markup prepended instead of the default stylesheet

        Raises:
            ExternalRenderFailure: If the PDF renderer fails
        """
        strategy = PdfFormat(self._get_pdf_renderer(), self._config.pdf)
        return self._format("pdf", strategy, stylesheet=self._stylesheet(custom_stylesheet))

    def print_on_browser(
        self,
        custom_stylesheet: str = "",
        channel: ResponseChannel | None = None,
    ) -> Any:
        """Send the document to the browser and open the print dialog.

        Formats and delivers in one step.

        Args:
            custom_stylesheet: Markup prepended instead of the default stylesheet
            channel: Overrides the channel given to the constructor

        Returns:
            The channel's delivery result
        """
        target = self._get_channel(channel)
        self._format("print_on_browser", PrintFormat(), stylesheet=self._stylesheet(custom_stylesheet))
        return self._deliver(target)

    def _format(self, operation: str, strategy: FormatStrategy, stylesheet: str) -> "Document":
        self._require(operation, DocumentState.DRAFT_BUILT, DocumentState.FORMATTED)

        orientation = self._orientation() if strategy.uses_orientation else ""
        self._draft.output_format = strategy.output_format
        self._artifact = strategy.build(self._draft, stylesheet=stylesheet, orientation=orientation)
        self._state = DocumentState.FORMATTED

        logger.info(
            "Formatted %s as %s (%d bytes)",
            self._artifact.filename or "inline document",
            strategy.output_format.value,
            len(self._artifact),
        )
        return self

    # =========================================================================
    # Output
    # =========================================================================

    def send_response(self, channel: ResponseChannel | None = None) -> Any:
        """Deliver the formatted document as a downloadable file.

        Args:
            channel: Overrides the channel given to the constructor

        Returns:
            The channel's delivery result
        """
        self._require("send_response", DocumentState.FORMATTED)
        return self._deliver(self._get_channel(channel))

    def get_document(self) -> str | bytes:
        """Return the document content without delivering it.

        Before formatting this is the fragments joined as-is.
        """
        self._require(
            "get_document",
            DocumentState.DRAFT_BUILT,
            DocumentState.FORMATTED,
            DocumentState.DELIVERED,
        )

        if self._artifact is None:
            return join_fragments(self._draft.fragments, "", use_delimiter=False)
        return self._artifact.content

    def save(self, directory: Path | None = None) -> Path:
        """Write the formatted document to a directory on the server.

        Args:
            directory: Target directory (defaults to ``output.directory``)

        Returns:
            Path of the written file
        """
        self._require("save", DocumentState.FORMATTED, DocumentState.DELIVERED)
        return FileChannel(directory or self._config.output_dir).deliver(self._artifact)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _deliver(self, channel: ResponseChannel) -> Any:
        result = channel.deliver(self._artifact)
        self._state = DocumentState.DELIVERED
        logger.debug("Delivered %s", self._artifact.filename or "inline document")
        return result

    def _get_channel(self, channel: ResponseChannel | None) -> ResponseChannel:
        target = channel or self._channel
        if target is None:
            raise InvalidInputError("No response channel configured for this document")
        return target

    def _get_pdf_renderer(self) -> PdfRenderer:
        if self._pdf_renderer is None:
            self._pdf_renderer = WeasyPrintRenderer()
        return self._pdf_renderer

    def _stylesheet(self, custom_stylesheet: str) -> str:
        if not isinstance(custom_stylesheet, str):
            raise InvalidInputError(
                f"Stylesheet must be a string, got {type(custom_stylesheet).__name__}"
            )
        return custom_stylesheet or self._config.document.stylesheet

    def _orientation(self) -> str:
        orientation = self._template.orientation or self._config.pdf.orientation
        if orientation not in VALID_ORIENTATIONS:
            raise InvalidInputError(
                f"Invalid orientation: {orientation}. Valid: {sorted(VALID_ORIENTATIONS)}"
            )
        return orientation

    def __repr__(self) -> str:
        fragments = len(self._draft) if self._draft is not None else 0
        return f"Document(state={self._state.value}, fragments={fragments})"
