"""Unit tests for the Document composer."""

from collections import namedtuple
from pathlib import Path
from types import SimpleNamespace

import pytest

from docsmith.config import DEFAULT_STYLESHEET, DocsmithConfig
from docsmith.document import Document, MemoryChannel
from docsmith.document.formats import (
    DELIMITER_DOC,
    DELIMITER_PDF,
    DELIMITER_PRINT,
    LANDSCAPE_PRINT_STYLE,
    PRINT_SCRIPT,
)
from docsmith.errors import (
    ExternalRenderFailure,
    InvalidInputError,
    InvalidStateError,
    TemplateNotFoundError,
)
from docsmith.models.document import DocumentState, OutputFormat
from docsmith.templates import BaseTemplate
from tests.fixtures.documents import InvoiceTemplate, LandscapeReport
from tests.fixtures.renderers import FailingPdfRenderer, FakePdfRenderer


class Item(BaseTemplate):
    template_name = "item"


@pytest.fixture
def document(
    config: DocsmithConfig,
    pdf_renderer: FakePdfRenderer,
    channel: MemoryChannel,
) -> Document:
    return Document(config=config, pdf_renderer=pdf_renderer, channel=channel)


@pytest.fixture
def loaded(document: Document, config: DocsmithConfig) -> Document:
    return document.load_template(Item(config=config))


NAMES = [{"name": "f0"}, {"name": "f1"}]


class TestLifecycle:
    """Tests for state transitions."""

    def test_starts_empty(self, document: Document) -> None:
        assert document.state is DocumentState.EMPTY
        assert document.template is None
        assert document.draft is None

    def test_full_chain(self, loaded: Document, channel: MemoryChannel) -> None:
        assert loaded.state is DocumentState.TEMPLATE_LOADED

        loaded.create_document(NAMES)
        assert loaded.state is DocumentState.DRAFT_BUILT

        loaded.doc()
        assert loaded.state is DocumentState.FORMATTED

        loaded.send_response()
        assert loaded.state is DocumentState.DELIVERED
        assert len(channel.responses) == 1

    def test_create_before_load(self, document: Document) -> None:
        with pytest.raises(InvalidStateError) as exc_info:
            document.create_document({"name": "a"})

        assert exc_info.value.operation == "create_document"
        assert exc_info.value.state == "empty"

    def test_format_before_create(self, loaded: Document) -> None:
        with pytest.raises(InvalidStateError):
            loaded.doc()

    def test_send_before_format(self, loaded: Document) -> None:
        loaded.create_document(NAMES)

        with pytest.raises(InvalidStateError):
            loaded.send_response()

    def test_save_as_after_format(self, loaded: Document) -> None:
        loaded.create_document(NAMES).doc()

        with pytest.raises(InvalidStateError):
            loaded.save_as("late")

    def test_with_params_before_load(self, document: Document) -> None:
        with pytest.raises(InvalidStateError):
            document.with_params("stamp")

    def test_reformat_replaces_artifact(self, loaded: Document) -> None:
        loaded.create_document(NAMES).doc()
        loaded.pdf()

        assert loaded.draft.output_format is OutputFormat.PDF
        assert loaded.artifact.filename == "journal.pdf"

    def test_load_template_resets_draft(self, loaded: Document, config: DocsmithConfig) -> None:
        loaded.create_document(NAMES).save_as("first")
        loaded.load_template(Item(config=config))

        assert loaded.state is DocumentState.TEMPLATE_LOADED
        assert loaded.draft is None

        loaded.create_document(NAMES)
        assert loaded.draft.file_name == "journal"

    def test_load_rejects_non_template(self, document: Document) -> None:
        with pytest.raises(InvalidInputError):
            document.load_template("Item")  # type: ignore[arg-type]

    def test_repr(self, loaded: Document) -> None:
        loaded.create_document(NAMES)

        assert repr(loaded) == "Document(state=draft_built, fragments=2)"


class TestCreateDocument:
    """Tests for create_document input handling."""

    def test_single_mapping(self, loaded: Document) -> None:
        loaded.create_document({"name": "only"})

        assert loaded.draft.fragments == ["only"]

    def test_single_object(self, loaded: Document) -> None:
        loaded.create_document(SimpleNamespace(name="obj"))

        assert loaded.draft.fragments == ["obj"]

    def test_list_in_order(self, loaded: Document) -> None:
        loaded.create_document([{"name": n} for n in "abc"])

        assert loaded.draft.fragments == ["a", "b", "c"]

    def test_tuple(self, loaded: Document) -> None:
        loaded.create_document(({"name": "a"}, {"name": "b"}))

        assert len(loaded.draft) == 2

    def test_namedtuple_is_single_object(self, loaded: Document) -> None:
        Row = namedtuple("Row", ["name", "price"])

        loaded.create_document(Row("tag", 5))

        assert loaded.draft.fragments == ["tag"]

    def test_tuple_of_namedtuples(self, loaded: Document) -> None:
        Row = namedtuple("Row", ["name", "price"])

        loaded.create_document((Row("a", 1), Row("b", 2)))

        assert loaded.draft.fragments == ["a", "b"]

    def test_empty_list(self, loaded: Document) -> None:
        loaded.create_document([])

        assert loaded.draft.fragments == []
        assert loaded.doc().get_document() == ""

    @pytest.mark.parametrize("data", [None, "text", 42, 3.5, True, b"raw"])
    def test_rejects_scalars(self, loaded: Document, data: object) -> None:
        with pytest.raises(InvalidInputError):
            loaded.create_document(data)

        assert loaded.state is DocumentState.TEMPLATE_LOADED

    def test_missing_template(self, document: Document, config: DocsmithConfig) -> None:
        document.load_template(BaseTemplate(template_name="absent", config=config))

        with pytest.raises(TemplateNotFoundError):
            document.create_document({"name": "a"})

    def test_rebuild_from_formatted(self, loaded: Document) -> None:
        loaded.create_document(NAMES).doc()
        loaded.create_document({"name": "again"})

        assert loaded.state is DocumentState.DRAFT_BUILT
        assert loaded.artifact is None


class TestDocOutput:
    """Tests for .doc formatting."""

    def test_two_fragments_joined(self, loaded: Document) -> None:
        loaded.create_document(NAMES).doc()

        assert loaded.get_document() == "f0" + DELIMITER_DOC + "f1"

    def test_without_delimiter(self, loaded: Document) -> None:
        loaded.create_document([{"name": n} for n in "abc"]).without_delimiter().doc()

        assert loaded.get_document() == "abc"

    def test_without_delimiter_before_create(self, loaded: Document) -> None:
        loaded.without_delimiter().create_document(NAMES).doc()

        assert loaded.get_document() == "f0f1"

    def test_attachment_headers(self, loaded: Document, channel: MemoryChannel) -> None:
        response = loaded.create_document(NAMES).doc().send_response()

        assert response is channel.last
        assert response.filename == "journal.doc"
        assert response.headers["Content-Type"] == "application/msword"
        assert response.headers["Content-Disposition"] == 'attachment; filename="journal.doc"'
        assert response.text() == "f0" + DELIMITER_DOC + "f1"


class TestPdfOutput:
    """Tests for PDF formatting."""

    def test_single_fragment_only_stylesheet(
        self, loaded: Document, pdf_renderer: FakePdfRenderer
    ) -> None:
        loaded.create_document({"name": "solo"}).pdf()

        assert pdf_renderer.calls[0]["html"] == DEFAULT_STYLESHEET + "solo"

    def test_fragments_joined(self, loaded: Document, pdf_renderer: FakePdfRenderer) -> None:
        loaded.create_document(NAMES).pdf()

        assert pdf_renderer.calls[0]["html"] == DEFAULT_STYLESHEET + "f0" + DELIMITER_PDF + "f1"

    def test_custom_stylesheet(self, loaded: Document, pdf_renderer: FakePdfRenderer) -> None:
        loaded.create_document(NAMES).without_delimiter().pdf("<style>td{}</style>")

        assert pdf_renderer.calls[0]["html"] == "<style>td{}</style>f0f1"

    def test_non_string_stylesheet(self, loaded: Document) -> None:
        loaded.create_document(NAMES)

        with pytest.raises(InvalidInputError):
            loaded.pdf(123)  # type: ignore[arg-type]

    def test_orientation_from_template(
        self,
        document: Document,
        config: DocsmithConfig,
        pdf_renderer: FakePdfRenderer,
    ) -> None:
        document.load_template(LandscapeReport(config=config)).create_document(NAMES).pdf()

        assert pdf_renderer.calls[0]["orientation"] == "landscape"

    def test_orientation_default(self, loaded: Document, pdf_renderer: FakePdfRenderer) -> None:
        loaded.create_document(NAMES).pdf()

        assert pdf_renderer.calls[0]["orientation"] == "portrait"

    def test_invalid_orientation(self, document: Document, config: DocsmithConfig) -> None:
        class Sideways(Item):
            orientation = "sideways"

        document.load_template(Sideways(config=config)).create_document(NAMES)

        with pytest.raises(InvalidInputError, match="sideways"):
            document.pdf()

    def test_doc_ignores_orientation(self, document: Document, config: DocsmithConfig) -> None:
        class Sideways(Item):
            orientation = "Landscape"

        document.load_template(Sideways(config=config)).create_document(NAMES).doc()

        assert document.get_document() == "f0" + DELIMITER_DOC + "f1"

    def test_renderer_failure(self, config: DocsmithConfig) -> None:
        document = Document(config=config, pdf_renderer=FailingPdfRenderer())
        document.load_template(Item(config=config)).create_document(NAMES)

        with pytest.raises(ExternalRenderFailure):
            document.pdf()

        assert document.state is DocumentState.DRAFT_BUILT

    def test_get_document_returns_bytes(self, loaded: Document) -> None:
        content = loaded.create_document(NAMES).pdf().get_document()

        assert isinstance(content, bytes)
        assert content.startswith(b"%PDF")


class TestPrintOutput:
    """Tests for browser printing."""

    def test_inline_response(self, loaded: Document, channel: MemoryChannel) -> None:
        response = loaded.create_document(NAMES).print_on_browser()

        assert loaded.state is DocumentState.DELIVERED
        assert response.is_attachment is False
        assert response.headers["Content-Disposition"] == "inline"
        assert response.text() == (
            DEFAULT_STYLESHEET + PRINT_SCRIPT + "f0" + DELIMITER_PRINT + "f1"
        )

    def test_landscape(
        self, document: Document, config: DocsmithConfig, channel: MemoryChannel
    ) -> None:
        document.load_template(LandscapeReport(config=config)).create_document({"name": "x"})
        document.print_on_browser("<css>")

        assert channel.last.text() == "<css>" + LANDSCAPE_PRINT_STYLE + PRINT_SCRIPT + "x"

    def test_channel_argument(self, config: DocsmithConfig) -> None:
        target = MemoryChannel()
        document = Document(config=config)
        document.load_template(Item(config=config)).create_document({"name": "x"})

        document.print_on_browser(channel=target)

        assert len(target.responses) == 1

    def test_no_channel(self, config: DocsmithConfig) -> None:
        document = Document(config=config)
        document.load_template(Item(config=config)).create_document({"name": "x"})

        with pytest.raises(InvalidInputError, match="channel"):
            document.print_on_browser()

        assert document.state is DocumentState.DRAFT_BUILT


class TestSaveAs:
    """Tests for save_as."""

    def test_sets_attachment_name(self, loaded: Document, channel: MemoryChannel) -> None:
        loaded.create_document(NAMES).save_as("invoices").pdf().send_response()

        assert channel.last.filename == "invoices.pdf"

    def test_empty_name_uses_default(self, loaded: Document) -> None:
        loaded.create_document(NAMES).save_as("").doc()

        assert loaded.artifact.filename == "journal.doc"

    def test_none_uses_default(self, loaded: Document) -> None:
        loaded.create_document(NAMES).save_as("custom").save_as(None).doc()

        assert loaded.artifact.filename == "journal.doc"

    def test_rejects_non_string(self, loaded: Document) -> None:
        loaded.create_document(NAMES)

        with pytest.raises(InvalidInputError):
            loaded.save_as(123)

    def test_extension_not_duplicated(self, loaded: Document) -> None:
        loaded.create_document(NAMES).save_as("report").doc().doc()

        assert loaded.artifact.filename == "report.doc"

    def test_non_ascii_name(self, loaded: Document, channel: MemoryChannel) -> None:
        loaded.create_document(NAMES).save_as("счёт").doc().send_response()

        disposition = channel.last.headers["Content-Disposition"]
        assert "filename*=UTF-8''%D1%81%D1%87%D1%91%D1%82.doc" in disposition


class TestWithParams:
    """Tests for with_params."""

    def test_flags_visible_in_render(self, document: Document, config: DocsmithConfig) -> None:
        document.load_template(InvoiceTemplate(config=config)).with_params("stamp", "signature")
        document.create_document({"number": "1", "total": 10})

        html = document.get_document()
        assert 'class="stamp"' in html
        assert 'class="signature"' in html

    def test_flags_off_by_default(self, document: Document, config: DocsmithConfig) -> None:
        document.load_template(InvoiceTemplate(config=config)).create_document(
            {"number": "1", "total": 10}
        )

        html = document.get_document()
        assert "stamp" not in html
        assert "signature" not in html

    def test_rejects_non_strings(self, loaded: Document) -> None:
        with pytest.raises(InvalidInputError):
            loaded.with_params("stamp", 5)  # type: ignore[arg-type]

        assert loaded.template.stamp is False

    def test_rejects_empty_name(self, loaded: Document) -> None:
        with pytest.raises(InvalidInputError):
            loaded.with_params("")


class TestGetDocument:
    """Tests for get_document and save."""

    def test_draft_is_plain_concatenation(self, loaded: Document) -> None:
        assert loaded.create_document(NAMES).get_document() == "f0f1"

    def test_before_create(self, loaded: Document) -> None:
        with pytest.raises(InvalidStateError):
            loaded.get_document()

    def test_after_delivery(self, loaded: Document) -> None:
        loaded.create_document(NAMES).doc().send_response()

        assert loaded.get_document() == "f0" + DELIMITER_DOC + "f1"

    def test_save_to_directory(self, loaded: Document, tmp_path: Path) -> None:
        path = loaded.create_document(NAMES).save_as("saved").doc().save(tmp_path / "docs")

        assert path == tmp_path / "docs" / "saved.doc"
        assert path.read_text() == "f0" + DELIMITER_DOC + "f1"

    def test_save_to_configured_directory(self, loaded: Document, tmp_path: Path) -> None:
        path = loaded.create_document(NAMES).doc().save()

        assert path == tmp_path / "out" / "journal.doc"

    def test_save_before_format(self, loaded: Document) -> None:
        loaded.create_document(NAMES)

        with pytest.raises(InvalidStateError):
            loaded.save()
