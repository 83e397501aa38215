"""Document composition data model."""

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import quote

# One template applied to one data object
RenderedFragment = str


def content_disposition(filename: str) -> str:
    """Build an attachment Content-Disposition header value.

    Non-ASCII names get an RFC 5987 ``filename*`` parameter next to an ASCII
    fallback.

    Examples:
        >>> content_disposition("journal.doc")
        'attachment; filename="journal.doc"'
    """
    ascii_name = filename.encode("ascii", "ignore").decode("ascii").strip() or "download"
    ascii_name = ascii_name.replace("\\", "").replace('"', "")
    if ascii_name == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


class DocumentState(Enum):
    """Lifecycle of a Document composer."""

    EMPTY = "empty"
    TEMPLATE_LOADED = "template_loaded"
    DRAFT_BUILT = "draft_built"
    FORMATTED = "formatted"
    DELIVERED = "delivered"


class OutputFormat(Enum):
    """Output formats a draft can be turned into."""

    DOC = "doc"
    PDF = "pdf"
    PRINT = "print"


@dataclass
class DocumentDraft:
    """Rendered fragments awaiting formatting.

    Attributes:
        fragments: Rendered fragments in input order (one for a single object)
        file_name: Attachment base name, without extension
        use_delimiter: Whether fragments are separated by page breaks
        output_format: Format selected last, if any
    """

    fragments: list[RenderedFragment] = field(default_factory=list)
    file_name: str = "journal"
    use_delimiter: bool = True
    output_format: OutputFormat | None = None

    def __len__(self) -> int:
        return len(self.fragments)


@dataclass(frozen=True)
class OutputArtifact:
    """Formatted document ready for delivery.

    Attributes:
        content: Markup (doc, print) or PDF bytes
        filename: Suggested attachment name, None for inline output
        content_type: MIME type for the response
        inline: Whether the content is shown in the browser rather than downloaded
    """

    content: str | bytes
    filename: str | None
    content_type: str
    inline: bool = False

    @property
    def disposition(self) -> str:
        """Content-Disposition header value."""
        if self.inline or not self.filename:
            return "inline"
        return content_disposition(self.filename)

    def to_bytes(self, encoding: str = "utf-8") -> bytes:
        if isinstance(self.content, bytes):
            return self.content
        return self.content.encode(encoding)

    def __len__(self) -> int:
        """Return the size of the content in bytes."""
        return len(self.to_bytes())
