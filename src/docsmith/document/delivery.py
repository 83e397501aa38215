"""Response channels that deliver finished documents.

A channel accepts either a downloadable attachment or inline HTML. Web
handlers typically use ``MemoryChannel`` and copy the collected ``Response``
into their framework's response object; the CLI uses ``FileChannel``.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from docsmith.models.document import OutputArtifact, content_disposition

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html; charset=utf-8"


@dataclass
class Response:
    """A delivered document.

    Attributes:
        content: Body as bytes
        content_type: MIME type
        filename: Attachment name, None for inline content
        headers: Response headers (Content-Type, Content-Disposition, Content-Length)
    """

    content: bytes
    content_type: str
    filename: str | None = None
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def is_attachment(self) -> bool:
        return self.filename is not None

    def text(self, encoding: str = "utf-8") -> str:
        return self.content.decode(encoding)


def _to_bytes(content: str | bytes) -> bytes:
    return content if isinstance(content, bytes) else content.encode("utf-8")


class ResponseChannel(ABC):
    """Destination for finished documents."""

    @abstractmethod
    def send_attachment(
        self,
        content: str | bytes,
        file_name: str,
        content_type: str = "application/octet-stream",
    ) -> Any:
        """Deliver content as a downloadable file.

        Args:
            content: Document body
            file_name: Suggested file name including extension
            content_type: MIME type

        Returns:
            Channel-specific delivery result
        """

    @abstractmethod
    def send_inline(self, markup: str, content_type: str = HTML_CONTENT_TYPE) -> Any:
        """Deliver markup for display in the browser.

        Args:
            markup: HTML to display
            content_type: MIME type

        Returns:
            Channel-specific delivery result
        """

    def deliver(self, artifact: OutputArtifact) -> Any:
        """Deliver an artifact according to its disposition."""
        if artifact.inline or artifact.filename is None:
            content = artifact.content
            if isinstance(content, bytes):
                content = content.decode("utf-8")
            return self.send_inline(content, artifact.content_type)
        return self.send_attachment(artifact.content, artifact.filename, artifact.content_type)


class MemoryChannel(ResponseChannel):
    """Collects responses in memory.

    Usage:
        channel = MemoryChannel()
        Document(channel=channel).load_template(t).create_document(obj).pdf().send_response()
        response = channel.last
        # response.headers["Content-Disposition"] -> 'attachment; filename="journal.pdf"'
    """

    def __init__(self) -> None:
        self.responses: list[Response] = []

    @property
    def last(self) -> Response | None:
        return self.responses[-1] if self.responses else None

    def send_attachment(
        self,
        content: str | bytes,
        file_name: str,
        content_type: str = "application/octet-stream",
    ) -> Response:
        body = _to_bytes(content)
        response = Response(
            content=body,
            content_type=content_type,
            filename=file_name,
            headers={
                "Content-Type": content_type,
                "Content-Disposition": content_disposition(file_name),
                "Content-Length": str(len(body)),
            },
        )
        self.responses.append(response)
        return response

    def send_inline(self, markup: str, content_type: str = HTML_CONTENT_TYPE) -> Response:
        body = _to_bytes(markup)
        response = Response(
            content=body,
            content_type=content_type,
            headers={
                "Content-Type": content_type,
                "Content-Disposition": "inline",
                "Content-Length": str(len(body)),
            },
        )
        self.responses.append(response)
        return response


class FileChannel(ResponseChannel):
    """Writes documents into a directory.

    Attachments keep their file name. Inline markup is written to
    ``inline_name`` so it can be opened in a browser.
    """

    def __init__(self, directory: Path, inline_name: str = "print.html") -> None:
        """Initialize the channel.

        Args:
            directory: Output directory (created on first write)
            inline_name: File name used for inline markup
        """
        self.directory = directory
        self.inline_name = inline_name

    def _write(self, file_name: str, body: bytes) -> Path:
        # Never let a document name escape the output directory
        target = self.directory / Path(file_name).name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(body)
        logger.info("Wrote %s (%d bytes)", target, len(body))
        return target

    def send_attachment(
        self,
        content: str | bytes,
        file_name: str,
        content_type: str = "application/octet-stream",
    ) -> Path:
        return self._write(file_name, _to_bytes(content))

    def send_inline(self, markup: str, content_type: str = HTML_CONTENT_TYPE) -> Path:
        return self._write(self.inline_name, _to_bytes(markup))
