"""Document composition: the builder, output formats and response channels."""

from docsmith.document.composer import Document
from docsmith.document.delivery import FileChannel, MemoryChannel, Response, ResponseChannel
from docsmith.document.formats import (
    DELIMITER_DOC,
    DELIMITER_PDF,
    DELIMITER_PRINT,
    DocFormat,
    FormatStrategy,
    PdfFormat,
    PrintFormat,
)

__all__ = [
    "DELIMITER_DOC",
    "DELIMITER_PDF",
    "DELIMITER_PRINT",
    "DocFormat",
    "Document",
    "FileChannel",
    "FormatStrategy",
    "MemoryChannel",
    "PdfFormat",
    "PrintFormat",
    "Response",
    "ResponseChannel",
]
