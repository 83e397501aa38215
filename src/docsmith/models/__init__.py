"""docsmith data models."""

from docsmith.models.document import (
    DocumentDraft,
    DocumentState,
    OutputArtifact,
    OutputFormat,
    RenderedFragment,
)

__all__ = [
    "DocumentDraft",
    "DocumentState",
    "OutputArtifact",
    "OutputFormat",
    "RenderedFragment",
]
