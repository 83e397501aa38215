"""Error taxonomy for document generation.

Every error is fatal to the current request. Nothing is retried or downgraded
to a warning, and there is no partial-success mode.
"""

from pathlib import Path


class DocsmithError(Exception):
    """Base class for all docsmith errors."""


class TemplateNotFoundError(DocsmithError):
    """Raised when a resolved template file does not exist."""

    def __init__(self, template_path: Path, message: str | None = None) -> None:
        self.template_path = template_path
        self.message = message or f"Template does not exist: {template_path}"
        super().__init__(self.message)


class InvalidInputError(DocsmithError):
    """Raised when a caller passes a value of the wrong shape or type."""


class TemplateTypeNotRegisteredError(InvalidInputError):
    """Raised when a type code has no registered template class."""

    def __init__(self, code: str, available: list[str]) -> None:
        self.code = code
        self.available = available
        super().__init__(
            f"Template type '{code}' not registered. Available: {available}"
        )


class RenderError(DocsmithError):
    """Raised when the pre-render hook or the render step fails.

    A failure on one element aborts the whole batch.
    """

    def __init__(
        self,
        template_name: str,
        message: str,
        index: int | None = None,
    ) -> None:
        self.template_name = template_name
        self.index = index
        full_message = f"Rendering failed: {template_name} - {message}"
        if index is not None:
            full_message += f" (element {index})"
        super().__init__(full_message)


class ExternalRenderFailure(DocsmithError):
    """Raised when the HTML to PDF conversion fails."""

    def __init__(self, renderer_name: str, message: str) -> None:
        self.renderer_name = renderer_name
        self.message = message
        super().__init__(f"PDF conversion failed ({renderer_name}): {message}")


class InvalidStateError(DocsmithError):
    """Raised when a document operation is called out of sequence."""

    def __init__(self, operation: str, state: str, allowed: list[str]) -> None:
        self.operation = operation
        self.state = state
        self.allowed = allowed
        super().__init__(
            f"Cannot call {operation}() in state {state}. Allowed states: {allowed}"
        )


class AssetNotFoundError(DocsmithError):
    """Raised when an asset to embed in a template does not exist."""

    def __init__(self, asset_path: Path) -> None:
        self.asset_path = asset_path
        super().__init__(f"Asset does not exist: {asset_path}")
