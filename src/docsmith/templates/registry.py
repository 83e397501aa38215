"""Registry mapping document type codes to template classes.

Controllers receive a short type code ("invoice", "pko", "act") and need the
template class that renders it. Codes are registered in code or in YAML
config, never hard-wired into the document composer.

Configuration example:
    registry:
      invoice:
        class: "shop.documents:InvoiceTemplate"
        title: "Invoice"
"""

import importlib
import logging
from typing import Any

from docsmith.config import DocsmithConfig
from docsmith.errors import InvalidInputError, TemplateTypeNotRegisteredError
from docsmith.templates.base import BaseTemplate

logger = logging.getLogger(__name__)


class TemplateRegistry:
    """Registry of template classes by type code.

    Adding a new document type:
        1. Subclass BaseTemplate and write its template file
        2. Register it under a type code
        3. No changes needed to the document composer
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._templates: dict[str, type[BaseTemplate]] = {}
        self._titles: dict[str, str] = {}

    # =========================================================================
    # Registration
    # =========================================================================

    def register(
        self,
        code: str,
        template_class: type[BaseTemplate],
        title: str | None = None,
    ) -> None:
        """Register a template class.

        Args:
            code: Type code (e.g., "invoice")
            template_class: BaseTemplate subclass to register
            title: Human-readable document title

        Raises:
            InvalidInputError: If template_class is not a BaseTemplate subclass
        """
        if not (isinstance(template_class, type) and issubclass(template_class, BaseTemplate)):
            raise InvalidInputError(
                f"Template for '{code}' must be a BaseTemplate subclass, got {template_class!r}"
            )

        self._templates[code] = template_class
        self._titles[code] = title or template_class.__name__
        logger.debug("Registered template %s -> %s", code, template_class.__name__)

    def load_from_config(self, config: DocsmithConfig) -> None:
        """Register every template listed in the config ``registry`` section.

        Raises:
            InvalidInputError: If a class path cannot be imported
        """
        for code, entry in config.registry.items():
            module_name, _, class_name = entry.target.partition(":")
            try:
                module = importlib.import_module(module_name)
                template_class = getattr(module, class_name)
            except (ImportError, AttributeError) as e:
                logger.error("Cannot import template %s for '%s': %s", entry.target, code, e)
                raise InvalidInputError(
                    f"Cannot import template class '{entry.target}' for '{code}': {e}"
                ) from e
            self.register(code, template_class, entry.title)

    # =========================================================================
    # Retrieval
    # =========================================================================

    def get(self, code: str, **kwargs: Any) -> BaseTemplate:
        """Instantiate the template registered under a code.

        Args:
            code: Type code
            **kwargs: Passed to the template constructor

        Returns:
            New template instance

        Raises:
            TemplateTypeNotRegisteredError: If the code is not registered
        """
        if code not in self._templates:
            raise TemplateTypeNotRegisteredError(code, self.list_codes())
        return self._templates[code](**kwargs)

    def get_class(self, code: str) -> type[BaseTemplate]:
        if code not in self._templates:
            raise TemplateTypeNotRegisteredError(code, self.list_codes())
        return self._templates[code]

    def get_title(self, code: str) -> str:
        """Get the human-readable title for a code."""
        if code not in self._titles:
            raise TemplateTypeNotRegisteredError(code, self.list_codes())
        return self._titles[code]

    # =========================================================================
    # Introspection
    # =========================================================================

    def list_codes(self) -> list[str]:
        """Get registered type codes."""
        return list(self._templates.keys())

    def __contains__(self, code: object) -> bool:
        return code in self._templates

    def get_metadata(self) -> dict[str, Any]:
        """Get registry metadata for logging and debugging."""
        return {
            code: {
                "class": f"{cls.__module__}:{cls.__name__}",
                "title": self._titles[code],
            }
            for code, cls in self._templates.items()
        }


# Global registry instance
_registry: TemplateRegistry | None = None


def get_registry() -> TemplateRegistry:
    """Get the global template registry instance."""
    global _registry
    if _registry is None:
        _registry = TemplateRegistry()
    return _registry


def reset_registry() -> None:
    """Reset the global registry (primarily for testing)."""
    global _registry
    _registry = None
