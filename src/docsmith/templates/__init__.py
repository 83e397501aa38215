"""Document templates.

Name resolution, the attribute bag, the template base class with its render
pipeline, and the type code registry.
"""

from docsmith.templates.attributes import AttributeBag
from docsmith.templates.base import BaseTemplate
from docsmith.templates.naming import resolve_name
from docsmith.templates.registry import TemplateRegistry, get_registry, reset_registry

__all__ = [
    "AttributeBag",
    "BaseTemplate",
    "TemplateRegistry",
    "get_registry",
    "reset_registry",
    "resolve_name",
]
