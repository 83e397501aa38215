"""Base class for document templates.

A template pairs a Jinja2 file with an optional pre-render hook. By default
template files live in the configured ``templates.path`` directory; a
template type may point elsewhere by setting the ``path`` class attribute:

    class CashOrder(BaseTemplate):
        path = "legacy/templates"

The file name is derived from the class name (see ``naming.resolve_name``):
``InvoiceTemplate`` renders ``invoice_template_template.html``. Set the
``template_name`` class attribute (without extension) to use another file.

``before_render`` may reshape the object or store derived values on the
template before rendering. It must return the object:

    class InvoiceTemplate(BaseTemplate):
        def before_render(self, obj):
            self.vat = round(obj["total"] * 0.2, 2)
            return obj

Inside the template file the data is available as ``object``, the template
instance as ``template`` (so ``template.vat`` or ``template.stamp``) and all
render parameters as the read-only mapping ``params``.
"""

import base64
import logging
import mimetypes
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from docsmith.config import DocsmithConfig, get_config
from docsmith.errors import (
    AssetNotFoundError,
    DocsmithError,
    InvalidInputError,
    RenderError,
    TemplateNotFoundError,
)
from docsmith.renderers.filters import number_format
from docsmith.templates.attributes import AttributeBag
from docsmith.templates.naming import resolve_name

logger = logging.getLogger(__name__)


class BaseTemplate:
    """A document template with a customizable pre-render hook.

    Attributes not declared on the class are stored in an ``AttributeBag``:
    reading an unset one returns ``None``, writing one stores it in the bag.

    Attributes:
        path: Template directory override for this template type
        template_name: Explicit template name (without extension)
        orientation: Page orientation ("portrait" or "landscape"); None uses
            the configured default
    """

    path: str | Path | None = None
    template_name: str | None = None
    orientation: str | None = None

    def __init__(
        self,
        path: str | Path | None = None,
        template_name: str | None = None,
        config: DocsmithConfig | None = None,
        **params: Any,
    ) -> None:
        """Initialize the template.

        Args:
            path: Template directory (overrides the class attribute and config)
            template_name: Explicit template name (overrides the class attribute)
            config: Configuration (defaults to the process-wide config)
            **params: Initial render parameters stored in the attribute bag
        """
        self._config = config or get_config()
        self._bag().update(params)
        self._env: Environment | None = None
        self._env_dir: Path | None = None

        if path is not None:
            self.path = path
        if template_name is not None:
            self.template_name = template_name

    # =========================================================================
    # Attribute bag fallback
    # =========================================================================

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails, i.e. for undeclared names
        if name.startswith("_"):
            raise AttributeError(name)
        return self._bag().get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or hasattr(type(self), name) or name in self.__dict__:
            super().__setattr__(name, value)
        else:
            self._bag().set(name, value)

    def _bag(self) -> AttributeBag:
        # Created on first use so subclasses may set parameters before
        # calling super().__init__()
        bag = self.__dict__.get("_attributes")
        if bag is None:
            bag = AttributeBag()
            super().__setattr__("_attributes", bag)
        return bag

    @property
    def attributes(self) -> AttributeBag:
        """The attribute bag holding render parameters."""
        return self._bag()

    @property
    def config(self) -> DocsmithConfig:
        return self._config

    # =========================================================================
    # Resolution
    # =========================================================================

    def get_template_name(self) -> str:
        """Resolve the template name (without extension)."""
        return resolve_name(type(self).__name__, self.template_name)

    def get_template_dir(self) -> Path:
        """Resolve the directory holding this template's file."""
        if self.path is not None:
            return self._config.resolve_path(self.path)
        return self._config.templates_dir

    def get_template_file(self) -> Path:
        """Resolve the template file on disk.

        Returns:
            Path to the template file

        Raises:
            TemplateNotFoundError: If the file does not exist
        """
        file_name = self.get_template_name() + self._config.templates.extension
        template_file = self.get_template_dir() / file_name

        if not template_file.is_file():
            logger.error("Template not found: %s", template_file)
            raise TemplateNotFoundError(template_file)

        return template_file

    # =========================================================================
    # Rendering
    # =========================================================================

    def before_render(self, obj: Any) -> Any:
        """Prepare the object before rendering.

        Override to round amounts, compute totals or set template attributes.
        Must return the object to render.
        """
        return obj

    def create_document(self, obj: Any) -> str:
        """Render a single object.

        Args:
            obj: Data object passed to the template as ``object``

        Returns:
            Rendered markup

        Raises:
            TemplateNotFoundError: If the template file does not exist
            RenderError: If the hook or the template fails
        """
        template_file = self.get_template_file()
        return self._render_one(template_file, obj)

    def create_documents(self, objects: Iterable[Any]) -> list[str]:
        """Render each object of a collection, preserving order.

        Hook writes to the attribute bag are undone after each element, so
        every element starts from the same parameters.

        Args:
            objects: Data objects

        Returns:
            One rendered fragment per object

        Raises:
            TemplateNotFoundError: If the template file does not exist
            RenderError: If the hook or the template fails on any element
        """
        template_file = self.get_template_file()

        documents = [
            self._render_one(template_file, obj, index)
            for index, obj in enumerate(objects)
        ]

        logger.debug("Rendered %d fragments from %s", len(documents), template_file.name)
        return documents

    def _render_one(self, template_file: Path, obj: Any, index: int | None = None) -> str:
        name = template_file.name

        with self._attributes.scope():
            try:
                prepared = self.before_render(obj)
            except DocsmithError:
                raise
            except Exception as e:
                logger.error("before_render failed for %s: %s", name, e)
                raise RenderError(name, f"before_render failed: {e}", index) from e

            if prepared is None:
                logger.error("before_render returned None for %s", name)
                raise RenderError(name, "before_render must return the object to render", index)

            try:
                template = self._get_environment(template_file.parent).get_template(name)
                return template.render(
                    object=prepared,
                    template=self,
                    params=self._attributes.view(),
                )
            except DocsmithError:
                raise
            except Exception as e:
                logger.error("Template rendering failed for %s: %s", name, e)
                raise RenderError(name, str(e), index) from e

    def _get_environment(self, directory: Path) -> Environment:
        # One environment per template directory; rebuilt if the path changes
        if self._env is None or self._env_dir != directory:
            self._env_dir = directory
            self._env = Environment(
                loader=FileSystemLoader(str(directory)),
                autoescape=select_autoescape(["html", "xml"]),
                trim_blocks=True,
                lstrip_blocks=True,
            )
            self._env.filters["number_format"] = number_format
            self._env.filters["data_uri"] = self.image_to_data_uri
        return self._env

    # =========================================================================
    # Assets
    # =========================================================================

    def image_to_data_uri(self, relative_path: str) -> str:
        """Embed an image from the public directory as a data URI.

        PDF renderers cannot always fetch images over HTTP, so templates
        inline them instead:

            <img src="{{ template.image_to_data_uri('images/stamp.png') }}">

        Args:
            relative_path: Path relative to ``assets.public_path``

        Returns:
            ``data:<mime>;base64,<payload>`` string

        Raises:
            AssetNotFoundError: If the file does not exist
            InvalidInputError: If the path leads outside ``assets.public_path``
        """
        public_dir = self._config.public_dir.resolve()
        asset = (public_dir / relative_path.lstrip("/")).resolve()
        if not asset.is_relative_to(public_dir):
            logger.error("Asset outside the public directory: %s", relative_path)
            raise InvalidInputError(f"Asset path escapes the public directory: {relative_path}")
        if not asset.is_file():
            logger.error("Asset not found: %s", asset)
            raise AssetNotFoundError(asset)

        mime_type, _ = mimetypes.guess_type(asset.name)
        payload = base64.b64encode(asset.read_bytes()).decode("ascii")
        return f"data:{mime_type or 'image/png'};base64,{payload}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(template_name={self.get_template_name()!r})"
