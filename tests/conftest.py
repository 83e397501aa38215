"""Shared pytest fixtures for docsmith tests.

Fixtures are organized by category:
- Path fixtures: template and asset directories
- Configuration fixtures: configs pointing at temporary directories
- Rendering fixtures: fake PDF renderers and response channels
"""

import logging
import sys
from pathlib import Path
from typing import Any

import pytest

from docsmith.config import (
    AssetsConfig,
    DocsmithConfig,
    OutputConfig,
    TemplatesConfig,
    reset_config,
)
from docsmith.document import MemoryChannel
from docsmith.templates.registry import reset_registry
from docsmith.utils.logging import ROOT_LOGGER
from tests.fixtures.renderers import FakePdfRenderer

# =============================================================================
# Global state
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_global_state() -> Any:
    """Reset process-wide config, registry and logging between tests."""
    reset_config()
    reset_registry()
    yield
    reset_config()
    reset_registry()
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """Create a template directory with a few simple templates."""
    directory = tmp_path / "templates"
    directory.mkdir()

    # Renders exactly the object's name, so composed output can be compared
    (directory / "item.html").write_text("{{ object.name }}")

    (directory / "invoice_template_template.html").write_text(
        "<h1>Invoice {{ object.number }}</h1>\n"
        "<p>Total: {{ object.total | number_format }}</p>\n"
        "{% if template.vat is not none %}<p>VAT: {{ template.vat | number_format }}</p>{% endif %}\n"
        "{% if template.stamp %}<img class=\"stamp\">{% endif %}\n"
        "{% if template.signature %}<span class=\"signature\"></span>{% endif %}\n"
    )

    (directory / "flags.html").write_text(
        "stamp={{ template.stamp }};signature={{ params.signature }};"
        "discount={{ template.discount }};name={{ object.name }}"
    )
    return directory


@pytest.fixture
def public_dir(tmp_path: Path) -> Path:
    """Create a public asset directory with a small PNG."""
    directory = tmp_path / "public"
    (directory / "images").mkdir(parents=True)
    (directory / "images" / "stamp.png").write_bytes(b"\x89PNG\r\n\x1a\nstamp")
    return directory


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def config(templates_dir: Path, public_dir: Path, tmp_path: Path) -> DocsmithConfig:
    """Return a config pointing at the temporary directories."""
    return DocsmithConfig(
        templates=TemplatesConfig(path=str(templates_dir)),
        assets=AssetsConfig(public_path=str(public_dir)),
        output=OutputConfig(directory=str(tmp_path / "out")),
    )


@pytest.fixture
def full_config() -> dict[str, Any]:
    """Return a complete configuration dictionary with all options."""
    return {
        "templates": {"path": "tpl", "extension": ".html"},
        "assets": {"public_path": "web"},
        "pdf": {
            "page_size": "A5",
            "orientation": "landscape",
            "encoding": "UTF-8",
            "base_url": "https://shop.example.com",
        },
        "document": {"default_name": "report", "stylesheet": "<style>body{}</style>"},
        "output": {"directory": "generated"},
        "registry": {
            "invoice": {
                "class": "tests.fixtures.documents:InvoiceTemplate",
                "title": "Invoice",
            },
        },
    }


# =============================================================================
# Rendering Fixtures
# =============================================================================


@pytest.fixture
def pdf_renderer() -> FakePdfRenderer:
    return FakePdfRenderer()


@pytest.fixture
def channel() -> MemoryChannel:
    return MemoryChannel()


@pytest.fixture
def weasyprint_without_pango(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Shadow WeasyPrint with a package that fails to load its native libraries.

    Like the real package, it prints an install banner to stdout before
    raising. Returns the banner text.
    """
    banner = "WeasyPrint could not import some external libraries."
    package = tmp_path / "site" / "weasyprint"
    package.mkdir(parents=True)
    (package / "__init__.py").write_text(
        f"print({banner!r})\n"
        "raise OSError(\"cannot load library 'libpango-1.0-0'\")\n"
    )

    monkeypatch.delitem(sys.modules, "weasyprint", raising=False)
    monkeypatch.syspath_prepend(str(tmp_path / "site"))
    return banner
