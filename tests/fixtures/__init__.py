"""Test fixtures for docsmith.

- templates/: template files used by the CLI tests
- data/: YAML and JSON data files
- documents.py: BaseTemplate subclasses registered by test configs
- renderers.py: PDF renderers that stand in for WeasyPrint
"""

from pathlib import Path

# Path to fixtures directory
FIXTURES_DIR = Path(__file__).parent

TEMPLATES_DIR = FIXTURES_DIR / "templates"

DATA_DIR = FIXTURES_DIR / "data"
