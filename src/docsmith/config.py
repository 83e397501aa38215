"""docsmith configuration system.

Configuration is YAML-based. Supports environment variable substitution
(${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.docsmith/config.yaml
3. ./docsmith.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

VALID_ORIENTATIONS = {"portrait", "landscape"}

DEFAULT_STYLESHEET = "<!DOCTYPE html><link href='/css/print.css' rel='stylesheet'></link>"

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class TemplatesConfig:
    """Template lookup configuration.

    Attributes:
        path: Directory holding template files
        extension: File extension appended to resolved template names
    """

    path: str = "templates"
    extension: str = ".html"

    def __post_init__(self) -> None:
        """Validate templates configuration."""
        if self.extension and not self.extension.startswith("."):
            self.extension = f".{self.extension}"


@dataclass
class AssetsConfig:
    """Asset configuration.

    Attributes:
        public_path: Base directory for images embedded as data URIs
    """

    public_path: str = "public"


@dataclass
class PdfConfig:
    """Settings passed to the HTML to PDF renderer.

    Attributes:
        page_size: Paper size
        orientation: Default orientation when a template does not set one
        encoding: Markup encoding
        base_url: Base URL for resolving relative links in markup
    """

    page_size: str = "A4"
    orientation: str = "portrait"
    encoding: str = "UTF-8"
    base_url: str | None = None

    def __post_init__(self) -> None:
        """Validate PDF configuration."""
        if self.orientation not in VALID_ORIENTATIONS:
            raise ValueError(
                f"Invalid orientation: {self.orientation}. Valid: {VALID_ORIENTATIONS}"
            )


@dataclass
class DocumentConfig:
    """Document composition defaults.

    Attributes:
        default_name: Attachment base name when none is given
        stylesheet: Markup prepended to pdf and print output
    """

    default_name: str = "journal"
    stylesheet: str = DEFAULT_STYLESHEET


@dataclass
class OutputConfig:
    """Output configuration.

    Attributes:
        directory: Directory where files are written by the file channel
    """

    directory: str = "out"


@dataclass
class RegistryEntry:
    """A template class registered under a type code.

    Attributes:
        target: Import path in "package.module:ClassName" form
        title: Human-readable document title
    """

    target: str
    title: str | None = None

    def __post_init__(self) -> None:
        """Validate registry entry."""
        if ":" not in self.target:
            raise ValueError(
                f"Invalid template class path: {self.target}. Expected 'module:Class'"
            )


@dataclass
class DocsmithConfig:
    """Top-level docsmith configuration.

    Attributes:
        templates: Template lookup settings
        assets: Asset embedding settings
        pdf: PDF renderer settings
        document: Composition defaults
        output: File output settings
        registry: Type code to template class mapping
    """

    templates: TemplatesConfig = field(default_factory=TemplatesConfig)
    assets: AssetsConfig = field(default_factory=AssetsConfig)
    pdf: PdfConfig = field(default_factory=PdfConfig)
    document: DocumentConfig = field(default_factory=DocumentConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    registry: dict[str, RegistryEntry] = field(default_factory=dict)

    # Set by load_config when read from a file
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path

    @property
    def base_dir(self) -> Path:
        """Directory that relative paths are resolved against."""
        if self._config_path is not None:
            return self._config_path.parent
        return Path.cwd()

    def resolve_path(self, value: str | Path) -> Path:
        """Resolve a configured path against the config base directory."""
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.base_dir / path
        return path

    @property
    def templates_dir(self) -> Path:
        return self.resolve_path(self.templates.path)

    @property
    def public_dir(self) -> Path:
        return self.resolve_path(self.assets.public_path)

    @property
    def output_dir(self) -> Path:
        return self.resolve_path(self.output.directory)


# =============================================================================
# Environment Variable Substitution
# =============================================================================

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)\}")


def _env_value(match: re.Match[str]) -> str:
    name = match.group(1)
    if name not in os.environ:
        raise ValueError(f"Environment variable not set: {name}")
    return os.environ[name]


def substitute_env_vars(value: Any) -> Any:
    """Replace ``${VAR}`` references with environment values.

    Strings are substituted; dicts and lists are walked recursively; other
    values are returned unchanged.

    Example:
        templates:
          path: "${DOCSMITH_ROOT}/templates"

    Raises:
        ValueError: If a referenced variable is not set
    """
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(_env_value, value)
    if isinstance(value, dict):
        return {key: substitute_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [substitute_env_vars(item) for item in value]
    return value


# =============================================================================
# Config File Discovery
# =============================================================================


# Searched in order, relative to the working directory
CONFIG_CANDIDATES = (Path(".docsmith") / "config.yaml", Path("docsmith.yaml"))


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Return the first existing file of ``CONFIG_CANDIDATES``.

    Args:
        start_path: Directory to search (defaults to cwd)
    """
    base = (start_path or Path.cwd()).resolve()
    return next(
        (base / candidate for candidate in CONFIG_CANDIDATES if (base / candidate).exists()),
        None,
    )


# =============================================================================
# Config Loading
# =============================================================================


def load_config_from_dict(data: dict[str, Any]) -> DocsmithConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        DocsmithConfig instance
    """
    data = substitute_env_vars(data)

    config = DocsmithConfig()

    if "templates" in data:
        templates_data = data["templates"]
        config.templates = TemplatesConfig(
            path=templates_data.get("path", config.templates.path),
            extension=templates_data.get("extension", config.templates.extension),
        )

    if "assets" in data:
        config.assets = AssetsConfig(
            public_path=data["assets"].get("public_path", config.assets.public_path),
        )

    if "pdf" in data:
        pdf_data = data["pdf"]
        config.pdf = PdfConfig(
            page_size=pdf_data.get("page_size", "A4"),
            orientation=pdf_data.get("orientation", "portrait"),
            encoding=pdf_data.get("encoding", "UTF-8"),
            base_url=pdf_data.get("base_url"),
        )

    if "document" in data:
        document_data = data["document"]
        config.document = DocumentConfig(
            default_name=document_data.get("default_name", config.document.default_name),
            stylesheet=document_data.get("stylesheet", config.document.stylesheet),
        )

    if "output" in data:
        config.output = OutputConfig(
            directory=data["output"].get("directory", config.output.directory),
        )

    if "registry" in data:
        for code, entry_data in (data["registry"] or {}).items():
            if isinstance(entry_data, str):
                config.registry[code] = RegistryEntry(target=entry_data)
            elif isinstance(entry_data, dict):
                config.registry[code] = RegistryEntry(
                    target=entry_data.get("class", ""),
                    title=entry_data.get("title"),
                )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> DocsmithConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        DocsmithConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        config = load_config_from_dict(data)
        config._config_path = found_path.resolve()
    else:
        config = DocsmithConfig()

    return config


# =============================================================================
# Process-wide Configuration
# =============================================================================

_config: DocsmithConfig | None = None


def get_config() -> DocsmithConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: DocsmithConfig) -> None:
    """Replace the process-wide configuration."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the process-wide configuration (primarily for testing)."""
    global _config
    _config = None


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return '''# docsmith configuration

# Where template files live, and the extension appended to resolved names
templates:
  path: "templates"
  extension: ".html"

# Base directory for images embedded with template.image_to_data_uri()
assets:
  public_path: "public"

# HTML to PDF conversion
pdf:
  page_size: "A4"
  orientation: "portrait"   # default when a template does not set one
  encoding: "UTF-8"
  # base_url: "https://example.com"

document:
  default_name: "journal"
  # stylesheet: "<link href='/css/print.css' rel='stylesheet'>"

output:
  directory: "out"

# Type codes for `docsmith render --type`
# registry:
#   invoice:
#     class: "myapp.documents:InvoiceTemplate"
#     title: "Invoice"
'''
