"""docsmith CLI interface.

Commands:
- render: Render a data file through a template into doc, pdf or print output
- templates: List registered document types
- check: Validate rendering dependencies
- init: Initialize docsmith configuration

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log output
- --version: Show version and exit
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml

from docsmith import __version__
from docsmith.config import DocsmithConfig, create_default_config, load_config
from docsmith.errors import DocsmithError
from docsmith.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="docsmith",
    help="Render business documents from templates to doc, pdf or browser print",
    add_completion=False,
    no_args_is_help=True,
)

OUTPUT_FORMATS = ("doc", "pdf", "print")

# Global state
_config: DocsmithConfig | None = None
_logger = get_logger()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"docsmith {__version__}")
        raise typer.Exit()


def _get_config() -> DocsmithConfig:
    return _config if _config is not None else DocsmithConfig()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output with timestamps"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress info messages (warnings and errors only)"),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option("--ci", help="Enable CI mode with JSON output"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """docsmith - render documents from templates."""
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except (ValueError, yaml.YAMLError) as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)


# =============================================================================
# render command
# =============================================================================


def _load_data(data_file: Path) -> Any:
    """Load a YAML or JSON data file (JSON is valid YAML)."""
    with open(data_file, encoding="utf-8") as f:
        return yaml.safe_load(f)


@app.command()
def render(
    data_file: Annotated[
        Path,
        typer.Argument(
            help="YAML or JSON file with one object or a list of objects",
            exists=True,
            dir_okay=False,
        ),
    ],
    type_code: Annotated[
        str | None,
        typer.Option("--type", "-t", help="Registered document type code"),
    ] = None,
    template_name: Annotated[
        str | None,
        typer.Option("--template", help="Template name without extension"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: doc, pdf, print"),
    ] = "pdf",
    save_as: Annotated[
        str | None,
        typer.Option("--save-as", "-n", help="Output file name without extension"),
    ] = None,
    params: Annotated[
        list[str] | None,
        typer.Option("--param", "-p", help="Render parameter to switch on (repeatable)"),
    ] = None,
    no_delimiter: Annotated[
        bool,
        typer.Option("--no-delimiter", help="Do not separate documents with page breaks"),
    ] = False,
    stylesheet: Annotated[
        Path | None,
        typer.Option(
            "--stylesheet",
            help="File whose markup replaces the default stylesheet (pdf, print)",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Output directory (overrides config)"),
    ] = None,
) -> None:
    """Render a data file into a document.

    Exit codes:
        0: Document written
        1: Invalid arguments or rendering failed
    """
    from docsmith.document import Document, FileChannel
    from docsmith.templates import BaseTemplate, get_registry

    config = _get_config()

    if (type_code is None) == (template_name is None):
        _logger.error("Pass exactly one of --type or --template")
        raise typer.Exit(1)

    if output_format not in OUTPUT_FORMATS:
        _logger.error(f"Invalid format: {output_format}. Use one of {', '.join(OUTPUT_FORMATS)}")
        raise typer.Exit(1)

    try:
        data = _load_data(data_file)
    except yaml.YAMLError as e:
        _logger.error(f"Invalid data file {data_file}: {e}")
        raise typer.Exit(1)

    css = stylesheet.read_text(encoding="utf-8") if stylesheet else ""
    channel = FileChannel(output_dir or config.output_dir)

    try:
        if type_code is not None:
            registry = get_registry()
            registry.load_from_config(config)
            template = registry.get(type_code, config=config)
        else:
            template = BaseTemplate(template_name=template_name, config=config)

        document = Document(config=config, channel=channel).load_template(template)
        if params:
            document.with_params(*params)
        if no_delimiter:
            document.without_delimiter()

        document.create_document(data)
        if save_as is not None:
            document.save_as(save_as)

        if output_format == "doc":
            written = document.doc().send_response()
        elif output_format == "pdf":
            written = document.pdf(css).send_response()
        else:
            written = document.print_on_browser(css)
    except DocsmithError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    _logger.structured(
        logging.INFO,
        f"Wrote {written}",
        path=str(written),
        format=output_format,
        fragments=len(document.draft),
    )
    typer.echo(str(written))


# =============================================================================
# templates command
# =============================================================================


@app.command()
def templates(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON"),
    ] = False,
) -> None:
    """List registered document types."""
    from docsmith.templates import get_registry

    registry = get_registry()
    try:
        registry.load_from_config(_get_config())
    except DocsmithError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    metadata = registry.get_metadata()

    if json_output:
        typer.echo(json.dumps(metadata, indent=2))
        return

    if not metadata:
        typer.echo("No document types registered")
        return

    width = max(len(code) for code in metadata)
    for code, info in metadata.items():
        typer.echo(f"  {code.ljust(width)}  {info['title']}  ({info['class']})")


# =============================================================================
# check command
# =============================================================================


@app.command()
def check(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON"),
    ] = False,
    pdf: Annotated[
        bool,
        typer.Option("--pdf", help="Require the PDF renderer"),
    ] = False,
) -> None:
    """Validate rendering dependencies.

    Exit codes:
        0: All required dependencies available
        1: One or more required dependencies missing
        2: Only optional dependencies missing (warnings)
    """
    from docsmith.utils.preflight import PreflightChecker

    result = PreflightChecker().check_all(_get_config(), needs_pdf=pdf)

    if json_output:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        typer.echo("\nPreflight Check Results\n")
        for check_result in result.checks:
            status = "ok " if check_result.available else "ERR"
            version_str = f" ({check_result.version})" if check_result.version else ""
            required_str = " [required]" if check_result.required else " [optional]"
            typer.echo(f"  {status} {check_result.name}{version_str}{required_str}")
            if check_result.message:
                typer.echo(f"      {check_result.message}")
        typer.echo()

    if result.errors:
        for error in result.errors:
            _logger.error(error)
        raise typer.Exit(1)
    if result.warnings:
        for warning in result.warnings:
            _logger.warning(warning)
        raise typer.Exit(2)
    raise typer.Exit(0)


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite existing config"),
    ] = False,
) -> None:
    """Initialize docsmith configuration.

    Creates .docsmith/config.yaml and an empty templates directory.
    """
    config_dir = Path(".docsmith")
    config_file = config_dir / "config.yaml"

    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    config_dir.mkdir(exist_ok=True)
    config_file.write_text(create_default_config(), encoding="utf-8")
    _logger.info(f"Created config: {config_file}")

    # Relative paths in the config resolve against .docsmith/
    templates_dir = config_dir / "templates"
    templates_dir.mkdir(exist_ok=True)

    typer.echo("docsmith configuration initialized")
    typer.echo(f"   Config: {config_file}")
    typer.echo(f"   Templates: {templates_dir}/")
    raise typer.Exit(0)
