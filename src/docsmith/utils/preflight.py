"""Preflight validation.

Checks that the rendering backends and the template directory are usable
before a document is generated, so a missing dependency fails the run up
front instead of halfway through a batch.
"""

import contextlib
import importlib.util
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from docsmith.config import DocsmithConfig


@dataclass
class DependencyCheck:
    """Result of checking a single dependency.

    Attributes:
        name: Dependency name
        available: Whether it is usable
        version: Version if known
        required: Whether the run fails without it
        path: Module or directory path if available
        message: Status message (human-readable context)
    """

    name: str
    available: bool
    version: str | None = None
    required: bool = True
    path: str | None = None
    message: str = ""


@dataclass
class PreflightResult:
    """Result of preflight validation.

    Attributes:
        success: Whether all required dependencies are available
        checks: Individual check results
        errors: Messages for missing required dependencies
        warnings: Messages for missing optional dependencies
    """

    success: bool = True
    checks: list[DependencyCheck] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def add_check(self, check: DependencyCheck) -> None:
        """Add a check result."""
        self.checks.append(check)

        if not check.available:
            if check.required:
                self.success = False
                self.errors.append(f"Required dependency not available: {check.name}")
            else:
                self.warnings.append(f"Optional dependency not available: {check.name}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON output."""
        return {
            "success": self.success,
            "checks": [
                {
                    "name": c.name,
                    "available": c.available,
                    "version": c.version,
                    "required": c.required,
                    "path": c.path,
                    "message": c.message,
                }
                for c in self.checks
            ],
            "errors": self.errors,
            "warnings": self.warnings,
        }


class PreflightChecker:
    """Validates rendering dependencies before documents are generated.

    Usage:
        checker = PreflightChecker()
        result = checker.check_all(config, needs_pdf=True)
        if not result.success:
            sys.exit(1)
    """

    def check_jinja2(self) -> DependencyCheck:
        """Check that Jinja2 is importable."""
        spec = importlib.util.find_spec("jinja2")
        if spec is None:
            return DependencyCheck(
                name="jinja2",
                available=False,
                message="Install with: pip install jinja2",
            )

        import jinja2

        return DependencyCheck(
            name="jinja2",
            available=True,
            version=getattr(jinja2, "__version__", None),
            path=spec.origin,
            message="Template engine",
        )

    def check_weasyprint(self, required: bool = True) -> DependencyCheck:
        """Check that WeasyPrint and its native libraries load.

        WeasyPrint needs Pango at import time, so a successful ``find_spec``
        alone does not prove it works.

        Args:
            required: Whether PDF output is needed for this run
        """
        spec = importlib.util.find_spec("weasyprint")
        if spec is None:
            return DependencyCheck(
                name="weasyprint",
                available=False,
                required=required,
                message="Install with: pip install weasyprint",
            )

        try:
            # WeasyPrint prints an install banner to stdout when Pango is missing
            with contextlib.redirect_stdout(sys.stderr):
                import weasyprint
        except (ImportError, OSError) as e:
            return DependencyCheck(
                name="weasyprint",
                available=False,
                required=required,
                path=spec.origin,
                message=f"Native libraries missing: {e}",
            )

        return DependencyCheck(
            name="weasyprint",
            available=True,
            version=getattr(weasyprint, "__version__", None),
            required=required,
            path=spec.origin,
            message="HTML to PDF renderer",
        )

    def check_template_dir(self, templates_dir: Path) -> DependencyCheck:
        """Check that the configured template directory exists."""
        if not templates_dir.is_dir():
            return DependencyCheck(
                name="templates",
                available=False,
                path=str(templates_dir),
                message=f"Template directory not found: {templates_dir}",
            )

        return DependencyCheck(
            name="templates",
            available=True,
            path=str(templates_dir),
            message="Template directory",
        )

    def check_all(self, config: DocsmithConfig, needs_pdf: bool = False) -> PreflightResult:
        """Run all preflight checks.

        Args:
            config: Loaded configuration
            needs_pdf: Whether WeasyPrint is required (otherwise optional)

        Returns:
            PreflightResult with all check results
        """
        result = PreflightResult()
        result.add_check(self.check_jinja2())
        result.add_check(self.check_template_dir(config.templates_dir))
        result.add_check(self.check_weasyprint(required=needs_pdf))
        return result
