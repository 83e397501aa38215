"""docsmith utility modules.

- logging: Standardized logging with human/verbose/JSON modes
- preflight: Rendering dependency checks
"""

from docsmith.utils.logging import get_logger, setup_logging
from docsmith.utils.preflight import PreflightChecker, PreflightResult

__all__ = [
    "get_logger",
    "setup_logging",
    "PreflightChecker",
    "PreflightResult",
]
