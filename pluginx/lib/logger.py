"""
Logging setup for the pluginx CLI.
"""

import logging
import sys
from typing import Optional

from pluginx.config import get_settings


def setup_logging(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
) -> None:
    """Set up logging configuration.

    Logs go to stderr so that ``--json`` output on stdout stays parseable.
    """
    settings = get_settings()

    log_level = getattr(logging, (level or settings.log_level).upper())
    log_format = format_string or settings.log_format

    # Root logger configuration
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(log_format))
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
