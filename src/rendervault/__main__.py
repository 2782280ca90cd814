"""
RenderVault Package Main Entry Point

Runs the CLI when the package is executed with ``python -m rendervault``.
"""

import logging
import sys

from rendervault.cli.typer_app import app
from rendervault.shared.constants import CLIDefaults

logger = logging.getLogger(__name__)


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        logger.info("Command interrupted by user")
        sys.exit(CLIDefaults.EXIT_ERROR)
