"""
modcache Package Main Entry Point

This module serves as the main entry point when the package is run as a module
using `python -m modcache`. It delegates to the Typer application.
"""

import logging
import sys

from modcache.cli.typer_app import app
from modcache.shared.constants import CLIDefaults

logger = logging.getLogger(__name__)


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        logger.info("Command interrupted by user")
        sys.exit(CLIDefaults.EXIT_ERROR)
