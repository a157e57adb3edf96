"""
pytest configuration file.

Adds the project root directory to sys.path so that tests can import
the emi_calc package without installing it.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture(autouse=True)
def reset_cli_logging():
    """Drop the stderr handler a CLI invocation installs on the root logger."""
    yield
    from emi_calc import main

    if main._console_handler is not None:
        logging.getLogger().removeHandler(main._console_handler)
        main._console_handler = None
    logging.getLogger().setLevel(logging.WARNING)
