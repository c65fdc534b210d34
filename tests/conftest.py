"""Shared fixtures for the DataTreeLib test suite."""

import sys
from pathlib import Path

import pytest
from loguru import logger

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def log_messages():
    """Collect loguru messages at WARNING and above.

    loguru does not go through the standard logging module, so pytest's
    caplog never sees its records; a list sink is used instead.
    """
    messages = []
    sink_id = logger.add(messages.append, level="WARNING", format="{level}: {message}")
    yield messages
    logger.remove(sink_id)
