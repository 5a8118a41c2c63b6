import os

import pytest
import logging

# Settings are read at import time, so the key must exist before call_relay is imported
os.environ.setdefault("OPENAI_API_KEY", "test-api-key")


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    logging.basicConfig(level=logging.NOTSET)
    yield


@pytest.fixture
def relay_logs(caplog):
    """Capture records from the call_relay logger, which does not propagate by default."""
    relay_logger = logging.getLogger("call_relay")
    previous = relay_logger.propagate
    relay_logger.propagate = True
    caplog.set_level(logging.DEBUG, logger="call_relay")
    yield caplog
    relay_logger.propagate = previous
