"""
Environment-driven settings for the call relay.

Values are read once at import time. A ``.env`` file in the working directory
is loaded first if it exists, so local development does not need exported
variables.
"""

import logging
import os
import sys
from pathlib import Path

import dotenv

from call_relay.config.constants import (
    DEFAULT_EXTRACTION_MODEL,
    DEFAULT_REALTIME_MODEL,
    DEFAULT_WEBHOOK_URL,
    LOGGER_NAME,
)

env_path = Path(".") / ".env"
if env_path.exists():
    dotenv.load_dotenv(env_path)

logger = logging.getLogger(LOGGER_NAME)

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
PORT = int(os.getenv("PORT", "5050"))
HOST = os.getenv("HOST", "0.0.0.0")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
REALTIME_MODEL = os.getenv("OPENAI_REALTIME_MODEL", DEFAULT_REALTIME_MODEL)
EXTRACTION_MODEL = os.getenv("OPENAI_EXTRACTION_MODEL", DEFAULT_EXTRACTION_MODEL)
WEBHOOK_URL = os.getenv("WEBHOOK_URL", DEFAULT_WEBHOOK_URL)
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "30"))
POST_CALL_TIMEOUT = float(os.getenv("POST_CALL_TIMEOUT", "90"))


def require_api_key() -> str:
    """
    Return the OpenAI API key or terminate the process.

    Returns:
        str: The configured API key

    The relay cannot do anything useful without the key, so a missing value
    is treated as a fatal startup error.
    """
    if not OPENAI_API_KEY:
        logger.error("Missing OpenAI API key. Please set OPENAI_API_KEY in the environment or .env file.")
        sys.exit(1)
    return OPENAI_API_KEY
