"""
Start the call relay under uvicorn.

    python run.py [--host HOST] [--port PORT] [--log-level LEVEL]

Command line flags override the HOST, PORT and LOG_LEVEL environment settings.
The process exits with status 1 when OPENAI_API_KEY is not configured.
"""

import argparse
import os

import uvicorn

from call_relay.config import settings
from call_relay.config.logging_config import configure_logging

LEVEL_CHOICES = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Relay Twilio Media Streams calls to the OpenAI Realtime API"
    )
    parser.add_argument("--host", default=settings.HOST, help=f"bind address (default: {settings.HOST})")
    parser.add_argument("--port", type=int, default=settings.PORT, help=f"listen port (default: {settings.PORT})")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default=settings.LOG_LEVEL,
        choices=LEVEL_CHOICES,
        help=f"relay log level (default: {settings.LOG_LEVEL})",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    settings.require_api_key()

    # call_relay.main configures logging from the setting when uvicorn imports it;
    # the environment copy reaches the reloader subprocess
    settings.LOG_LEVEL = args.log_level
    os.environ["LOG_LEVEL"] = args.log_level

    logger = configure_logging(args.log_level)
    logger.info(f"Call relay starting on {args.host}:{args.port} (log level {args.log_level})")

    uvicorn.run(
        "call_relay.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
        http="h11",
        access_log=False,
        reload=os.getenv("ENV", "production").lower() == "development",
    )


if __name__ == "__main__":
    main()
