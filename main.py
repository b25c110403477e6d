#!/usr/bin/env python3
"""Main entry point for the AEP copilot FastAPI server."""

import argparse
import logging

import uvicorn
from dotenv import load_dotenv

# Environment must be loaded before config is imported
load_dotenv()

from config import LOG_LEVEL  # noqa: E402

from api.server import app  # noqa: E402,F401 - Used by uvicorn

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# The SDK transports are chatty at debug level
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the FastAPI server."""
    parser = argparse.ArgumentParser(description="AEP Copilot Server")
    parser.add_argument(
        "--host", type=str, default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--port", type=int, default=8080, help="Port to run the server on (default: 8080)"
    )
    args = parser.parse_args()

    logger.info("Starting AEP Copilot Server...")
    logger.info(f"Listening on {args.host}:{args.port}")

    uvicorn.run(
        "main:app",
        host=args.host,
        port=args.port,
        reload=False,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
