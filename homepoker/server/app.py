"""
FastAPI Application Entry Point for HomePoker.

This module creates and configures the FastAPI application with:
- HTTP routes for table and hand management
- CORS middleware for the operator UI
"""

import argparse
import logging
from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from homepoker import __version__
from homepoker.server.routes import router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="HomePoker",
        description="Home-game poker table engine (Texas Hold'em and 5-Card Stud)",
        version=__version__,
    )

    # CORS middleware for the operator UI
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    logger.info("HomePoker app created")
    return app


# Create the application instance
app = create_app()


def main(argv: Optional[List[str]] = None):
    """Run the server (for use as entry point)."""
    import uvicorn

    parser = argparse.ArgumentParser(description="HomePoker Server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument(
        "--log-level",
        default="info",
        choices=["debug", "info", "warning", "error"],
        help="Log level for the engine and uvicorn",
    )
    args = parser.parse_args(argv)

    logging.getLogger("homepoker").setLevel(args.log_level.upper())
    uvicorn.run(
        "homepoker.server.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
