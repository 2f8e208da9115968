"""
Run the cookie scanner HTTP server with uvicorn.
"""

from __future__ import annotations

import uvicorn

from cookie_scanner import config
from cookie_scanner.utils import logger

log = logger.create_logger("Server")


def main() -> None:
    """Entry point for running the server."""
    settings = config.get_settings()
    log.success(f"Server listening on {settings.host}:{settings.port}")
    log.info("Open your browser", {"url": f"http://localhost:{settings.port}"})

    uvicorn.run(
        "cookie_scanner.app:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )


if __name__ == "__main__":
    main()
