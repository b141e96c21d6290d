"""Main entry point for taskflow-service.

- ``--server`` anywhere in the arguments: run the FastAPI server.
- Otherwise: run the click CLI (no arguments shows help).
"""

from __future__ import annotations

import sys
from typing import NoReturn


def run_fastapi_server() -> NoReturn:
    """Run the FastAPI application with uvicorn using configured host and port."""
    import uvicorn

    from taskflow_service.core.settings import get_app_settings, get_logging_settings

    settings = get_app_settings()
    log_settings = get_logging_settings()

    uvicorn.run(
        "taskflow_service.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        access_log=settings.debug,
        log_level=log_settings.level.lower(),
    )
    sys.exit(0)


def run_cli() -> NoReturn:
    from taskflow_service.cli.main import main as cli_main

    cli_main()
    sys.exit(0)


def main() -> NoReturn:
    """Route to the server or the CLI based on ``sys.argv``."""
    if "--server" in sys.argv:
        sys.argv.remove("--server")
        run_fastapi_server()
    run_cli()


if __name__ == "__main__":
    main()
