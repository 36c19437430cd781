"""Application entrypoint."""

from __future__ import annotations

import uvicorn

from deploy_triggers.api.app import create_app
from deploy_triggers.config import Environment, get_settings
from deploy_triggers.infrastructure.observability.logging import setup_logging
from deploy_triggers.infrastructure.observability.tracing import setup_tracing


app = create_app()


def main() -> None:
    """Run the application."""
    settings = get_settings()
    setup_logging(
        settings.observability.log_level,
        json_output=settings.environment != Environment.DEVELOPMENT,
    )
    setup_tracing(settings.observability)

    uvicorn.run(
        "deploy_triggers.main:app",
        host=settings.host,
        port=settings.port,
        workers=settings.workers,
        reload=settings.debug,
        log_level=settings.observability.log_level.lower(),
    )


if __name__ == "__main__":
    main()
