"""Run the service with uvicorn: ``python -m shorturl``."""

import uvicorn

from shorturl.core.config import settings
from shorturl.main import create_app


def main() -> None:
    # uvicorn installs SIGINT/SIGTERM handlers and runs the lifespan
    # shutdown, which disposes the connection pool
    uvicorn.run(
        create_app(),
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
