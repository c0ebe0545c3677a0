# filedrop/__main__.py
"""Start de upload service: python -m filedrop"""
import uvicorn

from filedrop.core.logging_config import setup_logging
from filedrop.core.settings import get_settings
from filedrop.main import create_app


def main() -> None:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_JSON)
    # uvicorn stopt bij SIGINT/SIGTERM met accepteren en laat lopende requests afmaken
    uvicorn.run(
        create_app(settings),
        host=settings.bind_host,
        port=settings.bind_port,
        log_config=None,
        timeout_graceful_shutdown=30,
    )


if __name__ == "__main__":
    main()
