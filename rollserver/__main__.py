# rollserver/__main__.py
import uvicorn

from .config import Settings
from .logging_utils import configure_logging, logger


def main():
    settings = Settings.from_env()
    configure_logging(settings.LOG_LEVEL)
    logger.info("Server listening on port %d", settings.PORT)
    uvicorn.run("rollserver.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
