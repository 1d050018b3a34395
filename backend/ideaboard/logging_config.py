import logging

from ideaboard.config import settings

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s %(message)s"


def setup_logging():
    level = getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # uvicorn access lines duplicate our request logging
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
