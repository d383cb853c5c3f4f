import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def setup_logging(level: str | None = None) -> None:
    global _configured
    if _configured:
        return
    logging.basicConfig(level=(level or settings.LOG_LEVEL).upper(), format=LOG_FORMAT)
    # uvicorn ships its own access log; ours comes from the request middleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    _configured = True
