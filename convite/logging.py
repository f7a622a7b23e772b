import logging
import sys

from convite.settings import settings

SERVICE_NAME = "convite"
TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"

# Loggers that drown the app's own output when the level is DEBUG
NOISY_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "PIL": logging.INFO,
}


def configure_logging() -> None:
    """Configure the root logger based on settings.

    JSON records carry a ``service`` field so gift-payment logs can be told
    apart in a shared collector. Call once at startup.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)

    if settings.log_json:
        from pythonjsonlogger.json import JsonFormatter

        handler.setFormatter(
            JsonFormatter(
                fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
                rename_fields={"asctime": "timestamp", "levelname": "level"},
                static_fields={"service": SERVICE_NAME},
            )
        )
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name, floor in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(max(level, floor))
