import contextvars
import logging
import sys
from typing import Optional

import uuid_utils as uuid
from colorlog import ColoredFormatter

LOGGER_NAME = "TemplateTalk"

# Streamlit's file watcher and HTTP stack log every rerun at DEBUG.
NOISY_LOGGERS = ("asyncio", "urllib3", "watchdog", "streamlit")

# Correlation id for one library operation (create, generate, ...).
ecid_var = contextvars.ContextVar("ecid", default="-")


def bind_ecid(ecid: Optional[str] = None) -> str:
    """Stamps subsequent log lines in this context with `ecid` (a fresh uuid7 prefix by default)."""
    ecid = ecid or uuid.uuid7().hex[:12]
    ecid_var.set(ecid)
    return ecid


class ECIDFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.ecid = ecid_var.get()
        return True


class TemplateTalkHandler(logging.StreamHandler):
    """Colored stderr handler; its type marks the root logger as configured."""

    def __init__(self, level: int):
        super().__init__(sys.stderr)
        self.setLevel(level)
        self.addFilter(ECIDFilter())
        self.setFormatter(
            ColoredFormatter(
                "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s "
                "%(light_black)secid=%(ecid)s%(reset)s %(name)s:%(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
                log_colors={
                    "DEBUG": "cyan",
                    "INFO": "green",
                    "WARNING": "yellow",
                    "ERROR": "red",
                    "CRITICAL": "bold_red",
                },
            )
        )


def setup_logging(level: int = logging.INFO, silence_third_party: bool = True) -> logging.Logger:
    """
    Configure colored terminal logging with ECID support.
    Safe to call on every Streamlit rerun; a changed level is applied to the existing handler.
    """
    root = logging.getLogger()
    root.setLevel(level)

    ours = [h for h in root.handlers if isinstance(h, TemplateTalkHandler)]
    if ours:
        for h in ours:
            h.setLevel(level)
    else:
        root.addHandler(TemplateTalkHandler(level))

    if silence_third_party:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    return logger
