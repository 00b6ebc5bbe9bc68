# blackjack/logging_utils.py

import logging
import os

# Environment switch:
#   LOG_LEVEL=DEBUG / INFO / WARNING / ERROR
# Game text goes to stdout with print(); logs go to stderr and stay quiet
# (WARNING) unless asked for.
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()

LOG_FORMAT = "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Call once at program start (terminal/main.py and the analysis scripts)."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
