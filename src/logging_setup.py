import logging
import sys

LOG_FORMAT = "%(levelname)s: %(message)s"


def setup_logging(level: str = "WARNING") -> None:
    """
    Send all diagnostics to stderr so stdout carries only the CSV snapshot.
    Unknown level names fall back to WARNING.
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)
    if not isinstance(log_level, int):
        log_level = logging.WARNING

    logging.basicConfig(
        level=log_level,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
