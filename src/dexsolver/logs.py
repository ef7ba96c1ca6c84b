"""Logging setup for processes embedding the solver."""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(debug: bool = False) -> None:
    """Install the root handler; DEBUG shows every upstream request."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
    )
    # httpx logs every request at INFO, which duplicates our own lines
    logging.getLogger("httpx").setLevel(logging.WARNING)
