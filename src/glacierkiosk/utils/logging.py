"""
Logging utilities for the glacierkiosk package.

Library Logging Conventions
---------------------------
1. **Library code never calls configure_logging()** - it only uses get_logger(__name__).
2. **The kiosk app (or a script) calls configure_logging()** to get console output.
3. When glacierkiosk is embedded in another application that already configured
   logging, all glacierkiosk logs go to that application's handlers.

glacierkiosk does NOT write any log files.

Example Usage
-------------
In library code (parser.py, controller.py, etc.):
    ```python
    from glacierkiosk.utils.logging import get_logger
    logger = get_logger(__name__)
    logger.debug("skipped %d malformed row(s)", n)
    ```

In the kiosk app:
    ```python
    from glacierkiosk.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

LOGGER_NAME = "glacierkiosk"

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Configure logging for the glacierkiosk logger only (never root).

    Parameters
    ----------
    level:
        Logging level (e.g. "DEBUG", "INFO"). Defaults to the GLACIERKIOSK_LOG_LEVEL
        env var, or "INFO" if unset.
    fmt:
        Log message format. Defaults to DEFAULT_FMT.
    datefmt:
        Date format. Defaults to "%Y-%m-%d %H:%M:%S".
    force:
        If True, remove existing handlers before adding a new one. If False,
        return early when a stderr handler is already attached.
    """
    if level is None:
        level = os.environ.get("GLACIERKIOSK_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    formatter = logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT)

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
    else:
        for h in logger.handlers:
            if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr:
                return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger by name.

    If name is None, returns the 'glacierkiosk' logger.
    Otherwise, returns logging.getLogger(name).
    """
    if name is None:
        name = LOGGER_NAME
    return logging.getLogger(name)
