"""
glacierkiosk: Kiosk display of Swiss glacier mass-balance series with NiceGUI.

This package provides:
- Parsers for the cumulative and daily-detail mass-balance feeds
- RevealController: the timed EMPTY -> BUILDING -> COMPLETE -> TRANSITIONING cycle
- Presentation helpers that mask unrevealed points and build Plotly figures
- A standalone kiosk app (glacierkiosk.kiosk_app)

For logging configuration in standalone scripts/demos:
    ```python
    from glacierkiosk.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```

When used as a library, logging is handled by the parent application's
configuration.
"""

import logging

from glacierkiosk.utils.logging import configure_logging, get_logger

from glacierkiosk.context import KioskContext
from glacierkiosk.reveal import ActiveView, RevealController, RevealPhase, RevealState, RevealTiming
from glacierkiosk.series import CumulativePoint, DetailPoint, parse_cumulative, parse_detail

# Ensure glacierkiosk logger has NullHandler so logs don't propagate to root
# when no application has configured logging.
_logger = logging.getLogger("glacierkiosk")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "ActiveView",
    "CumulativePoint",
    "DetailPoint",
    "KioskContext",
    "RevealController",
    "RevealPhase",
    "RevealState",
    "RevealTiming",
    "configure_logging",
    "get_logger",
    "parse_cumulative",
    "parse_detail",
]

__version__ = "0.1.0"
