"""Standalone NiceGUI kiosk app cycling the cumulative and detail charts."""

from glacierkiosk.kiosk_app.kiosk_config import KioskConfigData, KioskConfigStore
from glacierkiosk.kiosk_app.session import KioskSession
from glacierkiosk.kiosk_app.translations import TRANSLATIONS, translate

__all__ = [
    "KioskConfigData",
    "KioskConfigStore",
    "KioskSession",
    "TRANSLATIONS",
    "translate",
]
