"""Glacier kiosk app: standalone NiceGUI application cycling the two mass-balance views.

Serves one @ui.page("/") in the browser, or as a full-screen native window.

Run:
    uv run python -m glacierkiosk.kiosk_app.kiosk_app

Env vars:
    GLACIERKIOSK_NATIVE: 1/0 (default 0)
    GLACIERKIOSK_RELOAD: 1/0 (default 0)
    GLACIERKIOSK_CONFIG: path to a kiosk_config.json (default: per-user config dir)
    HOST: bind host (default 127.0.0.1 native, 0.0.0.0 web)
    PORT: bind port (default 8080)
"""

from __future__ import annotations

import os
from pathlib import Path

from nicegui import ui

from glacierkiosk.context import KioskContext
from glacierkiosk.kiosk_app.header import build_kiosk_header
from glacierkiosk.kiosk_app.kiosk_config import KioskConfigStore
from glacierkiosk.kiosk_app.kiosk_view import KioskView
from glacierkiosk.kiosk_app.session import KioskSession
from glacierkiosk.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

PAGE_TITLE = "Glacier Mass Balance"
BACKGROUND_STYLE = "background: linear-gradient(to bottom, #1E3B8A, #1a1a2e);"


def _env_bool(name: str, default: bool) -> bool:
    """Parse env var as bool; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    """Parse env var as int; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def load_config() -> KioskConfigStore:
    raw = os.getenv("GLACIERKIOSK_CONFIG")
    return KioskConfigStore.load(config_path=Path(raw) if raw else None)


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

@ui.page("/")
def home() -> None:
    """Kiosk page: header, title, animated chart and last-update line."""
    ui.page_title(PAGE_TITLE)
    ui.query("body").style(BACKGROUND_STYLE)

    config = load_config().data
    context = KioskContext(language=config.language)
    view = KioskView(context, theme=config.theme, year_range=config.get_year_range())
    session = KioskSession(config, context=context, view=view)

    build_kiosk_header(language=session.context.language, on_toggle_language=session.toggle_language)

    with ui.column().classes("w-full h-screen items-center justify-center gap-4 p-4"):
        view.build()

    ui.context.client.on_disconnect(session.shutdown)
    session.start()


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(*, reload: bool | None = None, native_bool: bool | None = None) -> None:
    """Start the kiosk; arguments override GLACIERKIOSK_RELOAD / GLACIERKIOSK_NATIVE."""
    configure_logging()

    native = _env_bool("GLACIERKIOSK_NATIVE", False) if native_bool is None else native_bool
    reload = _env_bool("GLACIERKIOSK_RELOAD", False) if reload is None else reload
    host = os.getenv("HOST", "127.0.0.1" if native else "0.0.0.0")
    port = _env_int("PORT", 8080)

    logger.info("Starting glacier kiosk: host=%s port=%s reload=%s native=%s", host, port, reload, native)
    if native:
        # full-screen desktop window instead of a browser tab
        ui.run(host=host, port=port, reload=reload, native=True, title=PAGE_TITLE, dark=True,
               window_size=(1920, 1080), fullscreen=True)
    else:
        ui.run(host=host, port=port, reload=reload, title=PAGE_TITLE, dark=True)


# ui.run skips startup by itself in the native window process; the reloader
# imports this module as __mp_main__
if __name__ in {"__main__", "__mp_main__"}:
    main()
