"""Header component for the kiosk page.

Provides build_kiosk_header() with the language toggle and a fullscreen toggle.
The fullscreen toggle is also bound to the "F" key.
"""

from __future__ import annotations

from typing import Callable

from nicegui import ui

from glacierkiosk.kiosk_app.translations import translate


def build_kiosk_header(
    *,
    language: str,
    on_toggle_language: Callable[[], str],
) -> ui.fullscreen:
    """Build a minimal header: language toggle and fullscreen button.

    Args:
        language: Language active when the page is built.
        on_toggle_language: Switches the language and returns the new code.

    Returns:
        Fullscreen controller for the page.
    """
    fullscreen = ui.fullscreen()

    def _toggle_language() -> None:
        new_language = on_toggle_language()
        lang_btn.text = translate(new_language, "language_toggle")

    def _on_key(e) -> None:
        key_name = str(getattr(getattr(e, "key", None), "name", "") or "")
        action = getattr(e, "action", None)
        if key_name.lower() == "f" and getattr(action, "keydown", False) and not getattr(action, "repeat", False):
            fullscreen.toggle()

    with ui.row().classes("w-full justify-end items-center gap-2 absolute top-2 right-2 z-20"):
        lang_btn = ui.button(
            translate(language, "language_toggle"),
            on_click=_toggle_language,
        ).props("flat dense text-color=white")
        ui.button(icon="fullscreen", on_click=fullscreen.toggle).props(
            "flat round dense text-color=white"
        ).tooltip("Fullscreen (F)")

    ui.keyboard(on_key=_on_key, ignore=["input", "select", "button", "textarea"])
    return fullscreen
