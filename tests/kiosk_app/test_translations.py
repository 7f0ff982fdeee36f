"""Tests for kiosk UI strings."""

from __future__ import annotations

from glacierkiosk.kiosk_app.translations import TRANSLATIONS, translate


def test_languages_share_keys() -> None:
    assert set(TRANSLATIONS["de"]) == set(TRANSLATIONS["en"])


def test_translate() -> None:
    assert translate("en", "average") == "Average"
    assert translate("de", "average") == "Durchschnitt"


def test_translate_fallbacks() -> None:
    assert translate("fr", "average") == "Durchschnitt"
    assert translate("en", "no_such_key") == "no_such_key"


def test_language_toggle_label_names_other_language() -> None:
    assert translate("de", "language_toggle") == "EN"
    assert translate("en", "language_toggle") == "DE"
