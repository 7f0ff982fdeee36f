"""UI strings for the kiosk (German and English)."""

from __future__ import annotations

DEFAULT_LANGUAGE = "de"

TRANSLATIONS: dict[str, dict[str, str]] = {
    "de": {
        "title": "Kumulative Massenbilanz gemittelt über 12 gemessene Gletscher in den Schweizer Alpen",
        "title_detail": "Realtime Massenbilanz gemittelt über 12 gemessene Gletscher in den Schweizer Alpen",
        "y_axis": "Kumulative Massenbilanz (m w.e.)",
        "x_axis_cumulative": "Hydrologisches Jahr",
        "x_axis_detail": "Tag des hydrologischen Jahres",
        "last_update": "Letztes Update:",
        "current_value": "Aktueller Wert",
        "average": "Durchschnitt",
        "stdev": "Standardabweichung",
        "loading": "Daten werden geladen...",
        "error": "Fehler beim Laden der Daten. Neuer Versuch folgt...",
        "language_toggle": "EN",
    },
    "en": {
        "title": "Cumulative Mass Balance averaged over 12 measured glaciers in the Swiss Alps",
        "title_detail": "Real-time Mass Balance averaged over 12 measured glaciers in the Swiss Alps",
        "y_axis": "Cumulative Mass Balance (m w.e.)",
        "x_axis_cumulative": "Hydrological Year",
        "x_axis_detail": "Day of hydrological year",
        "last_update": "Last update:",
        "current_value": "Current value",
        "average": "Average",
        "stdev": "Standard deviation",
        "loading": "Loading data...",
        "error": "Failed to load data. Retrying...",
        "language_toggle": "DE",
    },
}


def translate(language: str, key: str) -> str:
    """Look up ``key`` for ``language``; fall back to German, then to the key itself."""
    table = TRANSLATIONS.get(language, TRANSLATIONS[DEFAULT_LANGUAGE])
    if key in table:
        return table[key]
    return TRANSLATIONS[DEFAULT_LANGUAGE].get(key, key)
