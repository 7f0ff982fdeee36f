"""
Kiosk config persistence (platformdirs + JSON).

Persisted items (schema v1):
- feed URLs, year range and cumulative layout
- reveal timing (RevealTiming dict)
- first view, language, theme
- refresh / retry intervals and HTTP timeout

Behavior:
- If config file missing or unreadable -> defaults are used
- If schema_version mismatches:
  - default: reset to defaults
  - optional: keep loaded but update version
- Unknown keys in loaded JSON are ignored with warnings

Design:
- KioskConfigData dataclass holds JSON-friendly data
- KioskConfigStore manager provides explicit API for load/save
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

from glacierkiosk.feeds.fetch import DEFAULT_CUMULATIVE_URL, DEFAULT_DETAIL_URL
from glacierkiosk.reveal.state import ActiveView
from glacierkiosk.reveal.timing import RevealTiming
from glacierkiosk.series.parser import DEFAULT_YEAR_RANGE
from glacierkiosk.utils.logging import get_logger

logger = get_logger(__name__)

# Increment when you make a breaking change to the on-disk JSON schema.
SCHEMA_VERSION: int = 1

_LAYOUTS = ("auto", "wide", "long")
_LANGUAGES = ("de", "en")


@dataclass
class KioskConfigData:
    """
    JSON-serializable kiosk configuration.

    Keep fields JSON-friendly: primitives, lists, dicts.
    """
    schema_version: int = SCHEMA_VERSION
    cumulative_url: str = DEFAULT_CUMULATIVE_URL
    detail_url: str = DEFAULT_DETAIL_URL
    year_range: list[int] = field(default_factory=lambda: list(DEFAULT_YEAR_RANGE))
    cumulative_layout: str = "auto"
    timing: Dict[str, Any] = field(default_factory=lambda: RevealTiming().to_dict())
    first_view: str = ActiveView.CUMULATIVE.value
    language: str = "de"
    theme: str = "dark"
    refresh_interval_s: float = 24 * 60 * 60
    retry_delay_s: float = 30.0
    http_timeout_s: float = 30.0

    def to_json_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "schema_version": self.schema_version,
            "cumulative_url": self.cumulative_url,
            "detail_url": self.detail_url,
            "year_range": list(self.year_range),
            "cumulative_layout": self.cumulative_layout,
            "timing": dict(self.timing),
            "first_view": self.first_view,
            "language": self.language,
            "theme": self.theme,
            "refresh_interval_s": self.refresh_interval_s,
            "retry_delay_s": self.retry_delay_s,
            "http_timeout_s": self.http_timeout_s,
        }

    @classmethod
    def from_json_dict(cls, d: Dict[str, Any]) -> "KioskConfigData":
        """
        Tolerant loader:
        - ignores unknown keys
        - tolerates missing or invalid values (falls back to defaults)
        """
        default = cls()

        year_range = default.year_range
        raw_range = d.get("year_range")
        if isinstance(raw_range, list) and len(raw_range) == 2:
            try:
                lo, hi = int(raw_range[0]), int(raw_range[1])
                if lo <= hi:
                    year_range = [lo, hi]
                else:
                    logger.warning(f"year_range {raw_range} is reversed, using default")
            except (TypeError, ValueError):
                logger.warning(f"year_range {raw_range} is not numeric, using default")

        layout = str(d.get("cumulative_layout", default.cumulative_layout))
        if layout not in _LAYOUTS:
            logger.warning(f"Unknown cumulative_layout '{layout}', using 'auto'")
            layout = "auto"

        timing = default.timing
        if isinstance(d.get("timing"), dict):
            try:
                timing = RevealTiming.from_dict(d["timing"]).to_dict()
            except (TypeError, ValueError) as e:
                logger.warning(f"Invalid timing in kiosk config: {e}, using defaults")

        first_view = str(d.get("first_view", default.first_view))
        if first_view not in {v.value for v in ActiveView}:
            logger.warning(f"Unknown first_view '{first_view}', using '{default.first_view}'")
            first_view = default.first_view

        language = str(d.get("language", default.language))
        if language not in _LANGUAGES:
            language = default.language

        def _float(key: str, fallback: float) -> float:
            try:
                v = float(d.get(key, fallback))
            except (TypeError, ValueError):
                return fallback
            return v if v > 0 else fallback

        known_keys = set(default.to_json_dict())
        for key in d.keys():
            if key not in known_keys:
                logger.warning(f"Unknown key '{key}' in kiosk config, ignoring")

        try:
            schema_version = int(d.get("schema_version", -1))
        except (TypeError, ValueError):
            schema_version = -1

        return cls(
            schema_version=schema_version,
            cumulative_url=str(d.get("cumulative_url", default.cumulative_url)),
            detail_url=str(d.get("detail_url", default.detail_url)),
            year_range=year_range,
            cumulative_layout=layout,
            timing=timing,
            first_view=first_view,
            language=language,
            theme=str(d.get("theme", default.theme)),
            refresh_interval_s=_float("refresh_interval_s", default.refresh_interval_s),
            retry_delay_s=_float("retry_delay_s", default.retry_delay_s),
            http_timeout_s=_float("http_timeout_s", default.http_timeout_s),
        )

    # typed accessors
    def get_year_range(self) -> tuple[int, int]:
        return int(self.year_range[0]), int(self.year_range[1])

    def get_timing(self) -> RevealTiming:
        return RevealTiming.from_dict(self.timing)

    def get_first_view(self) -> ActiveView:
        return ActiveView(self.first_view)


class KioskConfigStore:
    """
    Manager for loading/saving KioskConfigData to disk.
    """

    def __init__(self, *, path: Path, data: Optional[KioskConfigData] = None):
        self.path = path
        self.data = data if data is not None else KioskConfigData()

    @staticmethod
    def default_config_path(
        app_name: str = "glacierkiosk",
        filename: str = "kiosk_config.json",
        app_author: str | None = None,
    ) -> Path:
        """
        Determine OS-appropriate per-user config path.

        macOS:   ~/Library/Application Support/glacierkiosk/kiosk_config.json
        Linux:   ~/.config/glacierkiosk/kiosk_config.json
        Windows: %APPDATA%\\glacierkiosk\\kiosk_config.json
        """
        return Path(user_config_dir(app_name, app_author)) / filename

    @classmethod
    def load(
        cls,
        *,
        config_path: Optional[Path] = None,
        schema_version: int = SCHEMA_VERSION,
        reset_on_version_mismatch: bool = True,
        create_if_missing: bool = False,
    ) -> "KioskConfigStore":
        """
        Load config from disk.

        If file doesn't exist or is unreadable -> defaults.
        If schema mismatch:
          - reset_on_version_mismatch=True -> defaults
          - else -> keep loaded but overwrite schema_version

        If create_if_missing=True and file is missing -> immediately write defaults.
        """
        path = config_path or cls.default_config_path()
        default_data = KioskConfigData(schema_version=schema_version)

        try:
            parsed = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(parsed, dict):
                logger.warning(f"Kiosk config file at {path} does not contain a dict, using defaults")
                return cls(path=path, data=default_data)

            loaded = KioskConfigData.from_json_dict(parsed)

            if int(loaded.schema_version) != int(schema_version):
                if reset_on_version_mismatch:
                    logger.warning(
                        f"Kiosk config schema version mismatch: loaded={loaded.schema_version}, "
                        f"expected={schema_version}, resetting to defaults"
                    )
                    return cls(path=path, data=default_data)
                loaded.schema_version = int(schema_version)

            return cls(path=path, data=loaded)
        except FileNotFoundError:
            logger.debug(f"Kiosk config file not found at {path}, using defaults")
            cfg = cls(path=path, data=default_data)
            if create_if_missing:
                cfg.save()
            return cfg
        except json.JSONDecodeError as e:
            logger.warning(f"Kiosk config file at {path} is not valid JSON: {e}, using defaults")
            return cls(path=path, data=default_data)
        except OSError as e:
            logger.warning(f"Error reading kiosk config from {path}: {e}, using defaults")
            return cls(path=path, data=default_data)

    def save(self) -> None:
        """Write config to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self.data.to_json_dict(), indent=2), encoding="utf-8")
            logger.info(f"Saved kiosk config to {self.path}")
        except OSError as e:
            logger.error(f"Error saving kiosk config to {self.path}: {e}")
            raise
