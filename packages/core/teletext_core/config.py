"""Persistent app settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from teletext_renderer.grid import GRID

CONFIG_VERSION = 2
HEADER_RESERVED = 12  # "P###" token plus "HH:MM:SS"


@dataclass
class TimingConfig:
    boot_ms: int = 1000
    clearing_ms: int = 100


@dataclass
class NavigationConfig:
    initial_page: int = 100
    index_page: int = 100


@dataclass
class ContentConfig:
    cache_ttl_s: int = 300
    fetch_timeout_s: int = 10
    rss_proxy_url: str = "https://api.rss2json.com/v1/api.json"


@dataclass
class WeatherConfig:
    latitude: float = 51.5074
    longitude: float = -0.1278
    city: str | None = "LONDON"


@dataclass
class UiConfig:
    page_name: str = "TELETEXT ZERO"
    scale: int = 2
    show_buffer: bool = True


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    timing: TimingConfig = field(default_factory=TimingConfig)
    navigation: NavigationConfig = field(default_factory=NavigationConfig)
    content: ContentConfig = field(default_factory=ContentConfig)
    weather: WeatherConfig = field(default_factory=WeatherConfig)
    ui: UiConfig = field(default_factory=UiConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "TeletextZero"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "TeletextZero"
    return Path.home() / ".config" / "teletext-zero"


def config_path() -> Path:
    override = os.environ.get("TELETEXT_CONFIG", "").strip()
    if override:
        return Path(override).expanduser()
    return config_root() / "config.json"


def _merge(dataclass_type, raw: Any):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _clamp_int(value: Any, low: int, high: int, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(low, min(high, number))


def _normalize_timing(cfg: AppConfig) -> None:
    cfg.timing.boot_ms = _clamp_int(cfg.timing.boot_ms, 1000, 10_000, 1000)
    cfg.timing.clearing_ms = _clamp_int(cfg.timing.clearing_ms, 0, 500, 100)


def _normalize_navigation(cfg: AppConfig) -> None:
    cfg.navigation.initial_page = _clamp_int(cfg.navigation.initial_page, 0, 999, 100)
    cfg.navigation.index_page = _clamp_int(cfg.navigation.index_page, 0, 999, 100)


def _normalize_content(cfg: AppConfig) -> None:
    cfg.content.cache_ttl_s = _clamp_int(cfg.content.cache_ttl_s, 0, 86_400, 300)
    cfg.content.fetch_timeout_s = _clamp_int(cfg.content.fetch_timeout_s, 1, 120, 10)


def _normalize_weather(cfg: AppConfig) -> None:
    try:
        cfg.weather.latitude = float(max(-90.0, min(90.0, float(cfg.weather.latitude))))
        cfg.weather.longitude = float(max(-180.0, min(180.0, float(cfg.weather.longitude))))
    except (TypeError, ValueError):
        cfg.weather = WeatherConfig()
    if cfg.weather.city is not None:
        cfg.weather.city = str(cfg.weather.city).strip().upper() or None


def _normalize_ui(cfg: AppConfig) -> None:
    name = str(cfg.ui.page_name or "TELETEXT ZERO")
    cfg.ui.page_name = name[: GRID.columns - HEADER_RESERVED]
    cfg.ui.scale = _clamp_int(cfg.ui.scale, 1, 6, 2)
    cfg.ui.show_buffer = bool(cfg.ui.show_buffer)


def _migrate(raw: dict[str, Any]) -> dict[str, Any]:
    version = int(raw.get("config_version", 1))
    data = dict(raw)

    if version < 2:
        # v1 kept both timers and the page name in one flat "screen" section.
        screen = dict(data.pop("screen", {}) or {})
        timing = dict(data.get("timing", {}) or {})
        ui = dict(data.get("ui", {}) or {})
        if "boot_ms" in screen:
            timing.setdefault("boot_ms", screen["boot_ms"])
        if "clearing_ms" in screen:
            timing.setdefault("clearing_ms", screen["clearing_ms"])
        if "page_name" in screen:
            ui.setdefault("page_name", screen["page_name"])
        data["timing"] = timing
        data["ui"] = ui
        data.setdefault("weather", {})
        data.setdefault("diagnostics", {})
        data["config_version"] = 2

    return data


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except Exception:
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()

    data = _migrate(raw)
    cfg = AppConfig(
        config_version=int(data.get("config_version", CONFIG_VERSION)),
        timing=_merge(TimingConfig, data.get("timing", {})),
        navigation=_merge(NavigationConfig, data.get("navigation", {})),
        content=_merge(ContentConfig, data.get("content", {})),
        weather=_merge(WeatherConfig, data.get("weather", {})),
        ui=_merge(UiConfig, data.get("ui", {})),
        diagnostics=_merge(DiagnosticsConfig, data.get("diagnostics", {})),
    )

    _normalize_timing(cfg)
    _normalize_navigation(cfg)
    _normalize_content(cfg)
    _normalize_weather(cfg)
    _normalize_ui(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
