"""Persistent app settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


CONFIG_VERSION = 2


@dataclass
class RenderConfig:
    interval_ms: int = 33
    legacy_atanh: bool = False


@dataclass
class UiConfig:
    zoom: int = 1


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7


@dataclass
class PerformanceConfig:
    cpu_percent_max: float = 90.0
    rss_mb_max: float = 1024.0
    frame_budget_factor: float = 1.0


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    render: RenderConfig = field(default_factory=RenderConfig)
    ui: UiConfig = field(default_factory=UiConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "PicoRaster"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "PicoRaster"
    return Path.home() / ".config" / "picoraster"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_render(cfg: AppConfig) -> None:
    cfg.render.interval_ms = max(1, min(1000, int(cfg.render.interval_ms)))
    cfg.render.legacy_atanh = bool(cfg.render.legacy_atanh)


def _normalize_ui(cfg: AppConfig) -> None:
    cfg.ui.zoom = max(1, min(8, int(cfg.ui.zoom)))


def _normalize_performance(cfg: AppConfig) -> None:
    cfg.performance.cpu_percent_max = float(max(1.0, cfg.performance.cpu_percent_max))
    cfg.performance.rss_mb_max = float(max(64.0, cfg.performance.rss_mb_max))
    cfg.performance.frame_budget_factor = float(max(0.1, cfg.performance.frame_budget_factor))


def _migrate(raw: dict[str, Any]) -> dict[str, Any]:
    version = int(raw.get("config_version", 1))
    data = dict(raw)

    if version < 2:
        # v1 kept the frame interval at the top level as "fps".
        render = dict(data.get("render", {}) or {})
        fps = data.pop("fps", None)
        if fps:
            render.setdefault("interval_ms", int(round(1000 / float(fps))))
        data["render"] = render
        data.setdefault("performance", {})
        data["config_version"] = 2

    return data


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        data = _migrate(raw)
        cfg = AppConfig(
            config_version=int(data.get("config_version", CONFIG_VERSION)),
            render=_merge(RenderConfig, data.get("render", {})),
            ui=_merge(UiConfig, data.get("ui", {})),
            diagnostics=_merge(DiagnosticsConfig, data.get("diagnostics", {})),
            performance=_merge(PerformanceConfig, data.get("performance", {})),
        )
        _normalize_render(cfg)
        _normalize_ui(cfg)
        _normalize_performance(cfg)
    except Exception:
        return AppConfig()
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
