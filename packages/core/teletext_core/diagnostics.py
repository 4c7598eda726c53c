"""Doctor payload and offline support bundles."""

from __future__ import annotations

import json
import platform
import re
import tempfile
import zipfile
from collections import Counter
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from .config import AppConfig, config_path
from .logging_setup import log_dir

REDACTED = "***REDACTED***"
PAGE_TURN_BUDGET_MS = 500

_SECRET_RE = re.compile(r"(token|secret|password|apikey|api_key|auth)", re.IGNORECASE)


def _jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return asdict(value)
    return str(value)


def redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: REDACTED if _SECRET_RE.search(str(k)) else redact(v) for k, v in value.items()}
    if isinstance(value, list):
        return [redact(v) for v in value]
    return value


def summarize_events(events: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """Count sequencer events and flag page turns slower than the budget."""
    counts: Counter[str] = Counter()
    latencies: list[int] = []
    for row in events:
        counts[str(row.get("event", "unknown"))] += 1
        if row.get("event") == "displaying" and isinstance(row.get("latency_ms"), int):
            latencies.append(row["latency_ms"])

    return {
        "counts": dict(sorted(counts.items())),
        "page_turns": len(latencies),
        "max_latency_ms": max(latencies, default=None),
        "slow_page_turns": sum(1 for ms in latencies if ms > PAGE_TURN_BUDGET_MS),
        "fetch_failures": counts.get("fetch_failed", 0),
    }


def build_doctor_payload(cfg: AppConfig, pages: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    return {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "config": redact(asdict(cfg)),
        "config_path": str(config_path()),
        "log_dir": str(log_dir()),
        "pages": list(pages or []),
    }


class DiagnosticsExporter:
    def __init__(self, app_name: str = "TeletextZero") -> None:
        self.app_name = app_name

    def bundle(
        self,
        cfg: AppConfig,
        doctor_payload: dict[str, Any],
        recent_events: list[dict[str, Any]] | None = None,
        output_dir: Path | None = None,
    ) -> Path:
        events = list(recent_events or [])
        output_base = output_dir or Path(tempfile.gettempdir())
        output_base.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        zip_path = output_base / f"teletext-diagnostics-{stamp}.zip"

        logs_root = log_dir()
        logs = sorted(logs_root.glob("*.log*")) if logs_root.exists() else []

        manifest = {
            "app": self.app_name,
            "created_utc": datetime.now(timezone.utc).isoformat(),
            "config_path": str(config_path()),
            "log_files": [item.name for item in logs],
            "events": summarize_events(events),
        }

        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            zf.writestr("manifest.json", json.dumps(manifest, indent=2, sort_keys=True))
            zf.writestr("doctor.json", json.dumps(redact(doctor_payload), indent=2, sort_keys=True, default=_jsonable))
            zf.writestr("config.redacted.json", json.dumps(redact(asdict(cfg)), indent=2, sort_keys=True))
            zf.writestr("sequencer_events.json", json.dumps(redact(events), indent=2, sort_keys=True, default=_jsonable))
            for item in logs:
                zf.write(item, arcname=f"logs/{item.name}")

        return zip_path
