"""Core services: navigation, screen sequencing, scheduling, settings and diagnostics."""

from .config import AppConfig, load_config, save_config
from .diagnostics import DiagnosticsExporter, build_doctor_payload, summarize_events
from .models import KeyClass, PageChangeEvent, PageSource, ResolvedPage, ScreenState
from .navigation import NavigationStateMachine, classify_key
from .scheduler import InlineExecutor, ManualScheduler, Scheduler, TimerHandle
from .sequencer import ScreenSequencer, fetch_failed_content, loading_content

__all__ = [
    "AppConfig",
    "DiagnosticsExporter",
    "InlineExecutor",
    "KeyClass",
    "ManualScheduler",
    "NavigationStateMachine",
    "PageChangeEvent",
    "PageSource",
    "ResolvedPage",
    "Scheduler",
    "ScreenSequencer",
    "ScreenState",
    "TimerHandle",
    "build_doctor_payload",
    "classify_key",
    "fetch_failed_content",
    "load_config",
    "loading_content",
    "save_config",
    "summarize_events",
]
