"""CLI entrypoints for the Teletext Zero desktop app, headless rendering and diagnostics."""

from __future__ import annotations

import argparse
import json
import random
from pathlib import Path

from teletext_content import ContentResolver, PageRegistry
from teletext_core import (
    AppConfig,
    DiagnosticsExporter,
    InlineExecutor,
    ManualScheduler,
    NavigationStateMachine,
    ScreenSequencer,
    build_doctor_payload,
    load_config,
    summarize_events,
)
from teletext_core.logging_setup import configure_logging
from teletext_renderer import RenderRequest, build_static_grid, render_text


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _print_frame(lines: list[str]) -> None:
    border = "+" + "-" * len(lines[0]) + "+"
    print(border)
    for line in lines:
        print(f"|{line}|")
    print(border)


class HeadlessSession:
    """Navigation and sequencer wired to a virtual clock and inline fetches."""

    def __init__(self, cfg: AppConfig, initial_page: int | None = None, network: bool = True) -> None:
        page = cfg.navigation.initial_page if initial_page is None else initial_page
        self.navigation = NavigationStateMachine(initial_page=page)
        self.scheduler = ManualScheduler()
        self.sequencer = ScreenSequencer.from_config(
            cfg,
            self.navigation,
            ContentResolver.from_config(cfg, network=network),
            self.scheduler,
            executor=InlineExecutor(),
        )
        self.frames: list[tuple[int, RenderRequest]] = []
        self.sequencer.subscribe_render(lambda request: self.frames.append((self.scheduler.now_ms(), request)))

    def boot(self) -> RenderRequest | None:
        self.sequencer.start()
        self.scheduler.run_until_idle()
        return self.sequencer.last_render

    def type_keys(self, keys: str, interval_ms: int) -> None:
        for key in keys:
            self.navigation.handle_key(key)
            self.scheduler.advance(interval_ms)
        self.scheduler.run_until_idle()

    def close(self) -> None:
        self.sequencer.stop()


def cmd_run(_args: argparse.Namespace) -> int:
    from .app import run_gui

    return run_gui()


def cmd_render(args: argparse.Namespace) -> int:
    session = HeadlessSession(load_config(), initial_page=args.page, network=not args.no_network)
    try:
        request = session.boot()
    finally:
        session.close()
    if request is None:
        return 2
    print("\n".join(render_text(request)))
    return 0


def cmd_snapshot(args: argparse.Namespace) -> int:
    from teletext_renderer.painter import GridPainter

    cfg = load_config()
    painter = GridPainter(scale=args.scale or cfg.ui.scale)
    out_path = Path(args.out).expanduser().resolve()
    if args.booting:
        out = painter.save_static_png(build_static_grid(random.Random(args.seed)), out_path)
        _print_json({"state": "booting", "path": str(out), "size": [painter.width, painter.height]})
        return 0

    session = HeadlessSession(cfg, initial_page=args.page, network=not args.no_network)
    try:
        request = session.boot()
    finally:
        session.close()
    if request is None:
        return 2

    out = painter.save_png(request, out_path)
    _print_json({"page_number": request.page_number, "path": str(out), "size": [painter.width, painter.height]})
    return 0


def cmd_simulate(args: argparse.Namespace) -> int:
    cfg = load_config()
    session = HeadlessSession(cfg, network=not args.no_network)
    try:
        session.boot()
        session.type_keys(args.keys, args.interval_ms)
        events = session.sequencer.recent_events()
    finally:
        session.close()

    for t_ms, request in session.frames:
        print(f"t={t_ms}ms page={request.page_number} title={request.title}")
        _print_frame(render_text(request))
    if args.events:
        _print_json({"events": events, "summary": summarize_events(events)})
    if args.export:
        out_dir = Path(args.out_dir).expanduser().resolve() if args.out_dir else None
        payload = build_doctor_payload(cfg, PageRegistry(index_page=cfg.navigation.index_page).describe())
        bundle = DiagnosticsExporter().bundle(cfg=cfg, doctor_payload=payload, recent_events=events, output_dir=out_dir)
        _print_json({"diagnostics_bundle": str(bundle), "event_count": len(events)})
    return 0 if session.frames else 2


def cmd_pages(_args: argparse.Namespace) -> int:
    cfg = load_config()
    _print_json(PageRegistry(index_page=cfg.navigation.index_page).describe())
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    cfg = load_config()
    payload = build_doctor_payload(cfg, PageRegistry(index_page=cfg.navigation.index_page).describe())

    if args.export:
        exporter = DiagnosticsExporter()
        out_dir = Path(args.out_dir).expanduser().resolve() if args.out_dir else None
        bundle = exporter.bundle(cfg=cfg, doctor_payload=payload, output_dir=out_dir)
        payload["diagnostics_bundle"] = str(bundle)

    _print_json(payload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="teletext", description="Teletext Zero terminal emulator and tools")
    parser.add_argument("--log-level", default=None, help="Log level name, e.g. DEBUG (default: $TELETEXT_LOG_LEVEL or INFO)")
    sub = parser.add_subparsers(dest="command", required=True)

    run_cmd = sub.add_parser("run", help="Run desktop app")
    run_cmd.set_defaults(func=cmd_run)

    render_cmd = sub.add_parser("render", help="Print one page as 24 rows of text")
    render_cmd.add_argument("--page", type=int, required=True)
    render_cmd.add_argument("--no-network", action="store_true", help="Fail feed fetches instead of calling out")
    render_cmd.set_defaults(func=cmd_render)

    snap_cmd = sub.add_parser("snapshot", help="Save one page as a PNG image")
    snap_target = snap_cmd.add_mutually_exclusive_group(required=True)
    snap_target.add_argument("--page", type=int)
    snap_target.add_argument("--booting", action="store_true", help="Paint the static noise shown while booting")
    snap_cmd.add_argument("--out", required=True, help="Output PNG path")
    snap_cmd.add_argument("--scale", type=int, default=None, choices=range(1, 7), metavar="1-6")
    snap_cmd.add_argument("--no-network", action="store_true", help="Fail feed fetches instead of calling out")
    snap_cmd.add_argument("--seed", type=int, default=None, help="Noise seed for --booting")
    snap_cmd.set_defaults(func=cmd_snapshot)

    sim_cmd = sub.add_parser("simulate", help="Boot, type keys on a virtual clock and print every frame")
    sim_cmd.add_argument("--keys", default="", help="Key presses, e.g. 300201")
    sim_cmd.add_argument("--interval-ms", type=int, default=50, help="Virtual time between key presses")
    sim_cmd.add_argument("--no-network", action="store_true", help="Fail feed fetches instead of calling out")
    sim_cmd.add_argument("--events", action="store_true", help="Also print the sequencer event log")
    sim_cmd.add_argument("--export", action="store_true", help="Bundle the run's sequencer events into a diagnostics zip")
    sim_cmd.add_argument("--out-dir", default=None, help="Optional output directory for diagnostics bundle")
    sim_cmd.set_defaults(func=cmd_simulate)

    pages_cmd = sub.add_parser("pages", help="List registered pages")
    pages_cmd.set_defaults(func=cmd_pages)

    doctor_cmd = sub.add_parser("doctor", help="Print diagnostics")
    doctor_cmd.add_argument("--export", action="store_true", help="Export offline diagnostics bundle")
    doctor_cmd.add_argument("--out-dir", default=None, help="Optional output directory for diagnostics bundle")
    doctor_cmd.set_defaults(func=cmd_doctor)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(keep_files=load_config().diagnostics.keep_log_files, console=False, level=args.log_level)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
