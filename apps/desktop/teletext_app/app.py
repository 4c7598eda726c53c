"""Desktop window: a QWidget that paints the teletext grid."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Callable

from PySide6.QtCore import QElapsedTimer, QObject, QRect, Qt, QTimer, Signal
from PySide6.QtGui import QColor, QFont, QKeyEvent, QPainter
from PySide6.QtWidgets import QApplication, QWidget

from teletext_content import ContentResolver, PageRegistry
from teletext_core import (
    AppConfig,
    DiagnosticsExporter,
    NavigationStateMachine,
    ScreenSequencer,
    ScreenState,
    build_doctor_payload,
    load_config,
)
from teletext_core.logging_setup import configure_logging, get_logger, install_crash_hooks
from teletext_core.scheduler import TimerHandle
from teletext_renderer import GRID, RenderableGrid, RenderRequest, build_static_grid, hex_for, render_text
from teletext_renderer.painter import CELL_HEIGHT, CELL_WIDTH

NOISE_REFRESH_MS = 50
CLOCK_REFRESH_MS = 1000


class QtScheduler(QObject):
    """Scheduler backed by the Qt event loop of the thread that created it."""

    _dispatch = Signal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._elapsed = QElapsedTimer()
        self._elapsed.start()
        self._dispatch.connect(self._run_handle, Qt.ConnectionType.QueuedConnection)

    def now_ms(self) -> int:
        return int(self._elapsed.elapsed())

    def call_later(self, delay_ms: int, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        delay = max(0, int(delay_ms))
        handle = TimerHandle(self.now_ms() + delay, callback, args)
        QTimer.singleShot(delay, self, handle.run)
        return handle

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        handle = TimerHandle(self.now_ms(), callback, args)
        self._dispatch.emit(handle)
        return handle

    def _run_handle(self, handle: TimerHandle) -> None:
        handle.run()


class TeletextWindow(QWidget):
    def __init__(
        self,
        sequencer: ScreenSequencer,
        navigation: NavigationStateMachine,
        config: AppConfig,
    ) -> None:
        super().__init__()
        self.sequencer = sequencer
        self.navigation = navigation
        self.config = config
        self.logger = get_logger("app")
        self.diagnostics = DiagnosticsExporter()

        scale = config.ui.scale
        self.cell_width = CELL_WIDTH * scale
        self.cell_height = CELL_HEIGHT * scale
        self.setFixedSize(self.cell_width * GRID.columns, self.cell_height * GRID.rows)
        self.setWindowTitle(config.ui.page_name.title())
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        self._font = QFont("DejaVu Sans Mono")
        self._font.setStyleHint(QFont.StyleHint.Monospace)
        self._font.setPixelSize(int(self.cell_height * 0.8))

        self._noise: RenderableGrid = build_static_grid()
        self._request: RenderRequest | None = None

        self._noise_timer = QTimer(self)
        self._noise_timer.timeout.connect(self._refresh_noise)
        self._noise_timer.start(NOISE_REFRESH_MS)

        self._clock_timer = QTimer(self)
        self._clock_timer.timeout.connect(self._tick)
        self._clock_timer.start(CLOCK_REFRESH_MS)

        sequencer.subscribe_state(self._on_state)
        sequencer.subscribe_render(self._on_render)

    def _on_state(self, state: ScreenState) -> None:
        if state is ScreenState.BOOTING:
            self._noise_timer.start(NOISE_REFRESH_MS)
        else:
            self._noise_timer.stop()
        self.update()

    def _on_render(self, request: RenderRequest) -> None:
        self._request = request
        self.update()

    def _refresh_noise(self) -> None:
        self._noise = build_static_grid()
        self.update()

    def _tick(self) -> None:
        self.sequencer.refresh_header()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        if event.key() == Qt.Key.Key_Escape:
            self.navigation.clear_buffer()
        elif event.key() == Qt.Key.Key_F12:
            self.export_diagnostics()
        else:
            self.navigation.handle_key(event.text())
        self.update()

    def paintEvent(self, _event) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(hex_for("black")))
        painter.setFont(self._font)

        state = self.sequencer.state
        if state is ScreenState.BOOTING:
            colors = {(c.row, c.column): c.color for c in self._noise.colors}
            self._paint_rows(painter, list(self._noise.rows), colors)
        elif state is ScreenState.DISPLAYING and self._request is not None:
            buffer_text = self.navigation.buffer_display if self.config.ui.show_buffer else ""
            colors = {(c.row, c.column): c.color for c in self._request.formatted_grid.colors}
            self._paint_rows(painter, render_text(self._request, buffer_text), colors)
        painter.end()

    def _paint_rows(self, painter: QPainter, rows: list[str], colors: dict[tuple[int, int], str]) -> None:
        for index, text in enumerate(rows[: GRID.rows]):
            row = index + 1
            y = index * self.cell_height
            for col, char in enumerate(text[: GRID.columns]):
                if char == " ":
                    continue
                painter.setPen(QColor(hex_for(colors.get((row, col), "white"))))
                cell = QRect(col * self.cell_width, y, self.cell_width, self.cell_height)
                painter.drawText(cell, Qt.AlignmentFlag.AlignCenter, char)

    def export_diagnostics(self) -> Path:
        """Bundle the live sequencer event log with a doctor payload (F12)."""
        pages = PageRegistry(index_page=self.config.navigation.index_page).describe()
        zip_path = self.diagnostics.bundle(
            cfg=self.config,
            doctor_payload=build_doctor_payload(self.config, pages),
            recent_events=self.sequencer.recent_events(),
        )
        self.logger.info(f"diagnostics exported to {zip_path}", extra={"event": "diagnostics_exported"})
        return zip_path

    def shutdown(self) -> None:
        self._noise_timer.stop()
        self._clock_timer.stop()
        self.sequencer.stop()


def run_gui() -> int:
    cfg = load_config()
    configure_logging(keep_files=cfg.diagnostics.keep_log_files)
    install_crash_hooks()
    logger = get_logger()

    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")
    QApplication.setHighDpiScaleFactorRoundingPolicy(Qt.HighDpiScaleFactorRoundingPolicy.PassThrough)

    app = QApplication(sys.argv)
    app.setApplicationName("Teletext Zero")

    navigation = NavigationStateMachine(initial_page=cfg.navigation.initial_page)
    scheduler = QtScheduler()
    sequencer = ScreenSequencer.from_config(cfg, navigation, ContentResolver.from_config(cfg), scheduler)

    window = TeletextWindow(sequencer, navigation, cfg)
    window.show()
    sequencer.start()
    logger.info("app started", extra={"event": "startup", "page_number": cfg.navigation.initial_page})

    exit_code = app.exec()
    window.shutdown()
    logger.info("app shutdown", extra={"event": "shutdown"})
    return int(exit_code)
