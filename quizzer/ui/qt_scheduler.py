"""``Scheduler`` implementation backed by single-shot ``QTimer`` objects."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QObject, QTimer


class QtScheduledCall:
    """Pending callback; cancelling stops the timer so the callback never runs."""

    def __init__(self, timer: QTimer) -> None:
        self._timer: QTimer | None = timer

    def cancel(self) -> None:
        if self._timer is None:
            return
        self._timer.stop()
        self._timer.deleteLater()
        self._timer = None

    def _finish(self) -> None:
        if self._timer is not None:
            self._timer.deleteLater()
            self._timer = None


class QtScheduler:
    """Runs callbacks on the Qt event loop after a delay in seconds."""

    def __init__(self, parent: QObject) -> None:
        self._parent = parent

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> QtScheduledCall:
        timer = QTimer(self._parent)
        timer.setSingleShot(True)
        timer.setInterval(max(0, int(delay_seconds * 1000)))
        handle = QtScheduledCall(timer)

        def fire() -> None:
            handle._finish()
            callback()

        timer.timeout.connect(fire)
        timer.start()
        return handle
