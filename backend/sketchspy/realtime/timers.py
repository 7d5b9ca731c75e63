from __future__ import annotations

import logging
from collections.abc import Callable

from flask_socketio import SocketIO


logger = logging.getLogger(__name__)


class ScheduledTask:
    def __init__(self, name: str, delay_sec: float) -> None:
        self.name = name
        self.delay_sec = delay_sec
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __repr__(self) -> str:
        return f"<ScheduledTask {self.name} delay={self.delay_sec}s cancelled={self.cancelled}>"


class SocketIOScheduler:
    """Runs delayed callbacks as Socket.IO background tasks.

    The callback receives its own task so it can check it is still the
    one its room is waiting on.
    """

    def __init__(self, socketio: SocketIO) -> None:
        self._socketio = socketio

    def schedule(self, name: str, delay_sec: float, callback: Callable[[ScheduledTask], None]) -> ScheduledTask:
        task = ScheduledTask(name, delay_sec)

        def _worker() -> None:
            self._socketio.sleep(delay_sec)
            if task.cancelled:
                logger.debug(f"[timer-cancelled] {task!r}")
                return
            try:
                callback(task)
            except Exception:
                logger.exception(f"[timer-error] {task!r}")

        self._socketio.start_background_task(_worker)
        return task
