# FILE: backend/bizpage/editor/notifications.py
# PHOENIX PROTOCOL - TRANSIENT NOTIFICATIONS
# 1. The editor's toasts: bounded history, newest last, each one logged.

import structlog
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional

logger = structlog.get_logger(__name__)

@dataclass(frozen=True)
class Notification:
    level: str  # "success" | "error"
    message: str
    key: Optional[str] = None

class Notifier:
    def __init__(self, max_history: int = 50, on_notify: Optional[Callable[[Notification], None]] = None):
        self._history: Deque[Notification] = deque(maxlen=max_history)
        self._on_notify = on_notify

    @property
    def history(self) -> List[Notification]:
        return list(self._history)

    @property
    def last(self) -> Optional[Notification]:
        return self._history[-1] if self._history else None

    def success(self, message: str, key: Optional[str] = None) -> Notification:
        logger.info("editor.notify", level="success", key=key, text=message)
        return self._push(Notification("success", message, key))

    def error(self, message: str, key: Optional[str] = None, error: Optional[BaseException] = None) -> Notification:
        logger.warning("editor.notify", level="error", key=key, text=message, error=str(error) if error else None)
        return self._push(Notification("error", message, key))

    def clear(self) -> None:
        self._history.clear()

    def _push(self, notification: Notification) -> Notification:
        self._history.append(notification)
        if self._on_notify:
            self._on_notify(notification)
        return notification
