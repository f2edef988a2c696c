import os
import time
import threading
from collections import deque


class EventLogger:
    """Thread-safe sink for tree lifecycle events.

    Recent entries are kept in memory for :meth:`get_events`; when
    ``log_path`` is given each entry is also appended to that file.
    """

    def __init__(self, log_path: str | None = None, *, max_events: int = 1000) -> None:
        self.log_path = log_path
        self._lock = threading.Lock()
        self._events = deque(maxlen=max_events)
        self._fp = None
        if log_path is not None:
            directory = os.path.dirname(log_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            self._fp = open(log_path, "a", encoding="utf-8")

    def close(self) -> None:
        with self._lock:
            if self._fp is not None:
                self._fp.close()
                self._fp = None

    def log(self, message: str) -> None:
        """Record ``message`` with a timestamp."""
        timestamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
        entry = f"[{timestamp}] {message}"
        with self._lock:
            if self._fp is not None:
                self._fp.write(entry + "\n")
                self._fp.flush()
            self._events.append(entry)

    def get_events(self, offset: int = 0, limit: int | None = None) -> list[str]:
        with self._lock:
            entries = list(self._events)
        if offset < 0:
            offset = 0
        end = offset + limit if limit is not None else None
        return entries[offset:end]
