"""In-memory log of the traffic between the debugger and its analysis host.

Each entry records a kind ("CREQ" for a request sent, "RECV" for a response received,
"CERR" for a failure), a detail (the method name for requests, the response status
for responses, "error" for failures), and a message.

The log panel shows these entries; the transport writes them. Entries may be added
from any thread.
"""

__all__ = ["LogBook", "LogEntry",
           "kind_request", "kind_response", "kind_error",
           "level_default", "level_info", "level_error", "level_of"]

import threading
import time
from typing import Any, List, Optional

from unpythonic import sym

kind_request = "CREQ"
kind_response = "RECV"
kind_error = "CERR"

level_default = sym("default")
level_info = sym("info")
level_error = sym("error")

def level_of(detail: str) -> sym:
    """Classify an entry by its detail, for coloring: `level_error`, `level_info` or `level_default`."""
    if detail == "error":
        return level_error
    if detail in ("ok", "info"):
        return level_info
    return level_default


class LogEntry:
    __slots__ = ["timestamp", "kind", "detail", "message"]

    def __init__(self, kind: str, detail: str, message: str, timestamp: Optional[float] = None):
        self.timestamp = timestamp if timestamp is not None else time.time()
        self.kind = kind
        self.detail = detail
        self.message = message if message != "" else "(empty)"

    @property
    def level(self) -> sym:
        return level_of(self.detail)

    def time_string(self) -> str:
        """Local wall-clock time of the entry, as "HH:MM:SS"."""
        return time.strftime("%H:%M:%S", time.localtime(self.timestamp))

    def __repr__(self):
        return f"<LogEntry {self.kind} {self.detail}: {self.message}>"


class LogBook:
    def __init__(self, max_entries: int = 1000):
        """A bounded, thread-safe list of `LogEntry`.

        `max_entries`: When full, the oldest entries are dropped.

        `version` increases by one at each change, so that a viewer can poll
        cheaply for whether it needs to refresh.
        """
        if max_entries < 1:
            raise ValueError(f"LogBook.__init__: `max_entries` must be at least 1, got {max_entries}")
        self.max_entries = max_entries
        self.entries: List[LogEntry] = []
        self.version = 0
        self.lock = threading.RLock()

    def add(self, kind: str, detail: str, message: Any) -> LogEntry:
        """Record an entry. Non-string messages are converted with `str`."""
        if not isinstance(message, str):
            message = str(message)
        entry = LogEntry(kind, detail, message)
        with self.lock:
            self.entries.append(entry)
            if len(self.entries) > self.max_entries:
                del self.entries[:len(self.entries) - self.max_entries]
            self.version += 1
        return entry

    def requested(self, method: str, data: Any) -> LogEntry:
        return self.add(kind_request, method, data)

    def received(self, status: str, data: Any) -> LogEntry:
        return self.add(kind_response, status, data)

    def error(self, message: Any) -> LogEntry:
        return self.add(kind_error, "error", message)

    def snapshot(self) -> List[LogEntry]:
        """Return a copy of the current entries, oldest first."""
        with self.lock:
            return list(self.entries)

    def clear(self) -> None:
        with self.lock:
            self.entries.clear()
            self.version += 1

    def __len__(self):
        with self.lock:
            return len(self.entries)
