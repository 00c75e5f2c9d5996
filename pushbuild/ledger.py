from threading import Lock

from pushbuild.exceptions import LedgerError
from pushbuild.schemas import InProgress, LogEntry, LogResult


class ResultLedger:
    """Append-only list of submissions, shared by every running pipeline.

    Entries are addressed by their insertion index. Each entry starts out
    in progress and is completed exactly once.
    """

    _entries: list[LogEntry]
    _lock: Lock

    def __init__(self):
        self._entries = []
        self._lock = Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __getitem__(self, index: int) -> LogEntry:
        with self._lock:
            return self._entries[index]

    def append(self, entry: LogEntry) -> int:
        with self._lock:
            self._entries.append(entry)
            return len(self._entries) - 1

    def complete_at(self, index: int, result: LogResult):
        if isinstance(result, InProgress):
            raise LedgerError('Cannot complete an entry with an in progress result')
        with self._lock:
            if not 0 <= index < len(self._entries):
                raise LedgerError(f'No entry at index {index}')
            entry = self._entries[index]
            if not entry.in_progress:
                raise LedgerError(f'Entry {index} is already completed')
            self._entries[index] = entry.model_copy(update={'result': result})

    def snapshot(self) -> list[LogEntry]:
        with self._lock:
            return list(self._entries)
