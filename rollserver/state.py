# rollserver/state.py
import threading
from collections import deque
from typing import Deque, Dict, List

from .config import MAX_ROLLS_PER_CLIENT
from .roller import RollRecord


class RollLogStore:
    """Per-client ring buffers of past rolls. Volatile, one per app."""

    def __init__(self, max_per_client: int = MAX_ROLLS_PER_CLIENT):
        self.max_per_client = max_per_client
        self._logs: Dict[str, Deque[RollRecord]] = {}
        self._lock = threading.Lock()

    def record(self, client_id: str, record: RollRecord) -> None:
        with self._lock:
            log = self._logs.get(client_id)
            if log is None:
                log = deque(maxlen=self.max_per_client)
                self._logs[client_id] = log
            # maxlen drops the oldest entry on overflow
            log.append(record)

    def inspect(self) -> Dict[str, List[RollRecord]]:
        with self._lock:
            return {cid: list(log) for cid, log in self._logs.items()}

    def client_count(self) -> int:
        with self._lock:
            return len(self._logs)

    def total_records(self) -> int:
        with self._lock:
            return sum(len(log) for log in self._logs.values())
