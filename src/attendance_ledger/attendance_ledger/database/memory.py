from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterator


@dataclass
class InMemoryStore:
    """Shared tables for the in-memory repositories.

    All repositories built on one store share its lock, so a change request
    approval can update both tables atomically.
    """

    users: Dict[int, object] = field(default_factory=dict)
    time_records: Dict[int, object] = field(default_factory=dict)
    change_requests: Dict[int, object] = field(default_factory=dict)
    lock: threading.RLock = field(default_factory=threading.RLock)
    _sequences: Dict[str, Iterator[int]] = field(default_factory=dict)

    def next_id(self, table: str) -> int:
        with self.lock:
            seq = self._sequences.setdefault(table, itertools.count(1))
            return next(seq)
