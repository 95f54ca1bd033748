# services/locks.py
"""
In-process mutual exclusion for check-then-write sequences.

``room_locks`` serializes booking creation and approval per room,
``meter_locks`` serializes meter readings per room, and ``billing_run_lock``
allows a single monthly invoice run at a time. Across processes the
services additionally take row locks (``SELECT ... FOR UPDATE``).
"""
import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator


class _KeyLock:
     __slots__ = ("lock", "holders")

     def __init__(self) -> None:
          self.lock = threading.Lock()
          self.holders = 0


class KeyedLockRegistry:
     """
     Hands out one lock per key; unrelated keys never contend.

     An entry lives only while some thread holds or waits for it, so keys
     that are never seen again (unknown room ids) leave nothing behind.
     """

     def __init__(self) -> None:
          self._guard = threading.Lock()
          self._locks: Dict[Hashable, _KeyLock] = {}

     def __len__(self) -> int:
          with self._guard:
               return len(self._locks)

     @contextmanager
     def hold(self, key: Hashable) -> Iterator[None]:
          with self._guard:
               entry = self._locks.get(key)
               if entry is None:
                    entry = self._locks[key] = _KeyLock()
               entry.holders += 1

          try:
               with entry.lock:
                    yield
          finally:
               with self._guard:
                    entry.holders -= 1
                    if entry.holders == 0:
                         del self._locks[key]


room_locks = KeyedLockRegistry()
meter_locks = KeyedLockRegistry()
billing_run_lock = threading.Lock()
