# locks.py
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List


class RecordLocks:
  """One mutex per customer id, held across a fetch-modify-commit cycle.

  Entries are dropped once no thread holds or waits on them.
  """

  def __init__(self) -> None:
    self._guard = threading.Lock()
    self._locks: Dict[str, List] = {}  # id -> [lock, users]

  @contextmanager
  def hold(self, record_id: str) -> Iterator[None]:
    with self._guard:
      entry = self._locks.setdefault(record_id, [threading.Lock(), 0])
      entry[1] += 1
    try:
      with entry[0]:
        yield
    finally:
      with self._guard:
        entry[1] -= 1
        if entry[1] == 0:
          self._locks.pop(record_id, None)

  def __len__(self) -> int:
    with self._guard:
      return len(self._locks)
