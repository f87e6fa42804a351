from __future__ import annotations

import threading

from post_ledger.errors import IdentityCollision
from post_ledger.schema import Record
from post_ledger.store.base import RecordStore, check_identity


class MemoryRecordStore(RecordStore):
    def __init__(self) -> None:
        self._records: dict[str, Record] = {}
        self._lock = threading.Lock()

    def allocate(self, identity: str, record: Record) -> None:
        check_identity(identity)
        with self._lock:
            if identity in self._records:
                raise IdentityCollision()
            self._records[identity] = record.model_copy()

    def fetch(self, identity: str) -> Record:
        check_identity(identity)
        return self._records[identity].model_copy()

    def exists(self, identity: str) -> bool:
        check_identity(identity)
        return identity in self._records

    def __len__(self) -> int:
        return len(self._records)
