from post_ledger.store.base import RecordStore, check_identity
from post_ledger.store.memory import MemoryRecordStore
from post_ledger.store.parquet import ParquetRecordStore

__all__ = ["MemoryRecordStore", "ParquetRecordStore", "RecordStore", "check_identity"]
