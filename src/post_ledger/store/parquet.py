from __future__ import annotations

import errno
import os
import shutil
import uuid
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from post_ledger.errors import IdentityCollision
from post_ledger.schema import Record
from post_ledger.store.base import RecordStore, check_identity


RECORD_FILENAME = "record.parquet"
STAGING_DIRNAME = ".staging"
RECORD_PARQUET_SCHEMA = pa.schema(
    [
        ("author", pa.string()),
        ("topic", pa.string()),
        ("content", pa.string()),
        ("created_at", pa.int64()),
    ]
)

_COLLISION_ERRNOS = {errno.EEXIST, errno.ENOTEMPTY}


class ParquetRecordStore(RecordStore):
    """One single-row Parquet file per record at ``<root>/identity=<id>/record.parquet``.

    A record is written in full under ``<root>/.staging/`` and the staging
    directory is then renamed onto its partition. The rename fails when the
    partition exists, so it is the only allocate-or-fail step. The root is
    created on first allocation.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        self._staging = self.root / STAGING_DIRNAME

    def _partition_dir(self, identity: str) -> Path:
        return self.root / f"identity={check_identity(identity)}"

    def allocate(self, identity: str, record: Record) -> None:
        final_dir = self._partition_dir(identity)
        if final_dir.exists():
            raise IdentityCollision()

        self._staging.mkdir(parents=True, exist_ok=True)
        staged_dir = self._staging / uuid.uuid4().hex
        staged_dir.mkdir()
        try:
            table = pa.Table.from_pylist([record.model_dump()], schema=RECORD_PARQUET_SCHEMA)
            pq.write_table(table, str(staged_dir / RECORD_FILENAME))
            try:
                os.rename(staged_dir, final_dir)
            except FileExistsError as exc:
                raise IdentityCollision() from exc
            except OSError as exc:
                if exc.errno in _COLLISION_ERRNOS:
                    raise IdentityCollision() from exc
                raise
        finally:
            if staged_dir.exists():
                shutil.rmtree(staged_dir)

    def fetch(self, identity: str) -> Record:
        record_path = self._partition_dir(identity) / RECORD_FILENAME
        if not record_path.exists():
            raise KeyError(identity)
        rows = pq.ParquetFile(str(record_path)).read().to_pylist()
        return Record(**rows[0])

    def exists(self, identity: str) -> bool:
        return (self._partition_dir(identity) / RECORD_FILENAME).exists()
