from __future__ import annotations

import json
from collections import Counter
from pathlib import Path
from typing import Any, Iterable

import pandas as pd

from post_ledger.auth.keys import Keypair, new_identity, sign_post
from post_ledger.errors import PostError
from post_ledger.handler import create_record
from post_ledger.store.base import RecordStore, check_identity


MALFORMED_ROW = "MalformedRow"


def submit_posts(
    input_path: str,
    store: RecordStore,
    keypair: Keypair,
    max_rows: int | None = None,
) -> dict:
    input_file = Path(input_path)
    suffix = input_file.suffix.lower()
    total_read = 0
    total_written = 0
    rejected: Counter[str] = Counter()
    identities: list[str] = []

    def process_rows(rows: Iterable[dict[str, Any]]) -> None:
        nonlocal total_read, total_written
        for raw in rows:
            if max_rows is not None and total_read >= max_rows:
                break
            total_read += 1
            normalized = _normalize_row(raw)
            if normalized is None:
                rejected[MALFORMED_ROW] += 1
                continue
            topic, content, identity = normalized
            signature = sign_post(keypair, identity, topic, content)
            try:
                create_record(store, topic, content, identity, keypair.principal, signature)
            except PostError as exc:
                rejected[exc.kind] += 1
                continue
            identities.append(identity)
            total_written += 1

    if suffix == ".csv":
        for chunk in pd.read_csv(input_file, chunksize=1000, keep_default_na=False, dtype=str):
            process_rows(chunk.to_dict(orient="records"))
            if max_rows is not None and total_read >= max_rows:
                break
    elif suffix == ".jsonl":
        with input_file.open("r", encoding="utf-8") as handle:
            for line in handle:
                if max_rows is not None and total_read >= max_rows:
                    break
                line = line.strip()
                if not line:
                    continue
                try:
                    raw = json.loads(line)
                except json.JSONDecodeError:
                    total_read += 1
                    rejected[MALFORMED_ROW] += 1
                    continue
                process_rows([raw])
    else:
        raise ValueError("Unsupported input format. Use .jsonl or .csv")

    total_rejected = sum(rejected.values())
    print(
        f"total_read={total_read} total_written={total_written} total_rejected={total_rejected}"
    )

    return {
        "total_read": total_read,
        "total_written": total_written,
        "total_rejected": total_rejected,
        "rejected_by_kind": dict(rejected),
        "identities": identities,
    }


def _normalize_row(raw: Any) -> tuple[str, str, str] | None:
    if not isinstance(raw, dict):
        return None
    content = raw.get("content")
    if not isinstance(content, str):
        return None
    topic = raw.get("topic")
    topic = topic if isinstance(topic, str) else ""
    identity = raw.get("identity")
    if identity in (None, ""):
        identity = new_identity()
    try:
        check_identity(identity)
    except ValueError:
        return None
    return topic, content, identity
