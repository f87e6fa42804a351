from __future__ import annotations

import time
from typing import Callable

from post_ledger.auth.keys import post_message, verify_signature
from post_ledger.errors import ContentEmpty, ContentTooLong, TopicTooLong, Unauthorized
from post_ledger.schema import CONTENT_MAX_LENGTH, CONTENT_MIN_LENGTH, TOPIC_MAX_LENGTH, Record
from post_ledger.store.base import RecordStore


def _now() -> int:
    return int(time.time())


def create_record(
    store: RecordStore,
    topic: str,
    content: str,
    identity: str,
    authorizer: str,
    signature: bytes | None,
    clock: Callable[[], int] | None = None,
) -> Record:
    """Validate, authorize and persist a new post under ``identity``.

    ``authorizer`` becomes the record's author and ``signature`` must be its
    signature over :func:`post_message` for this identity, topic and content.
    Every check runs before the store is touched; ``store.allocate`` is the
    only write and raises ``IdentityCollision`` for an occupied identity.
    """
    if len(topic) > TOPIC_MAX_LENGTH:
        raise TopicTooLong()
    if len(content) > CONTENT_MAX_LENGTH:
        raise ContentTooLong()
    if len(content) < CONTENT_MIN_LENGTH:
        raise ContentEmpty()

    if not verify_signature(authorizer, post_message(identity, topic, content), signature):
        raise Unauthorized()

    created_at = (clock or _now)()
    record = Record(author=authorizer, topic=topic, content=content, created_at=created_at)
    store.allocate(identity, record)
    return record
