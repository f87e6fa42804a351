from __future__ import annotations

import re
from abc import ABC, abstractmethod

from post_ledger.schema import Record


IDENTITY_RE = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


def check_identity(identity: str) -> str:
    if not isinstance(identity, str) or not IDENTITY_RE.match(identity):
        raise ValueError(f"Invalid record identity: {identity!r}")
    return identity


class RecordStore(ABC):
    """Keyed storage holding at most one immutable record per identity.

    ``allocate`` is the only write. It either stores the whole record under a
    free identity or raises :class:`~post_ledger.errors.IdentityCollision`;
    an occupied slot is never overwritten.
    """

    @abstractmethod
    def allocate(self, identity: str, record: Record) -> None:
        ...

    @abstractmethod
    def fetch(self, identity: str) -> Record:
        """Return the record stored under ``identity`` or raise ``KeyError``."""

    @abstractmethod
    def exists(self, identity: str) -> bool:
        ...
