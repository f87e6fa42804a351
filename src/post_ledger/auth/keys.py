from __future__ import annotations

import json
import os
import re
from pathlib import Path

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)


#: Size in bytes of freshly generated record identities (256-bit).
IDENTITY_SIZE: int = 32

#: Canonical principal: lowercase hex of a raw 32-byte Ed25519 public key.
PRINCIPAL_RE = re.compile(r"[0-9a-f]{64}")


def _generate_random_bytes(n: int) -> bytes:
    """Return ``n`` cryptographically-secure random bytes."""
    return os.urandom(n)


def new_identity() -> str:
    """Return a fresh, unguessable record identity."""
    return _generate_random_bytes(IDENTITY_SIZE).hex()


class Keypair:
    """An Ed25519 signing key together with its public principal."""

    def __init__(self, private_key: Ed25519PrivateKey) -> None:
        self._private_key = private_key
        public_bytes = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        self.principal = public_bytes.hex()

    @classmethod
    def generate(cls) -> "Keypair":
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def load(cls, path: str | Path) -> "Keypair":
        """
        Load a keypair written by :meth:`save`.

        Raises :class:`ValueError` if the file holds anything other than an
        unencrypted Ed25519 private key.
        """
        data = Path(path).read_bytes()
        private_key = serialization.load_pem_private_key(data, password=None)
        if not isinstance(private_key, Ed25519PrivateKey):
            raise ValueError(f"Not an Ed25519 private key: {path}")
        return cls(private_key)

    def save(self, path: str | Path) -> None:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        pem = self._private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        output_path.write_bytes(pem)

    def sign(self, message: bytes) -> bytes:
        return self._private_key.sign(message)


def post_message(identity: str, topic: str, content: str) -> bytes:
    """Canonical bytes a principal signs to authorize one post."""
    payload = {"content": content, "identity": identity, "topic": topic}
    text = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise ValueError("Post fields must be valid Unicode text.") from exc


def sign_post(keypair: Keypair, identity: str, topic: str, content: str) -> bytes:
    return keypair.sign(post_message(identity, topic, content))


def verify_signature(principal: str, message: bytes, signature: bytes | None) -> bool:
    if not isinstance(principal, str) or not isinstance(signature, (bytes, bytearray)):
        return False
    if not PRINCIPAL_RE.fullmatch(principal):
        return False
    try:
        public_key = Ed25519PublicKey.from_public_bytes(bytes.fromhex(principal))
    except ValueError:
        return False
    try:
        public_key.verify(bytes(signature), message)
    except InvalidSignature:
        return False
    return True
