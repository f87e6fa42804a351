from __future__ import annotations


class PostError(Exception):
    """Base class for rejected post submissions.

    Every subclass has a stable ``kind`` and a fixed human-readable ``msg`` so
    callers can branch on the kind instead of matching message text. A
    rejected request never leaves anything behind in the store.
    """

    kind = "PostError"
    msg = "The post could not be created."

    def __init__(self, msg: str | None = None) -> None:
        if msg is not None:
            self.msg = msg
        super().__init__(self.msg)


class TopicTooLong(PostError):
    kind = "TopicTooLong"
    msg = "The provided topic should be 50 characters long maximum."


class ContentTooLong(PostError):
    kind = "ContentTooLong"
    msg = "The provided content should be 280 characters long maximum."


class ContentEmpty(PostError):
    kind = "ContentEmpty"
    msg = "The provided content should not be empty."


class IdentityCollision(PostError):
    kind = "IdentityCollision"
    msg = "A record already exists under the provided identity."


class Unauthorized(PostError):
    kind = "Unauthorized"
    msg = "The request is not signed by the provided authorizer."
