from __future__ import annotations

from pydantic import BaseModel, Field


TOPIC_MAX_LENGTH = 50
CONTENT_MIN_LENGTH = 1
CONTENT_MAX_LENGTH = 280


class Record(BaseModel):
    author: str
    topic: str = Field(default="", max_length=TOPIC_MAX_LENGTH)
    content: str = Field(min_length=CONTENT_MIN_LENGTH, max_length=CONTENT_MAX_LENGTH)
    created_at: int = Field(ge=0)
