from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime, timezone
from enum import Enum


def _utcnow():
    return datetime.now(timezone.utc)


def annotation_id(user_id, book_id, chapter, verse):
    return f"{user_id}_{book_id}_{chapter}_{verse}"


class HighlightColor(str, Enum):
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    ORANGE = "orange"
    PINK = "pink"
    PURPLE = "purple"
    RED = "red"
    GRAY = "gray"


class Highlight(BaseModel):
    id: str
    user_id: str
    book_id: str
    book_name: str
    chapter: int
    verse: int
    verse_text: str = ''
    color: HighlightColor = HighlightColor.YELLOW
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def reference(self):
        return f"{self.book_name} {self.chapter}:{self.verse}"


class Note(BaseModel):
    id: str
    user_id: str
    book_id: str
    book_name: str
    chapter: int
    verse: int
    verse_text: str = ''
    content: str
    tags: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def reference(self):
        return f"{self.book_name} {self.chapter}:{self.verse}"


class NoteUpdate(BaseModel):
    content: str = Field(..., min_length=1)
    tags: Optional[List[str]] = None
