from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime


class BookmarkBase(BaseModel):
    book_id: str = Field(..., max_length=100)
    book_name: str = Field(..., max_length=100)
    chapter: int = Field(..., ge=1)
    verse: int = Field(..., ge=1)
    text: str
    note: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class BookmarkCreate(BookmarkBase):
    reference: Optional[str] = None

    def resolved_reference(self):
        return self.reference or f"{self.book_name} {self.chapter}:{self.verse}"


class BookmarkUpdate(BaseModel):
    note: Optional[str] = None
    tags: Optional[List[str]] = None


class BookmarkRead(BookmarkBase):
    model_config = ConfigDict(from_attributes=True)  # For compatibility with SQLAlchemy models

    id: int
    reference: str
    created_at: datetime
    updated_at: datetime

    def remote_id(self, user_id):
        """Id the remote mirror stores this bookmark under."""
        return f"{user_id}_{self.book_id}_{self.chapter}_{self.verse}"
