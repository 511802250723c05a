from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, Text, JSON
from database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class LocalBookmark(Base):
    __tablename__ = 'local_bookmarks'

    # Autoincrement id doubles as insertion order and as the stable identifier
    id = Column(Integer, primary_key=True, autoincrement=True)

    book_id = Column(String(100), nullable=False, index=True)  # E.g., "01_kejadian"
    book_name = Column(String(100), nullable=False)             # E.g., "Kejadian"
    chapter = Column(Integer, nullable=False, index=True)
    verse = Column(Integer, nullable=False)

    # Denormalized so the bookmark can be shown without re-fetching the chapter
    text = Column(Text, nullable=False)
    reference = Column(String(150), nullable=False)
    note = Column(Text, nullable=True)
    tags = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f'<LocalBookmark {self.id} - {self.reference}>'
