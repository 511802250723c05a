# services/bookmark_store.py
import logging

from sqlalchemy.exc import SQLAlchemyError

from database import get_db_session
from models.bookmark import LocalBookmark
from schemas.bookmark_schemas import BookmarkCreate, BookmarkRead
from services.errors import LocalStorageError, NotFound

logger = logging.getLogger(__name__)


class LocalBookmarkStore:
    """On-device bookmark storage. Authoritative for everything the app shows.

    Every write is committed before the method returns.
    """

    def __init__(self, session_factory=None):
        self._session_factory = session_factory

    def _session(self):
        return get_db_session(self._session_factory)

    def get_bookmarks(self):
        """All bookmarks in insertion order; empty list when there are none."""
        try:
            with self._session() as db:
                rows = db.query(LocalBookmark).order_by(LocalBookmark.id).all()
                return [BookmarkRead.model_validate(row) for row in rows]
        except SQLAlchemyError as e:
            raise LocalStorageError(f"Failed to load bookmarks: {e}") from e

    def get_bookmark(self, bookmark_id):
        try:
            with self._session() as db:
                row = db.get(LocalBookmark, bookmark_id)
                return BookmarkRead.model_validate(row) if row else None
        except SQLAlchemyError as e:
            raise LocalStorageError(f"Failed to load bookmark {bookmark_id}: {e}") from e

    def bookmarked_verses(self, book_id, chapter):
        try:
            with self._session() as db:
                rows = db.query(LocalBookmark.verse).filter_by(book_id=book_id, chapter=chapter).all()
                return {verse for (verse,) in rows}
        except SQLAlchemyError as e:
            raise LocalStorageError(f"Failed to load bookmarks for {book_id} {chapter}: {e}") from e

    def add_bookmark(self, bookmark: BookmarkCreate):
        try:
            with self._session() as db:
                row = LocalBookmark(
                    book_id=bookmark.book_id,
                    book_name=bookmark.book_name,
                    chapter=bookmark.chapter,
                    verse=bookmark.verse,
                    text=bookmark.text,
                    reference=bookmark.resolved_reference(),
                    note=bookmark.note,
                    tags=list(bookmark.tags),
                )
                db.add(row)
                db.commit()
                db.refresh(row)  # To get ID and timestamps
                saved = BookmarkRead.model_validate(row)
        except SQLAlchemyError as e:
            raise LocalStorageError(f"Failed to add bookmark: {e}") from e
        logger.info(f"Bookmark {saved.id} stored locally: {saved.reference}")
        return saved

    def update_bookmark(self, bookmark_id, note=None, tags=None):
        """Replace the note and tags of one bookmark."""
        try:
            with self._session() as db:
                row = db.get(LocalBookmark, bookmark_id)
                if row is None:
                    raise NotFound(f"Bookmark not found: {bookmark_id}")
                row.note = note or None
                row.tags = list(tags or [])
                db.commit()
                db.refresh(row)
                return BookmarkRead.model_validate(row)
        except SQLAlchemyError as e:
            raise LocalStorageError(f"Failed to update bookmark {bookmark_id}: {e}") from e

    def remove_bookmark(self, bookmark_id):
        """Delete one bookmark by id. Returns False when it did not exist."""
        try:
            with self._session() as db:
                deleted = db.query(LocalBookmark).filter_by(id=bookmark_id).delete(synchronize_session=False)
        except SQLAlchemyError as e:
            raise LocalStorageError(f"Failed to delete bookmark {bookmark_id}: {e}") from e
        if deleted:
            logger.info(f"Bookmark {bookmark_id} deleted locally")
        return bool(deleted)

    def remove_bookmark_at(self, index):
        """Delete the bookmark at ``index`` of get_bookmarks(), in one transaction."""
        if index < 0:
            return False
        try:
            with self._session() as db:
                row = db.query(LocalBookmark).order_by(LocalBookmark.id).offset(index).first()
                if row is None:
                    return False
                db.delete(row)
        except SQLAlchemyError as e:
            raise LocalStorageError(f"Failed to delete bookmark at {index}: {e}") from e
        return True

    def clear_bookmarks(self):
        try:
            with self._session() as db:
                db.query(LocalBookmark).delete(synchronize_session=False)
        except SQLAlchemyError as e:
            raise LocalStorageError(f"Failed to clear bookmarks: {e}") from e
