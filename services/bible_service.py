# services/bible_service.py
import logging
from datetime import datetime, timezone

from models.bible import ReadingPosition
from schemas.annotation_schemas import Highlight, HighlightColor, Note, annotation_id
from schemas.preferences_schemas import Preferences
from services.errors import NotFound

logger = logging.getLogger(__name__)

BOOKMARKS_TABLE = 'bookmarks'
HIGHLIGHTS_TABLE = 'highlights'
NOTES_TABLE = 'notes'


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


class BibleService:
    """Bible content, chapter navigation and remote annotation storage.

    Navigation never keeps a "current chapter" of its own: callers pass the
    ReadingPosition they are at and get a new one back (or None at a
    boundary).
    """

    def __init__(self, repository, cross_book_navigation=False,
                 default_translation='TB', default_language='malay'):
        self.repository = repository
        self.cross_book_navigation = cross_book_navigation
        self.default_translation = default_translation
        self.default_language = default_language

    # --- Catalogue ---

    def list_collections(self):
        collections = self.repository.list_collections()
        logger.info(f"Loaded {len(collections)} collections")
        return collections

    def get_collection(self, collection_id):
        collection = self.repository.get_collection(collection_id)
        if collection is None:
            raise NotFound(f"Collection not found: {collection_id}")
        return collection

    def list_books(self, collection_id):
        return self.repository.list_books(collection_id)

    def get_book(self, book_id):
        book = self.repository.get_book(book_id)
        if book is None:
            raise NotFound(f"Book not found: {book_id}")
        return book

    def get_chapter(self, book, chapter_number):
        if not book.has_chapter(chapter_number):
            raise NotFound(f"Invalid chapter number: {chapter_number} (valid range: 1-{book.total_chapters})")
        chapter = self.repository.get_chapter(book, chapter_number)
        if chapter is None:
            raise NotFound(f"Chapter not found: {book.name} {chapter_number}")
        return chapter

    # --- Navigation ---

    def open_chapter(self, book_id, chapter_number):
        book = self.get_book(book_id)
        chapter = self.get_chapter(book, chapter_number)
        return ReadingPosition(collection_id=book.collection_id, book=book, chapter=chapter)

    def select_chapter(self, position, chapter_number):
        """Jump to another chapter of the book ``position`` is in."""
        chapter = self.get_chapter(position.book, chapter_number)
        logger.info(f"Selected {chapter.reference}")
        return ReadingPosition(collection_id=position.collection_id, book=position.book, chapter=chapter)

    def next_chapter(self, position):
        book = position.book
        next_number = position.chapter.number + 1
        if book.has_chapter(next_number):
            return self.select_chapter(position, next_number)

        if self.cross_book_navigation:
            neighbour = self._neighbour_book(position, 1)
            if neighbour is not None:
                return self._position_in(neighbour, 1)

        logger.info(f"No chapter after {position.reference}")
        return None

    def previous_chapter(self, position):
        prev_number = position.chapter.number - 1
        if prev_number >= 1:
            return self.select_chapter(position, prev_number)

        if self.cross_book_navigation:
            neighbour = self._neighbour_book(position, -1)
            if neighbour is not None:
                return self._position_in(neighbour, neighbour.total_chapters)

        logger.info(f"No chapter before {position.reference}")
        return None

    def _neighbour_book(self, position, step):
        books = self.list_books(position.collection_id)
        ids = [b.id for b in books]
        if position.book.id not in ids:
            return None
        index = ids.index(position.book.id) + step
        if 0 <= index < len(books):
            return books[index]
        return None

    def _position_in(self, book, chapter_number):
        chapter = self.get_chapter(book, chapter_number)
        return ReadingPosition(collection_id=book.collection_id, book=book, chapter=chapter)

    # --- Remote bookmarks (mirror of the local store) ---

    def add_bookmark(self, user_id, bookmark):
        row = {
            'id': bookmark.remote_id(user_id),
            'user_id': user_id,
            'book_id': bookmark.book_id,
            'book_name': bookmark.book_name,
            'chapter': bookmark.chapter,
            'verse': bookmark.verse,
            'verse_text': bookmark.text,
            'note': bookmark.note,
            'tags': list(bookmark.tags),
            'reference': bookmark.reference,
            'created_at': bookmark.created_at.isoformat(),
            'updated_at': bookmark.updated_at.isoformat(),
        }
        return self.repository.upsert_annotation(BOOKMARKS_TABLE, row)

    def list_bookmarks(self, user_id):
        return self.repository.list_annotations(BOOKMARKS_TABLE, user_id)

    def update_bookmark(self, user_id, bookmark):
        changes = {'note': bookmark.note, 'tags': list(bookmark.tags), 'updated_at': _now_iso()}
        return self.repository.update_annotation(BOOKMARKS_TABLE, bookmark.remote_id(user_id), changes)

    def remove_bookmark(self, user_id, bookmark):
        self.repository.delete_annotation(BOOKMARKS_TABLE, bookmark.remote_id(user_id))

    # --- Highlights ---

    def list_highlights(self, user_id, book_id, chapter_number):
        rows = self.repository.list_annotations(HIGHLIGHTS_TABLE, user_id, book_id, chapter_number)
        return [Highlight.model_validate(row) for row in rows]

    def add_highlight(self, user_id, chapter, verse, color):
        highlight = Highlight(
            id=annotation_id(user_id, chapter.book_id, chapter.number, verse.number),
            user_id=user_id,
            book_id=chapter.book_id,
            book_name=chapter.book_name,
            chapter=chapter.number,
            verse=verse.number,
            verse_text=verse.text,
            color=HighlightColor(color),
        )
        self.repository.upsert_annotation(HIGHLIGHTS_TABLE, highlight.model_dump(mode='json'))
        logger.info(f"Highlight saved: {highlight.reference} ({highlight.color.value})")
        return highlight

    def update_highlight_color(self, highlight_id, color):
        changes = {'color': HighlightColor(color).value, 'updated_at': _now_iso()}
        row = self.repository.update_annotation(HIGHLIGHTS_TABLE, highlight_id, changes)
        if row is None:
            raise NotFound(f"Highlight not found: {highlight_id}")
        return Highlight.model_validate(row)

    def remove_highlight(self, highlight_id):
        self.repository.delete_annotation(HIGHLIGHTS_TABLE, highlight_id)

    # --- Notes ---

    def list_notes(self, user_id):
        rows = self.repository.list_annotations(NOTES_TABLE, user_id)
        return [Note.model_validate(row) for row in rows]

    def get_verse_note(self, user_id, book_id, chapter_number, verse_number):
        row = self.repository.get_annotation(
            NOTES_TABLE, annotation_id(user_id, book_id, chapter_number, verse_number))
        return Note.model_validate(row) if row else None

    def add_note(self, user_id, chapter, verse, content, tags=None):
        note = Note(
            id=annotation_id(user_id, chapter.book_id, chapter.number, verse.number),
            user_id=user_id,
            book_id=chapter.book_id,
            book_name=chapter.book_name,
            chapter=chapter.number,
            verse=verse.number,
            verse_text=verse.text,
            content=content,
            tags=list(tags or []),
        )
        self.repository.upsert_annotation(NOTES_TABLE, note.model_dump(mode='json'))
        logger.info(f"Note saved: {note.reference}")
        return note

    def update_note(self, note_id, content, tags=None):
        changes = {'content': content, 'updated_at': _now_iso()}
        if tags is not None:
            changes['tags'] = list(tags)
        row = self.repository.update_annotation(NOTES_TABLE, note_id, changes)
        if row is None:
            raise NotFound(f"Note not found: {note_id}")
        return Note.model_validate(row)

    def remove_note(self, note_id):
        self.repository.delete_annotation(NOTES_TABLE, note_id)

    # --- Preferences ---

    def get_preferences(self, user_id):
        row = self.repository.get_preferences(user_id)
        if row is not None:
            return Preferences.model_validate(row)

        preferences = Preferences(
            user_id=user_id,
            preferred_translation=self.default_translation,
            preferred_language=self.default_language,
        )
        self.repository.upsert_preferences(preferences.model_dump(mode='json'))
        logger.info(f"Created default preferences for {user_id}")
        return preferences

    def update_preferences(self, user_id, changes):
        updated = changes.apply_to(self.get_preferences(user_id))
        self.repository.upsert_preferences(updated.model_dump(mode='json'))
        logger.info(f"Preferences updated for {user_id}")
        return updated
