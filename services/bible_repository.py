# services/bible_repository.py
import logging
from contextlib import contextmanager

import httpx
from postgrest.exceptions import APIError

from database import get_supabase
from models.bible import Book, Chapter, Collection, Verse
from services.errors import BibleException, NetworkUnavailable, PermissionDenied

logger = logging.getLogger(__name__)

# PostgREST / Postgres codes that mean "the caller is not allowed to do this"
PERMISSION_CODES = {'42501', 'PGRST301', 'PGRST302', '401', '403'}


@contextmanager
def remote_call(action):
    """Translate backend client failures into BibleException kinds."""
    try:
        yield
    except BibleException:
        raise
    except APIError as e:
        code = str(e.code or '')
        logger.error(f"Supabase API error during {action}: [{code}] {e.message}")
        if code in PERMISSION_CODES:
            raise PermissionDenied(f"Not allowed to {action}") from e
        raise BibleException(f"Failed to {action}: {e.message}") from e
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        logger.error(f"HTTP {status} during {action}")
        if status in (401, 403):
            raise PermissionDenied(f"Not allowed to {action}") from e
        raise BibleException(f"Failed to {action}: HTTP {status}") from e
    except httpx.TransportError as e:
        logger.warning(f"Network unavailable during {action}: {e}")
        raise NetworkUnavailable(f"Could not reach the server to {action}") from e
    except Exception as e:
        logger.error(f"Unexpected error during {action}: {str(e)}", exc_info=True)
        raise BibleException(f"Failed to {action}: {e}") from e


def _collection_from_row(row):
    return Collection(
        id=row['id'],
        name=row.get('name') or '',
        language=row.get('language') or 'malay',
        translation=row.get('translation') or 'TB',
        description=row.get('description') or '',
        is_premium=row.get('is_premium', True),
        available_books=tuple(row.get('available_books') or ()),
    )


def _book_from_row(row):
    return Book(
        id=row['id'],
        name=row.get('name') or '',
        collection_id=row.get('collection_id') or '',
        book_number=row.get('book_number') or 1,
        total_chapters=row.get('total_chapters') or 1,
        testament=row.get('testament') or 'old',
        translation=row.get('translation') or 'TB',
        abbreviation=row.get('abbreviation') or '',
        english_name=row.get('english_name') or '',
    )


class SupabaseBibleRepository:
    """Remote storage for Bible content and the user's annotations.

    Tables: bible_collections, bible_books, bible_verses, bookmarks,
    highlights, notes, preferences. Rows are plain dicts; the service
    layer turns them into domain objects or pydantic models.
    """

    def __init__(self, client_getter=get_supabase):
        self._client_getter = client_getter

    def _table(self, name):
        return self._client_getter().table(name)

    # --- Content ---

    def list_collections(self):
        with remote_call("load collections"):
            response = self._table('bible_collections').select('*').order('name').execute()
        return [_collection_from_row(row) for row in response.data]

    def get_collection(self, collection_id):
        with remote_call(f"load collection {collection_id}"):
            response = self._table('bible_collections').select('*').eq('id', collection_id).limit(1).execute()
        return _collection_from_row(response.data[0]) if response.data else None

    def list_books(self, collection_id):
        with remote_call(f"load books for {collection_id}"):
            response = self._table('bible_books').select('*') \
                .eq('collection_id', collection_id) \
                .order('book_number') \
                .execute()
        return [_book_from_row(row) for row in response.data]

    def get_book(self, book_id):
        with remote_call(f"load book {book_id}"):
            response = self._table('bible_books').select('*').eq('id', book_id).limit(1).execute()
        return _book_from_row(response.data[0]) if response.data else None

    def get_chapter(self, book, chapter_number):
        with remote_call(f"load {book.name} {chapter_number}"):
            response = self._table('bible_verses').select('*') \
                .eq('book_id', book.id) \
                .eq('chapter', chapter_number) \
                .order('verse') \
                .execute()
        rows = response.data
        if not rows:
            return None
        return Chapter(
            book_id=book.id,
            book_name=book.name,
            number=chapter_number,
            translation=rows[0].get('translation') or book.translation,
            verses=tuple(Verse(number=row['verse'], text=row['text']) for row in rows),
            language=rows[0].get('language') or 'malay',
        )

    # --- Annotations (bookmarks, highlights, notes share one shape) ---

    def list_annotations(self, table, user_id, book_id=None, chapter=None):
        with remote_call(f"load {table}"):
            query = self._table(table).select('*').eq('user_id', user_id)
            if book_id is not None:
                query = query.eq('book_id', book_id)
            if chapter is not None:
                query = query.eq('chapter', chapter)
            response = query.order('created_at').execute()
        return response.data

    def get_annotation(self, table, annotation_id):
        with remote_call(f"load {table} {annotation_id}"):
            response = self._table(table).select('*').eq('id', annotation_id).limit(1).execute()
        return response.data[0] if response.data else None

    def upsert_annotation(self, table, row):
        with remote_call(f"save {table}"):
            response = self._table(table).upsert(row).execute()
        return response.data[0] if response.data else row

    def update_annotation(self, table, annotation_id, changes):
        with remote_call(f"update {table} {annotation_id}"):
            response = self._table(table).update(changes).eq('id', annotation_id).execute()
        return response.data[0] if response.data else None

    def delete_annotation(self, table, annotation_id):
        with remote_call(f"delete {table} {annotation_id}"):
            self._table(table).delete().eq('id', annotation_id).execute()

    # --- Preferences ---

    def get_preferences(self, user_id):
        with remote_call("load preferences"):
            response = self._table('preferences').select('*').eq('user_id', user_id).limit(1).execute()
        return response.data[0] if response.data else None

    def upsert_preferences(self, row):
        with remote_call("save preferences"):
            response = self._table('preferences').upsert(row).execute()
        return response.data[0] if response.data else row
