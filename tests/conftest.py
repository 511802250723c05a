from collections import defaultdict

import pytest
from sqlalchemy.orm import sessionmaker

from app import create_app
from database import init_db, make_engine
from models.bible import Book, Chapter, Collection, Verse
from screens.navigator import Navigator
from screens.notifications import Clipboard, Notifier
from screens.reader import ReaderContext, ReaderScreen
from screens.sessions import ReaderSessions
from services import AppServices, BibleService, LocalBookmarkStore
from utils.auth import generate_token

JWT_SECRET = 'test-secret-that-is-long-enough-for-hs256'
USER_ID = 'user-1'

COLLECTION = Collection(
    id='tb_malay',
    name='Terjemahan Baru',
    language='malay',
    translation='TB',
    available_books=('01_kejadian', '02_keluaran'),
)
KEJADIAN = Book(id='01_kejadian', name='Kejadian', collection_id='tb_malay', book_number=1, total_chapters=4)
KELUARAN = Book(id='02_keluaran', name='Keluaran', collection_id='tb_malay', book_number=2, total_chapters=2)


def make_chapter(book, number, verse_count):
    return Chapter(
        book_id=book.id,
        book_name=book.name,
        number=number,
        translation=book.translation,
        verses=tuple(Verse(n, f"{book.name} {number} ayat {n}") for n in range(1, verse_count + 1)),
    )


class FakeBibleRepository:
    """In-memory stand-in for SupabaseBibleRepository.

    ``fail(method, exc)`` makes the next calls to ``method`` raise ``exc``;
    ``hooks[method]`` runs before the method does its work.
    """

    def __init__(self, collections, books, chapters):
        self.collections = {c.id: c for c in collections}
        self.books = {b.id: b for b in books}
        self.chapters = {(c.book_id, c.number): c for c in chapters}
        self.tables = defaultdict(dict)
        self.preferences = {}
        self.failures = {}
        self.hooks = {}
        self.calls = []

    def fail(self, method, exc):
        self.failures[method] = exc

    def _enter(self, method):
        self.calls.append(method)
        hook = self.hooks.get(method)
        if hook is not None:
            hook()
        if method in self.failures:
            raise self.failures[method]

    def list_collections(self):
        self._enter('list_collections')
        return list(self.collections.values())

    def get_collection(self, collection_id):
        self._enter('get_collection')
        return self.collections.get(collection_id)

    def list_books(self, collection_id):
        self._enter('list_books')
        books = [b for b in self.books.values() if b.collection_id == collection_id]
        return sorted(books, key=lambda b: b.book_number)

    def get_book(self, book_id):
        self._enter('get_book')
        return self.books.get(book_id)

    def get_chapter(self, book, chapter_number):
        self._enter('get_chapter')
        return self.chapters.get((book.id, chapter_number))

    def list_annotations(self, table, user_id, book_id=None, chapter=None):
        self._enter('list_annotations')
        rows = [r for r in self.tables[table].values() if r['user_id'] == user_id]
        if book_id is not None:
            rows = [r for r in rows if r['book_id'] == book_id]
        if chapter is not None:
            rows = [r for r in rows if r['chapter'] == chapter]
        return [dict(r) for r in rows]

    def get_annotation(self, table, annotation_id):
        self._enter('get_annotation')
        row = self.tables[table].get(annotation_id)
        return dict(row) if row else None

    def upsert_annotation(self, table, row):
        self._enter('upsert_annotation')
        self.tables[table][row['id']] = dict(row)
        return dict(row)

    def update_annotation(self, table, annotation_id, changes):
        self._enter('update_annotation')
        row = self.tables[table].get(annotation_id)
        if row is None:
            return None
        row.update(changes)
        return dict(row)

    def delete_annotation(self, table, annotation_id):
        self._enter('delete_annotation')
        self.tables[table].pop(annotation_id, None)

    def get_preferences(self, user_id):
        self._enter('get_preferences')
        row = self.preferences.get(user_id)
        return dict(row) if row else None

    def upsert_preferences(self, row):
        self._enter('upsert_preferences')
        self.preferences[row['user_id']] = dict(row)
        return dict(row)


class FakePremiumService:
    def __init__(self, premium=True):
        self.premium = premium
        self.calls = 0

    def is_premium(self, user_id):
        self.calls += 1
        return self.premium


@pytest.fixture
def repository():
    chapters = [make_chapter(KEJADIAN, n, 10) for n in range(1, 5)]
    chapters += [make_chapter(KELUARAN, n, 5) for n in range(1, 3)]
    return FakeBibleRepository([COLLECTION], [KEJADIAN, KELUARAN], chapters)


@pytest.fixture
def bible_service(repository):
    return BibleService(repository)


@pytest.fixture
def premium():
    return FakePremiumService(premium=True)


@pytest.fixture
def session_factory(tmp_path):
    engine = make_engine(tmp_path / 'bookmarks.db')
    init_db(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    return LocalBookmarkStore(session_factory=session_factory)


@pytest.fixture
def reader_context(bible_service, store, premium):
    return ReaderContext(
        bible_service=bible_service,
        bookmark_store=store,
        premium_service=premium,
        user_id=USER_ID,
        navigator=Navigator(),
        notifier=Notifier(),
        clipboard=Clipboard(),
    )


@pytest.fixture
def open_reader(reader_context, bible_service):
    """Push a loaded reader for (book_id, chapter) onto the context's navigator."""
    def _open(book_id='01_kejadian', chapter=1):
        position = bible_service.open_chapter(book_id, chapter)
        screen = reader_context.navigator.push(ReaderScreen(reader_context, position))
        screen.load()
        return screen
    return _open


@pytest.fixture
def services(bible_service, store, premium):
    return AppServices(
        bible_service=bible_service,
        bookmark_store=store,
        premium_service=premium,
        sessions=ReaderSessions(bible_service, store, premium),
    )


@pytest.fixture
def flask_app(services):
    return create_app(
        overrides={'TESTING': True, 'JWT_SECRET': JWT_SECRET, 'JWT_AUDIENCE': 'authenticated'},
        services=services,
    )


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture
def auth_headers():
    def _headers(user_id=USER_ID):
        return {'Authorization': f"Bearer {generate_token(user_id, JWT_SECRET)}"}
    return _headers
