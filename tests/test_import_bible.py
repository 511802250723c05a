from scripts import import_bible
from scripts.import_bible import build_rows, clean_verse_text, import_collection

DATA = {
    'collection': {'id': 'tb_malay', 'name': 'Terjemahan Baru', 'language': 'malay', 'translation': 'TB'},
    'books': [
        {'id': '01_kejadian', 'name': 'Kejadian', 'book_number': 1, 'testament': 'old',
         'chapters': {'1': {'1': '# Pada mulanya ', '2': 'Bumi belum berbentuk'}, '2': {'1': 'Demikianlah'}}},
        {'id': '02_keluaran', 'name': 'Keluaran', 'book_number': 2, 'chapters': {}},
    ],
}


class RecordingClient:
    def __init__(self):
        self.writes = []

    def table(self, name):
        client = self

        class _Upsert:
            def upsert(self, rows):
                client.writes.append((name, rows))
                return self

            def execute(self):
                return None

        return _Upsert()


def test_clean_verse_text():
    assert clean_verse_text('## Pada mulanya  ') == 'Pada mulanya'


def test_build_rows():
    collection, books, verses, skipped = build_rows(DATA)

    assert collection['available_books'] == ['01_kejadian']
    assert [b['total_chapters'] for b in books] == [2]
    assert skipped == ['02_keluaran']
    assert len(verses) == 3
    assert verses[0] == {
        'book_id': '01_kejadian', 'chapter': 1, 'verse': 1, 'text': 'Pada mulanya',
        'translation': 'TB', 'language': 'malay',
    }


def test_import_writes_in_batches(monkeypatch):
    monkeypatch.setattr(import_bible, 'BATCH_SIZE', 2)
    client = RecordingClient()

    assert import_collection(DATA, client=client) == (1, 3)

    tables = [name for name, _ in client.writes]
    assert tables == ['bible_collections', 'bible_books', 'bible_verses', 'bible_verses']
    assert [len(rows) for name, rows in client.writes if name == 'bible_verses'] == [2, 1]
