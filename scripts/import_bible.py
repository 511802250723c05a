# scripts/import_bible.py
import json
import logging
import sys
from pathlib import Path

# Add the parent directory to the Python path properly
current_dir = Path(__file__).resolve().parent
backend_dir = current_dir.parent
sys.path.insert(0, str(backend_dir))

from database import get_supabase  # noqa: E402

logger = logging.getLogger(__name__)

BATCH_SIZE = 1000


def clean_verse_text(text):
    """Clean verse text by removing any leading '#' and trimming whitespace"""
    return text.lstrip('#').strip()


def build_rows(data):
    """Turn a collection export into rows for bible_collections/bible_books/bible_verses.

    Expected shape::

        {"collection": {"id": ..., "name": ..., "language": ..., "translation": ...},
         "books": [{"id": ..., "name": ..., "book_number": 1, "testament": "old",
                    "chapters": {"1": {"1": "In the beginning ...", ...}, ...}}, ...]}
    """
    collection = data['collection']
    collection_id = collection['id']
    translation = collection.get('translation', 'TB')
    language = collection.get('language', 'malay')

    book_rows = []
    verse_rows = []
    skipped = []
    for position, book in enumerate(data.get('books', []), start=1):
        chapters = book.get('chapters') or {}
        if not chapters:
            skipped.append(book.get('id'))
            continue
        book_rows.append({
            'id': book['id'],
            'name': book['name'],
            'english_name': book.get('english_name', ''),
            'abbreviation': book.get('abbreviation', ''),
            'testament': book.get('testament', 'old'),
            'book_number': book.get('book_number', position),
            'total_chapters': max(int(c) for c in chapters),
            'collection_id': collection_id,
            'translation': translation,
        })
        for chapter_key, verses in chapters.items():
            for verse_key, text in verses.items():
                verse_rows.append({
                    'book_id': book['id'],
                    'chapter': int(chapter_key),
                    'verse': int(verse_key),
                    'text': clean_verse_text(text),
                    'translation': translation,
                    'language': language,
                })

    collection_row = {
        'id': collection_id,
        'name': collection.get('name', collection_id),
        'language': language,
        'translation': translation,
        'description': collection.get('description', ''),
        'is_premium': collection.get('is_premium', True),
        'available_books': [b['id'] for b in book_rows],
    }
    return collection_row, book_rows, verse_rows, skipped


def _upsert_batches(client, table, rows):
    for start in range(0, len(rows), BATCH_SIZE):
        batch = rows[start:start + BATCH_SIZE]
        client.table(table).upsert(batch).execute()
        logger.info(f"{table}: wrote {start + len(batch)}/{len(rows)} rows")


def import_collection(data, client=None):
    client = client or get_supabase()
    collection_row, book_rows, verse_rows, skipped = build_rows(data)

    client.table('bible_collections').upsert(collection_row).execute()
    _upsert_batches(client, 'bible_books', book_rows)
    _upsert_batches(client, 'bible_verses', verse_rows)

    logger.info(f"Imported {collection_row['id']}: {len(book_rows)} books, {len(verse_rows)} verses")
    if skipped:
        logger.warning(f"Skipped {len(skipped)} books without chapters: {skipped}")
    return len(book_rows), len(verse_rows)


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    if len(sys.argv) != 2:
        print("Usage: python scripts/import_bible.py <path_to_collection.json>")
        sys.exit(1)

    with open(sys.argv[1], 'r', encoding='utf-8') as f:
        import_collection(json.load(f))
