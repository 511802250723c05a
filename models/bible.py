import re
from dataclasses import dataclass, field
from typing import Optional, Tuple

_FOOTNOTE_RE = re.compile(r'\[\d+\]')
_TAG_RE = re.compile(r'<[^>]*>')
_SPACE_RE = re.compile(r'\s+')


@dataclass(frozen=True)
class Verse:
    number: int
    text: str

    @property
    def clean_text(self):
        """Verse text without footnote markers or inline markup."""
        text = _FOOTNOTE_RE.sub('', self.text)
        text = _TAG_RE.sub('', text)
        return _SPACE_RE.sub(' ', text).strip()

    def reference(self, book_name, chapter_number):
        return f"{book_name} {chapter_number}:{self.number}"

    def to_json(self):
        return {"verse": self.number, "text": self.text}


@dataclass(frozen=True)
class Chapter:
    book_id: str
    book_name: str
    number: int
    translation: str
    verses: Tuple[Verse, ...] = ()
    language: str = 'malay'

    def __post_init__(self):
        ordered = tuple(sorted(self.verses, key=lambda v: v.number))
        numbers = [v.number for v in ordered]
        if any(n < 1 for n in numbers):
            raise ValueError(f"Verse numbers must be positive in {self.book_name} {self.number}")
        if len(set(numbers)) != len(numbers):
            raise ValueError(f"Duplicate verse numbers in {self.book_name} {self.number}")
        object.__setattr__(self, 'verses', ordered)

    @property
    def total_verses(self):
        return len(self.verses)

    @property
    def reference(self):
        return f"{self.book_name} {self.number}"

    @property
    def verse_numbers(self):
        return [v.number for v in self.verses]

    def get_verse(self, verse_number) -> Optional[Verse]:
        for verse in self.verses:
            if verse.number == verse_number:
                return verse
        return None

    def verse_range(self, start, end):
        return [v for v in self.verses if start <= v.number <= end]

    def to_json(self):
        return {
            "book_id": self.book_id,
            "book_name": self.book_name,
            "chapter": self.number,
            "translation": self.translation,
            "language": self.language,
            "reference": self.reference,
            "total_verses": self.total_verses,
            "verses": [v.to_json() for v in self.verses],
        }


@dataclass(frozen=True)
class Book:
    id: str                 # e.g. "01_kejadian"
    name: str               # e.g. "Kejadian"
    collection_id: str
    book_number: int
    total_chapters: int
    testament: str = 'old'
    translation: str = 'TB'
    abbreviation: str = ''
    english_name: str = ''

    @property
    def is_old_testament(self):
        return self.testament == 'old'

    def has_chapter(self, chapter_number):
        return 1 <= chapter_number <= self.total_chapters

    def to_json(self):
        return {
            "id": self.id,
            "name": self.name,
            "english_name": self.english_name,
            "abbreviation": self.abbreviation,
            "collection_id": self.collection_id,
            "book_number": self.book_number,
            "total_chapters": self.total_chapters,
            "testament": self.testament,
            "translation": self.translation,
        }


@dataclass(frozen=True)
class Collection:
    id: str
    name: str
    language: str
    translation: str
    description: str = ''
    is_premium: bool = True
    available_books: Tuple[str, ...] = ()

    def has_book(self, book_id):
        return book_id in self.available_books

    def to_json(self):
        return {
            "id": self.id,
            "name": self.name,
            "language": self.language,
            "translation": self.translation,
            "description": self.description,
            "is_premium": self.is_premium,
            "total_books": len(self.available_books),
        }


@dataclass(frozen=True)
class ReadingPosition:
    """Where a reader is: handed out by every navigation call, never mutated."""
    collection_id: str
    book: Book
    chapter: Chapter

    @property
    def reference(self):
        return self.chapter.reference


@dataclass(frozen=True)
class ChatContext:
    collection_id: str
    book_id: str
    book_name: str
    chapter: int
    verses: Tuple[int, ...] = field(default_factory=tuple)

    @property
    def description(self):
        if not self.verses:
            return f"{self.book_name} {self.chapter}"
        listed = ', '.join(str(v) for v in self.verses)
        return f"{self.book_name} {self.chapter}:{listed}"

    def to_json(self):
        return {
            "collection_id": self.collection_id,
            "book_id": self.book_id,
            "book_name": self.book_name,
            "chapter": self.chapter,
            "verses": list(self.verses),
            "description": self.description,
        }
