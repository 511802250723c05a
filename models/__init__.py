# This file makes the models directory a Python package
from .bible import Verse, Chapter, Book, Collection, ReadingPosition, ChatContext
from .bookmark import LocalBookmark

__all__ = [
    'Verse',
    'Chapter',
    'Book',
    'Collection',
    'ReadingPosition',
    'ChatContext',
    'LocalBookmark',
]
