from .bookmark_schemas import BookmarkCreate, BookmarkUpdate, BookmarkRead
from .annotation_schemas import HighlightColor, Highlight, Note, NoteUpdate, annotation_id
from .preferences_schemas import Preferences, PreferencesUpdate

__all__ = [
    'BookmarkCreate',
    'BookmarkUpdate',
    'BookmarkRead',
    'HighlightColor',
    'Highlight',
    'Note',
    'NoteUpdate',
    'annotation_id',
    'Preferences',
    'PreferencesUpdate',
]
