from dataclasses import dataclass

from .bible_service import BibleService
from .bookmark_store import LocalBookmarkStore
from .premium_service import PremiumService


@dataclass
class AppServices:
    """Collaborators shared by every request of one Flask app."""
    bible_service: BibleService
    bookmark_store: LocalBookmarkStore
    premium_service: PremiumService
    sessions: object  # screens.sessions.ReaderSessions


__all__ = [
    'AppServices',
    'BibleService',
    'LocalBookmarkStore',
    'PremiumService',
]
