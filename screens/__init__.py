from .navigator import Navigator, Screen
from .notifications import Clipboard, Notification, NotificationLevel, Notifier
from .reader import ReaderContext, ReaderScreen, render_reader
from .bookmarks import BookmarksScreen
from .premium import PremiumUpsellScreen
from .sessions import ReaderSession, ReaderSessions

__all__ = [
    'Navigator',
    'Screen',
    'Clipboard',
    'Notification',
    'NotificationLevel',
    'Notifier',
    'ReaderContext',
    'ReaderScreen',
    'render_reader',
    'BookmarksScreen',
    'PremiumUpsellScreen',
    'ReaderSession',
    'ReaderSessions',
]
