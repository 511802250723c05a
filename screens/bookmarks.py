import logging

from screens.navigator import Screen

logger = logging.getLogger(__name__)


class BookmarksScreen(Screen):
    """List of locally stored bookmarks with edit and confirmed delete.

    After every mutation the list is re-read from the store, whether the
    mutation worked or not, so what is shown always matches storage.
    """
    route_name = 'bookmarks'

    def __init__(self, bookmark_store, notifier, bible_service=None, user_id=None):
        super().__init__()
        self.bookmark_store = bookmark_store
        self.notifier = notifier
        self.bible_service = bible_service
        self.user_id = user_id
        self.bookmarks = []
        self.load_error = None

    def load(self):
        try:
            self.bookmarks = self.bookmark_store.get_bookmarks()
            self.load_error = None
        except Exception as e:
            logger.error(f"Error loading bookmarks: {str(e)}", exc_info=True)
            self.bookmarks = []
            self.load_error = str(e)
        return self.bookmarks

    def _mirror(self, write, description):
        if self.bible_service is None or not self.user_id:
            return
        try:
            write()
        except Exception as e:
            logger.warning(f"Remote mirror of {description} failed; local copy kept: {e}")

    def delete(self, bookmark_id, confirmed=False):
        if not confirmed:
            logger.debug(f"Delete of bookmark {bookmark_id} not confirmed")
            return False
        try:
            existing = self.bookmark_store.get_bookmark(bookmark_id)
            if existing is None:
                self.notifier.show_error("Bookmark not found")
                return False
            self.bookmark_store.remove_bookmark(bookmark_id)
            self._mirror(
                lambda: self.bible_service.remove_bookmark(self.user_id, existing),
                f"delete of {existing.reference}",
            )
            self.notifier.show_message("Bookmark deleted")
            return True
        except Exception as e:
            logger.error(f"Error deleting bookmark {bookmark_id}: {str(e)}", exc_info=True)
            self.notifier.show_error("Failed to delete bookmark")
            return False
        finally:
            self.load()

    def edit(self, bookmark_id, note=None, tags=None):
        try:
            updated = self.bookmark_store.update_bookmark(bookmark_id, note=note, tags=tags)
            self._mirror(
                lambda: self.bible_service.update_bookmark(self.user_id, updated),
                f"edit of {updated.reference}",
            )
            self.notifier.show_message("Bookmark updated")
            return updated
        except Exception as e:
            logger.error(f"Error updating bookmark {bookmark_id}: {str(e)}", exc_info=True)
            self.notifier.show_error(f"Failed to update bookmark: {e}")
            return None
        finally:
            self.load()

    def render(self):
        return {
            "route": self.route_name,
            "bookmarks": [b.model_dump(mode='json') for b in self.bookmarks],
            "count": len(self.bookmarks),
            "empty": not self.bookmarks,
            "error": self.load_error,
        }
