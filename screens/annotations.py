import logging

from models.bible import ChatContext
from schemas.annotation_schemas import HighlightColor
from schemas.bookmark_schemas import BookmarkCreate
from services.errors import EntitlementRequired, ErrorKind

logger = logging.getLogger(__name__)

# Failures that mean "you need premium or a connection", not "something broke"
ACCESS_ERROR_KINDS = {
    ErrorKind.ENTITLEMENT_REQUIRED,
    ErrorKind.PERMISSION_DENIED,
    ErrorKind.NETWORK_UNAVAILABLE,
}


def parse_highlight_color(color):
    try:
        return HighlightColor(color)
    except ValueError:
        palette = ', '.join(c.value for c in HighlightColor)
        raise ValueError(f"Unknown highlight color '{color}' (expected one of: {palette})") from None


class AnnotationFlow:
    """Bookmarks, highlights, notes and chat context for one user.

    Every gated action asks the premium service first and raises
    EntitlementRequired before anything is written.
    """

    def __init__(self, bible_service, bookmark_store, premium_service, user_id):
        self.bible_service = bible_service
        self.bookmark_store = bookmark_store
        self.premium_service = premium_service
        self.user_id = user_id

    def require_premium(self, feature):
        if not self.premium_service.is_premium(self.user_id):
            logger.info(f"{feature} blocked for {self.user_id}: not premium")
            raise EntitlementRequired(feature)

    def add_bookmark(self, chapter, verse, note=None, tags=None):
        self.require_premium('bookmarks')

        record = self.bookmark_store.add_bookmark(BookmarkCreate(
            book_id=chapter.book_id,
            book_name=chapter.book_name,
            chapter=chapter.number,
            verse=verse.number,
            text=verse.text,
            note=note or None,
            tags=list(tags or []),
        ))
        # Local copy is committed; the remote copy is best-effort only
        self.mirror(
            lambda: self.bible_service.add_bookmark(self.user_id, record),
            f"bookmark {record.reference}",
        )
        return record

    def mirror(self, write, description):
        """Run a remote write whose failure must not affect the local result."""
        try:
            write()
            return True
        except Exception as e:
            logger.warning(f"Remote mirror of {description} failed; local copy kept: {e}")
            return False

    def add_highlight(self, chapter, verse, color):
        color = parse_highlight_color(color)
        self.require_premium('highlights')
        return self.bible_service.add_highlight(self.user_id, chapter, verse, color)

    def add_note(self, chapter, verse, content, tags=None):
        if not content or not content.strip():
            raise ValueError("Note content is required")
        self.require_premium('notes')
        return self.bible_service.add_note(self.user_id, chapter, verse, content.strip(), tags=tags)

    def chat_context(self, position, selected_verses=()):
        self.require_premium('ai_chat')
        chapter = position.chapter
        return ChatContext(
            collection_id=position.collection_id,
            book_id=chapter.book_id,
            book_name=chapter.book_name,
            chapter=chapter.number,
            verses=tuple(sorted(selected_verses)),
        )
