# screens/reader.py
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from schemas.preferences_schemas import Preferences
from screens.annotations import ACCESS_ERROR_KINDS, AnnotationFlow
from screens.navigation import ChapterNavigationController
from screens.navigator import Screen
from screens.premium import PremiumUpsellScreen
from screens.selection import (
    VerseSelection,
    format_passage,
    format_verse_for_copy,
    format_verse_for_share,
)
from services.errors import BibleException, EntitlementRequired, NotFound

logger = logging.getLogger(__name__)

# Menu shown when a verse is tapped outside selection mode
VERSE_ACTIONS = ('copy', 'share', 'bookmark', 'highlight', 'note', 'ask_ai')

HIGHLIGHT_ACCESS_MESSAGE = "Highlights need a premium subscription or an internet connection"
NOTE_ACCESS_MESSAGE = "Notes need a premium subscription or an internet connection"


@dataclass
class ReaderContext:
    """Everything a reader needs that outlives a single chapter."""
    bible_service: object
    bookmark_store: object
    premium_service: object
    user_id: str
    navigator: object
    notifier: object
    clipboard: object


@dataclass(frozen=True)
class VerseView:
    number: int
    text: str
    highlight: Optional[str] = None
    selected: bool = False
    bookmarked: bool = False

    def to_json(self):
        return {
            "verse": self.number,
            "text": self.text,
            "highlight": self.highlight,
            "selected": self.selected,
            "bookmarked": self.bookmarked,
        }


@dataclass(frozen=True)
class ReaderView:
    reference: str
    book_id: str
    book_name: str
    chapter: int
    translation: str
    verses: Tuple[VerseView, ...]
    selection_mode: bool
    selected_count: int
    is_loading: bool
    is_loading_content: bool
    font_size: float
    font_family: str
    show_verse_numbers: bool
    night_mode: bool
    route: str = 'reader'
    actions: Tuple[str, ...] = field(default=VERSE_ACTIONS)

    def to_json(self):
        return {
            "route": self.route,
            "reference": self.reference,
            "book_id": self.book_id,
            "book_name": self.book_name,
            "chapter": self.chapter,
            "translation": self.translation,
            "total_verses": len(self.verses),
            "verses": [v.to_json() for v in self.verses],
            "selection_mode": self.selection_mode,
            "selected_count": self.selected_count,
            "is_loading": self.is_loading,
            "is_loading_content": self.is_loading_content,
            "theme": "dark" if self.night_mode else "light",
            "font_size": self.font_size,
            "font_family": self.font_family,
            "show_verse_numbers": self.show_verse_numbers,
            "verse_actions": list(self.actions),
        }


def find_highlight(highlights, verse_number):
    """First highlight recorded for ``verse_number``, if any."""
    for highlight in highlights:
        if highlight.verse == verse_number:
            return highlight
    return None


def render_reader(chapter, preferences, highlights, selection, is_loading,
                  bookmarked=frozenset(), is_loading_content=False):
    """Build the reader's view state. Depends only on its arguments."""
    verses = []
    for verse in chapter.verses:
        highlight = find_highlight(highlights, verse.number)
        verses.append(VerseView(
            number=verse.number,
            text=verse.text,
            highlight=highlight.color.value if highlight else None,
            selected=verse.number in selection,
            bookmarked=verse.number in bookmarked,
        ))
    return ReaderView(
        reference=chapter.reference,
        book_id=chapter.book_id,
        book_name=chapter.book_name,
        chapter=chapter.number,
        translation=chapter.translation,
        verses=tuple(verses),
        selection_mode=selection.is_active,
        selected_count=len(selection),
        is_loading=is_loading,
        is_loading_content=is_loading_content,
        font_size=preferences.font_size,
        font_family=preferences.font_family,
        show_verse_numbers=preferences.show_verse_numbers,
        night_mode=preferences.night_mode,
    )


class ReaderScreen(Screen):
    """One chapter on screen. Built fresh for every chapter change."""
    route_name = 'reader'

    def __init__(self, context, position, preferences=None):
        super().__init__()
        self.context = context
        self.position = position
        self.preferences = preferences or Preferences(user_id=context.user_id)
        self._preferences_loaded = preferences is not None
        self.highlights = []
        self.bookmarked = frozenset()
        self.selection = VerseSelection()
        self.is_loading_content = False
        self.annotations = AnnotationFlow(
            context.bible_service,
            context.bookmark_store,
            context.premium_service,
            context.user_id,
        )
        self.navigation = ChapterNavigationController(
            context.bible_service,
            context.navigator,
            context.notifier,
            self._next_reader,
        )

    @property
    def chapter(self):
        return self.position.chapter

    def _next_reader(self, position):
        return ReaderScreen(self.context, position, self.preferences)

    @property
    def notifier(self):
        return self.context.notifier

    # --- Loading ---

    def load(self):
        """Fetch preferences, highlights and bookmark markers for this chapter."""
        self.is_loading_content = True
        try:
            if not self._preferences_loaded:
                try:
                    preferences = self.context.bible_service.get_preferences(self.context.user_id)
                    if self.mounted:
                        self.preferences = preferences
                        self._preferences_loaded = True
                except Exception as e:
                    logger.warning(f"Using default preferences for {self.context.user_id}: {e}")
            self.load_highlights()
            self.load_bookmarks()
        finally:
            self.is_loading_content = False

    def load_highlights(self):
        try:
            highlights = self.context.bible_service.list_highlights(
                self.context.user_id, self.chapter.book_id, self.chapter.number)
        except Exception as e:
            logger.warning(f"Could not load highlights for {self.chapter.reference}: {e}")
            return
        if self.mounted:
            self.highlights = highlights

    def load_bookmarks(self):
        try:
            verses = self.context.bookmark_store.bookmarked_verses(self.chapter.book_id, self.chapter.number)
        except Exception as e:
            logger.warning(f"Could not load bookmark markers for {self.chapter.reference}: {e}")
            return
        if self.mounted:
            self.bookmarked = frozenset(verses)

    # --- Rendering ---

    def highlight_for(self, verse_number):
        return find_highlight(self.highlights, verse_number)

    def view(self):
        return render_reader(
            self.chapter,
            self.preferences,
            self.highlights,
            self.selection,
            self.is_loading,
            bookmarked=self.bookmarked,
            is_loading_content=self.is_loading_content,
        )

    def render(self):
        return self.view().to_json()

    # --- Navigation ---

    def go_to_previous(self):
        return self.navigation.go_to_previous(self)

    def go_to_next(self):
        return self.navigation.go_to_next(self)

    def select_chapter(self, chapter_number):
        return self.navigation.select_chapter(self, chapter_number)

    # --- Selection ---

    def _require_verse(self, verse_number):
        verse = self.chapter.get_verse(verse_number)
        if verse is None:
            raise NotFound(f"{self.chapter.reference} has no verse {verse_number}")
        return verse

    def long_press_verse(self, verse_number):
        self._require_verse(verse_number)
        self.selection.begin(verse_number)

    def tap_verse(self, verse_number):
        """Toggle in selection mode; otherwise return the verse's action menu."""
        self._require_verse(verse_number)
        if self.selection.is_active:
            self.selection.toggle(verse_number)
            return None
        return list(VERSE_ACTIONS)

    def select_all(self):
        self.selection.select_all(self.chapter.verse_numbers)

    def cancel_selection(self):
        self.selection.cancel()

    def _selected_verses(self):
        return [v for v in self.chapter.verses if v.number in self.selection]

    def copy_selected(self):
        try:
            verses = self._selected_verses()
            if not verses:
                self.notifier.show_message("No verses selected")
                return None
            text = format_passage(self.chapter.reference, verses)
            self.context.clipboard.set_text(text)
            self.notifier.show_message(f"{len(verses)} verses copied")
            return text
        finally:
            self.selection.cancel()

    def share_selected(self):
        try:
            verses = self._selected_verses()
            if not verses:
                self.notifier.show_message("No verses selected")
                return None
            return {
                "text": format_passage(self.chapter.reference, verses),
                "subject": "Share selected verses",
            }
        finally:
            self.selection.cancel()

    # --- Single verse / whole chapter ---

    def copy_verse(self, verse_number):
        verse = self._require_verse(verse_number)
        text = format_verse_for_copy(self.chapter, verse)
        self.context.clipboard.set_text(text)
        self.notifier.show_message("Verse copied")
        return text

    def share_verse(self, verse_number):
        verse = self._require_verse(verse_number)
        return {"text": format_verse_for_share(self.chapter, verse), "subject": "Share Bible verse"}

    def copy_chapter(self):
        text = format_passage(self.chapter.reference, self.chapter.verses)
        self.context.clipboard.set_text(text)
        self.notifier.show_message("Chapter copied")
        return text

    def share_chapter(self):
        return {
            "text": format_passage(self.chapter.reference, self.chapter.verses),
            "subject": "Share Bible chapter",
        }

    # --- Annotations ---

    def _show_upsell(self, feature):
        if self.mounted:
            self.context.navigator.push(PremiumUpsellScreen(feature))

    def add_bookmark(self, verse_number, note=None, tags=None):
        verse = self._require_verse(verse_number)
        if not self.begin_loading():
            return None
        try:
            record = self.annotations.add_bookmark(self.chapter, verse, note=note, tags=tags)
            if self.mounted:
                self.bookmarked = self.bookmarked | {verse_number}
                self.notifier.show_message("Bookmark saved locally!")
            return record
        except EntitlementRequired as e:
            self._show_upsell(e.feature)
            return None
        except Exception as e:
            logger.error(f"Error adding bookmark for {verse.reference(self.chapter.book_name, self.chapter.number)}: {str(e)}", exc_info=True)
            if self.mounted:
                self.notifier.show_error(f"Failed to add bookmark: {e}")
            return None
        finally:
            self.end_loading()

    def add_highlight(self, verse_number, color):
        verse = self._require_verse(verse_number)
        if not self.begin_loading():
            return None
        try:
            highlight = self.annotations.add_highlight(self.chapter, verse, color)
            if self.mounted:
                self.highlights = [h for h in self.highlights if h.verse != verse_number] + [highlight]
                self.notifier.show_message("Verse highlighted!")
            return highlight
        except EntitlementRequired as e:
            self._show_upsell(e.feature)
            return None
        except BibleException as e:
            logger.error(f"Error highlighting {self.chapter.reference}:{verse_number}: {e}")
            if self.mounted:
                if e.kind in ACCESS_ERROR_KINDS:
                    self.notifier.show_error(HIGHLIGHT_ACCESS_MESSAGE)
                else:
                    self.notifier.show_error(f"Failed to highlight verse: {e}")
            return None
        except Exception as e:
            logger.error(f"Error highlighting {self.chapter.reference}:{verse_number}: {str(e)}", exc_info=True)
            if self.mounted:
                self.notifier.show_error(f"Failed to highlight verse: {e}")
            return None
        finally:
            self.end_loading()

    def add_note(self, verse_number, content, tags=None):
        verse = self._require_verse(verse_number)
        if not self.begin_loading():
            return None
        try:
            note = self.annotations.add_note(self.chapter, verse, content, tags=tags)
            if self.mounted:
                self.notifier.show_message("Note saved!")
            return note
        except EntitlementRequired as e:
            self._show_upsell(e.feature)
            return None
        except BibleException as e:
            logger.error(f"Error saving note for {self.chapter.reference}:{verse_number}: {e}")
            if self.mounted:
                if e.kind in ACCESS_ERROR_KINDS:
                    self.notifier.show_error(NOTE_ACCESS_MESSAGE)
                else:
                    self.notifier.show_error(f"Failed to save note: {e}")
            return None
        except Exception as e:
            logger.error(f"Error saving note for {self.chapter.reference}:{verse_number}: {str(e)}", exc_info=True)
            if self.mounted:
                self.notifier.show_error(f"Failed to save note: {e}")
            return None
        finally:
            self.end_loading()

    def open_ai_chat(self):
        """Chat context for this chapter (and the selected verses, if any)."""
        try:
            return self.annotations.chat_context(self.position, self.selection.ordered())
        except EntitlementRequired as e:
            self._show_upsell(e.feature)
            return None
        except Exception as e:
            logger.error(f"Error opening AI chat for {self.chapter.reference}: {str(e)}", exc_info=True)
            if self.mounted:
                self.notifier.show_error(f"Could not open AI chat: {e}")
            return None
