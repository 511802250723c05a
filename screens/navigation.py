import logging

logger = logging.getLogger(__name__)

FIRST_CHAPTER_MESSAGE = "Already at the first chapter"
LAST_CHAPTER_MESSAGE = "Already at the last chapter"


class ChapterNavigationController:
    """Moves a reader one chapter back/forward or to a chosen chapter.

    A successful move builds a brand-new reader for the new position and
    replaces the current one on the navigator; nothing on the old reader
    is mutated. A failed move leaves the old reader exactly as it was.
    """

    def __init__(self, bible_service, navigator, notifier, screen_factory):
        self.bible_service = bible_service
        self.navigator = navigator
        self.notifier = notifier
        self.screen_factory = screen_factory

    def go_to_previous(self, screen):
        return self._navigate(
            screen,
            lambda: self.bible_service.previous_chapter(screen.position),
            FIRST_CHAPTER_MESSAGE,
        )

    def go_to_next(self, screen):
        return self._navigate(
            screen,
            lambda: self.bible_service.next_chapter(screen.position),
            LAST_CHAPTER_MESSAGE,
        )

    def select_chapter(self, screen, chapter_number):
        return self._navigate(
            screen,
            lambda: self.bible_service.select_chapter(screen.position, chapter_number),
            f"Chapter {chapter_number} is not available",
        )

    def _navigate(self, screen, move, boundary_message):
        if not screen.begin_loading():
            logger.debug("Navigation ignored: another action is in flight")
            return False
        try:
            position = move()
            if not screen.mounted:
                # Reader went away while the chapter was loading
                return False
            if position is None:
                self.notifier.show_message(boundary_message)
                return False

            new_screen = self.screen_factory(position)
            self.navigator.replace(new_screen)
            new_screen.load()
            logger.info(f"Navigated from {screen.position.reference} to {position.reference}")
            return True
        except Exception as e:
            logger.error(f"Error navigating from {screen.position.reference}: {str(e)}", exc_info=True)
            if screen.mounted:
                self.notifier.show_error(f"Error: {e}")
            return False
        finally:
            screen.end_loading()
