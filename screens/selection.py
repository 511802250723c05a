import threading


class VerseSelection:
    """Multi-select state for one reader screen.

    Selection mode is entered with a long-press and left automatically as
    soon as the last verse is toggled off, so outside of select_all/cancel
    the mode is active exactly when the set is non-empty.
    """

    def __init__(self):
        self._verses = set()
        self._active = False
        self._lock = threading.Lock()

    @property
    def is_active(self):
        return self._active

    @property
    def verses(self):
        return frozenset(self._verses)

    def __len__(self):
        return len(self._verses)

    def __contains__(self, verse_number):
        return verse_number in self._verses

    def begin(self, verse_number):
        with self._lock:
            self._active = True
            self._verses = {verse_number}

    def toggle(self, verse_number):
        """Flip membership of one verse. No-op (returns False) outside selection mode."""
        with self._lock:
            if not self._active:
                return False
            if verse_number in self._verses:
                self._verses.discard(verse_number)
            else:
                self._verses.add(verse_number)
            if not self._verses:
                self._active = False
            return True

    def select_all(self, verse_numbers):
        with self._lock:
            self._active = True
            self._verses = set(verse_numbers)

    def cancel(self):
        with self._lock:
            self._active = False
            self._verses = set()

    def ordered(self):
        return sorted(self._verses)


def format_passage(reference, verses):
    """'Book C' header followed by numbered verses, blank line between each."""
    body = '\n\n'.join(f"{v.number}. {v.text}" for v in sorted(verses, key=lambda v: v.number))
    return f"{reference}\n\n{body}"


def format_verse_for_copy(chapter, verse):
    return f"{verse.text}\n\n{chapter.reference}:{verse.number}"


def format_verse_for_share(chapter, verse):
    return f"{chapter.reference} {verse.number}\n{verse.text}"
