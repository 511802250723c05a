import pytest

from models.bible import Chapter, ChatContext, Verse
from conftest import KEJADIAN, make_chapter


def test_chapter_sorts_verses_on_construction():
    chapter = Chapter('01_kejadian', 'Kejadian', 3, 'TB', verses=(Verse(3, 'c'), Verse(1, 'a'), Verse(2, 'b')))

    assert chapter.verse_numbers == [1, 2, 3]
    assert chapter.total_verses == 3
    assert chapter.reference == 'Kejadian 3'


def test_chapter_rejects_duplicate_verse_numbers():
    with pytest.raises(ValueError):
        Chapter('01_kejadian', 'Kejadian', 1, 'TB', verses=(Verse(1, 'a'), Verse(1, 'b')))


def test_chapter_rejects_non_positive_verse_numbers():
    with pytest.raises(ValueError):
        Chapter('01_kejadian', 'Kejadian', 1, 'TB', verses=(Verse(0, 'a'),))


def test_chapter_is_immutable():
    chapter = make_chapter(KEJADIAN, 1, 3)
    with pytest.raises(AttributeError):
        chapter.number = 2


def test_verse_lookup_and_range():
    chapter = make_chapter(KEJADIAN, 2, 10)

    assert chapter.get_verse(4).text == 'Kejadian 2 ayat 4'
    assert chapter.get_verse(11) is None
    assert [v.number for v in chapter.verse_range(3, 5)] == [3, 4, 5]


def test_verse_clean_text_strips_footnotes_and_markup():
    verse = Verse(1, 'Pada mulanya[1] Allah  <i>menciptakan</i> langit')
    assert verse.clean_text == 'Pada mulanya Allah menciptakan langit'
    assert verse.reference('Kejadian', 1) == 'Kejadian 1:1'


def test_book_has_chapter():
    assert KEJADIAN.has_chapter(1)
    assert KEJADIAN.has_chapter(4)
    assert not KEJADIAN.has_chapter(0)
    assert not KEJADIAN.has_chapter(5)


def test_chat_context_description():
    whole = ChatContext('tb_malay', '01_kejadian', 'Kejadian', 3)
    picked = ChatContext('tb_malay', '01_kejadian', 'Kejadian', 3, verses=(2, 5))

    assert whole.description == 'Kejadian 3'
    assert picked.description == 'Kejadian 3:2, 5'
    assert picked.to_json()['verses'] == [2, 5]
