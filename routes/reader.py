# routes/reader.py
from flask import Blueprint, request, jsonify
from functools import wraps
import logging

from routes import error_response, get_services
from schemas.annotation_schemas import HighlightColor
from screens.reader import ReaderScreen
from services.errors import BibleException
from utils.auth import token_required

reader_bp = Blueprint('reader', __name__)
logger = logging.getLogger(__name__)


def session_response(session, status=200, **extra):
    top = session.top
    body = {
        "session_id": session.id,
        "screen": top.render() if top is not None else None,
        "routes": session.navigator.routes(),
        "notifications": [n.to_json() for n in session.notifier.drain()],
    }
    body.update(extra)
    return jsonify(body), status


def with_session(f):
    """Resolve <session_id> for the authenticated user."""
    @wraps(f)
    @token_required
    def decorated(current_user_id, session_id, *args, **kwargs):
        try:
            session = get_services().sessions.get(session_id, current_user_id)
        except BibleException as e:
            return error_response(e)
        return f(session, *args, **kwargs)
    return decorated


def with_reader(f):
    """Like with_session, but the reader must be the screen on top."""
    @wraps(f)
    @with_session
    def decorated(session, *args, **kwargs):
        reader = session.top
        if not isinstance(reader, ReaderScreen):
            return jsonify({
                "error": "Reader is not the active screen",
                "routes": session.navigator.routes(),
            }), 409
        try:
            return f(session, reader, *args, **kwargs)
        except BibleException as e:
            return error_response(e)
        except Exception as e:
            logger.error(f"Error handling {request.path}: {str(e)}", exc_info=True)
            return jsonify({"error": "Something went wrong, please try again"}), 500
    return decorated


def _json_body():
    return request.get_json(silent=True) or {}


@reader_bp.route('', methods=['POST'])
@token_required
def open_reader(current_user_id):
    data = _json_body()
    book_id = data.get('book_id')
    chapter = data.get('chapter', 1)
    if not isinstance(book_id, str) or not isinstance(chapter, int):
        return jsonify({"error": "book_id (string) and chapter (integer) are required"}), 400

    try:
        session = get_services().sessions.open(current_user_id, book_id, chapter)
    except BibleException as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error opening reader at {book_id} {chapter}: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to open reader"}), 500
    return session_response(session, 201)


@reader_bp.route('/<session_id>', methods=['GET'])
@with_session
def get_reader(session):
    return session_response(session)


@reader_bp.route('/<session_id>', methods=['DELETE'])
@token_required
def close_reader(current_user_id, session_id):
    try:
        get_services().sessions.close(session_id, current_user_id)
    except BibleException as e:
        return error_response(e)
    return jsonify({"message": "Reader session closed"}), 200


@reader_bp.route('/<session_id>/back', methods=['POST'])
@with_session
def go_back(session):
    if session.navigator.depth <= 1:
        return jsonify({"error": "Nothing to go back to"}), 409
    session.navigator.pop()
    return session_response(session)


# --- Chapter navigation ---

@reader_bp.route('/<session_id>/previous', methods=['POST'])
@with_reader
def previous_chapter(session, reader):
    moved = reader.go_to_previous()
    return session_response(session, moved=moved)


@reader_bp.route('/<session_id>/next', methods=['POST'])
@with_reader
def next_chapter(session, reader):
    moved = reader.go_to_next()
    return session_response(session, moved=moved)


@reader_bp.route('/<session_id>/chapters/<int:chapter>', methods=['POST'])
@with_reader
def select_chapter(session, reader, chapter):
    moved = reader.select_chapter(chapter)
    return session_response(session, moved=moved)


# --- Selection ---

@reader_bp.route('/<session_id>/verses/<int:verse>/long-press', methods=['POST'])
@with_reader
def long_press_verse(session, reader, verse):
    reader.long_press_verse(verse)
    return session_response(session)


@reader_bp.route('/<session_id>/verses/<int:verse>/tap', methods=['POST'])
@with_reader
def tap_verse(session, reader, verse):
    actions = reader.tap_verse(verse)
    return session_response(session, verse_actions=actions)


@reader_bp.route('/<session_id>/selection/select-all', methods=['POST'])
@with_reader
def select_all(session, reader):
    reader.select_all()
    return session_response(session)


@reader_bp.route('/<session_id>/selection/cancel', methods=['POST'])
@with_reader
def cancel_selection(session, reader):
    reader.cancel_selection()
    return session_response(session)


@reader_bp.route('/<session_id>/selection/copy', methods=['POST'])
@with_reader
def copy_selected(session, reader):
    text = reader.copy_selected()
    return session_response(session, text=text)


@reader_bp.route('/<session_id>/selection/share', methods=['POST'])
@with_reader
def share_selected(session, reader):
    payload = reader.share_selected() or {}
    return session_response(session, **payload)


# --- Verse and chapter actions ---

@reader_bp.route('/<session_id>/verses/<int:verse>/copy', methods=['POST'])
@with_reader
def copy_verse(session, reader, verse):
    return session_response(session, text=reader.copy_verse(verse))


@reader_bp.route('/<session_id>/verses/<int:verse>/share', methods=['POST'])
@with_reader
def share_verse(session, reader, verse):
    return session_response(session, **reader.share_verse(verse))


@reader_bp.route('/<session_id>/chapter/copy', methods=['POST'])
@with_reader
def copy_chapter(session, reader):
    return session_response(session, text=reader.copy_chapter())


@reader_bp.route('/<session_id>/chapter/share', methods=['POST'])
@with_reader
def share_chapter(session, reader):
    return session_response(session, **reader.share_chapter())


@reader_bp.route('/<session_id>/verses/<int:verse>/bookmark', methods=['POST'])
@with_reader
def bookmark_verse(session, reader, verse):
    data = _json_body()
    note = data.get('note')
    tags = data.get('tags') or []
    if note is not None and not isinstance(note, str):
        return jsonify({"error": "Invalid data type for note"}), 400
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        return jsonify({"error": "tags must be a list of strings"}), 400

    record = reader.add_bookmark(verse, note=note, tags=tags)
    bookmark = record.model_dump(mode='json') if record else None
    return session_response(session, 201 if record else 200, bookmark=bookmark)


@reader_bp.route('/<session_id>/verses/<int:verse>/highlight', methods=['POST'])
@with_reader
def highlight_verse(session, reader, verse):
    color = _json_body().get('color')
    if color not in {c.value for c in HighlightColor}:
        return jsonify({
            "error": "Invalid highlight color",
            "palette": [c.value for c in HighlightColor],
        }), 400

    highlight = reader.add_highlight(verse, color)
    body = highlight.model_dump(mode='json') if highlight else None
    return session_response(session, 201 if highlight else 200, highlight=body)


@reader_bp.route('/<session_id>/verses/<int:verse>/note', methods=['POST'])
@with_reader
def note_verse(session, reader, verse):
    data = _json_body()
    content = data.get('content')
    if not isinstance(content, str) or not content.strip():
        return jsonify({"error": "content is required"}), 400

    note = reader.add_note(verse, content, tags=data.get('tags'))
    body = note.model_dump(mode='json') if note else None
    return session_response(session, 201 if note else 200, note=body)


@reader_bp.route('/<session_id>/chat', methods=['POST'])
@with_reader
def open_chat(session, reader):
    context = reader.open_ai_chat()
    return session_response(session, chat_context=context.to_json() if context else None)
