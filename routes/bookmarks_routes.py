# routes/bookmarks_routes.py
from flask import Blueprint, request, jsonify
import logging

from routes import error_response, get_services
from screens.bookmarks import BookmarksScreen
from screens.notifications import Notifier
from services.errors import BibleException
from utils.auth import token_required

logger = logging.getLogger(__name__)
bookmarks_bp = Blueprint('bookmarks_bp', __name__, url_prefix='/api/bookmarks')


def _bookmarks_screen(current_user_id):
    services = get_services()
    return BookmarksScreen(
        services.bookmark_store,
        Notifier(),
        bible_service=services.bible_service,
        user_id=current_user_id,
    )


def _screen_response(screen, status=200, **extra):
    body = screen.render()
    body["notifications"] = [n.to_json() for n in screen.notifier.drain()]
    body.update(extra)
    return jsonify(body), status


@bookmarks_bp.route("/", methods=['GET'])
@token_required
def get_bookmarks(current_user_id):
    screen = _bookmarks_screen(current_user_id)
    screen.load()
    if screen.load_error:
        return jsonify({"error": "Failed to fetch bookmarks"}), 500
    return _screen_response(screen)


@bookmarks_bp.route("/<int:bookmark_id>", methods=['PUT'])
@token_required
def update_bookmark(current_user_id, bookmark_id):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid JSON payload"}), 400
    note = data.get('note')
    tags = data.get('tags')
    if note is not None and not isinstance(note, str):
        return jsonify({"error": "Invalid data type for note"}), 400
    if tags is not None and (not isinstance(tags, list) or not all(isinstance(t, str) for t in tags)):
        return jsonify({"error": "tags must be a list of strings"}), 400

    screen = _bookmarks_screen(current_user_id)
    updated = screen.edit(bookmark_id, note=note, tags=tags)
    if updated is not None:
        return _screen_response(screen, bookmark=updated.model_dump(mode='json'))
    try:
        missing = screen.bookmark_store.get_bookmark(bookmark_id) is None
    except BibleException as e:
        return error_response(e)
    return _screen_response(screen, 404 if missing else 500)


@bookmarks_bp.route("/<int:bookmark_id>", methods=['DELETE'])
@token_required
def delete_bookmark(current_user_id, bookmark_id):
    confirmed = request.args.get('confirm', '').lower() in ('1', 'true', 'yes')
    if not confirmed:
        return jsonify({"error": "Deleting a bookmark must be confirmed (confirm=true)"}), 400

    screen = _bookmarks_screen(current_user_id)
    try:
        existing = screen.bookmark_store.get_bookmark(bookmark_id)
    except BibleException as e:
        return error_response(e)
    if existing is None:
        screen.load()
        return _screen_response(screen, 404)
    deleted = screen.delete(bookmark_id, confirmed=True)
    return _screen_response(screen, 200 if deleted else 500)
