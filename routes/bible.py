# routes/bible.py
from flask import Blueprint, jsonify
import logging

from routes import error_response, get_services
from services.errors import BibleException

bible_bp = Blueprint('bible', __name__)
logger = logging.getLogger(__name__)


@bible_bp.route('/collections', methods=['GET'])
def get_collections():
    try:
        collections = get_services().bible_service.list_collections()
        return jsonify([c.to_json() for c in collections])
    except BibleException as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error in get_collections: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to load collections"}), 500


@bible_bp.route('/collections/<collection_id>/books', methods=['GET'])
def get_books(collection_id):
    try:
        books = get_services().bible_service.list_books(collection_id)
        if not books:
            return jsonify({"error": "Collection not found or empty"}), 404
        return jsonify([b.to_json() for b in books])
    except BibleException as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error in get_books for {collection_id}: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to load books"}), 500


@bible_bp.route('/books/<book_id>/chapters/<int:chapter>', methods=['GET'])
def get_chapter(book_id, chapter):
    try:
        position = get_services().bible_service.open_chapter(book_id, chapter)
        return jsonify(position.chapter.to_json())
    except BibleException as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error in get_chapter for {book_id} {chapter}: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to load chapter"}), 500
