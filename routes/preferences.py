from flask import Blueprint, request, jsonify
from pydantic import ValidationError
import logging

from routes import error_response, get_services
from schemas.preferences_schemas import PreferencesUpdate
from services.errors import BibleException
from utils.auth import token_required

preferences_bp = Blueprint('preferences', __name__)
logger = logging.getLogger(__name__)


@preferences_bp.route('', methods=['GET'])
@token_required
def get_preferences(current_user_id):
    try:
        preferences = get_services().bible_service.get_preferences(current_user_id)
        return jsonify(preferences.model_dump(mode='json'))
    except BibleException as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error fetching preferences: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to fetch preferences"}), 500


@preferences_bp.route('', methods=['PUT'])
@token_required
def update_preferences(current_user_id):
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Invalid JSON payload"}), 400
    try:
        changes = PreferencesUpdate.model_validate(data)
    except ValidationError as e:
        return jsonify({"error": "Invalid preferences", "details": e.errors(include_url=False, include_context=False, include_input=False)}), 400

    try:
        preferences = get_services().bible_service.update_preferences(current_user_id, changes)
        return jsonify(preferences.model_dump(mode='json'))
    except BibleException as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error updating preferences: {str(e)}", exc_info=True)
        return jsonify({"error": "Failed to update preferences"}), 500
