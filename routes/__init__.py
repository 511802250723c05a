from flask import current_app, jsonify

from services.errors import ErrorKind

EXTENSION_KEY = 'bible_reader'

STATUS_BY_KIND = {
    ErrorKind.ENTITLEMENT_REQUIRED: 403,
    ErrorKind.PERMISSION_DENIED: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.NETWORK_UNAVAILABLE: 503,
    ErrorKind.UNKNOWN: 500,
}


def get_services():
    """The AppServices bound to the running app."""
    return current_app.extensions[EXTENSION_KEY]


def error_response(error):
    """JSON error body and status for a BibleException."""
    status = STATUS_BY_KIND.get(error.kind, 500)
    return jsonify({"error": str(error), "kind": error.kind.value}), status
