# utils/auth.py
import jwt
from datetime import datetime, timedelta, timezone
from functools import wraps
from flask import request, jsonify, current_app
import logging

logger = logging.getLogger(__name__)


def generate_token(user_id, secret, audience='authenticated', expiration_hours=24):
    """Generate a JWT shaped like the ones Supabase Auth issues."""
    expiration = datetime.now(timezone.utc) + timedelta(hours=expiration_hours)
    return jwt.encode(
        {
            'sub': user_id,
            'aud': audience,
            'exp': expiration
        },
        secret,
        algorithm='HS256'
    )


def token_required(f):
    """Decorator to protect routes with JWT; passes the user id as first argument."""
    @wraps(f)
    def decorated(*args, **kwargs):
        token = None
        auth_header = request.headers.get('Authorization')

        if auth_header:
            parts = auth_header.split(" ")
            if len(parts) != 2 or parts[0].lower() != 'bearer':
                logger.warning("Invalid token format in Authorization header.")
                return jsonify({'error': 'Invalid token format'}), 401
            token = parts[1]
        else:
            logger.warning(f"Authorization header missing for {request.path}")

        if not token:
            return jsonify({'error': 'Token is required'}), 401

        try:
            data = jwt.decode(
                token,
                current_app.config['JWT_SECRET'],
                algorithms=["HS256"],
                audience=current_app.config['JWT_AUDIENCE'],
            )
            current_user_id = data['sub']
        except jwt.ExpiredSignatureError:
            logger.warning("Token has expired.")
            return jsonify({'error': 'Token has expired'}), 401
        except (jwt.InvalidTokenError, KeyError) as e:
            logger.warning(f"Invalid token: {e}")
            return jsonify({'error': 'Invalid token'}), 401

        return f(current_user_id, *args, **kwargs)

    return decorated
