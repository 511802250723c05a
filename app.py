# app.py
from flask import Flask, jsonify, request, g
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix
import logging
import time
import sys

from config import Config
from database import init_db
from routes import EXTENSION_KEY, get_services
from routes.bible import bible_bp
from routes.bookmarks_routes import bookmarks_bp
from routes.preferences import preferences_bp
from routes.reader import reader_bp
from screens.sessions import ReaderSessions
from services import AppServices, BibleService, LocalBookmarkStore, PremiumService
from services.bible_repository import SupabaseBibleRepository

# Configure logging to output to stdout
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def build_services(config):
    """Wire the production collaborators from app config."""
    bible_service = BibleService(
        SupabaseBibleRepository(),
        cross_book_navigation=config['CROSS_BOOK_NAVIGATION'],
        default_translation=config['DEFAULT_TRANSLATION'],
        default_language=config['DEFAULT_LANGUAGE'],
    )
    bookmark_store = LocalBookmarkStore()
    premium_service = PremiumService()
    return AppServices(
        bible_service=bible_service,
        bookmark_store=bookmark_store,
        premium_service=premium_service,
        sessions=ReaderSessions(
            bible_service,
            bookmark_store,
            premium_service,
            idle_ttl=config['READER_SESSION_IDLE_SECONDS'],
            max_per_user=config['READER_SESSIONS_PER_USER'],
        ),
    )


def create_app(overrides=None, services=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    # Use ProxyFix to handle proxy headers properly
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)
    app.json.sort_keys = False  # Preserve order of keys in JSON responses
    app.url_map.strict_slashes = False

    CORS(app, resources={
        r"/api/*": {
            "origins": "*",
            "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
            "expose_headers": ["Content-Type", "Authorization"],
        }
    })

    if services is None:
        init_db()
        services = build_services(app.config)
    app.extensions[EXTENSION_KEY] = services

    app.register_blueprint(bible_bp, url_prefix='/api/bible')
    app.register_blueprint(reader_bp, url_prefix='/api/reader')
    app.register_blueprint(preferences_bp, url_prefix='/api/preferences')
    app.register_blueprint(bookmarks_bp)

    @app.before_request
    def before_request():
        g.start_time = time.time()

    @app.after_request
    def after_request(response):
        duration = time.time() - g.get('start_time', time.time())
        logger.info(f"{request.method} {request.path} -> {response.status_code} in {duration:.3f}s")
        return response

    @app.route('/health', methods=['GET'])
    def health():
        """Health check that also confirms the local store is readable."""
        try:
            count = len(get_services().bookmark_store.get_bookmarks())
            return jsonify({
                'status': 'healthy',
                'local_store': 'ok',
                'local_bookmarks': count,
                'reader_sessions': len(get_services().sessions),
                'timestamp': time.time()
            })
        except Exception as e:
            logger.error(f"Health check failed: {str(e)}")
            return jsonify({
                'status': 'unhealthy',
                'error': str(e),
                'timestamp': time.time()
            }), 500

    logger.info("Bible reader app created")
    return app


if __name__ == '__main__':
    app = create_app()
    logger.info(f"Starting Flask server on port {Config.PORT}...")
    app.run(debug=True, port=Config.PORT, threaded=True)
