# app.py
from flask import Flask, jsonify, request, g
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix
from config import Config
from database import init_db
from routes.home import home_bp
from routes.bible import bible_bp
from routes.prayer import prayer_bp
from routes.saved import saved_bp
from routes.settings import settings_bp
from utils.app_state import EXTENSION_NAME, build_state
import atexit
import logging
import time
import sys

# Configure logging to output to stdout
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def create_app(overrides=None, provider=None, sleep=time.sleep):
    """Build the Flask app. overrides replace Config values (tests pass a fake provider too)."""
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    app.json.sort_keys = False  # Preserve order of keys in JSON responses
    app.json.compact = True
    app.json.ensure_ascii = False  # Tamil text stays readable
    app.config['MAX_CONTENT_LENGTH'] = 1 * 1024 * 1024

    CORS(app, resources={
        r"/api/*": {
            "origins": "*",
            "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type"],
        }
    })

    # Ensure URLs with or without trailing slashes are handled the same way
    app.url_map.strict_slashes = False

    init_db(app.config['DATABASE_URL'])
    state = build_state(app.config, provider=provider, sleep=sleep)
    app.extensions[EXTENSION_NAME] = state
    atexit.register(state.close)

    app.register_blueprint(home_bp, url_prefix='/api/home')
    app.register_blueprint(bible_bp, url_prefix='/api/bible')
    app.register_blueprint(prayer_bp, url_prefix='/api/prayers')
    app.register_blueprint(saved_bp, url_prefix='/api/saved')
    app.register_blueprint(settings_bp, url_prefix='/api/settings')

    @app.before_request
    def before_request():
        g.start_time = time.time()

    @app.after_request
    def after_request(response):
        # Log request duration
        duration = time.time() - g.get('start_time', time.time())
        logger.info(f"Request to {request.path} took {duration:.2f} seconds")
        return response

    @app.route('/health', methods=['GET'])
    def health():
        """Health check endpoint that also verifies the local store"""
        try:
            state.kv.ping()
            return jsonify({
                'status': 'healthy',
                'store': 'connected',
                'timestamp': time.time()
            })
        except Exception as e:
            logger.error(f"Health check failed: {str(e)}")
            return jsonify({
                'status': 'unhealthy',
                'error': str(e),
                'timestamp': time.time()
            }), 500

    return app


if __name__ == '__main__':
    print("Starting Flask server...")
    app = create_app()
    app.run(debug=True, port=app.config['PORT'])
