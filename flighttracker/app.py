"""
Flight tracker Flask application.

Main entry point for the web application. Initializes:
- Airport reference table
- Flight lookup providers
- API routes

Usage:
    python -m flighttracker.app

Or with gunicorn:
    gunicorn 'flighttracker.app:create_app()'
"""

import logging

from flask import Flask
from flask_cors import CORS

from flighttracker.config import config
from flighttracker.airports import airport_table
from flighttracker.api import flights_bp, widgets_bp

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def create_app(preload_airports: bool = True) -> Flask:
    """
    Application factory for Flask.

    Args:
        preload_airports: Load the airport table at startup instead of on
                          the first lookup. Set to False for testing.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = config.secret_key

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    if preload_airports:
        logger.info(f'Airport table ready with {len(airport_table)} airports')

    # Register API blueprints
    app.register_blueprint(flights_bp)
    app.register_blueprint(widgets_bp)

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(500)
    def server_error(e):
        original = getattr(e, 'original_exception', None) or e
        logger.error(f'Server error: {original}')
        return {
            'error': 'Internal server error',
            'message': 'Failed to look up flight data',
        }, 500

    return app


def run_development_server():
    """Run the development server."""
    app = create_app()

    logger.info(f'Starting flight tracker on http://localhost:{config.port}')

    app.run(
        host='0.0.0.0',
        port=config.port,
        debug=config.debug,
    )


if __name__ == '__main__':
    run_development_server()
