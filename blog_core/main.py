"""Flask application entry point."""

import logging
from flask import Flask, jsonify
from flask_cors import CORS

from .auth.gate import AuthGate
from .config import settings
from .db import init_db
from .exceptions import (
    AuthenticationError,
    BlogCoreError,
    ConflictError,
    ResourceNotFound,
    ValidationError,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# Create Flask app
app = Flask(__name__)

# CORS configuration
CORS(app, origins=settings.cors_origins, supports_credentials=True)

# Bearer token gate used by @auth_required
AuthGate().init_app(app)


def initialize_database():
    """Initialize database on app startup."""
    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


with app.app_context():
    initialize_database()


# Error handlers
def _error_response(error: BlogCoreError, status: int):
    response = {
        "error": {
            "type": error.__class__.__name__,
            "message": error.message
        }
    }
    if error.details:
        response["error"]["details"] = error.details
    return jsonify(response), status


@app.errorhandler(ResourceNotFound)
def handle_not_found(error):
    """Handle ResourceNotFound exceptions."""
    return _error_response(error, 404)


@app.errorhandler(ValidationError)
def handle_validation_error(error):
    """Handle ValidationError exceptions."""
    return _error_response(error, 400)


@app.errorhandler(ConflictError)
def handle_conflict_error(error):
    """Handle ConflictError exceptions (uniqueness violations)."""
    return _error_response(error, 422)


@app.errorhandler(AuthenticationError)
def handle_authentication_error(error):
    """Handle AuthenticationError exceptions."""
    return _error_response(error, 401)


@app.errorhandler(BlogCoreError)
def handle_blog_core_error(error):
    """Handle generic BlogCoreError exceptions (storage, hashing)."""
    return _error_response(error, 500)


@app.errorhandler(500)
def handle_internal_error(error):
    """Handle internal server errors."""
    logger.error(f"Internal error: {error}")
    return jsonify({
        "error": {
            "type": "InternalServerError",
            "message": "An internal error occurred"
        }
    }), 500


# Health check endpoint
@app.route("/health")
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


# Register API blueprints
from .api.v1 import api_v1_bp

app.register_blueprint(api_v1_bp, url_prefix=settings.api_v1_prefix)


if __name__ == "__main__":
    app.run(debug=True)
