"""
Main Flask application with configuration, logging, and error handlers.
"""
import os
import json
import logging
from datetime import datetime
from flask import Flask, jsonify
from flask_cors import CORS

from compressor.config import Config
from compressor.utils.image_processing import check_jpeg_encoder
from compressor.utils.validation import describe_size_limit


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    EXTRA_FIELDS = ('endpoint', 'quality', 'original_size', 'compressed_size', 'duration_ms', 'status')

    def format(self, record):
        log_data = {
            'timestamp': datetime.utcnow().isoformat() + 'Z',
            'level': record.levelname,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        # Add extra fields if present
        for field in self.EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        # Add exception info if present
        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def setup_logging(app):
    """Set up JSON logging for the application."""
    # Remove default handlers
    app.logger.handlers.clear()

    # Create console handler with JSON formatter
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())

    # Set log level
    log_level = getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO)
    handler.setLevel(log_level)
    app.logger.setLevel(log_level)

    app.logger.addHandler(handler)

    # Prevent propagation to avoid duplicate logs
    app.logger.propagate = False


def create_app():
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(Config)

    setup_logging(app)

    # The browser client calls the gateway cross-origin
    CORS(app, origins=Config.CORS_ORIGINS)

    register_error_handlers(app)
    register_routes(app)

    app.logger.info('Flask application initialized', extra={
        'flask_env': Config.FLASK_ENV,
        'log_level': Config.LOG_LEVEL
    })

    return app


# Status code -> (error, error_code) for client errors reported as-is
CLIENT_ERRORS = {
    400: ('Bad request', 'BAD_REQUEST'),
    404: ('Not found', 'NOT_FOUND'),
    405: ('Method not allowed', 'METHOD_NOT_ALLOWED'),
}


def error_response(status_code, error, error_code, message):
    return jsonify({
        'status': 'error',
        'error': error,
        'error_code': error_code,
        'message': message
    }), status_code


def register_error_handlers(app):
    """Register JSON error handlers for the HTTP errors the service raises."""

    def client_error(error):
        app.logger.warning(f'{error.code} {error.name}: {error.description}')
        label, error_code = CLIENT_ERRORS[error.code]
        return error_response(error.code, label, error_code, str(error.description))

    for status_code in CLIENT_ERRORS:
        app.register_error_handler(status_code, client_error)

    @app.errorhandler(413)
    def request_entity_too_large(error):
        app.logger.warning(f'Request too large: {error.description}')
        limit = describe_size_limit(app.config['MAX_IMAGE_SIZE'])
        return error_response(413, 'Request entity too large', 'IMAGE_TOO_LARGE',
                              f'Image exceeds maximum size of {limit}')

    @app.errorhandler(500)
    def internal_server_error(error):
        app.logger.error(f'Internal server error: {str(error)}', exc_info=True)
        return error_response(500, 'Internal server error', 'INTERNAL_ERROR', 'An unexpected error occurred')


def register_routes(app):
    """Register application routes."""

    from compressor.routes.compress import register_compress_routes
    register_compress_routes(app)

    @app.route('/health', methods=['GET'])
    def health():
        """
        Health check endpoint that tests the JPEG encoder.
        Returns 200 if healthy, 503 if Pillow cannot encode JPEG.
        """
        try:
            check_jpeg_encoder()

            app.logger.info('Health check passed')

            return jsonify({
                'status': 'healthy',
                'timestamp': datetime.utcnow().isoformat() + 'Z'
            }), 200

        except Exception as e:
            app.logger.error(f'Health check failed: {str(e)}', exc_info=True)
            return jsonify({
                'status': 'unhealthy',
                'error': str(e),
                'timestamp': datetime.utcnow().isoformat() + 'Z'
            }), 503


# Create the Flask app instance
app = create_app()


if __name__ == '__main__':
    # For local development only
    port = int(os.environ.get('PORT', 8080))
    app.run(host='0.0.0.0', port=port, debug=(Config.FLASK_ENV != 'production'))
