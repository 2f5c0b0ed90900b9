"""
Configuration loaded from environment variables (and a local .env file).
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Configuration class to load environment variables."""

    FLASK_ENV = os.getenv('FLASK_ENV', 'production')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    MAX_IMAGE_SIZE = int(os.getenv('MAX_IMAGE_SIZE', 10 * 1024 * 1024))  # 10MB default
    # Headroom for multipart boundaries and the quality field
    MAX_CONTENT_LENGTH = MAX_IMAGE_SIZE + 1024 * 1024
    DEFAULT_QUALITY = int(os.getenv('DEFAULT_QUALITY', 80))
    CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', '*').split(',') if o.strip()]
    COMPRESSION_SERVICE_URL = os.getenv('COMPRESSION_SERVICE_URL', 'http://localhost:8080')
    REQUEST_TIMEOUT_SECONDS = float(os.getenv('REQUEST_TIMEOUT_SECONDS', 30))
