"""
/function/compress-image endpoints for re-encoding uploaded images as JPEG.
"""
from datetime import datetime
from flask import request, jsonify, Response
from werkzeug.exceptions import BadRequest, RequestEntityTooLarge

from compressor.utils.validation import parse_quality, validate_upload, sanitize_filename
from compressor.utils.image_processing import compress_image, encode_base64


# Function names as exposed under /function/
BINARY_FUNCTION = 'compress-image'
BASE64_FUNCTION = 'compress-image-node'

FUNCTIONS = [BINARY_FUNCTION, BASE64_FUNCTION]


def register_compress_routes(app):
    """Register the compression endpoints with the Flask app."""

    def run_compression(endpoint):
        """
        Shared request handling for both response variants.

        Returns:
            Tuple of (compressed_bytes, None) on success, or
            (None, error_response) when encoding failed
        """
        start_time = datetime.utcnow()

        # 1. Extract form data
        image_file = request.files.get('image')
        is_valid, error_msg, status_code = validate_upload(image_file, app.config['MAX_IMAGE_SIZE'])
        if not is_valid:
            if status_code == 413:
                raise RequestEntityTooLarge(error_msg)
            raise BadRequest(error_msg)

        quality = parse_quality(request.form.get('quality'), app.config['DEFAULT_QUALITY'])
        filename = sanitize_filename(image_file.filename)

        # 2. Read and compress
        image_bytes = image_file.read()
        app.logger.info(f'Compressing {filename or "upload"} ({len(image_bytes)} bytes) at quality {quality}')

        try:
            compressed = compress_image(image_bytes, quality)
        except Exception as e:
            duration_ms = int((datetime.utcnow() - start_time).total_seconds() * 1000)
            app.logger.error(f'Compression failed: {str(e)}', exc_info=True, extra={
                'endpoint': endpoint,
                'quality': quality,
                'original_size': len(image_bytes),
                'duration_ms': duration_ms,
                'status': 'error'
            })

            return None, (jsonify({
                'status': 'error',
                'error': f'Compression failed: {str(e)}',
                'error_code': 'COMPRESSION_FAILED'
            }), 500)

        # 3. Log completion
        duration_ms = int((datetime.utcnow() - start_time).total_seconds() * 1000)
        app.logger.info('Compression completed', extra={
            'endpoint': endpoint,
            'quality': quality,
            'original_size': len(image_bytes),
            'compressed_size': len(compressed),
            'duration_ms': duration_ms,
            'status': 'success'
        })

        return compressed, None

    @app.route(f'/function/{BINARY_FUNCTION}', methods=['POST'])
    def compress_binary():
        """
        Compress an image and return the JPEG bytes.

        Accepts multipart/form-data with:
        - image: File (any format Pillow can decode)
        - quality: str (integer 1-100, optional, default 80)

        Returns image/jpeg body on success.
        """
        compressed, error_response = run_compression(f'/function/{BINARY_FUNCTION}')
        if error_response is not None:
            return error_response

        return Response(compressed, status=200, mimetype='image/jpeg')

    @app.route(f'/function/{BASE64_FUNCTION}', methods=['POST'])
    def compress_base64():
        """
        Legacy variant of the compression endpoint.

        Same form fields as /function/compress-image, but the JPEG bytes are
        returned as base64 text. Clients must prefix the body with
        "data:image/jpeg;base64," to render it.
        """
        compressed, error_response = run_compression(f'/function/{BASE64_FUNCTION}')
        if error_response is not None:
            return error_response

        return Response(encode_base64(compressed), status=200, mimetype='text/plain')

    @app.route('/system/functions', methods=['GET'])
    def list_functions():
        """List the deployed compression functions."""
        return jsonify([{'name': name} for name in FUNCTIONS]), 200
