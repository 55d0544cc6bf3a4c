"""Main blueprint: greeting, health checks and uploaded files."""
from flask import Blueprint, jsonify, current_app, send_from_directory
from sqlalchemy import text
from retailflow.database import get_session

main_bp = Blueprint('main', __name__)


@main_bp.route('/api/hello')
def hello():
    return jsonify({'message': 'Hello from the backend!'})


@main_bp.route('/health')
def health():
    """
    Health check endpoint that validates the database connection.

    Returns:
        200: Healthy (DB connected)
        500: Unhealthy (DB error)
    """
    try:
        session = get_session()
        row = session.execute(text("SELECT 1 as health_check")).fetchone()

        if row and row[0] == 1:
            return jsonify({
                'status': 'healthy',
                'database': 'connected',
                'message': 'Database connection successful'
            }), 200
        return jsonify({
            'status': 'unhealthy',
            'database': 'error',
            'message': 'Unexpected query result'
        }), 500

    except Exception as e:
        current_app.logger.error(f"Health check failed: {e}")
        return jsonify({
            'status': 'unhealthy',
            'database': 'disconnected',
            'message': 'Failed to connect to database'
        }), 500


@main_bp.route('/health/cache')
def health_cache():
    """
    Cache health check. Never returns 500: the app runs without Redis.
    """
    from retailflow.services.cache_service import get_cache
    cache = get_cache()

    if not cache.is_available():
        return jsonify({
            'status': 'degraded',
            'cache': 'unavailable',
            'message': 'Cache disabled or Redis unavailable (app continues without cache)'
        }), 200

    cache.set('system', 'health_check', {'test': 'ok'}, ttl=10)
    result = cache.get('system', 'health_check')
    if result and result.get('test') == 'ok':
        return jsonify({'status': 'ok', 'cache': 'connected', 'message': 'Cache is working correctly'}), 200

    return jsonify({
        'status': 'degraded',
        'cache': 'error',
        'message': 'Redis connected but operations failing'
    }), 200


@main_bp.route('/uploads/<path:filename>')
def uploaded_file(filename):
    """Serve files stored by the image upload endpoint."""
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)
