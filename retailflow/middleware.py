"""Middleware for bearer-token authentication and CORS."""
from functools import wraps
from flask import g, request, current_app
from retailflow.database import get_session
from retailflow.exceptions import UnauthorizedError, ValidationError
from retailflow.models import User
from retailflow.services.auth_service import decode_token


def load_current_user():
    """
    Load the user named by the bearer token into g.

    Called before each request. Sets g.user and g.user_id when a valid
    `Authorization: Bearer <token>` header is present; an invalid token is
    treated as anonymous so public endpoints keep working.
    """
    g.user = None
    g.user_id = None

    header = request.headers.get('Authorization', '')
    if not header.startswith('Bearer '):
        return

    token = header[len('Bearer '):].strip()
    try:
        claims = decode_token(token, current_app.config['JWT_SECRET'])
    except UnauthorizedError:
        return

    db_session = get_session()
    user = db_session.query(User).filter_by(id=claims.get('id')).first()
    if user and user.status != 0:
        g.user = user
        g.user_id = user.id


def require_login(f):
    """
    Decorator: Require a valid bearer token.

    Raises UnauthorizedError (401) when no authenticated user is loaded.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.get('user') is None:
            raise UnauthorizedError('Authentication required')
        return f(*args, **kwargs)
    return decorated_function


def add_cors_headers(response):
    """Add CORS headers for the configured origins (CORS_ORIGINS)."""
    allowed = current_app.config.get('CORS_ORIGINS', '*')
    origin = request.headers.get('Origin')

    if allowed == '*':
        response.headers['Access-Control-Allow-Origin'] = '*'
    elif origin and origin in [o.strip() for o in allowed.split(',')]:
        response.headers['Access-Control-Allow-Origin'] = origin
        response.headers['Vary'] = 'Origin'
    else:
        return response

    response.headers['Access-Control-Allow-Headers'] = 'Authorization, Content-Type'
    response.headers['Access-Control-Allow-Methods'] = 'GET, POST, PUT, DELETE, OPTIONS'
    return response


def json_body():
    """
    Return the request's JSON object, or {} when there is no body.

    Raises ValidationError when the body is JSON but not an object.
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data
