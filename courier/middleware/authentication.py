"""
Bearer-token gate for protected routes.

Missing header -> 401. Empty token, unknown or expired session, or a token
that fails verification -> 403. On success the caller's id and token are
put on flask.g.
"""

from functools import wraps

from flask import g, request

from courier.errors import AccessDenied, InvalidToken
from courier.extensions import get_services

BEARER_PREFIX = "Bearer "


def _bearer_token():
    header = request.headers.get("Authorization", "")
    if not header:
        raise AccessDenied("Authorization header required")
    token = header[len(BEARER_PREFIX):] if header.startswith(BEARER_PREFIX) else header
    token = token.strip()
    if not token:
        raise InvalidToken()
    return token


def session_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        token = _bearer_token()
        g.user_id = get_services().sessions.authenticate(token)
        g.access_token = token
        return fn(*args, **kwargs)

    return wrapper


def current_user_id():
    return g.user_id
