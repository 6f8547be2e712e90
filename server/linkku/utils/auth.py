# server/linkku/utils/auth.py

import logging
from functools import wraps
from typing import Optional

from flask import g
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity

from linkku.errors import AuthenticationRequired
from linkku.extensions import db
from linkku.models.user import User
from linkku.utils.permissions import ensure_can

logger = logging.getLogger(__name__)


def _load_current_user() -> User:
    # Token problems are answered by the JWT error loaders
    verify_jwt_in_request()

    user_id = get_jwt_identity()
    if not user_id:
        raise AuthenticationRequired("Invalid token: missing user ID")

    # Role is always read fresh from the database, never from the token
    user = db.session.get(User, user_id)
    if not user:
        raise AuthenticationRequired("User no longer exists")

    g.current_user = user
    g.current_user_id = user.id
    return user


def require_auth(f):
    """Decorator that requires a valid JWT and loads the user into g"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        _load_current_user()
        return f(*args, **kwargs)

    return decorated_function


def require_capability(resource: str, action: str):
    """Decorator that requires a valid JWT and a role allowed to perform
    `action` on `resource`."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = _load_current_user()
            ensure_can(user, resource, action)
            return f(*args, **kwargs)

        return decorated_function

    return decorator


def get_current_user() -> Optional[User]:
    """Get current authenticated user from request context"""
    return getattr(g, "current_user", None)
