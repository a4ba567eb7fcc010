"""Session-based access control for API views."""

from __future__ import annotations

from functools import wraps

from flask import session

from ...errors import AuthenticationRequired


def current_user_id() -> int:
    """Return the id stored in the signed session cookie."""

    user_id = session.get("user_id")
    if user_id is None:
        raise AuthenticationRequired()
    return int(user_id)


def login_required(view):
    @wraps(view)
    def decorated_function(*args, **kwargs):
        current_user_id()
        return view(*args, **kwargs)

    return decorated_function
