"""Registration, login and session routes."""

from __future__ import annotations

from flask import jsonify, request, session

from ...errors import AuthenticationRequired
from ...extensions import get_session_factory
from ...services import auth as auth_service
from . import bp
from .decorators import current_user_id, login_required


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@bp.post("/register")
def register():
    data = _payload()
    user = auth_service.create_user(
        username=data.get("username") or "",
        email=data.get("email") or "",
        password=data.get("password") or "",
        session_factory=get_session_factory(),
    )
    session.clear()
    session["user_id"] = user.id
    return jsonify({"message": "User registered successfully", "user": user.to_dict()}), 201


@bp.post("/login")
def login():
    data = _payload()
    user = auth_service.authenticate(
        email=data.get("email") or "",
        password=data.get("password") or "",
        session_factory=get_session_factory(),
    )
    session.clear()
    session["user_id"] = user.id
    return jsonify({"message": "Logged in successfully", "user": user.to_dict()})


@bp.post("/logout")
def logout():
    session.clear()
    return jsonify({"message": "Logged out"})


@bp.get("/me")
@login_required
def me():
    user = auth_service.get_user(current_user_id(), get_session_factory())
    if user is None:
        # Account removed while the cookie was still valid.
        session.clear()
        raise AuthenticationRequired()
    return jsonify({"user": user.to_dict()})
