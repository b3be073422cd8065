from flask import Blueprint, jsonify, session

from .common import json_body
from ..services.common import _store
from ..services.user_service import UserService
from ..utils.decorators import login_required

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@bp.post("/register")
def register():
    data = json_body()
    user = UserService.register(
        username=data.get("username"),
        password=data.get("password"),
        email=data.get("email"),
    )
    return jsonify({"message": "Registration successful", "user": user.to_dict()}), 201


@bp.post("/login")
def login():
    data = json_body()
    user = UserService.authenticate(data.get("username"), data.get("password"))

    session.clear()
    session["uid"] = user.user_id
    session["role"] = user.role
    session["username"] = user.username
    return jsonify({"message": "Logged in", "user": user.to_dict()})


@bp.post("/logout")
def logout():
    session.clear()
    return jsonify({"message": "Logged out"})


@bp.get("/me")
@login_required
def me():
    user = _store().get_user(session["uid"])
    if user is None:
        # account deleted under a live session
        session.clear()
        return jsonify({"message": "Access denied, please login first"}), 401
    return jsonify(user.to_dict())
