from functools import wraps

from flask import session, jsonify

from ..utils.constants import Role


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if "uid" not in session:
            return jsonify({"message": "Access denied, please login first"}), 401
        return fn(*args, **kwargs)

    return wrapper


def role_required(*roles):
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if "uid" not in session:
                return jsonify({"message": "Access denied, please login first"}), 401
            if session.get("role") not in roles:
                return jsonify({"message": "Insufficient permission"}), 403
            return fn(*args, **kwargs)

        return wrapper

    return deco


admin_required = role_required(Role.ADMIN)


def current_actor():
    """(user_id, is_admin) of the logged-in session."""
    return session.get("uid"), session.get("role") == Role.ADMIN
