from __future__ import annotations

import re

from . import common
from ..exceptions import AuthenticationError, ValidationError
from ..models.user import User
from ..utils.constants import Role
from ..utils.security import generate_hash, check_hash

# Compile once at module import
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d).{6,}$")
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{3,30}$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class UserService:
    """Registration and credential checks. Sessions are handled by the controller."""

    @staticmethod
    def register(username: str, password: str, email: str = "", store=None) -> User:
        st = store or common._store()
        username = (username or "").strip()
        email = (email or "").strip()
        password = password or ""

        if not username or not password:
            raise ValidationError("Username and password are required.")
        if not USERNAME_PATTERN.match(username):
            raise ValidationError("Username must be 3-30 chars (letters, digits, ., _, -).")
        if not PASSWORD_PATTERN.match(password):
            raise ValidationError("Password must have at least 6 characters, including A-Z, a-z, and 0-9.")
        if password.lower() == username.lower():
            raise ValidationError("Password cannot be the same as username.")
        if email and not EMAIL_PATTERN.match(email):
            raise ValidationError("Email address is not valid.")
        if st.user_exists(username):
            raise ValidationError("Username already exists.")

        # self-service registration is always a customer; admins come from config
        uid = st.create_user(username, email, generate_hash(password), Role.CUSTOMER)
        return st.get_user(uid)

    @staticmethod
    def authenticate(username: str, password: str, store=None) -> User:
        st = store or common._store()
        record = st.find_user((username or "").strip())
        if not record or not check_hash(password or "", record["password_hash"]):
            raise AuthenticationError("Invalid credentials")
        return User.from_dict(record)
