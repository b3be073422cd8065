import hmac

from werkzeug.security import generate_password_hash, check_password_hash


def generate_hash(password: str) -> str:
    return generate_password_hash(password)


def check_hash(password: str, hashed: str) -> bool:
    try:
        return check_password_hash(hashed, password)
    except (TypeError, ValueError):
        return False


def secrets_match(given: str | None, expected: str | None) -> bool:
    """Constant-time compare; an unset expected secret never matches."""
    if not given or not expected:
        return False
    return hmac.compare_digest(given.encode(), expected.encode())
