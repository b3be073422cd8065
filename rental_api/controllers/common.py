"""Request helpers shared by the JSON blueprints."""
from flask import request

from ..exceptions import ValidationError


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require(data: dict, *keys: str) -> list:
    missing = [k for k in keys if data.get(k) in (None, "")]
    if missing:
        raise ValidationError(f"Missing field(s): {', '.join(missing)}")
    return [data[k] for k in keys]
