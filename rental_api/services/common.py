"""Shared service helpers."""

from typing import Optional

from flask import current_app, has_app_context

from ..models.store import Store
from ..utils.dates import today_in

STORE_KEY = "rental_store"


def _store() -> Store:
    """The store bound to the running app, else the process-wide singleton."""
    if has_app_context():
        st = current_app.extensions.get(STORE_KEY)
        if st is not None:
            return st
    return Store.instance()


def _today():
    """Business date in the configured timezone. Wrapper for easier testing/mocking."""
    tz = current_app.config.get("APP_TIMEZONE") if has_app_context() else None
    return today_in(tz)


def norm_type(value: Optional[str]) -> str:
    """Normalize vehicle type to lowercase; return '' if None."""
    return (value or "").strip().lower()


def _lc(s):
    """Safe lowercase for case-insensitive compare."""
    return (s or "").lower()
