from __future__ import annotations

from functools import wraps
from typing import Callable, Optional

from flask import jsonify, request
from werkzeug.security import check_password_hash

ADMIN_HEADER = "X-Admin-Password"


def check_admin_password(password_hash: Optional[str], candidate: Optional[str]) -> bool:
    if not password_hash or not candidate:
        return False
    try:
        return check_password_hash(password_hash, candidate)
    except ValueError:
        # e.g. placeholder or corrupted hashes
        return False


def make_admin_required(get_password_hash: Callable[[], Optional[str]]):
    """Decorator factory: admin routes need the admin password header."""

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not check_admin_password(get_password_hash(), request.headers.get(ADMIN_HEADER)):
                return jsonify({"success": False, "message": "❌ Password admin salah. Akses ditolak."}), 403
            return view(*args, **kwargs)

        return wrapper

    return admin_required
