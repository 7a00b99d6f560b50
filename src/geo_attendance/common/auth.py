from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, session

from ..core.enums import Role
from ..users.model import Principal


def current_principal() -> Optional[Principal]:
    return Principal.from_session(session)


def _guard(role: Optional[Role]):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            principal = current_principal()
            if principal is None:
                return jsonify({"error": "Authentication required"}), 401
            if not principal.is_active:
                return jsonify({"error": "Account is disabled"}), 403
            if role is not None and principal.role != role:
                return jsonify({"error": "Access denied"}), 403
            return view(*args, principal=principal, **kwargs)

        return wrapper

    return decorator


login_required = _guard(None)
staff_required = _guard(Role.STAFF)
admin_required = _guard(Role.ADMIN)
