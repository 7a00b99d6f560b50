from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Principal:
    """Authenticated caller for one request.

    Built by the HTTP layer from the session established by the login collaborator and
    passed explicitly to each operation; nothing about the caller is kept process-wide.
    """

    user_id: int
    role: Role
    is_active: bool = True

    @classmethod
    def from_session(cls, data: Mapping[str, Any]) -> Optional["Principal"]:
        user_id = data.get("user_id")
        role = data.get("role")
        if user_id is None or role is None:
            return None
        try:
            return cls(user_id=int(user_id), role=Role(role), is_active=bool(data.get("is_active", True)))
        except (TypeError, ValueError):
            return None
