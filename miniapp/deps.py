from uuid import UUID

from miniapp.core.auth import require_api_key
from miniapp.core.database import get_session
from miniapp.core.errors import BadRequestError


def parse_id(raw: str, kind: str) -> UUID:
    try:
        return UUID(raw)
    except ValueError:
        raise BadRequestError(f"Invalid {kind} ID format", details={"id": raw})


__all__ = ["get_session", "parse_id", "require_api_key"]
