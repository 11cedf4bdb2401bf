from __future__ import annotations

from typing import Annotated

from fastapi import Security
from fastapi.security import APIKeyHeader

from miniapp.core.config import api_key
from miniapp.core.errors import UnauthorizedError


api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def require_api_key(
    x_api_key: Annotated[str | None, Security(api_key_header)],
) -> None:
    expected = api_key()
    if not expected:
        return
    if x_api_key != expected:
        raise UnauthorizedError()
