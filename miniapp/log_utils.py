import json
import logging
import time
import uuid
from contextvars import ContextVar
from starlette.requests import Request
from starlette.responses import Response

from miniapp.core.config import log_level

# Id of the request being served; None outside a request (scripts, tests).
request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def setup_logging():
    logging.basicConfig(level=log_level())


def log_event(logger: logging.Logger, event: str, **fields) -> None:
    """Emit one JSON line for a state change, tagged with the current request id."""
    record = {"msg": event}
    req_id = request_id.get()
    if req_id:
        record["req_id"] = req_id
    record.update({k: str(v) for k, v in fields.items()})
    logger.info(json.dumps(record))


async def inject_request_id(request: Request, call_next):
    req_id = request.headers.get("X-Request-Id", str(uuid.uuid4()))
    logger = logging.getLogger("miniapp")
    request.state.req_id = req_id
    token = request_id.set(req_id)
    started = time.perf_counter()
    try:
        response: Response = await call_next(request)
    finally:
        request_id.reset(token)
    response.headers["X-Request-Id"] = req_id
    # access log
    logger.info(json.dumps({
        "msg": "request",
        "req_id": req_id,
        "method": request.method,
        "path": request.url.path,
        "status": response.status_code,
        "duration_ms": round((time.perf_counter() - started) * 1000, 2),
    }))
    return response
