import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from miniapp.core.config import cors_origins
from miniapp.core.database import init_db
from miniapp.core.errors import APIError, InternalError, ValidationError
from miniapp.log_utils import inject_request_id, setup_logging
from miniapp.routers.api import api_router


load_dotenv()
setup_logging()
logger = logging.getLogger("miniapp")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title="Mini App Config API", version="1.0.0", lifespan=lifespan)


def _error_response(err: APIError) -> JSONResponse:
    return JSONResponse(
        status_code=err.status_code,
        content={"code": err.code, "message": err.message, "details": err.details},
    )


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError):
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}" for err in exc.errors()
    )
    return _error_response(ValidationError(f"Invalid request body: {problems}"))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return _error_response(InternalError())


@app.middleware("http")
async def add_req_id(request, call_next):
    return await inject_request_id(request, call_next)


# Outermost, so preflight requests are answered before auth and routing.
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-Id"],
)


app.include_router(api_router)
