import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from check_scam.bootstrap import initialize
from check_scam.dependencies import init_app
from check_scam.exceptions import ProviderError, ReportNotFoundError

from .routes import router
from .schemas import SearchResponse, VerdictOut
from . import auth  # re-export for convenience

logger = logging.getLogger(__name__)

app = FastAPI(title="Check Scam API", version="1.0")
init_app(app)

app.include_router(router)


@app.on_event("startup")
async def startup_event() -> None:
    initialize()


def report_not_found_handler(request: Request, exc: ReportNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    logger.error("Provider error: %s", exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


async def exception_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.add_exception_handler(ReportNotFoundError, report_not_found_handler)
app.add_exception_handler(ProviderError, provider_error_handler)
app.middleware("http")(exception_middleware)

__all__ = [
    "app",
    "auth",
    "SearchResponse",
    "VerdictOut",
]
