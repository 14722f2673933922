from contextlib import asynccontextmanager
import logging
import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from app.api.v1.endpoints.asbis_sync import router as asbis_sync_router
from app.core.config import settings
from app.db.base import Base
from app.db.session import engine
from app import models  # noqa: F401  registers models on Base.metadata
_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Development databases are created on the fly; real ones go through alembic
    if settings.database_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
        _logger.info("SQLite schema ensured at %s", settings.database_url)
    yield


app = FastAPI(title="Asbis Catalog Sync", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        excluded_paths = ["/docs", "/redoc", "/openapi.json", "/health"]
        if request.url.path in excluded_paths:
            return await call_next(request)

        started = time.monotonic()
        response = await call_next(request)
        elapsed_ms = int((time.monotonic() - started) * 1000)
        _logger.info(
            "%s %s -> %s (%sms)",
            request.method, request.url.path, response.status_code, elapsed_ms,
        )
        return response


app.add_middleware(RequestLoggingMiddleware)

app.include_router(asbis_sync_router)


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=5010, reload=True)
