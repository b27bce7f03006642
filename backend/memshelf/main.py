import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from memshelf.config import settings
from memshelf.lifecycle import AppLifecycle
from memshelf.middleware.error_handler import register_exception_handlers
from memshelf.middleware.rate_limit import limiter
from memshelf.middleware.request_logging import log_requests
from memshelf.routers import links, notes, workspaces

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    stream=sys.stderr,
    force=True,
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    lifecycle = AppLifecycle()
    await lifecycle.startup()
    yield
    await lifecycle.shutdown()


app = FastAPI(title="Memshelf API", lifespan=lifespan)
app.state.limiter = limiter
register_exception_handlers(app)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)

app.include_router(workspaces.router, prefix=API_PREFIX)
app.include_router(notes.router, prefix=API_PREFIX)
app.include_router(links.router, prefix=API_PREFIX)


@app.get("/health")
@limiter.exempt
async def health(request: Request) -> dict:
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.service_name,
    }
