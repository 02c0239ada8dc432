# marketplan/main.py
import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketplan.config import settings
from marketplan.db import init_db
from marketplan.dependencies import get_completion_client
from marketplan.errors import MarketPlanError
from marketplan.routers import auth
from marketplan.routers.account import router as account_router
from marketplan.routers.admin import router as admin_router
from marketplan.routers.plans import router as plans_router
from marketplan.routers.strategies import router as strategies_router

SERVICE_NAME = "MarketPlan IA Backend"
VERSION = "1.0.0"

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

_started_at = time.monotonic()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Création des tables si elles n'existent pas
    init_db()
    # Service IA non configuré -> échec au démarrage, pas à la première requête
    get_completion_client()
    yield

app = FastAPI(title="MarketPlan IA", version=VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

@app.exception_handler(MarketPlanError)
async def marketplan_error_handler(request: Request, exc: MarketPlanError):
    if exc.status_code >= 500:
        log.error("%s sur %s: %s", exc.__class__.__name__, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "statusCode": exc.status_code,
            "message": exc.message,
            "error": exc.__class__.__name__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "path": request.url.path,
        },
    )

@app.get("/")
def read_root():
    return {"message": "Bienvenue sur MarketPlan IA API"}

@app.get("/health")
def health():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": SERVICE_NAME,
        "version": VERSION,
        "environment": settings.ENVIRONMENT,
        "uptime_seconds": int(time.monotonic() - _started_at),
    }

app.include_router(auth.router, prefix="")
app.include_router(account_router, prefix="/api")
app.include_router(plans_router, prefix="/api")
app.include_router(strategies_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
