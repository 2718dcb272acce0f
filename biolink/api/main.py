import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from biolink.adapters.sqlite.migrator import SQLiteMigrator
from biolink.api.deps import get_settings
from biolink.api.errors import install_exception_handlers
from biolink.app_shell.config import validate_ops_rules
from biolink.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
        validate_ops_rules(rules)
        logger.info("Rules loaded from %s", settings.rules_path)
    except Exception as e:
        logger.critical("Rules load failed: %s", e)
        sys.exit(1)

    if rules.ops.apply_migrations_on_startup:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        SQLiteMigrator(settings.db_path, str(settings.migrations_dir)).run_migrations()

    yield


app = FastAPI(
    title="Biolink API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

install_exception_handlers(app)

# --- Routers ---
from biolink.api.routes import auth, links, profiles, public  # noqa: E402

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(profiles.router, prefix="/api", tags=["Profiles"])
app.include_router(links.router, prefix="/api", tags=["Links"])
app.include_router(public.router, prefix="/api/public", tags=["Public"])


# CORS (Allow Frontend)
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "api"}
