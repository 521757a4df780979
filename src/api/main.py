import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.api.deps import get_settings
from src.api.errors import install_error_handlers
from src.app_shell.config import ConfigError, validate_ops_rules
from src.rules.loader import load_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        rules = load_rules(settings.rules_path)
        logging.basicConfig(
            level=rules.ops.log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        validate_ops_rules(rules)
        logger.info("Rules loaded from %s", settings.rules_path)

        settings.data_dir.mkdir(parents=True, exist_ok=True)
        applied = SQLiteMigrator(settings.db_path, str(settings.migrations_dir)).run_migrations()
        logger.info("Database ready at %s (%d migrations applied)", settings.db_path, len(applied))
    except (FileNotFoundError, ValueError, ConfigError, RuntimeError) as e:
        logger.critical("Startup failed: %s", e)
        sys.exit(1)

    yield
    # Shutdown cleanup if needed


app = FastAPI(
    title="Slate CMS API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

install_error_handlers(app)

# --- Routers ---
from src.api.routes import admin, comments, posts, reference  # noqa: E402

app.include_router(posts.router, prefix="/api/posts", tags=["Posts"])
app.include_router(comments.router, prefix="/api/posts", tags=["Comments"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
app.include_router(reference.router, prefix="/api", tags=["Reference"])


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "api"}
