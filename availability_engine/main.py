# availability_engine/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text

from availability_engine.config import get_settings
from availability_engine.db.session import engine, init_db
from availability_engine.logging_config import configure_logging
from availability_engine.routers import participants, suggestions

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_db()
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# Routers
app.include_router(suggestions.router)
app.include_router(participants.router)


@app.get("/health")
def health_check():
    """Liveness plus the engine defaults requests fall back to."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        database = "ok"
    except Exception:
        database = "error"

    return {
        "status": "ok" if database == "ok" else "degraded",
        "app": settings.APP_NAME,
        "env": settings.ENV,
        "database": database,
        "engine": {
            "cutting_policy": settings.DEFAULT_CUTTING_POLICY,
            "min_duration_minutes": settings.DEFAULT_MIN_DURATION_MINUTES,
            "max_suggestions": settings.DEFAULT_MAX_SUGGESTIONS,
            "max_range_days": settings.MAX_RANGE_DAYS,
        },
    }
