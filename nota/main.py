import logging

from fastapi import FastAPI
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.orm import Session

import nota.models  # noqa: F401  (register all mappers)
from nota.api.jobs import router as jobs_router
from nota.api.tasks import router as tasks_router
from nota.core.config import settings
from nota.db.session import get_db

logging.basicConfig(level=settings.log_level)

app = FastAPI(title="Nota Tasks API", version="0.1.0")
app.include_router(tasks_router)
app.include_router(jobs_router)


class HealthResponse(BaseModel):
    ok: bool
    service: str
    version: str
    db_ok: bool


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    # lightweight DB check
    db_ok = False
    db: Session | None = None
    try:
        db = next(get_db())
        db.execute(text("SELECT 1"))
        db_ok = True
    except Exception:
        db_ok = False
    finally:
        if db is not None:
            db.close()

    return HealthResponse(ok=True, service="api", version=app.version, db_ok=db_ok)
