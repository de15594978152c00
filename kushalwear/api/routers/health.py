# kushalwear/api/routers/health.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from kushalwear.data.database import Database, get_database
from kushalwear.domain.schemas import HealthOut
from kushalwear.utils.settings import APP_VERSION, ENVIRONMENT

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthOut)
def health(request: Request, database: Database = Depends(get_database)):
    now = datetime.now(timezone.utc)
    return {
        "status": "OK",
        "message": "KushalWear API is running",
        "database": "connected" if database.ping() else "error",
        "environment": ENVIRONMENT,
        "version": APP_VERSION,
        "timestamp": now,
        "uptime_seconds": (now - request.app.state.started_at).total_seconds(),
    }
