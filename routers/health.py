# routers/health.py

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from core.config import settings
from core.supabase_client import ping_supabase

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


# -----------------------------------------------------
# GET /health/db
# users / houses / residents reachable through Supabase
# No auth required
# -----------------------------------------------------
@router.get("/db", summary="Directory tables health check")
def health_db():
    """
    Queries one id from each directory table.
    Returns 503 when Supabase is unconfigured or any table query fails,
    so uptime monitors can alert on the status code alone.

    Row contents are never returned.
    """
    status = ping_supabase()
    tables = status.get("tables", {})
    failed = sorted(t for t, r in tables.items() if r.get("status") != "ok")

    healthy = status.get("status") == "ok" and not failed
    body = {
        "service": "Supabase",
        "status": "ok" if healthy else "degraded",
        "failed_tables": failed,
        "details": status,
    }
    return JSONResponse(status_code=200 if healthy else 503, content=body)


# -----------------------------------------------------
# GET /health/app
# -----------------------------------------------------
@router.get("/app", summary="App health check")
def health_app():
    return {
        "service": settings.PROJECT_NAME,
        "status": "ok",
    }
