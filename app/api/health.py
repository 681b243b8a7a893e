from fastapi import APIRouter
from sqlalchemy import text
import redis

from app.utils.cache import redis_client
from app.database import engine

router = APIRouter(prefix="/health", tags=["Health"])


@router.get(
    "/",
    summary="Health check",
    description="Basic health check endpoint."
)
def health_check():
    """Simple health check."""
    return {"status": "healthy"}


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the database and Redis are reachable."
)
def readiness_check():
    """
    Readiness check for all dependencies.
    
    The database is required; Redis only backs the product cache and the
    task broker, so it is reported but does not fail readiness.
    """
    checks = {
        "database": False,
        "redis": False
    }
    
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            checks["database"] = True
    except Exception as e:
        checks["database_error"] = str(e)
    
    try:
        redis_client.ping()
        checks["redis"] = True
    except redis.RedisError as e:
        checks["redis_error"] = str(e)
    
    return {
        "status": "ready" if checks["database"] else "not_ready",
        "checks": checks
    }
