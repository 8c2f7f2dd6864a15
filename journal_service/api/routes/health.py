from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(request: Request):
    """Liveness plus whether the database pool is open."""
    db = getattr(request.app.state, "db", None)
    pool_open = db is not None and db.pool.is_open
    return {
        "status": "healthy",
        "database": "connected" if pool_open else "unavailable",
    }
