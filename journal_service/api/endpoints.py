from fastapi import APIRouter

from journal_service.api.routes import entries, health, setup, stats


router = APIRouter()

router.include_router(entries.router)
router.include_router(stats.router)
router.include_router(setup.router)
router.include_router(health.router)
