from fastapi import APIRouter

from billedy.api.endpoints import health, images, pages

api_router = APIRouter(prefix="/api")
api_router.include_router(images.router, tags=["images"])

router = APIRouter()
router.include_router(health.router, tags=["health"])
router.include_router(api_router)
router.include_router(pages.router, tags=["pages"])
