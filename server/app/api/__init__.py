from fastapi import APIRouter

from app.api import admin, tracks, users, votes

api_router = APIRouter()


@api_router.get("/health", tags=["health"])
def api_health_check():
    """Health check endpoint for monitoring and load balancers."""
    return {"status": "ok", "service": "api"}


api_router.include_router(votes.router, prefix="/tracks", tags=["votes"])
api_router.include_router(tracks.router, prefix="/tracks", tags=["tracks"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
