"""API routes."""

from fastapi import APIRouter

from app.routes import reviews, search

api_router = APIRouter()

# Mention search + trust score
api_router.include_router(search.router, prefix="/api", tags=["search"])

# Reviews feed and widget config
api_router.include_router(reviews.router, prefix="/api", tags=["reviews"])
