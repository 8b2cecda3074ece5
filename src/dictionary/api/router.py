"""Main API router aggregating all endpoints."""

from fastapi import APIRouter

from dictionary.api import routes

router = APIRouter(prefix="/api")

router.include_router(routes.router, tags=["dictionary"])
