"""
API router configuration.
"""

from fastapi import APIRouter

from portfolio_site.api.routers import contact, health

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(contact.router)
