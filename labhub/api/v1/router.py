"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from labhub.api.v1 import bookings, resources

api_router = APIRouter()

# Resource catalog
api_router.include_router(resources.router, prefix="/resources", tags=["Resources"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])
