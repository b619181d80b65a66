"""
Top‑level router for version 1 of the API.

This router aggregates the resource routers under a unified prefix.
When new resources are introduced, include their routers here.
"""

from fastapi import APIRouter

from .endpoints import cars

router = APIRouter()

router.include_router(cars.router, prefix="/cars", tags=["cars"])
