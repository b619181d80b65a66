"""
FastAPI dependencies shared by the endpoint modules.

The car repository is built once at application startup and kept on
``app.state``; handlers receive it through ``Depends`` so tests can
swap it (or the id generator) via ``app.dependency_overrides``.
"""

from typing import Callable

from fastapi import Request

from oldcars_api.app.services.car_service import CarRepository, generate_car_id


def get_car_repository(request: Request) -> CarRepository:
    return request.app.state.car_repository


def get_id_generator() -> Callable[[], str]:
    return generate_car_id
