"""
Car endpoints for API v1.

Every route answers with ``text/plain`` lines meant for people, not
machines.  Domain outcomes (not found, duplicate) keep the 200 status
and only change the text; the sole error status is the 500 returned
when a create payload cannot be decoded.

Bodies are streamed: each handler yields its lines as it goes, so a
progress line such as ``Looking up car with ID: ...`` is written
before the outcome is known.  The generators run in the worker thread
pool, which is where the blocking store calls happen.
"""

import logging
from typing import Callable, Iterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, StreamingResponse
from pydantic import ValidationError

from oldcars_api.app.api.deps import get_car_repository, get_id_generator
from oldcars_api.app.core.errors import CarStoreError, ErrorKind
from oldcars_api.app.schemas.car import Car, CarCreate
from oldcars_api.app.services.car_service import CarRepository

logger = logging.getLogger(__name__)

router = APIRouter()

LIST_HEADER = "Car list:"
NOT_FOUND_MESSAGE = "Car not found!"


def _text(lines: Iterator[str]) -> StreamingResponse:
    return StreamingResponse(lines, media_type="text/plain; charset=utf-8")


@router.get("", response_class=PlainTextResponse)
def list_cars(repo: CarRepository = Depends(get_car_repository)) -> StreamingResponse:
    """List every car, one line each, under a header line.

    A store failure is logged and only the header is sent.
    """
    return _text(_list_lines(repo))


@router.get("/{car_id}", response_class=PlainTextResponse)
def get_car(car_id: str, repo: CarRepository = Depends(get_car_repository)) -> StreamingResponse:
    """Describe a single car, or report that it does not exist."""
    return _text(_get_lines(repo, car_id))


@router.put("", response_class=PlainTextResponse)
async def create_car(
    request: Request,
    repo: CarRepository = Depends(get_car_repository),
    new_id: Callable[[], str] = Depends(get_id_generator),
) -> StreamingResponse:
    """Create a car from a JSON body with ``make``, ``model`` and ``year``.

    The identifier is always generated here; an ``id`` in the body is
    ignored.  A body that cannot be decoded raises a ``DECODE`` error,
    which the application renders as a 500 with the decoder's message.
    """
    body = await request.body()
    try:
        payload = CarCreate.model_validate_json(body)
    except ValidationError as exc:
        raise CarStoreError.decode(str(exc)) from exc
    car = Car(id=new_id(), **payload.model_dump())
    return _text(_create_lines(repo, car))


@router.delete("/{car_id}", response_class=PlainTextResponse)
def delete_car(car_id: str, repo: CarRepository = Depends(get_car_repository)) -> StreamingResponse:
    """Remove a car after confirming that it exists."""
    return _text(_delete_lines(repo, car_id))


def _list_lines(repo: CarRepository) -> Iterator[str]:
    try:
        cars = repo.list_all()
    except CarStoreError as exc:
        logger.error("Failed to fetch cars: %s", exc)
        cars = []
    yield f"{LIST_HEADER}\n"
    for car in cars:
        yield f"- {car!r}\n"


def _get_lines(repo: CarRepository, car_id: str) -> Iterator[str]:
    yield f"Looking up car with ID: {car_id}\n"
    try:
        car = repo.find_by_id(car_id)
    except CarStoreError as exc:
        if exc.kind is not ErrorKind.NOT_FOUND:
            logger.error("Failed to fetch car %s: %s", car_id, exc)
        yield f"{NOT_FOUND_MESSAGE}\n"
        return
    yield f"Car: {car!r}\n"


def _create_lines(repo: CarRepository, car: Car) -> Iterator[str]:
    try:
        repo.create(car)
    except CarStoreError as exc:
        if exc.kind is ErrorKind.DUPLICATE_KEY:
            yield f"Car already exists: {car!r}\n"
        else:
            logger.error("Failed to create car %s: %s", car.id, exc)
            yield f"Failed to create car: {exc}\n"
        return
    yield f"Car created successfully: {car!r}\n"


def _delete_lines(repo: CarRepository, car_id: str) -> Iterator[str]:
    yield f"Removing car with ID: {car_id}\n"
    try:
        car = repo.find_by_id(car_id)
    except CarStoreError as exc:
        if exc.kind is not ErrorKind.NOT_FOUND:
            logger.error("Failed to fetch car %s: %s", car_id, exc)
        yield f"{NOT_FOUND_MESSAGE}\n"
        return
    try:
        removed = repo.remove(car.id)
    except CarStoreError as exc:
        # No client-facing message; the outcome is only logged.
        logger.error("Failed to remove car %s: %s", car.id, exc)
        return
    if removed:
        yield "Car removed!\n"
    else:
        # Deleted by a concurrent request between the lookup and the removal.
        yield f"{NOT_FOUND_MESSAGE}\n"
