"""
Service layer for cars.

``CarRepository`` is the only component that reads or writes car
documents.  Each car is stored as its JSON serialisation in the
``car`` table, keyed by the car identifier.  Every method opens its
own connection through the injected :class:`ConnectionPool` and closes
it before returning, so no connection outlives a single operation.

SQLite failures are translated into :class:`CarStoreError`: a
primary-key violation on insert becomes ``DUPLICATE_KEY``, a missing
document on lookup becomes ``NOT_FOUND`` and everything else becomes
``TRANSPORT``.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from typing import List

from pydantic import ValidationError

from oldcars_api.app.core.db import CAR_COLLECTION, ConnectionPool
from oldcars_api.app.core.errors import CarStoreError
from oldcars_api.app.schemas.car import Car

logger = logging.getLogger(__name__)

# Extended result codes SQLite reports when the car id is already taken.
DUPLICATE_KEY_CODES = frozenset(
    {sqlite3.SQLITE_CONSTRAINT_PRIMARYKEY, sqlite3.SQLITE_CONSTRAINT_UNIQUE}
)

DEFAULT_MIN_YEAR = 1900


def generate_car_id() -> str:
    """Return a new universally unique car identifier."""
    return str(uuid.uuid4())


class CarRepository:
    """CRUD access to the car collection."""

    def __init__(self, pool: ConnectionPool) -> None:
        self.pool = pool

    def create(self, car: Car) -> None:
        """Insert a new car.

        Raises ``DUPLICATE_KEY`` when a car with the same id exists and
        ``TRANSPORT`` for any other store failure.
        """
        try:
            with self.pool.acquire() as conn:
                conn.execute(
                    f"INSERT INTO {CAR_COLLECTION} (id, document) VALUES (?, ?)",
                    (car.id, car.model_dump_json()),
                )
        except sqlite3.IntegrityError as exc:
            if getattr(exc, "sqlite_errorcode", None) in DUPLICATE_KEY_CODES:
                raise CarStoreError.duplicate_key(car.id) from exc
            raise CarStoreError.transport(str(exc)) from exc
        except sqlite3.Error as exc:
            raise CarStoreError.transport(str(exc)) from exc
        logger.info("Created car %s", car.id)

    def update(self, car: Car) -> bool:
        """Replace the stored document for ``car.id`` with ``car``.

        Returns ``True`` if a car was replaced, ``False`` if none matched.
        """
        try:
            with self.pool.acquire() as conn:
                cursor = conn.execute(
                    f"UPDATE {CAR_COLLECTION} SET document = ? WHERE id = ?",
                    (car.model_dump_json(), car.id),
                )
                affected = cursor.rowcount
        except sqlite3.Error as exc:
            raise CarStoreError.transport(str(exc)) from exc
        if affected:
            logger.info("Updated car %s", car.id)
        return affected > 0

    def remove(self, car_id: str) -> bool:
        """Delete a car by id.

        Returns ``True`` if a car was deleted, ``False`` otherwise.
        """
        try:
            with self.pool.acquire() as conn:
                cursor = conn.execute(
                    f"DELETE FROM {CAR_COLLECTION} WHERE id = ?", (car_id,)
                )
                affected = cursor.rowcount
        except sqlite3.Error as exc:
            raise CarStoreError.transport(str(exc)) from exc
        if affected:
            logger.info("Removed car %s", car_id)
        return affected > 0

    def find_by_id(self, car_id: str) -> Car:
        try:
            with self.pool.acquire() as conn:
                row = conn.execute(
                    f"SELECT id, document FROM {CAR_COLLECTION} WHERE id = ?",
                    (car_id,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise CarStoreError.transport(str(exc)) from exc
        if row is None:
            raise CarStoreError.not_found(car_id)
        return self._row_to_car(row)

    def list_all(self) -> List[Car]:
        """Return every stored car, in no particular order."""
        return self._find(f"SELECT id, document FROM {CAR_COLLECTION}", ())

    def find_by_year(self, min_year: int = DEFAULT_MIN_YEAR) -> List[Car]:
        """Return the cars built in ``min_year`` or later."""
        return self._find(
            f"SELECT id, document FROM {CAR_COLLECTION} "
            "WHERE json_extract(document, '$.year') >= ?",
            (min_year,),
        )

    def _find(self, query: str, params: tuple) -> List[Car]:
        try:
            with self.pool.acquire() as conn:
                rows = conn.execute(query, params).fetchall()
        except sqlite3.Error as exc:
            raise CarStoreError.transport(str(exc)) from exc
        return [self._row_to_car(row) for row in rows]

    @staticmethod
    def _row_to_car(row: sqlite3.Row) -> Car:
        """Convert a stored document into a ``Car``."""
        try:
            return Car.model_validate_json(row["document"])
        except ValidationError as exc:
            raise CarStoreError.transport(f"Corrupt document for car {row['id']}: {exc}") from exc
