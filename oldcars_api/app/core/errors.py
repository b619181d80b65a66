"""
Error types raised by the car store.

Every failure the store reports is a :class:`CarStoreError` tagged with
an :class:`ErrorKind`.  Callers branch on ``error.kind`` rather than on
the exception's identity or message.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Category of a store or request failure."""

    DUPLICATE_KEY = "duplicate_key"
    NOT_FOUND = "not_found"
    TRANSPORT = "transport"
    DECODE = "decode"


class CarStoreError(Exception):
    """Raised when a car operation cannot be completed."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"CarStoreError(kind={self.kind.value!r}, message={self.message!r})"

    @classmethod
    def duplicate_key(cls, car_id: str) -> "CarStoreError":
        return cls(ErrorKind.DUPLICATE_KEY, f"Car {car_id} already exists")

    @classmethod
    def not_found(cls, car_id: str) -> "CarStoreError":
        return cls(ErrorKind.NOT_FOUND, f"Car {car_id} not found")

    @classmethod
    def transport(cls, message: str) -> "CarStoreError":
        return cls(ErrorKind.TRANSPORT, message)

    @classmethod
    def decode(cls, message: str) -> "CarStoreError":
        return cls(ErrorKind.DECODE, message)


__all__ = ["CarStoreError", "ErrorKind"]
