"""
Application package initializer.

The package is organised into logical pieces: ``core`` holds
configuration, database access and logging, ``services`` owns the car
store, ``schemas`` the pydantic models and ``api`` the versioned
routers.
"""

from .main import app  # noqa: F401
