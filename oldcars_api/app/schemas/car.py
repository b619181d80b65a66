"""
Pydantic schemas for cars.

``CarCreate`` is the payload accepted by the create endpoint; the
identifier is never taken from the client.  ``Car`` is the stored and
returned record, including its service-assigned ``id``.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class CarCreate(BaseModel):
    """Schema for creating a new car.  Unknown fields, ``id`` included, are ignored."""

    model_config = ConfigDict(extra="ignore")

    make: str = Field(..., description="Manufacturer, e.g. Ford")
    model: str = Field(..., description="Model name, e.g. T")
    # JSON booleans, strings and floats are rejected rather than coerced.
    year: StrictInt = Field(..., description="Year of manufacture")


class Car(CarCreate):
    """A stored car."""

    id: str = Field(..., description="Unique identifier assigned by the service")
