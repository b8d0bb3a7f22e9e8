"""Wire models for the Reaport ticketing and registration APIs.

Field names on the wire are camelCase; Python attributes are snake_case.
Requests are frozen and built fresh for every call.
"""

from datetime import datetime, timezone
from typing import List
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def new_passenger_id():
    """Generate a unique passenger identifier."""
    return str(uuid4())


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, serialize_by_alias=True)


class PurchaseRequest(WireModel):
    model_config = ConfigDict(frozen=True)

    passenger_id: str = Field(alias="passengerId")
    flight_id: str = Field("", alias="flightId", description="Empty for the discovery call")
    seat_class: str = Field(alias="seatClass")
    meal_type: str = Field(alias="mealType")
    baggage: str


class AvailableSeats(WireModel):
    economy: int = Field(0, ge=0)
    business: int = Field(0, ge=0)

    @field_validator("economy", "business", mode="before")
    @classmethod
    def _null_count(cls, value):
        return 0 if value is None else value


class FlightOffer(WireModel):
    model_config = ConfigDict(frozen=True)

    flight_id: str = Field(alias="flightId")
    registration_start_time: datetime = Field(alias="registrationStartTime")
    direction: str = ""
    departure_time: datetime = Field(alias="departureTime")
    available_seats: AvailableSeats = Field(default_factory=AvailableSeats, alias="availableSeats")

    @field_validator("direction", mode="before")
    @classmethod
    def _null_direction(cls, value):
        return "" if value is None else value

    @field_validator("available_seats", mode="before")
    @classmethod
    def _null_seats(cls, value):
        return {} if value is None else value

    @field_validator("registration_start_time", "departure_time")
    @classmethod
    def _assume_utc(cls, value):
        # Timestamps without an offset are read as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class PurchaseResponse(WireModel):
    message: str = ""
    available_flights: List[FlightOffer] = Field(default_factory=list, alias="availableFlights")

    # The ticketing host encodes an empty list as null
    @field_validator("message", mode="before")
    @classmethod
    def _null_message(cls, value):
        return "" if value is None else value

    @field_validator("available_flights", mode="before")
    @classmethod
    def _null_flights(cls, value):
        return [] if value is None else value


class CheckinRequest(WireModel):
    model_config = ConfigDict(frozen=True)

    passenger_id: str = Field(alias="passengerId")
    baggage_weight: float = Field(alias="baggageWeight")
    meal_type: str = Field(alias="mealType")
