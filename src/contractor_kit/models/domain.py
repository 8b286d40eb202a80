"""Domain models for clients, appointments, mileage and route preferences."""

from dataclasses import dataclass
from datetime import date, time
from typing import Optional


@dataclass(slots=True)
class Client:
    """A contractor's client with the address used for route planning."""

    client_id: str
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None


@dataclass(slots=True)
class Appointment:
    """A scheduled visit. ``location`` overrides the client's stored address."""

    appointment_id: str
    date: date
    time: Optional[time]
    client_id: Optional[str]
    client_name: str
    location: Optional[str] = None
    notes: Optional[str] = None


@dataclass(slots=True)
class MileageEntry:
    date: date
    distance_miles: float
    purpose: Optional[str] = None
    notes: Optional[str] = None
    entry_id: Optional[str] = None


@dataclass(slots=True)
class RouteSettings:
    """Start/end preferences applied around the day's appointments."""

    start_address: Optional[str] = None
    end_address: Optional[str] = None
