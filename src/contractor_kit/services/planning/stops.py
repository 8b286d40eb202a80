"""Turn the day's appointments into an ordered list of labelled addresses."""

from __future__ import annotations

from datetime import date, time
from typing import Iterable, Optional, Sequence

from ...models.domain import Appointment, Client, RouteSettings
from ..routing.models import LabeledAddress

START_LABEL = "Start"
END_LABEL = "End"
STOP_LABEL = "Stop"


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def todays_appointments(appointments: Iterable[Appointment], today: date) -> list[Appointment]:
    """Appointments on ``today`` ordered by time of day; untimed ones go last."""

    selected = [appointment for appointment in appointments if appointment.date == today]
    return sorted(
        selected,
        key=lambda appointment: (appointment.time is None, appointment.time or time.min),
    )


def _find_client(appointment: Appointment, clients_by_id: dict[str, Client], clients_by_name: dict[str, Client]) -> Client | None:
    if appointment.client_id and appointment.client_id in clients_by_id:
        return clients_by_id[appointment.client_id]
    return clients_by_name.get(_clean(appointment.client_name).lower())


def appointment_address(appointment: Appointment, client: Client | None) -> str:
    """The appointment's own location wins over the client's stored address."""

    override = _clean(appointment.location)
    if override:
        return override
    if client is None:
        return ""
    return _clean(client.address)


def build_labeled_addresses(
    appointments: Sequence[Appointment],
    clients: Sequence[Client],
    route_settings: RouteSettings | None,
    today: date,
) -> list[LabeledAddress]:
    route_settings = route_settings or RouteSettings()
    clients_by_id = {client.client_id: client for client in clients}
    clients_by_name = {_clean(client.name).lower(): client for client in clients if _clean(client.name)}

    labeled: list[LabeledAddress] = []
    start = _clean(route_settings.start_address)
    if start:
        labeled.append(LabeledAddress(label=START_LABEL, address=start))

    for appointment in todays_appointments(appointments, today):
        client = _find_client(appointment, clients_by_id, clients_by_name)
        address = appointment_address(appointment, client)
        if not address:
            continue
        label = _clean(appointment.client_name) or (client.name if client else "") or STOP_LABEL
        labeled.append(LabeledAddress(label=label, address=address))

    end = _clean(route_settings.end_address)
    if end:
        labeled.append(LabeledAddress(label=END_LABEL, address=end))
    return labeled
