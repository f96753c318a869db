"""JSON snapshot files.

A snapshot file mirrors the booking service's read API:

    {
      "settings": {"openingHour": 8, "closingHour": 18},
      "resources": [{"id": "r1", "name": "Everest", "capacity": 8,
                     "amenities": ["projector"], "openingHour": null,
                     "closingHour": null, "lockedToCompanies": []}],
      "reservations": [{"id": "b1", "roomId": "r1", "userId": "u1",
                        "title": "Standup", "description": "",
                        "startTime": "2024-01-15T09:00:00+00:00",
                        "endTime": "2024-01-15T09:30:00+00:00",
                        "status": "confirmed", "attendees": [],
                        "externalGuests": []}]
    }

``lockedToCompanyId`` (a single id) is accepted in place of
``lockedToCompanies``.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union

from roomgrid.domain.models import (
    ExternalGuest,
    Reservation,
    ReservationStatus,
    Resource,
)
from roomgrid.data.source import InMemorySource, OperatingSettings


class SnapshotFormatError(ValueError):
    """A snapshot file or record could not be parsed."""


def _parse_instant(value: Any, field_name: str, record_id: str) -> datetime:
    if not isinstance(value, str):
        raise SnapshotFormatError(f"Reservation {record_id}: {field_name} must be a string")
    try:
        instant = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise SnapshotFormatError(
            f"Reservation {record_id}: invalid {field_name} {value!r}"
        ) from exc
    if instant.tzinfo is None:
        raise SnapshotFormatError(
            f"Reservation {record_id}: {field_name} {value!r} has no UTC offset"
        )
    return instant


def _optional_hour(value: Any, field_name: str, record_id: str) -> Optional[int]:
    if value is None:
        return None
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= 23:
        raise SnapshotFormatError(f"Resource {record_id}: invalid {field_name} {value!r}")
    return value


def _string_list(value: Any, field_name: str, record: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise SnapshotFormatError(f"{record}: {field_name} must be a list, got {value!r}")
    return [str(v) for v in value]


def resource_from_dict(data: dict) -> Resource:
    """Build a Resource from its JSON form."""
    if not isinstance(data, dict):
        raise SnapshotFormatError(f"Resource record must be an object, got {data!r}")
    try:
        resource_id = str(data["id"])
        name = str(data["name"])
    except KeyError as exc:
        raise SnapshotFormatError(f"Resource record missing {exc.args[0]!r}") from exc

    record = f"Resource {resource_id}"
    capacity = data.get("capacity", 0)
    if not isinstance(capacity, int) or isinstance(capacity, bool) or capacity < 0:
        raise SnapshotFormatError(f"{record}: invalid capacity {capacity!r}")

    locked = data.get("lockedToCompanies")
    if locked is None:
        single = data.get("lockedToCompanyId")
        locked = [single] if single else []

    return Resource(
        id=resource_id,
        name=name,
        capacity=capacity,
        amenities=tuple(_string_list(data.get("amenities"), "amenities", record)),
        opening_hour=_optional_hour(data.get("openingHour"), "openingHour", resource_id),
        closing_hour=_optional_hour(data.get("closingHour"), "closingHour", resource_id),
        locked_to_companies=frozenset(
            _string_list(locked, "lockedToCompanies", record)
        ),
    )


def _guest_from_dict(data: Any, reservation_id: str) -> ExternalGuest:
    if not isinstance(data, dict):
        raise SnapshotFormatError(
            f"Reservation {reservation_id}: external guest must be an object, got {data!r}"
        )
    return ExternalGuest(
        name=str(data.get("name") or ""),
        email=str(data.get("email") or ""),
        company=str(data.get("company") or ""),
    )


def reservation_from_dict(data: dict) -> Reservation:
    """Build a Reservation from its JSON form."""
    if not isinstance(data, dict):
        raise SnapshotFormatError(f"Reservation record must be an object, got {data!r}")
    try:
        reservation_id = str(data["id"])
        resource_id = str(data["roomId"])
        start_raw = data["startTime"]
        end_raw = data["endTime"]
    except KeyError as exc:
        raise SnapshotFormatError(f"Reservation record missing {exc.args[0]!r}") from exc

    record = f"Reservation {reservation_id}"
    try:
        status = ReservationStatus(data.get("status", "confirmed"))
    except ValueError as exc:
        raise SnapshotFormatError(
            f"{record}: unknown status {data.get('status')!r}"
        ) from exc

    guests = data.get("externalGuests") or []
    if not isinstance(guests, list):
        raise SnapshotFormatError(f"{record}: externalGuests must be a list, got {guests!r}")

    return Reservation(
        id=reservation_id,
        resource_id=resource_id,
        user_id=str(data.get("userId", "")),
        title=data.get("title", ""),
        description=data.get("description") or "",
        start=_parse_instant(start_raw, "startTime", reservation_id),
        end=_parse_instant(end_raw, "endTime", reservation_id),
        status=status,
        attendees=tuple(_string_list(data.get("attendees"), "attendees", record)),
        external_guests=tuple(_guest_from_dict(g, reservation_id) for g in guests),
    )


def settings_from_dict(data: Optional[dict]) -> Optional[OperatingSettings]:
    """Build global settings; None when the file has none."""
    if not data:
        return None
    try:
        return OperatingSettings(
            opening_hour=int(data["openingHour"]),
            closing_hour=int(data["closingHour"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise SnapshotFormatError(f"Invalid settings record: {data!r}") from exc


def resource_to_dict(resource: Resource) -> dict:
    return {
        "id": resource.id,
        "name": resource.name,
        "capacity": resource.capacity,
        "amenities": list(resource.amenities),
        "openingHour": resource.opening_hour,
        "closingHour": resource.closing_hour,
        "lockedToCompanies": sorted(resource.locked_to_companies),
    }


def reservation_to_dict(reservation: Reservation) -> dict:
    return {
        "id": reservation.id,
        "roomId": reservation.resource_id,
        "userId": reservation.user_id,
        "title": reservation.title,
        "description": reservation.description,
        "startTime": reservation.start.isoformat(),
        "endTime": reservation.end.isoformat(),
        "status": reservation.status.value,
        "attendees": list(reservation.attendees),
        "externalGuests": [
            {"name": g.name, "email": g.email, "company": g.company}
            for g in reservation.external_guests
        ],
    }


def source_from_dict(data: dict) -> InMemorySource:
    """Build an in-memory source from a parsed snapshot document."""
    if not isinstance(data, dict):
        raise SnapshotFormatError("Snapshot document must be a JSON object")
    return InMemorySource(
        resources=[resource_from_dict(r) for r in data.get("resources") or ()],
        reservations=[reservation_from_dict(r) for r in data.get("reservations") or ()],
        settings=settings_from_dict(data.get("settings")),
    )


def source_to_dict(source: InMemorySource) -> dict:
    settings = source.settings
    return {
        "settings": (
            {"openingHour": settings.opening_hour, "closingHour": settings.closing_hour}
            if settings is not None
            else None
        ),
        "resources": [resource_to_dict(r) for r in source.resources],
        "reservations": [reservation_to_dict(r) for r in source.reservations],
    }


def load_snapshot_file(path: Union[str, Path]) -> InMemorySource:
    """Read a snapshot file into an in-memory source."""
    try:
        data = json.loads(Path(path).read_text())
    except json.JSONDecodeError as exc:
        raise SnapshotFormatError(f"{path}: invalid JSON ({exc})") from exc
    return source_from_dict(data)


def save_snapshot_file(source: InMemorySource, path: Union[str, Path]) -> None:
    """Write an in-memory source as a snapshot file."""
    Path(path).write_text(json.dumps(source_to_dict(source), indent=2))
