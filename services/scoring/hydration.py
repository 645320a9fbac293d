"""
Mapping from persisted rows to scoring entities.

This is the only place ORM objects are read by the scoring package; everything
past this point works with the frozen dataclasses in services.scoring.types.
"""

from typing import Optional

from services.scoring import types

def gender_from_row(row) -> Optional[types.Gender]:
    if row is None:
        return None
    return types.Gender(id=row.id, value=row.value, label=row.label)

def unit_from_row(row) -> Optional[types.Unit]:
    if row is None:
        return None
    return types.Unit(id=row.id, value=row.value, label=row.label)

def unit_type_from_row(row) -> types.UnitType:
    return types.UnitType(
        id=row.id,
        value=row.value,
        label=row.label,
        units=tuple(unit_from_row(u) for u in row.units),
    )

def domain_from_row(row) -> types.Domain:
    return types.Domain(
        id=row.id,
        value=row.value,
        label=row.label,
        mobile_label=row.mobile_label,
        logo=row.logo,
    )

def event_from_row(row) -> types.Event:
    return types.Event(
        id=row.id,
        value=row.value,
        label=row.label,
        description=row.description,
        unit_type=unit_type_from_row(row.unit_type),
        domain=domain_from_row(row.domain),
    )

def user_from_row(row) -> types.User:
    return types.User(
        id=row.id,
        email=row.email,
        birthday=row.birthday,
        gender=gender_from_row(row.gender),
    )

def submission_from_row(row) -> types.Submission:
    return types.Submission(
        id=row.id,
        user=user_from_row(row.user),
        event=event_from_row(row.event),
        raw_value=row.raw_value,
        value=float(row.value),
        unit=unit_from_row(row.unit),
        created_at=row.created_at,
    )
