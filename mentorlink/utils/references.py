# mentorlink/utils/references.py
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from sqlalchemy import inspect

from ..models import Mentorship

T = TypeVar("T")

PARTY_ROLES = ("mentor", "parent", "student")

@dataclass(frozen=True)
class Id:
    """A party known only by its identifier."""
    value: Optional[str]

@dataclass(frozen=True)
class Resolved(Generic[T]):
    """A party whose full record is at hand."""
    record: T

Reference = Union[Id, Resolved[T]]

def reference_of(mentorship: Mentorship, role: str) -> Reference:
    """Returns the mentor/parent/student of a mentorship as an ``Id`` or ``Resolved`` reference.

    Looks at the load state of the relationship instead of touching the attribute,
    which would trigger lazy IO on an async session.
    """
    if role not in PARTY_ROLES:
        raise ValueError(f"Unknown mentorship role: {role}")
    foreign_key = getattr(mentorship, f"{role}_id")
    if role in inspect(mentorship).unloaded:
        return Id(foreign_key)
    record = getattr(mentorship, role)
    if record is None:
        return Id(foreign_key)
    return Resolved(record)

def name_of(reference: Reference) -> Optional[str]:
    if isinstance(reference, Resolved):
        return reference.record.name
    return None
