"""Async Person CRUD operations over MongoDB."""

from personstore.models import DeleteSummary, Person, PersonCollection, PersonProfile
from personstore.operations import PeopleService

__all__ = [
    "DeleteSummary",
    "PeopleService",
    "Person",
    "PersonCollection",
    "PersonProfile",
]
