from .collection import PersonCollection
from .person import DeleteSummary, Person, PersonProfile

__all__ = [
    "DeleteSummary",
    "Person",
    "PersonCollection",
    "PersonProfile",
]
