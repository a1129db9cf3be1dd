"""Person data model definitions."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Any, Dict, List, Mapping, Optional

import pydantic
from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from personstore.core.exceptions import ValidationError


def _object_id_to_str(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    return value


ObjectIdStr = Annotated[str, BeforeValidator(_object_id_to_str)]


def to_object_id(value: Any) -> ObjectId:
    """Cast an id (string or ObjectId) for use in a query filter."""

    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as exc:
        raise ValidationError(f"Invalid person id: {value!r}") from exc


class PersonProfile(BaseModel):
    """A stored person as returned by queries that project `age` away."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    id: Optional[ObjectIdStr] = Field(None, alias="_id", description="Storage assigned identifier")
    name: str = Field(..., min_length=1)
    favorite_foods: List[str] = Field(default_factory=list, alias="favoriteFoods")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    @classmethod
    def wire_fields(cls) -> List[str]:
        return [field.alias or name for name, field in cls.model_fields.items()]

    @classmethod
    def from_document(cls, document: Mapping[str, Any]):
        """Build a model from a raw MongoDB document, ignoring bookkeeping keys."""

        known = set(cls.wire_fields())
        return cls.model_validate({key: value for key, value in document.items() if key in known})

    def to_document(self) -> Dict[str, Any]:
        document = self.model_dump(by_alias=True, exclude={"id"})
        if self.id is not None:
            document = {"_id": to_object_id(self.id), **document}
        return document


class Person(PersonProfile):
    """The full Person record."""

    age: int = 0


def validate_person(data: Mapping[str, Any] | Person) -> Person:
    """Validate caller supplied data into a `Person`, raising our `ValidationError`."""

    if isinstance(data, Person):
        data = data.model_dump(by_alias=True)
    try:
        return Person.model_validate(dict(data))
    except pydantic.ValidationError as exc:
        raise ValidationError("Person validation failed", errors=exc.errors()) from exc


@dataclass(frozen=True)
class DeleteSummary:
    """Outcome of a bulk delete."""

    deleted_count: int
    acknowledged: bool

    @classmethod
    def from_result(cls, result: Any) -> "DeleteSummary":
        return cls(deleted_count=result.deleted_count, acknowledged=result.acknowledged)
