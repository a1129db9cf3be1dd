"""Validated gateway over the raw MongoDB `people` collection."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar

from pymongo import ReturnDocument

from personstore.core.exceptions import NotFoundError, ValidationError
from personstore.models.person import (
    DeleteSummary,
    Person,
    PersonProfile,
    to_object_id,
    validate_person,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=PersonProfile)
SortSpec = Sequence[Tuple[str, int]]


def utcnow() -> datetime:
    # BSON dates keep millisecond precision
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class PersonCollection:
    """The only path by which person records reach storage.

    Wraps an `AsyncIOMotorCollection` (or anything exposing the same coroutine
    API), validating writes against `Person` and maintaining timestamps.
    """

    def __init__(self, collection: Any) -> None:
        self._collection = collection

    @property
    def raw(self) -> Any:
        return self._collection

    def _stamped(self, data: Mapping[str, Any] | Person) -> Person:
        person = validate_person(data)
        if person.id is not None:
            raise ValidationError("Person id is assigned by storage on insert")
        now = utcnow()
        return person.model_copy(update={"created_at": now, "updated_at": now})

    async def create(self, data: Mapping[str, Any] | Person) -> Person:
        person = self._stamped(data)
        result = await self._collection.insert_one(person.to_document())
        created = person.model_copy(update={"id": str(result.inserted_id)})
        logger.debug("Inserted person %s", created.id)
        return created

    async def create_many(self, records: Iterable[Mapping[str, Any] | Person]) -> List[Person]:
        people = [self._stamped(record) for record in records]
        if not people:
            return []
        result = await self._collection.insert_many([person.to_document() for person in people], ordered=True)
        created = [
            person.model_copy(update={"id": str(inserted_id)})
            for person, inserted_id in zip(people, result.inserted_ids)
        ]
        logger.debug("Inserted %d people", len(created))
        return created

    async def find(
        self,
        filter: Mapping[str, Any],
        *,
        projection: Optional[Mapping[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        limit: int = 0,
        model: Type[ModelT] = Person,
    ) -> List[ModelT]:
        cursor = self._collection.find(dict(filter), projection)
        if sort:
            cursor = cursor.sort(list(sort))
        if limit:
            cursor = cursor.limit(limit)
        documents = await cursor.to_list(length=None)
        return [model.from_document(document) for document in documents]

    async def find_one(self, filter: Mapping[str, Any]) -> Optional[Person]:
        document = await self._collection.find_one(dict(filter))
        if document is None:
            return None
        return Person.from_document(document)

    async def find_by_id(self, person_id: Any) -> Optional[Person]:
        return await self.find_one({"_id": to_object_id(person_id)})

    async def save(self, person: Person) -> Person:
        """Persist a loaded person, replacing the stored document by id."""

        if person.id is None:
            return await self.create(person)
        validated = validate_person(person).model_copy(update={"updated_at": utcnow()})
        result = await self._collection.replace_one({"_id": to_object_id(validated.id)}, validated.to_document())
        if result.matched_count == 0:
            raise NotFoundError(f"Person {validated.id} not found")
        return validated

    async def find_one_and_update(self, filter: Mapping[str, Any], values: Mapping[str, Any]) -> Optional[Person]:
        """Atomically `$set` validated fields on the first match, returning the updated record."""

        changes = _validated_changes(values)
        changes["updatedAt"] = utcnow()
        document = await self._collection.find_one_and_update(
            dict(filter),
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            return None
        return Person.from_document(document)

    async def find_by_id_and_delete(self, person_id: Any) -> Optional[Person]:
        document = await self._collection.find_one_and_delete({"_id": to_object_id(person_id)})
        if document is None:
            return None
        return Person.from_document(document)

    async def delete_many(self, filter: Mapping[str, Any]) -> DeleteSummary:
        result = await self._collection.delete_many(dict(filter))
        return DeleteSummary.from_result(result)


def _validated_changes(values: Mapping[str, Any]) -> Dict[str, Any]:
    if not values:
        raise ValidationError("Update must set at least one field")
    probe = validate_person({"name": "_", **values})
    changed = set(probe.model_fields_set)
    if "id" in changed:
        raise ValidationError("Person id is immutable")
    if "name" not in values:
        changed.discard("name")
    return probe.model_dump(by_alias=True, include=changed)
