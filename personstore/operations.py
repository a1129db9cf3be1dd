"""Person CRUD and query operations."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

from pymongo import ASCENDING

from personstore.core.exceptions import NotFoundError
from personstore.models.collection import PersonCollection
from personstore.models.person import DeleteSummary, Person, PersonProfile

logger = logging.getLogger(__name__)

SAMPLE_PERSON = {"name": "Alice", "age": 28, "favoriteFoods": ["sushi", "burritos"]}


class PeopleService:
    """The ten person operations, bound to an explicitly supplied collection.

    Every method is a coroutine that returns its result or raises; driver
    errors propagate untouched. Lookups that match nothing return ``None``
    (or an empty list), except `find_edit_then_save`, whose target must exist.
    """

    def __init__(self, collection: Any) -> None:
        if not isinstance(collection, PersonCollection):
            collection = PersonCollection(collection)
        self.people = collection

    async def create_and_save_person(self, data: Optional[Mapping[str, Any]] = None) -> Person:
        return await self.people.create(data if data is not None else SAMPLE_PERSON)

    async def create_many_people(self, records: Iterable[Mapping[str, Any]]) -> List[Person]:
        return await self.people.create_many(records)

    async def find_people_by_name(self, name: str) -> List[Person]:
        return await self.people.find({"name": name})

    async def find_one_by_food(self, food: str) -> Optional[Person]:
        return await self.people.find_one({"favoriteFoods": food})

    async def find_person_by_id(self, person_id: Any) -> Optional[Person]:
        return await self.people.find_by_id(person_id)

    async def find_edit_then_save(self, person_id: Any, food: str = "hamburger") -> Person:
        """Load a person, append ``food`` to their favorites and save.

        Unlike the other lookups a missing person is an error here.
        """

        person = await self.people.find_by_id(person_id)
        if person is None:
            raise NotFoundError(f"Person {person_id} not found")
        person.favorite_foods.append(food)
        return await self.people.save(person)

    async def find_and_update(self, name: str, age: int = 20) -> Optional[Person]:
        return await self.people.find_one_and_update({"name": name}, {"age": age})

    async def remove_by_id(self, person_id: Any) -> Optional[Person]:
        return await self.people.find_by_id_and_delete(person_id)

    async def remove_many_people(self, name: str = "Mary") -> DeleteSummary:
        summary = await self.people.delete_many({"name": name})
        logger.debug("Removed %d people named %s", summary.deleted_count, name)
        return summary

    async def query_chain(self, food: str = "burritos", limit: int = 2) -> List[PersonProfile]:
        """People who like ``food``, sorted by name, capped at ``limit``, without ``age``."""

        return await self.people.find(
            {"favoriteFoods": food},
            projection={"age": 0},
            sort=[("name", ASCENDING)],
            limit=limit,
            model=PersonProfile,
        )
