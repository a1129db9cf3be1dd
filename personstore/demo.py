"""Runnable walkthrough of every person operation against a live collection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from personstore.core.config import Settings, get_settings
from personstore.core.database import DatabaseManager
from personstore.core.exceptions import ConfigError, DatabaseConnectionError
from personstore.core.logging import configure_logging
from personstore.models.person import DeleteSummary, Person, PersonProfile
from personstore.operations import PeopleService

logger = logging.getLogger(__name__)

DEMO_PEOPLE = [
    {"name": "John", "age": 25, "favoriteFoods": ["pizza", "burritos"]},
    {"name": "Mary", "age": 31, "favoriteFoods": ["salad"]},
    {"name": "John", "age": 40, "favoriteFoods": ["burritos", "steak"]},
]


@dataclass
class DemoReport:
    """Results of each demo step, in order."""

    created: Optional[Person] = None
    created_many: List[Person] = field(default_factory=list)
    johns: List[Person] = field(default_factory=list)
    burrito_lover: Optional[Person] = None
    by_id: Optional[Person] = None
    edited: Optional[Person] = None
    john_updated: Optional[Person] = None
    removed: Optional[Person] = None
    removed_mary: Optional[DeleteSummary] = None
    chain: List[PersonProfile] = field(default_factory=list)


async def run_demo(service: PeopleService) -> DemoReport:
    """Run the ten operations once each, strictly in sequence."""

    report = DemoReport()

    report.created = await service.create_and_save_person()
    logger.info("Created one: %s", report.created.model_dump(by_alias=True))

    report.created_many = await service.create_many_people(DEMO_PEOPLE)
    logger.info("Created many (count): %d", len(report.created_many))

    report.johns = await service.find_people_by_name("John")
    logger.info("Find by name (John): %s", [person.id for person in report.johns])

    report.burrito_lover = await service.find_one_by_food("burritos")
    logger.info("Find one who likes burritos: %s", report.burrito_lover.name if report.burrito_lover else None)

    person_id = report.created.id
    report.by_id = await service.find_person_by_id(person_id)
    logger.info("Find by id: %s", report.by_id.name if report.by_id else None)

    report.edited = await service.find_edit_then_save(person_id)
    logger.info("Classic update, foods: %s", report.edited.favorite_foods)

    report.john_updated = await service.find_and_update("John")
    logger.info("John after age=20: %s", report.john_updated.age if report.john_updated else None)

    report.removed = await service.remove_by_id(person_id)
    logger.info("Removed by id: %s", report.removed.id if report.removed else None)

    report.removed_mary = await service.remove_many_people("Mary")
    logger.info(
        "Remove Mary result: deleted=%d acknowledged=%s",
        report.removed_mary.deleted_count,
        report.removed_mary.acknowledged,
    )

    report.chain = await service.query_chain("burritos")
    logger.info("Query chain result: %s", [person.model_dump(by_alias=True) for person in report.chain])

    return report


async def main(settings: Optional[Settings] = None, database: Optional[DatabaseManager] = None) -> int:
    """Connect, run the demo, always disconnect. Returns the process exit code."""

    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)
    database = database or DatabaseManager(settings)

    try:
        await database.initialize()
    except (ConfigError, DatabaseConnectionError) as exc:
        logger.error("%s", exc)
        return 1

    try:
        await run_demo(PeopleService(database.collection()))
    except Exception:
        logger.exception("Demo error")
        return 1
    finally:
        await database.close()
    return 0
