from dataclasses import dataclass, field
from datetime import timezone
from typing import Any, Dict, List, Optional

import bson
import pytest
from bson import ObjectId
from bson.codec_options import CodecOptions
from pymongo import ReturnDocument

from personstore.operations import PeopleService


# Same codec options DatabaseManager gives the motor client.
CODEC_OPTIONS = CodecOptions(tz_aware=True, tzinfo=timezone.utc)


def _wire(document: Dict[str, Any]) -> Dict[str, Any]:
    return bson.decode(bson.encode(document), codec_options=CODEC_OPTIONS)


@dataclass
class InsertOneResult:
    inserted_id: ObjectId


@dataclass
class InsertManyResult:
    inserted_ids: List[ObjectId]


@dataclass
class UpdateResult:
    matched_count: int
    modified_count: int


@dataclass
class DeleteResult:
    deleted_count: int
    acknowledged: bool = True


def _matches(document: Dict[str, Any], filter: Dict[str, Any]) -> bool:
    for key, expected in filter.items():
        if key not in document:
            return False
        actual = document[key]
        if isinstance(actual, list) and not isinstance(expected, list):
            if expected not in actual:
                return False
        elif actual != expected:
            return False
    return True


def _project(document: Dict[str, Any], projection: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    document = _wire(document)
    for key, flag in (projection or {}).items():
        if not flag:
            document.pop(key, None)
    return document


class StubCursor:
    def __init__(self, documents: List[Dict[str, Any]]) -> None:
        self._documents = documents

    def sort(self, key_or_list, direction=None):
        keys = [(key_or_list, direction or 1)] if isinstance(key_or_list, str) else list(key_or_list)
        for key, order in reversed(keys):
            self._documents.sort(key=lambda doc: doc.get(key), reverse=order < 0)
        return self

    def limit(self, count: int):
        if count:
            self._documents = self._documents[:count]
        return self

    async def to_list(self, length=None):
        return list(self._documents if length is None else self._documents[:length])

    def __aiter__(self):
        self._iter = iter(self._documents)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


@dataclass
class StubCollection:
    """In-memory stand-in for the motor collection API used by personstore."""

    documents: List[Dict[str, Any]] = field(default_factory=list)
    writes: int = 0

    async def insert_one(self, document):
        document.setdefault("_id", ObjectId())
        self.documents.append(_wire(document))
        self.writes += 1
        return InsertOneResult(document["_id"])

    async def insert_many(self, documents, ordered=True):
        ids = []
        for document in documents:
            ids.append((await self.insert_one(document)).inserted_id)
        return InsertManyResult(ids)

    def find(self, filter=None, projection=None):
        return StubCursor([_project(doc, projection) for doc in self.documents if _matches(doc, filter or {})])

    async def find_one(self, filter=None, projection=None):
        for document in self.documents:
            if _matches(document, filter or {}):
                return _project(document, projection)
        return None

    async def replace_one(self, filter, replacement):
        for index, document in enumerate(self.documents):
            if _matches(document, filter):
                replacement = _wire(replacement)
                replacement["_id"] = document["_id"]
                self.documents[index] = replacement
                self.writes += 1
                return UpdateResult(matched_count=1, modified_count=1)
        return UpdateResult(matched_count=0, modified_count=0)

    async def find_one_and_update(self, filter, update, return_document=ReturnDocument.BEFORE):
        for document in self.documents:
            if _matches(document, filter):
                before = _wire(document)
                document.update(_wire(update["$set"]))
                self.writes += 1
                return _wire(document) if return_document == ReturnDocument.AFTER else before
        return None

    async def find_one_and_delete(self, filter):
        for index, document in enumerate(self.documents):
            if _matches(document, filter):
                self.writes += 1
                return _wire(self.documents.pop(index))
        return None

    async def delete_many(self, filter):
        kept = [doc for doc in self.documents if not _matches(doc, filter)]
        deleted = len(self.documents) - len(kept)
        self.documents[:] = kept
        self.writes += deleted
        return DeleteResult(deleted_count=deleted)

    async def count_documents(self, filter):
        return sum(1 for doc in self.documents if _matches(doc, filter))


@pytest.fixture
def collection():
    return StubCollection()


@pytest.fixture
def service(collection):
    return PeopleService(collection)
