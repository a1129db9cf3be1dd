import pytest
from bson import ObjectId

from personstore.core.exceptions import ValidationError
from personstore.models.person import Person, PersonProfile, to_object_id, validate_person


def test_name_is_required():
    with pytest.raises(ValidationError) as excinfo:
        validate_person({"age": 3})
    assert excinfo.value.errors[0]["loc"] == ("name",)
    assert excinfo.value.code == "validation_error"


def test_empty_name_is_rejected():
    with pytest.raises(ValidationError):
        validate_person({"name": ""})


def test_defaults_fill_age_and_foods():
    person = validate_person({"name": "Zed"})
    assert person.age == 0
    assert person.favorite_foods == []


def test_favorite_foods_cannot_be_null():
    with pytest.raises(ValidationError):
        validate_person({"name": "Zed", "favoriteFoods": None})


def test_unknown_fields_are_rejected():
    with pytest.raises(ValidationError):
        validate_person({"name": "Zed", "nickname": "z"})


def test_fractional_age_is_rejected():
    with pytest.raises(ValidationError):
        validate_person({"name": "Zed", "age": 2.5})


def test_document_uses_wire_names():
    oid = ObjectId()
    person = Person(id=str(oid), name="Ann", age=5, favorite_foods=["kale"])
    document = person.to_document()
    assert document["_id"] == oid
    assert set(document) == {"_id", "name", "age", "favoriteFoods", "createdAt", "updatedAt"}


def test_from_document_ignores_bookkeeping_keys():
    oid = ObjectId()
    person = Person.from_document({"_id": oid, "name": "Ann", "__v": 0})
    assert person.id == str(oid)


def test_profile_has_no_age():
    profile = PersonProfile.from_document({"_id": ObjectId(), "name": "Ann", "age": 9})
    assert "age" not in profile.model_dump(by_alias=True)
    assert not hasattr(profile, "age")


def test_invalid_id_is_a_validation_error():
    with pytest.raises(ValidationError):
        to_object_id("not-an-id")
