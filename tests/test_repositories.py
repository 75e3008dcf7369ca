"""
Tests for both record store backends.

- JsonCollectionRepository: stable ids, legacy documents, corrupt files
- MongoCollectionRepository: id mapping and error translation over a mocked
  pymongo collection
"""

import json
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import ServerSelectionTimeoutError

from adapters.json_adapter import JsonDocumentStore
from app.config import Settings, StorageBackend
from app.exceptions import NotFoundError, StorageIOError
from repositories import JsonCollectionRepository, MongoCollectionRepository
from repositories.factory import create_mongo_stores, create_record_stores


# =============================================================================
# JSON REPOSITORY TESTS
# =============================================================================


@pytest.fixture
def document(tmp_path) -> JsonDocumentStore:
    store = JsonDocumentStore(tmp_path / "data.json")
    store.ensure_exists()
    return store


@pytest.fixture
def meals_repo(document) -> JsonCollectionRepository:
    return JsonCollectionRepository(document, "meals")


def test_json_document_created_empty(document):
    assert json.loads(document.path.read_text()) == {"meals": [], "headings": []}


def test_json_create_assigns_stable_id(meals_repo):
    created = meals_repo.create({"name": "Soup", "description": "Tomato soup"})

    assert isinstance(created["id"], str) and created["id"]
    assert meals_repo.get_by_id(created["id"])["name"] == "Soup"
    assert meals_repo.get_all() == [created]


def test_json_ids_survive_earlier_deletes(meals_repo):
    """
    Deleting one record never changes another record's identity.
    """
    first = meals_repo.create({"name": "A", "description": "a"})
    second = meals_repo.create({"name": "B", "description": "b"})
    third = meals_repo.create({"name": "C", "description": "c"})

    meals_repo.delete(first["id"])

    assert meals_repo.get_by_id(second["id"])["name"] == "B"
    assert meals_repo.get_by_id(third["id"])["name"] == "C"
    updated = meals_repo.update(third["id"], {"name": "C2"})
    assert updated == {"id": third["id"], "name": "C2", "description": "c"}
    assert meals_repo.get_by_id(second["id"])["name"] == "B"


def test_json_update_and_delete_missing_raise(meals_repo):
    with pytest.raises(NotFoundError):
        meals_repo.update("missing", {"name": "x"})
    with pytest.raises(NotFoundError):
        meals_repo.delete("missing")
    assert meals_repo.get_by_id("missing") is None
    assert meals_repo.exists("missing") is False


def test_json_not_found_messages_name_the_entity(document, meals_repo):
    headings_repo = JsonCollectionRepository(document, "headings")

    with pytest.raises(NotFoundError) as meal_exc:
        meals_repo.update("missing", {"name": "x"})
    with pytest.raises(NotFoundError) as heading_exc:
        headings_repo.delete("missing")

    assert str(meal_exc.value) == "Meal not found"
    assert str(heading_exc.value) == "Heading not found"


def test_json_update_returning_previous(meals_repo):
    created = meals_repo.create({"name": "A", "description": "a", "photo": "/uploads/a.png"})

    previous, updated = meals_repo.update_returning_previous(
        created["id"], {"photo": "/uploads/b.png"}
    )

    assert previous == created
    assert updated == {**created, "photo": "/uploads/b.png"}
    assert meals_repo.get_by_id(created["id"]) == updated


def test_json_update_cannot_change_id(meals_repo):
    created = meals_repo.create({"name": "A", "description": "a"})
    updated = meals_repo.update(created["id"], {"id": "hijack"})
    assert updated["id"] == created["id"]


def test_json_collections_are_independent(document, meals_repo):
    headings_repo = JsonCollectionRepository(document, "headings")
    headings_repo.create({"name": "Mains"})
    meals_repo.create({"name": "Soup", "description": "Tomato soup"})

    stored = json.loads(document.path.read_text())
    assert len(stored["meals"]) == 1
    assert len(stored["headings"]) == 1


def test_json_unknown_collection_rejected(document):
    with pytest.raises(ValueError):
        JsonCollectionRepository(document, "drinks")


def test_json_legacy_records_get_persistent_ids(tmp_path):
    """Documents written without ids get ids assigned once and kept"""
    path = tmp_path / "data.json"
    path.write_text(
        json.dumps(
            {
                "meals": [
                    {"name": "Soup", "description": "Tomato soup", "halfServe": True},
                    {"name": "Pie", "description": "Apple pie"},
                ]
            }
        )
    )
    repo = JsonCollectionRepository(JsonDocumentStore(path), "meals")

    first_ids = [r["id"] for r in repo.get_all()]
    second_ids = [r["id"] for r in repo.get_all()]

    assert all(first_ids)
    assert first_ids == second_ids
    stored = json.loads(path.read_text())
    assert [r["id"] for r in stored["meals"]] == first_ids
    assert stored["headings"] == []


def test_json_corrupt_document_raises_without_reset(tmp_path):
    path = tmp_path / "data.json"
    path.write_text("{not json")
    repo = JsonCollectionRepository(JsonDocumentStore(path), "meals")

    with pytest.raises(StorageIOError):
        repo.get_all()
    with pytest.raises(StorageIOError):
        repo.create({"name": "Soup", "description": "Tomato soup"})

    assert path.read_text() == "{not json"


def test_json_non_object_document_raises(tmp_path):
    path = tmp_path / "data.json"
    path.write_text("[]")
    with pytest.raises(StorageIOError):
        JsonDocumentStore(path).load()


def test_json_failed_transaction_writes_nothing(document, meals_repo):
    meals_repo.create({"name": "Soup", "description": "Tomato soup"})
    before = document.path.read_text()

    with pytest.raises(RuntimeError):
        with document.transaction() as doc:
            doc["meals"].clear()
            raise RuntimeError("boom")

    assert document.path.read_text() == before


def test_json_write_failure_is_storage_error(document, monkeypatch):
    def fail(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr("adapters.json_adapter.os.replace", fail)

    with pytest.raises(StorageIOError):
        document.save({"meals": [], "headings": []})
    leftovers = [p for p in document.path.parent.iterdir() if p.name.endswith(".tmp")]
    assert leftovers == []


# =============================================================================
# MONGO REPOSITORY TESTS
# =============================================================================


def make_collection(name: str = "meals") -> MagicMock:
    collection = MagicMock()
    collection.name = name
    return collection


def test_mongo_get_all_maps_ids():
    oid = ObjectId()
    heading_oid = ObjectId()
    collection = make_collection()
    collection.find.return_value = [
        {"_id": oid, "name": "Soup", "description": "Tomato soup", "headingId": heading_oid}
    ]
    repo = MongoCollectionRepository(collection)

    records = repo.get_all()

    assert records == [
        {"id": str(oid), "name": "Soup", "description": "Tomato soup", "headingId": str(heading_oid)}
    ]


def test_mongo_get_by_id_malformed_is_absent():
    collection = make_collection()
    repo = MongoCollectionRepository(collection)

    assert repo.get_by_id("not-an-object-id") is None
    collection.find_one.assert_not_called()


def test_mongo_create_returns_assigned_id():
    oid = ObjectId()
    collection = make_collection()
    collection.insert_one.return_value = MagicMock(inserted_id=oid)
    repo = MongoCollectionRepository(collection)

    created = repo.create({"id": "ignored", "name": "Soup", "description": "Tomato soup"})

    assert created["id"] == str(oid)
    inserted = collection.insert_one.call_args.args[0]
    assert "id" not in inserted


def test_mongo_update_uses_single_document_update():
    oid = ObjectId()
    collection = make_collection()
    collection.find_one_and_update.return_value = {"_id": oid, "name": "Mains"}
    repo = MongoCollectionRepository(collection)

    updated = repo.update(str(oid), {"name": "Mains", "id": "ignored"})

    assert updated == {"id": str(oid), "name": "Mains"}
    filter_, change = collection.find_one_and_update.call_args.args[:2]
    assert filter_ == {"_id": oid}
    assert change == {"$set": {"name": "Mains"}}


def test_mongo_update_returning_previous_is_one_operation():
    oid = ObjectId()
    collection = make_collection()
    collection.find_one_and_update.return_value = {
        "_id": oid,
        "name": "Soup",
        "photo": "/uploads/a.png",
    }
    repo = MongoCollectionRepository(collection)

    previous, updated = repo.update_returning_previous(str(oid), {"photo": "/uploads/b.png"})

    assert previous == {"id": str(oid), "name": "Soup", "photo": "/uploads/a.png"}
    assert updated == {"id": str(oid), "name": "Soup", "photo": "/uploads/b.png"}
    call = collection.find_one_and_update.call_args
    assert call.args[:2] == ({"_id": oid}, {"$set": {"photo": "/uploads/b.png"}})
    assert call.kwargs["return_document"] == ReturnDocument.BEFORE
    collection.find_one.assert_not_called()


def test_mongo_update_and_delete_missing_raise():
    collection = make_collection()
    collection.find_one_and_update.return_value = None
    collection.find_one_and_delete.return_value = None
    repo = MongoCollectionRepository(collection)

    with pytest.raises(NotFoundError):
        repo.update(str(ObjectId()), {"name": "x"})
    with pytest.raises(NotFoundError):
        repo.delete(str(ObjectId()))
    with pytest.raises(NotFoundError) as exc_info:
        repo.delete("bad-id")
    assert str(exc_info.value) == "Meal not found"


def test_mongo_delete_returns_removed_document():
    oid = ObjectId()
    collection = make_collection()
    collection.find_one_and_delete.return_value = {"_id": oid, "name": "Soup"}
    repo = MongoCollectionRepository(collection)

    assert repo.delete(str(oid)) == {"id": str(oid), "name": "Soup"}


def test_mongo_errors_become_storage_errors():
    collection = make_collection()
    collection.find.side_effect = ServerSelectionTimeoutError("no servers")
    collection.insert_one.side_effect = ServerSelectionTimeoutError("no servers")
    repo = MongoCollectionRepository(collection)

    with pytest.raises(StorageIOError):
        repo.get_all()
    with pytest.raises(StorageIOError):
        repo.create({"name": "Soup"})


# =============================================================================
# FACTORY TESTS
# =============================================================================


def test_factory_defaults_to_json(tmp_path):
    settings = Settings(_env_file=None, data_file=tmp_path / "menu.json")
    stores = create_record_stores(settings)

    assert stores.backend == StorageBackend.JSON
    assert isinstance(stores.meals, JsonCollectionRepository)
    assert (tmp_path / "menu.json").exists()


def test_factory_builds_mongo_stores_from_connection():
    connection = MagicMock()
    connection.db_name = "menuboard"
    connection.collection.side_effect = make_collection

    stores = create_mongo_stores(Settings(_env_file=None), connection)

    assert stores.backend == StorageBackend.MONGODB
    assert stores.meals.collection == "meals"
    assert stores.headings.collection == "headings"
    stores.close()
    connection.close.assert_called_once()
