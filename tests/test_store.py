import orjson

from impostor.core.schemas import RecordKind, StorageError, load_record, validate_record
from impostor.core.store import JsonFileStore, MemoryStore

import pytest


def test_json_store_round_trip(tmp_path):
    path = tmp_path / "nested" / "store.json"
    store = JsonFileStore(path)

    store.set("impostor_used_pool", ["a", "b"])
    store.set("other", {"x": 1})

    reopened = JsonFileStore(path)
    assert reopened.get("impostor_used_pool") == ["a", "b"]
    assert reopened.keys() == ["impostor_used_pool", "other"]

    reopened.delete("other")
    assert JsonFileStore(path).get("other") is None
    assert not path.with_name("store.json.tmp").exists()


def test_missing_key_is_none(tmp_path):
    assert JsonFileStore(tmp_path / "store.json").get("anything") is None


def test_corrupt_file_reads_as_empty_and_is_replaced(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json")
    store = JsonFileStore(path)

    assert store.get("impostor_categories_v3") is None

    store.set("key", "value")
    assert orjson.loads(path.read_bytes()) == {"key": "value"}


def test_non_object_document_reads_as_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("[1, 2, 3]")

    assert JsonFileStore(path).get("0") is None


def test_validate_record_raises_storage_error():
    with pytest.raises(StorageError) as info:
        validate_record(kind=RecordKind.CUSTOM_WORDS, key="k", payload=[1, 2])
    assert info.value.key == "k"
    assert info.value.errors


def test_load_record_falls_back_on_bad_shape():
    store = MemoryStore({"k": "not a list"})
    assert load_record(store, kind=RecordKind.CUSTOM_WORDS, key="k", default=list) == []


def test_load_record_falls_back_when_missing():
    assert load_record(MemoryStore(), kind=RecordKind.USED_WORDS, key="k", default=lambda: ["x"]) == ["x"]


def test_load_record_validates_categories():
    store = MemoryStore({"k": [{"id": "a", "name": "A", "words": ["uno"]}]})
    categories = load_record(store, kind=RecordKind.CATEGORIES, key="k", default=list)

    assert categories[0].id == "a"
    assert categories[0].words == ["uno"]


def test_failed_replace_keeps_old_document_and_cleans_up(tmp_path, monkeypatch):
    path = tmp_path / "store.json"
    store = JsonFileStore(path)
    store.set("a", [1])

    def refuse(src, dst):
        raise PermissionError("read-only")

    monkeypatch.setattr("impostor.core.store.os.replace", refuse)
    store.set("a", [2])

    assert orjson.loads(path.read_bytes()) == {"a": [1]}
    assert not (tmp_path / "store.json.tmp").exists()


def test_unwritable_location_does_not_raise(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = JsonFileStore(blocker / "store.json")

    store.set("a", [1])
    store.delete("a")

    assert store.get("a") is None
