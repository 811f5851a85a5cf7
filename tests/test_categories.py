import pytest

from impostor.core.categories import (
    CategoryError,
    CategoryManager,
    CustomWordList,
    make_category_id,
    split_by_lines,
)
from impostor.core.store import MemoryStore


@pytest.fixture
def manager(store):
    ids = iter(f"id-{n}" for n in range(100))
    return CategoryManager(store, id_factory=lambda name: next(ids))


def test_presets_are_served_when_store_is_empty(manager):
    categories = manager.list_all()

    assert [category.id for category in categories] == ["frutas", "cocina", "lugares"]
    assert all(len(category.words) == 50 for category in categories)


def test_malformed_collection_falls_back_to_presets():
    store = MemoryStore({"impostor_categories_v3": [{"name": "missing id"}]})
    assert [c.id for c in CategoryManager(store).list_all()] == ["frutas", "cocina", "lugares"]


def test_create_appends_and_persists(manager, store):
    category = manager.create("  Animales  ", ["perro", "gato"])

    assert category.id == "id-0"
    assert category.name == "Animales"
    stored = store.get("impostor_categories_v3")
    assert stored[-1] == {"id": "id-0", "name": "Animales", "words": ["perro", "gato"]}
    assert len(stored) == 4


@pytest.mark.parametrize("name, words", [("", ["a"]), ("  ", ["a"]), ("Vacía", [])])
def test_create_rejects_blank_name_or_no_words(manager, name, words):
    with pytest.raises(CategoryError):
        manager.create(name, words)


def test_update_keeps_id_and_falls_back_to_old_name(manager):
    category = manager.create("Animales", ["perro"])

    updated = manager.update(category.id, "   ", ["perro", "gato"])

    assert updated.id == category.id
    assert updated.name == "Animales"
    assert manager.get(category.id).words == ["perro", "gato"]


def test_update_unknown_category(manager):
    with pytest.raises(CategoryError):
        manager.update("nope", "x", ["a"])


def test_delete(manager):
    manager.delete("cocina")
    assert [c.id for c in manager.list_all()] == ["frutas", "lugares"]

    with pytest.raises(CategoryError):
        manager.delete("cocina")


def test_delete_everything_leaves_empty_collection(manager):
    for category_id in ("frutas", "cocina", "lugares"):
        manager.delete(category_id)
    assert manager.list_all() == []


def test_custom_word_list(store):
    words = CustomWordList(store)
    assert words.load() == []

    words.save(["sol", "luna"])
    assert CustomWordList(store).load() == ["sol", "luna"]

    words.clear()
    assert words.load() == []


def test_split_by_lines():
    assert split_by_lines("manzana\r\n  banana \n\n\t\nnaranja") == ["manzana", "banana", "naranja"]
    assert split_by_lines("") == []


def test_make_category_id():
    category_id = make_category_id("Comida  Rápida")
    prefix, suffix = category_id.rsplit("-", 1)

    assert prefix == "comida-rápida"
    assert len(suffix) == 7
