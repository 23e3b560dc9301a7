import json
import threading

import pytest

from services import cart as cart_service


def test_load_missing_collection_is_empty(store):
    assert store.load("products") == []


def test_save_then_load(store):
    store.save("products", [{"id": "p1", "name": "Kurta"}])
    assert store.load("products") == [{"id": "p1", "name": "Kurta"}]


def test_unknown_collection_is_rejected(store):
    with pytest.raises(ValueError):
        store.load("../secrets")
    with pytest.raises(ValueError):
        store.save("payments", [])


def test_update_saves_in_place_mutations(store):
    store.save("orders", [{"id": "ORD-001", "status": "pending"}])

    with store.update("orders") as orders:
        orders[0]["status"] = "shipped"
        orders.append({"id": "ORD-002", "status": "pending"})

    assert [o["status"] for o in store.load("orders")] == ["shipped", "pending"]


def test_update_discards_changes_when_body_raises(store):
    store.save("carts", [{"userId": "u1", "items": []}])

    with pytest.raises(RuntimeError):
        with store.update("carts") as carts:
            carts.clear()
            raise RuntimeError("boom")

    assert store.load("carts") == [{"userId": "u1", "items": []}]


def test_update_several_collections(store):
    with store.update("orders", "carts") as (orders, carts):
        orders.append({"id": "ORD-001"})
        carts.append({"userId": "u1", "items": []})

    assert store.load("orders") == [{"id": "ORD-001"}]
    assert store.load("carts") == [{"userId": "u1", "items": []}]


def test_find_matches_all_fields(store):
    store.save("users", [{"id": "u1", "email": "a@x.com"}, {"id": "u2", "email": "b@x.com"}])

    assert store.find("users", email="b@x.com")["id"] == "u2"
    assert store.find("users", id="u1", email="b@x.com") is None


def test_next_sequence_is_monotonic_and_respects_floor(store):
    assert store.next_sequence("orders") == 1
    assert store.next_sequence("orders") == 2
    assert store.next_sequence("orders", floor=10) == 11
    # A lower floor never moves the counter back
    assert store.next_sequence("orders", floor=3) == 12
    assert store.next_sequence("products") == 1


def test_corrupt_file_loads_as_empty(json_store):
    json_store.path_for("products").write_text("{not json", encoding="utf-8")
    assert json_store.load("products") == []


def test_non_array_document_loads_as_empty(json_store):
    json_store.path_for("orders").write_text('{"id": "ORD-001"}', encoding="utf-8")
    assert json_store.load("orders") == []


def test_json_files_are_pretty_printed_utf8(json_store):
    json_store.save("products", [{"id": "p1", "name": "Chikankari Kurtī"}])

    raw = json_store.path_for("products").read_text(encoding="utf-8")
    assert "Chikankari Kurtī" in raw
    assert raw.startswith("[\n  {")
    assert json.loads(raw) == [{"id": "p1", "name": "Chikankari Kurtī"}]


def test_save_leaves_no_temp_files(json_store):
    for i in range(3):
        json_store.save("orders", [{"id": f"ORD-{i:03d}"}])

    names = sorted(p.name for p in json_store.data_dir.iterdir())
    assert names == ["orders.json"]


def test_concurrent_adds_in_one_process_are_not_lost(json_store):
    def add(n):
        cart_service.add_item(json_store, "u1", f"p{n}", f"Dress {n}", 100, "/img.jpg", "M")

    threads = [threading.Thread(target=add, args=(n,)) for n in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(cart_service.get_cart(json_store, "u1")) == 20


def test_shared_store_is_built_once_under_concurrent_first_use(monkeypatch):
    import time

    import storage

    built = []

    def slow_build():
        time.sleep(0.05)
        built.append(object())
        return built[-1]

    monkeypatch.setattr(storage, "_store", None)
    monkeypatch.setattr(storage, "build_store", slow_build)

    results = []
    threads = [threading.Thread(target=lambda: results.append(storage.get_store())) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(built) == 1
    assert all(r is built[0] for r in results)
