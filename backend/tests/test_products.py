import pytest

from errors import NotFound, ValidationError
from services import products as product_service


def test_create_then_get_round_trip(store, dress_fields):
    created = product_service.create_product(store, dress_fields)

    assert created["id"] == "p1"
    assert product_service.get_product(store, "p1") == {"id": "p1", **dress_fields}


def test_create_requires_every_field(store, dress_fields):
    del dress_fields["color"]
    dress_fields["image"] = ""

    with pytest.raises(ValidationError) as excinfo:
        product_service.create_product(store, dress_fields)

    assert "color" in excinfo.value.message
    assert "image" in excinfo.value.message
    assert product_service.list_products(store) == []


def test_zero_stock_is_not_missing(store, dress_fields):
    dress_fields["stock"] = 0
    assert product_service.create_product(store, dress_fields)["stock"] == 0


def test_create_coerces_numbers_and_single_size(store, dress_fields):
    dress_fields.update(price="1499.50", stock="7", size="XL")

    product = product_service.create_product(store, dress_fields)

    assert product["price"] == 1499.5
    assert product["stock"] == 7
    assert product["size"] == ["XL"]


@pytest.mark.parametrize("field, value", [
    ("category", "pets"),
    ("price", "cheap"),
    ("price", -1),
    ("stock", -3),
    ("size", []),
])
def test_create_rejects_bad_values(store, dress_fields, field, value):
    dress_fields[field] = value
    with pytest.raises(ValidationError):
        product_service.create_product(store, dress_fields)


def test_ids_continue_after_highest_existing(store, dress_fields):
    store.save("products", [{"id": "p7", **dress_fields}, {"id": "p3", **dress_fields}])

    assert product_service.create_product(store, dress_fields)["id"] == "p8"


def test_deleting_newest_product_does_not_free_its_id(store, dress_fields):
    product_service.create_product(store, dress_fields)
    second = product_service.create_product(store, dress_fields)
    product_service.delete_product(store, second["id"])

    third = product_service.create_product(store, dress_fields)

    assert second["id"] == "p2"
    assert third["id"] == "p3"


def test_get_unknown_product(store):
    with pytest.raises(NotFound):
        product_service.get_product(store, "p404")


def test_update_applies_only_provided_fields(store, dress_fields):
    product_service.create_product(store, dress_fields)

    updated = product_service.update_product(store, "p1", {"price": "999", "stock": "3", "name": None})

    assert updated["price"] == 999.0
    assert updated["stock"] == 3
    assert updated["name"] == dress_fields["name"]
    assert product_service.get_product(store, "p1") == updated


def test_update_unknown_product(store):
    with pytest.raises(NotFound):
        product_service.update_product(store, "p9", {"name": "Ghost"})


def test_second_delete_is_not_found(store, dress_fields):
    product_service.create_product(store, dress_fields)

    deleted = product_service.delete_product(store, "p1")
    assert deleted["name"] == dress_fields["name"]

    with pytest.raises(NotFound):
        product_service.delete_product(store, "p1")


def test_delete_does_not_touch_carts(store, dress_fields):
    product_service.create_product(store, dress_fields)
    store.save("carts", [{"userId": "u1", "items": [{"id": "c1", "dressId": "p1", "quantity": 1}]}])

    product_service.delete_product(store, "p1")

    assert store.load("carts")[0]["items"][0]["dressId"] == "p1"


def test_set_stock(store, dress_fields):
    product_service.create_product(store, dress_fields)

    assert product_service.set_stock(store, "p1", "4")["stock"] == 4
    with pytest.raises(ValidationError):
        product_service.set_stock(store, "p1", None)
    with pytest.raises(NotFound):
        product_service.set_stock(store, "p2", 1)
