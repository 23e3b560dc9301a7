import os

import pytest

from populate_db import DEFAULT_CSV, load_catalog, populate_catalog
from services import products as product_service

CSV = """name,category,price,description,color,sizes,image,stock
Linen Shirt,Men ,1499,Breathable linen shirt,White,M|L|XL,/img/shirt.jpg,20
Party Frock,children,999.5,Tiered frock,Pink,4Y,/img/frock.jpg,
Mystery Item,pets,10,Unknown,Grey,M,/img/x.jpg,1
"""


@pytest.fixture
def catalog_csv(tmp_path):
    path = tmp_path / "products.csv"
    path.write_text(CSV, encoding="utf-8")
    return str(path)


def test_load_catalog_normalises_rows(catalog_csv):
    rows = load_catalog(catalog_csv)

    assert rows[0]["category"] == "men"
    assert rows[0]["size"] == ["M", "L", "XL"]
    assert rows[1]["stock"] == 0
    assert rows[1]["price"] == 999.5


def test_populate_creates_skips_and_reports_invalid(json_store, catalog_csv):
    first = populate_catalog(json_store, catalog_csv)
    second = populate_catalog(json_store, catalog_csv)

    assert first == {"created": 2, "skipped": 0, "invalid": 1}
    assert second == {"created": 0, "skipped": 2, "invalid": 1}
    names = [p["name"] for p in product_service.list_products(json_store)]
    assert names == ["Linen Shirt", "Party Frock"]


def test_missing_columns_are_reported(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("name,price\nShirt,10\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_catalog(str(path))


def test_bundled_catalog_imports_cleanly(json_store):
    assert os.path.exists(DEFAULT_CSV)
    result = populate_catalog(json_store)
    assert result["invalid"] == 0
    assert result["created"] == len(product_service.list_products(json_store))
