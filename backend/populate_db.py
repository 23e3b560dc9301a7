import argparse
import logging
import os
import sys

import pandas as pd

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from errors import ValidationError
from services import products as product_service
from storage import build_store
from storage.base import RecordStore

logger = logging.getLogger(__name__)

# Configuration
DATA_DIR = os.path.join(os.path.dirname(__file__), "data_source")
DEFAULT_CSV = os.path.join(DATA_DIR, "products.csv")
CSV_COLUMNS = ["name", "category", "price", "description", "color", "sizes", "image", "stock"]
# End Configuration


def load_catalog(csv_path: str) -> list:
    """Reads the catalog CSV and returns product field dicts ready for create_product."""
    df = pd.read_csv(csv_path, dtype={"sizes": str})

    missing = [c for c in CSV_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Catalog file is missing columns: {', '.join(missing)}")

    # Clean data: drop rows without a name, normalise text columns
    df = df.dropna(subset=["name"]).copy()
    df["category"] = df["category"].astype(str).str.strip().str.lower()
    df["stock"] = df["stock"].fillna(0).astype(int)
    df["price"] = df["price"].astype(float).round(2)
    df[["description", "color", "image", "sizes"]] = df[["description", "color", "image", "sizes"]].fillna("")

    rows = []
    for record in df.to_dict(orient="records"):
        sizes = [s.strip() for s in str(record.pop("sizes") or "").split("|") if s.strip()]
        record["size"] = sizes
        rows.append(record)
    return rows


def populate_catalog(store: RecordStore, csv_path: str = DEFAULT_CSV) -> dict:
    """Adds catalog rows whose name is not in the store yet. Returns created/skipped/invalid counts."""
    existing = {p.get("name") for p in product_service.list_products(store)}
    counts = {"created": 0, "skipped": 0, "invalid": 0}

    for fields in load_catalog(csv_path):
        if fields["name"] in existing:
            counts["skipped"] += 1
            continue
        try:
            product = product_service.create_product(store, fields)
        except ValidationError as e:
            logger.warning("Skipping catalog row %r: %s", fields.get("name"), e.message)
            counts["invalid"] += 1
            continue
        existing.add(product["name"])
        counts["created"] += 1

    return counts


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    parser = argparse.ArgumentParser(description="Import a product catalog CSV into the store.")
    parser.add_argument("csv_path", nargs="?", default=DEFAULT_CSV)
    args = parser.parse_args()

    result = populate_catalog(build_store(), args.csv_path)
    print(f"Catalog import: {result['created']} created, {result['skipped']} already present, "
          f"{result['invalid']} invalid.")
