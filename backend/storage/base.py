# backend/storage/base.py
import threading
from contextlib import contextmanager
from typing import Dict, List, Optional

COLLECTIONS = ("users", "otps", "carts", "products", "orders", "logs", "counters")


class RecordStore:
    """Whole-collection persistence for lists of JSON records.

    Every service operation follows the same cycle: load the full collection,
    mutate it in memory, save the full collection back. ``update`` wraps that
    cycle and holds a per-store lock for its duration, so writers inside one
    process are serialised. Nothing coordinates separate processes: the last
    save wins.
    """

    def __init__(self):
        self._lock = threading.RLock()

    def _check(self, collection: str) -> str:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")
        return collection

    def load(self, collection: str) -> List[dict]:
        raise NotImplementedError

    def save(self, collection: str, records: List[dict]) -> None:
        raise NotImplementedError

    def save_many(self, snapshot: Dict[str, List[dict]]) -> None:
        for collection, records in snapshot.items():
            self.save(collection, records)

    @contextmanager
    def update(self, *collections: str):
        """Load the named collections, yield them for in-place mutation, save on success.

        With one name the list itself is yielded, with several a tuple of lists
        in the same order. Mutate the lists in place (``records[:] = ...``);
        rebinding the name is not seen by the save. If the body raises,
        nothing is written.
        """
        if not collections:
            raise ValueError("update() needs at least one collection")
        with self._lock:
            snapshot = {name: self.load(name) for name in collections}
            if len(collections) == 1:
                yield snapshot[collections[0]]
            else:
                yield tuple(snapshot[name] for name in collections)
            self.save_many(snapshot)

    def find(self, collection: str, **match) -> Optional[dict]:
        for record in self.load(collection):
            if all(record.get(key) == value for key, value in match.items()):
                return record
        return None

    def next_sequence(self, name: str, floor: int = 0) -> int:
        """Advance and persist the counter ``name``; never returns a value twice.

        ``floor`` lets callers account for ids already present in data that
        predates the counter.
        """
        with self.update("counters") as counters:
            entry = next((c for c in counters if c.get("name") == name), None)
            if entry is None:
                entry = {"name": name, "value": 0}
                counters.append(entry)
            entry["value"] = max(int(entry.get("value") or 0), floor) + 1
            return entry["value"]
