# backend/storage/sql_store.py
from typing import Dict, List

from models.collection import CollectionDocument
from storage.base import RecordStore


class SqlRecordStore(RecordStore):
    """Collections kept as JSON documents in the ``collections`` table.

    ``save_many`` commits every collection of an ``update`` block in a single
    transaction, so a checkout and its cart clear land together or not at all.
    """

    def __init__(self, session_factory):
        super().__init__()
        self.session_factory = session_factory

    def load(self, collection: str) -> List[dict]:
        self._check(collection)
        with self.session_factory() as db:
            row = db.get(CollectionDocument, collection)
            records = row.records if row is not None else []
        return list(records) if isinstance(records, list) else []

    def save(self, collection: str, records: List[dict]) -> None:
        self.save_many({collection: records})

    def save_many(self, snapshot: Dict[str, List[dict]]) -> None:
        with self.session_factory() as db:
            try:
                for collection, records in snapshot.items():
                    db.merge(CollectionDocument(name=self._check(collection), records=list(records)))
                db.commit()
            except Exception:
                db.rollback()
                raise
