# backend/storage/json_store.py
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List

from storage.base import RecordStore

logger = logging.getLogger(__name__)


class JsonFileStore(RecordStore):
    """One pretty-printed UTF-8 JSON array per collection: ``<data_dir>/<name>.json``."""

    def __init__(self, data_dir):
        super().__init__()
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, collection: str) -> Path:
        return self.data_dir / f"{self._check(collection)}.json"

    def load(self, collection: str) -> List[dict]:
        path = self.path_for(collection)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            logger.warning("Unreadable collection file %s, treating as empty: %s", path, e)
            return []

        if not isinstance(data, list):
            logger.warning("Collection file %s does not hold a JSON array, treating as empty", path)
            return []
        return data

    def save(self, collection: str, records: List[dict]) -> None:
        path = self.path_for(collection)
        # Write next to the target and swap it in, readers never see a half-written file
        fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, prefix=f".{collection}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
