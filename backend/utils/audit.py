import logging
import uuid
from datetime import datetime, timezone

from config import settings
from storage.base import RecordStore

logger = logging.getLogger(__name__)


def write_log(store: RecordStore, *, user_id, action, resource, status="SUCCESS", ip=None, meta=None):
    entry = {
        "id": f"log-{uuid.uuid4().hex}",
        "ts": datetime.now(timezone.utc).isoformat(),
        "userId": user_id,
        "action": action,
        "resource": resource,
        "status": status,
        "ip": ip,
        "meta": meta or {},
    }
    logger.info("audit %s %s %s user=%s meta=%s", action, resource, status, user_id, entry["meta"])
    # The audited change is already saved; a failed audit write must not turn it into an error
    try:
        with store.update("logs") as logs:
            logs.append(entry)
            limit = settings.AUDIT_LOG_LIMIT
            if limit and len(logs) > limit:
                del logs[: len(logs) - limit]
    except Exception:
        logger.exception("Could not persist audit entry %s %s", action, resource)
    return entry
