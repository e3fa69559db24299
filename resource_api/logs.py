import json, logging, time, uuid, datetime as dt
from typing import Optional, Tuple, List, Dict, Any

from .config import get_log_level
from .db import Database, StorageError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None):
    logging.basicConfig(level=level or get_log_level(), format=LOG_FORMAT)


def _dumps(obj):
    return json.dumps(obj, ensure_ascii=False, default=str) if obj is not None else None


class LogContext:
    """Collects one operation's audit record and writes it to operation_log."""

    def __init__(self, db: Database, action: str):
        self.db = db
        self.action = action
        self.request_id = str(uuid.uuid4())
        self.start = time.perf_counter()
        self.before = None
        self.after = None
        self.payload = None
        self.entity_type = None
        self.entity_id = None

    def set_entity(self, etype: str, eid):
        self.entity_type = etype
        self.entity_id = str(eid)

    def set_before(self, obj): self.before = obj
    def set_after(self, obj): self.after = obj
    def set_payload(self, obj): self.payload = obj

    def write(self, result: str = "OK", err: Optional[str] = None):
        elapsed_ms = int((time.perf_counter() - self.start) * 1000)
        rec = {
            "ts": dt.datetime.now(dt.timezone.utc).isoformat(),
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "request_id": self.request_id,
            "before_json": _dumps(self.before),
            "after_json": _dumps(self.after),
            "payload_json": _dumps(self.payload),
            "result": result,
            "err_msg": err,
            "latency_ms": elapsed_ms,
        }
        try:
            self.db.execute(
                """INSERT INTO operation_log
                (ts,action,entity_type,entity_id,request_id,before_json,after_json,payload_json,result,err_msg,latency_ms)
                VALUES(:ts,:action,:entity_type,:entity_id,:request_id,:before_json,:after_json,:payload_json,:result,:err_msg,:latency_ms)""",
                rec,
            )
        except StorageError as e:
            # the audit trail must not turn a finished request into a failure
            logger.error("operation_log write failed for %s: %s", self.action, e.message)


_JSON_COLUMNS = (("before_json", "before"), ("after_json", "after"), ("payload_json", "payload"))


def _decode(row) -> Dict[str, Any]:
    rec = dict(row)
    for col, key in _JSON_COLUMNS:
        raw = rec.pop(col)
        rec[key] = json.loads(raw) if raw is not None else None
    return rec


def search_logs(db: Database, *, q: Optional[str] = None, action: Optional[str] = None,
                entity_id: Optional[str] = None, ts_from: Optional[str] = None, ts_to: Optional[str] = None,
                page: int = 1, size: int = 20) -> Tuple[int, List[Dict[str, Any]]]:
    """
    Newest-first page of audit records. `q` matches inside the stored
    payload/before/after snapshots; snapshots come back decoded.
    """
    where = []
    params: List[Any] = []
    if q:
        where.append("(instr(payload_json, ?) > 0 OR instr(before_json, ?) > 0 OR instr(after_json, ?) > 0)")
        params.extend([q, q, q])
    if action:
        where.append("action = ?")
        params.append(action)
    if entity_id is not None:
        where.append("entity_type = 'RESOURCE' AND entity_id = ?")
        params.append(str(entity_id))
    if ts_from:
        where.append("ts >= ?")
        params.append(ts_from)
    if ts_to:
        where.append("ts <= ?")
        params.append(ts_to)
    wh = " WHERE " + " AND ".join(where) if where else ""

    total = db.fetch_one(f"SELECT COUNT(1) AS cnt FROM operation_log{wh}", params)["cnt"]
    rows = db.fetch_many(
        f"SELECT * FROM operation_log{wh} ORDER BY ts DESC, id DESC LIMIT ? OFFSET ?",
        [*params, size, (page - 1) * size],
    )
    return total, [_decode(r) for r in rows]
