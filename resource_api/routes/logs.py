from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ..db import Database
from ..logs import search_logs
from .resources import get_db

router = APIRouter()


@router.get("/api/logs/search")
def api_logs_search(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=200),
    action: str | None = None,
    query: str | None = None,
    resource_id: int | None = Query(None, description="only entries for this resource"),
    ts_from: str | None = None,
    ts_to: str | None = None,
    db: Database = Depends(get_db),
):
    total, items = search_logs(
        db, q=query, action=action, entity_id=resource_id, ts_from=ts_from, ts_to=ts_to, page=page, size=size
    )
    return {"total": total, "items": items}
