from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import JSONResponse

from ..db import Database, StorageError
from ..domain.models import ResourceCreate, ResourceFilters, ResourceUpdate
from ..domain.validation import INT64_MAX, update_fields, validate_resource, validate_resource_update
from ..logs import LogContext
from ..repository import resource_repo

router = APIRouter(prefix="/api/resources", tags=["resources"])


def get_db(request: Request) -> Database:
    return request.app.state.db


def _fail(status_code: int, **body) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, **body})


def _parse_id(raw: str) -> Optional[int]:
    try:
        return int(raw)
    except ValueError:
        return None


def _lookup(db: Database, rid: int):
    # ids past 64 bits can never have been stored
    if not -INT64_MAX - 1 <= rid <= INT64_MAX:
        return None
    return resource_repo.find_by_id(db, rid)


def _invalid_id() -> JSONResponse:
    return _fail(400, error="Invalid resource ID")


def _not_found() -> JSONResponse:
    return _fail(404, error="Resource not found")


@router.post("", status_code=201)
def api_resource_create(payload: Optional[Dict[str, Any]] = Body(None), db: Database = Depends(get_db)):
    payload = payload or {}
    log = LogContext(db, "CREATE_RESOURCE")
    log.set_payload(payload)

    errors = validate_resource(payload)
    if errors:
        log.write("ERROR", "; ".join(errors))
        return _fail(400, errors=errors)

    try:
        new_id = resource_repo.create(db, ResourceCreate(**payload))
    except StorageError as e:
        log.write("ERROR", e.message)
        raise
    created = resource_repo.find_by_id(db, new_id)
    log.set_entity("RESOURCE", new_id)
    log.set_after(created.model_dump() if created else None)
    log.write("OK")
    return {"success": True, "data": created}


@router.get("")
def api_resource_list(
    name: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    min_price: Optional[float] = Query(None),
    max_price: Optional[float] = Query(None),
    limit: int = Query(50, ge=-INT64_MAX - 1, le=INT64_MAX),
    offset: int = Query(0, ge=-INT64_MAX - 1, le=INT64_MAX),
    db: Database = Depends(get_db),
):
    filters = ResourceFilters(
        name=name,
        category=category,
        min_price=min_price,
        max_price=max_price,
        limit=limit,
        offset=offset,
    )
    items = resource_repo.find_all(db, filters)
    return {
        "success": True,
        "data": items,
        "count": len(items),
        "filters": filters.model_dump(exclude_none=True),
    }


@router.get("/{resource_id}")
def api_resource_get(resource_id: str, db: Database = Depends(get_db)):
    rid = _parse_id(resource_id)
    if rid is None:
        return _invalid_id()
    resource = _lookup(db, rid)
    if resource is None:
        return _not_found()
    return {"success": True, "data": resource}


@router.put("/{resource_id}")
def api_resource_update(
    resource_id: str,
    payload: Optional[Dict[str, Any]] = Body(None),
    db: Database = Depends(get_db),
):
    rid = _parse_id(resource_id)
    if rid is None:
        return _invalid_id()
    payload = payload or {}
    log = LogContext(db, "UPDATE_RESOURCE")
    log.set_entity("RESOURCE", rid)
    log.set_payload(payload)

    errors = validate_resource_update(payload)
    if errors:
        log.write("ERROR", "; ".join(errors))
        return _fail(400, errors=errors)
    fields = update_fields(payload)
    if not fields:
        log.write("ERROR", "no valid fields")
        return _fail(400, error="No valid fields to update")

    before = _lookup(db, rid)
    if before is None:
        log.write("ERROR", "resource_not_found")
        return _not_found()

    try:
        ok = resource_repo.update(db, rid, ResourceUpdate(**fields))
    except StorageError as e:
        log.write("ERROR", e.message)
        raise
    if not ok:
        log.write("ERROR", "resource_not_found")
        return _not_found()

    updated = resource_repo.find_by_id(db, rid)
    log.set_before(before.model_dump())
    log.set_after(updated.model_dump() if updated else None)
    log.write("OK")
    return {"success": True, "data": updated}


@router.delete("/{resource_id}")
def api_resource_delete(resource_id: str, db: Database = Depends(get_db)):
    rid = _parse_id(resource_id)
    if rid is None:
        return _invalid_id()
    log = LogContext(db, "DELETE_RESOURCE")
    log.set_entity("RESOURCE", rid)

    resource = _lookup(db, rid)
    if resource is None:
        log.write("ERROR", "resource_not_found")
        return _not_found()

    log.set_before(resource.model_dump())
    if not resource_repo.delete(db, rid):
        log.write("ERROR", "delete_failed")
        return _fail(500, error="Failed to delete resource")
    log.write("OK")
    return {"success": True, "message": "Resource deleted successfully", "data": resource}
