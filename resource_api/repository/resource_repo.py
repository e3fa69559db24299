from __future__ import annotations

import logging
from typing import Optional

from ..db import Database, StorageError
from ..domain.models import Resource, ResourceCreate, ResourceFilters, ResourceUpdate

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, description, category, price, quantity, created_at, updated_at"
_UPDATABLE = ("name", "description", "category", "price", "quantity")


def _to_resource(row) -> Resource:
    return Resource(**dict(row))


def create(db: Database, fields: ResourceCreate) -> int:
    res = db.execute(
        "INSERT INTO resources(name, description, category, price, quantity) VALUES(?,?,?,?,?)",
        (fields.name, fields.description, fields.category, float(fields.price), int(fields.quantity)),
    )
    return int(res.lastrowid)


def find_all(db: Database, filters: ResourceFilters) -> list[Resource]:
    sql = f"SELECT {_COLUMNS} FROM resources"
    where = []
    params: list[object] = []
    if filters.name:
        # instr() keeps the match case-sensitive; LIKE would fold ASCII case
        where.append("instr(name, ?) > 0")
        params.append(filters.name)
    if filters.category:
        where.append("category = ?")
        params.append(filters.category)
    if filters.min_price is not None:
        where.append("price >= ?")
        params.append(filters.min_price)
    if filters.max_price is not None:
        where.append("price <= ?")
        params.append(filters.max_price)
    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += " ORDER BY created_at DESC, id DESC"

    if filters.limit is not None:
        sql += " LIMIT ?"
        params.append(filters.limit)
    elif filters.offset is not None:
        sql += " LIMIT -1"
    if filters.offset is not None:
        sql += " OFFSET ?"
        params.append(filters.offset)

    return [_to_resource(r) for r in db.fetch_many(sql, params)]


def find_by_id(db: Database, resource_id: int) -> Optional[Resource]:
    row = db.fetch_one(f"SELECT {_COLUMNS} FROM resources WHERE id = ?", (resource_id,))
    return _to_resource(row) if row else None


def update(db: Database, resource_id: int, fields: ResourceUpdate) -> bool:
    """
    Apply only the supplied fields. updated_at is refreshed by the
    update_resources_timestamp trigger.
    """
    supplied = fields.model_dump(exclude_unset=True)
    sets = []
    params: list[object] = []
    for col in _UPDATABLE:
        if col in supplied and supplied[col] is not None:
            sets.append(f"{col} = ?")
            params.append(supplied[col])
    if not sets:
        return False
    params.append(resource_id)

    res = db.execute(f"UPDATE resources SET {', '.join(sets)} WHERE id = ?", params)
    return res.rowcount > 0


def delete(db: Database, resource_id: int) -> bool:
    # Existence is not checked here; callers look the row up first.
    try:
        db.execute("DELETE FROM resources WHERE id = ?", (resource_id,))
    except StorageError as e:
        logger.warning("delete of resource %s failed: %s", resource_id, e.message)
        return False
    return True
