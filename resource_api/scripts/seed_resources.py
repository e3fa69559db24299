"""
Load resources from a CSV into the catalogue.

CSV columns: name, description, category, price, quantity.
Rows failing the resource field rules are skipped and reported.

Usage:
  python -m resource_api.scripts.seed_resources --csv seeds/resources.csv
"""
from __future__ import annotations

import argparse
import logging

import pandas as pd

from ..config import get_db_path
from ..db import Database
from ..domain.models import ResourceCreate
from ..domain.validation import FIELDS, validate_resource
from ..logs import LogContext, configure_logging
from ..repository import resource_repo

logger = logging.getLogger(__name__)


def _row_payload(r: pd.Series) -> dict:
    payload = {}
    for k in FIELDS:
        v = r.get(k)
        if v is None or (isinstance(v, float) and pd.isna(v)):
            continue
        # numpy scalars -> python scalars so the field rules see int/float/str
        payload[k] = v.item() if hasattr(v, "item") else v
    return payload


def seed_load(db: Database, csv_path: str, log: LogContext) -> dict:
    df = pd.read_csv(csv_path)
    missing = [c for c in FIELDS if c not in df.columns]
    if missing:
        raise ValueError(f"missing columns: {', '.join(missing)}")

    created, skipped = 0, 0
    errors = []
    for i, r in df.iterrows():
        payload = _row_payload(r)
        errs = validate_resource(payload)
        if errs:
            skipped += 1
            errors.append({"row": int(i), "errors": errs})
            continue
        resource_repo.create(db, ResourceCreate(**payload))
        created += 1

    res = {"created": created, "skipped": skipped, "errors": errors}
    log.set_payload({"csv": csv_path})
    log.set_after({"created": created, "skipped": skipped})
    return res


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--csv", required=True)
    ap.add_argument("--db", default=None, help="SQLite file; defaults to the configured path")
    args = ap.parse_args()

    configure_logging()
    db = Database(args.db or get_db_path())
    try:
        db.initialize_schema()
        log = LogContext(db, "SEED_RESOURCES")
        res = seed_load(db, args.csv, log)
        log.write("OK")
        for e in res["errors"]:
            logger.warning("row %s skipped: %s", e["row"], "; ".join(e["errors"]))
        print({"message": "ok", "created": res["created"], "skipped": res["skipped"]})
    finally:
        db.close()


if __name__ == "__main__":
    main()
