from __future__ import annotations

from resource_api.domain.models import ResourceFilters
from resource_api.logs import LogContext
from resource_api.repository import resource_repo
from resource_api.scripts.seed_resources import seed_load


def test_seed_load_skips_invalid_rows(db, tmp_path):
    csv = tmp_path / "resources.csv"
    csv.write_text(
        "name,description,category,price,quantity\n"
        "Laptop,High-performance laptop,Electronics,999.99,5\n"
        "Broken,,Electronics,-1,2\n"
        "Notebook,A5 dotted notebook,Stationery,4.25,200\n",
        encoding="utf-8",
    )
    log = LogContext(db, "SEED_RESOURCES")
    res = seed_load(db, str(csv), log)

    assert res["created"] == 2
    assert res["skipped"] == 1
    assert res["errors"][0]["row"] == 1
    assert "Price is required and must be a non-negative number" in res["errors"][0]["errors"]

    names = sorted(r.name for r in resource_repo.find_all(db, ResourceFilters()))
    assert names == ["Laptop", "Notebook"]
    laptop = resource_repo.find_all(db, ResourceFilters(name="Laptop"))[0]
    assert laptop.price == 999.99 and laptop.quantity == 5


def test_seed_load_requires_columns(db, tmp_path):
    csv = tmp_path / "bad.csv"
    csv.write_text("name,price\nLamp,3\n", encoding="utf-8")
    try:
        seed_load(db, str(csv), LogContext(db, "SEED_RESOURCES"))
    except ValueError as e:
        assert "description" in str(e)
    else:
        raise AssertionError("expected ValueError")
