import datetime as dt

from fastapi import APIRouter

from .. import __version__

router = APIRouter()

@router.get("/health")
def health():
    return {"status": "ok", "timestamp": dt.datetime.now(dt.timezone.utc).isoformat()}

@router.get("/version")
def version():
    return {"app": "resource-api", "version": __version__}
