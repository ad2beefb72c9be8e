from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from shopledger.config import get_settings
from shopledger.core.constants import COLLECTIONS
from shopledger.core.errors import StoreError
from shopledger.dependencies import get_live_ledger, get_store, to_http_exception

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(live_ledger=Depends(get_live_ledger), store=Depends(get_store)):
    settings = get_settings()
    try:
        versions = store.versions()
    except StoreError as exc:
        raise to_http_exception(exc) from exc
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "environment": settings.ENVIRONMENT,
        "subscriptions": len(live_ledger.active_subscriptions()),
        "loading": live_ledger.loading,
        "collections": {name: versions.get(name, 0) for name in COLLECTIONS},
        "time": datetime.now(timezone.utc).isoformat(),
    }
