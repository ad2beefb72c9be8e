from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from shopledger.config import Settings, get_settings
from shopledger.core.logging import setup_logging
from shopledger.core.session import SessionContext
from shopledger.database import Base, engine
from shopledger.models import import_all_models
from shopledger.routers import (
    expenses_router,
    health_router,
    inventory_router,
    meta_router,
    summary_router,
)
from shopledger.services.ledger_service import LedgerService
from shopledger.services.live_ledger import LiveLedger
from shopledger.store import CollectionWatcher, SqlRecordStore


def create_app(store: Optional[SqlRecordStore] = None, *, watch: Optional[bool] = None) -> FastAPI:
    settings: Settings = get_settings()
    if store is None:
        import_all_models()
        Base.metadata.create_all(bind=engine)
        store = SqlRecordStore()
    if watch is None:
        watch = settings.SUBSCRIPTION_WATCH_ENABLED

    watcher = CollectionWatcher(
        store,
        poll_seconds=settings.SUBSCRIPTION_POLL_SECONDS,
        retry_seconds=settings.SUBSCRIPTION_RETRY_SECONDS,
        max_backoff_seconds=settings.SUBSCRIPTION_MAX_BACKOFF_SECONDS,
    )
    live_ledger = LiveLedger(store)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        live_ledger.open(SessionContext(user_id=settings.DEFAULT_USER_ID))
        if watch:
            watcher.start()
        try:
            yield
        finally:
            watcher.stop()
            live_ledger.close()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.store = store
    app.state.live_ledger = live_ledger
    app.state.ledger_service = LedgerService(store)
    app.state.watcher = watcher

    app.include_router(health_router)
    app.include_router(meta_router)
    app.include_router(expenses_router)
    app.include_router(inventory_router)
    app.include_router(summary_router)
    return app


setup_logging()
app = create_app()


__all__ = ["app", "create_app"]
