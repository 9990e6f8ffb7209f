from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional

import structlog
from fastapi import FastAPI

from order_ledger.config import settings
from order_ledger.database import Store
from order_ledger.logging_config import setup_logging
from order_ledger.payments import SimulatedPaymentProcessor
from order_ledger.routes import router
from order_ledger.service import OrderService

logger = structlog.get_logger(__name__)


def build_service() -> OrderService:
    store = Store(settings.database_url)
    store.create_all()
    return OrderService(
        store,
        SimulatedPaymentProcessor(settings.payment_failure_rate),
        duplicate_window=timedelta(seconds=settings.duplicate_payment_window_seconds),
    )


def create_app(service: Optional[OrderService] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level)
        owned = service is None
        app.state.order_service = service or build_service()
        logger.info("order_ledger_started", database=app.state.order_service.store.database_url)
        yield
        if owned:
            app.state.order_service.store.dispose()

    app = FastAPI(title="Order Ledger", lifespan=lifespan)
    app.include_router(router)
    return app


app = create_app()
