from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from order_ledger.database import Store
from order_ledger.main import create_app
from order_ledger.models import Order, Payment
from order_ledger.payments import FixedPaymentProcessor
from order_ledger.service import OrderService


class FakeClock:
    def __init__(self, start=datetime(2024, 1, 1, 12, 0, 0)):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def store(tmp_path):
    store = Store(f"sqlite:///{tmp_path / 'test_orders.db'}")
    store.create_all()
    yield store
    store.drop_all()
    store.dispose()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service(store, clock):
    return OrderService(store, FixedPaymentProcessor(approve=True), clock=clock)


@pytest.fixture
def client(service):
    with TestClient(create_app(service)) as c:
        yield c


@pytest.fixture
def count_rows(store):
    def _count():
        with store.session() as db:
            return db.query(Order).count(), db.query(Payment).count()

    return _count
