"""Pytest fixtures and configuration for trayplan tests."""

import pytest
import uuid
from datetime import date, datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from trayplan.database.database import Base
from trayplan.database.models import CustomerDB, OrderDB, VarietyDB
from trayplan.database.order_repository import OrderRepository
from trayplan.database.repository import TaskRepository
from trayplan.models.order import ActiveOrder, OrderStatus


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.
    
    Uses an in-memory SQLite database that is created fresh for each test.
    """
    from sqlalchemy import event
    
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    
    @event.listens_for(engine, "connect")
    def set_sqlite_pragmas(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
    
    Base.metadata.create_all(bind=engine)
    
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def task_repository(db_session: Session):
    """Create a TaskRepository instance for testing."""
    return TaskRepository(db_session)


@pytest.fixture
def order_repository(db_session: Session):
    """Create an OrderRepository instance for testing."""
    return OrderRepository(db_session)


@pytest.fixture
def add_customer(db_session: Session):
    """Factory: insert a customer row and return its id."""
    def _add(name: str = "Cafe B") -> str:
        row = CustomerDB(id=str(uuid.uuid4()), name=name, created_at=datetime.utcnow())
        db_session.add(row)
        db_session.commit()
        return row.id
    return _add


@pytest.fixture
def add_variety(db_session: Session):
    """Factory: insert a variety row and return its id."""
    def _add(name: str = "Pea", harvest_days=8, blackout_days=3, soak_hours=12) -> str:
        row = VarietyDB(
            id=str(uuid.uuid4()),
            name=name,
            harvest_days=harvest_days,
            blackout_days=blackout_days,
            soak_hours=soak_hours,
            created_at=datetime.utcnow(),
        )
        db_session.add(row)
        db_session.commit()
        return row.id
    return _add


@pytest.fixture
def add_order(db_session: Session):
    """Factory: insert an order row and return its id."""
    def _add(customer_id: str, variety_id: str, quantity: int = 5,
             delivery_date: date = date(2025, 3, 20), status: str = "confirmed") -> str:
        row = OrderDB(
            id=str(uuid.uuid4()),
            customer_id=customer_id,
            variety_id=variety_id,
            quantity=quantity,
            delivery_date=delivery_date,
            status=status,
            created_at=datetime.utcnow(),
        )
        db_session.add(row)
        db_session.commit()
        return row.id
    return _add


@pytest.fixture
def worked_example_orders(add_customer, add_variety, add_order):
    """Two Pea orders delivered 2025-03-20: Cafe B x5 (soaked) and Farm C x3 (no soak)."""
    cafe = add_customer("Cafe B")
    farm = add_customer("Farm C")
    pea_soaked = add_variety("Pea", harvest_days=8, blackout_days=3, soak_hours=12)
    pea_dry = add_variety("Pea", harvest_days=8, blackout_days=3, soak_hours=0)
    return {
        "a": add_order(cafe, pea_soaked, quantity=5),
        "b": add_order(farm, pea_dry, quantity=3),
    }


def make_active_order(**overrides) -> ActiveOrder:
    """Build an ActiveOrder with worked-example defaults."""
    base = {
        "id": str(uuid.uuid4()),
        "customer_id": "c1",
        "customer_name": "Cafe B",
        "variety_id": "v1",
        "variety_name": "Pea",
        "quantity": 5,
        "delivery_date": date(2025, 3, 20),
        "status": OrderStatus.CONFIRMED,
        "soak_hours": 12,
        "blackout_days": 3,
        "harvest_days": 8,
    }
    base.update(overrides)
    return ActiveOrder(**base)


@pytest.fixture
def test_client(db_session: Session):
    """Create a FastAPI test client with overridden database dependency."""
    from trayplan.api.app import app
    from trayplan.database.database import get_db
    
    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it
    
    app.dependency_overrides[get_db] = override_get_db
    
    with TestClient(app) as client:
        yield client
    
    app.dependency_overrides.clear()
