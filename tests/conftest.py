import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bizdocs.db import get_db
from bizdocs.main import app
from bizdocs.models import Base, Customer, Supplier


@pytest.fixture()
def engine(tmp_path):
    db_path = tmp_path / "test.db"
    engine = create_engine(
        f"sqlite+pysqlite:///{db_path}", connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture()
def SessionLocal(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(SessionLocal):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(SessionLocal):
    def override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def customer(db_session):
    customer = Customer(code="C001", name="Acme Builders", is_active=True)
    db_session.add(customer)
    db_session.commit()
    return customer


@pytest.fixture()
def supplier(db_session):
    supplier = Supplier(code="S001", name="Harbour Timber", is_active=True)
    db_session.add(supplier)
    db_session.commit()
    return supplier
