import pytest
from datetime import date
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from calculator import LifestyleInputs
from config import Settings
from database import Base, create_user


@pytest.fixture
def db():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False},
                           poolclass=StaticPool)
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def alice(db):
    return create_user(db, "Alice", "alice@example.com", "s3cret")


@pytest.fixture
def bob(db):
    return create_user(db, "Bob", "bob@example.com", "hunter2")


@pytest.fixture
def typical_inputs():
    return LifestyleInputs(car_km=300, bus_km=50, plane_km=0, veg_days=2,
                           meat_meals=20, clothing_items=1, electronics=1)


@pytest.fixture
def green_inputs():
    return LifestyleInputs(car_km=0, bus_km=100, plane_km=0, veg_days=7,
                           meat_meals=0, clothing_items=0, electronics=0)


@pytest.fixture
def day():
    return date(2024, 3, 10)


@pytest.fixture
def offline_settings():
    return Settings(database_url="sqlite://")


@pytest.fixture
def online_settings():
    return Settings(database_url="sqlite://", openai_api_key="sk-test",
                    openweather_api_key="ow-test", request_timeout=1)
