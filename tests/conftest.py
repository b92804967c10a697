"""Shared fixtures: an in-memory SQLite database seeded with the catalog."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.auth import CurrentUser
from database import models, seed_reference_data
from services.calorie_calculator import calorie_calculator


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    models.Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    """Session on a freshly seeded database."""
    session = session_factory()
    seed_reference_data(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user(db):
    """Profile for user 1: 70 kg, 175 cm, 30 years, male, sedentary, maintain."""
    user = models.User(
        id=1,
        name="Alex",
        email="alex@example.com",
        weight=70,
        height=175,
        age=30,
        gender="male",
        activity_level="sedentary",
        goal="maintain",
        bmr_formula="mifflin_st_jeor",
    )
    calorie_calculator.apply_to(user)
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def current():
    return CurrentUser(id=1)


@pytest.fixture
def product(db):
    """Look up a seeded product by name."""
    def lookup(name):
        return db.query(models.Product).filter_by(name=name).one()
    return lookup


@pytest.fixture
def exercise(db):
    def lookup(name):
        return db.query(models.ExerciseDefinition).filter_by(name=name).one()
    return lookup
