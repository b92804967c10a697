"""Database helpers: engines, session factories and DB initialization.

Provides read/write session factories and an `init_db` helper that creates
tables and seeds the reference catalog (categories, products, exercises,
achievement definitions) when it is empty.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from core.config import READ_DATABASE_URL, SEED_DATA, WRITE_DATABASE_URL
from core.logger import get_logger
from data.achievements_dataset import ACHIEVEMENTS_DATA
from data.exercises_dataset import EXERCISES_DATA
from data.products_dataset import CATEGORIES, PRODUCTS_DATA
from .models import AchievementDefinition, Base, Category, ExerciseDefinition, Product

logger = get_logger("database")


def _connect_args(url: str) -> dict:
    # SQLite connections are shared across FastAPI's threadpool workers
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# Read/Write partitioning: point READ_DATABASE_URL at a replica in production.
write_engine = create_engine(WRITE_DATABASE_URL, connect_args=_connect_args(WRITE_DATABASE_URL), pool_pre_ping=True)
read_engine = create_engine(READ_DATABASE_URL, connect_args=_connect_args(READ_DATABASE_URL), pool_pre_ping=True)

WriteSessionLocal = sessionmaker(bind=write_engine, autoflush=False)
ReadSessionLocal = sessionmaker(bind=read_engine, autoflush=False)


def seed_reference_data(session: Session) -> None:
    """Insert the default catalog into empty tables. Safe to call repeatedly."""
    if session.query(Category).count() == 0:
        session.add_all(Category(name=c["name"], label=c["label"]) for c in CATEGORIES)
        session.flush()
        logger.info("Seeded %s categories", len(CATEGORIES))

    if session.query(Product).count() == 0:
        categories = {c.name: c.id for c in session.query(Category).all()}
        for item in PRODUCTS_DATA:
            session.add(Product(
                name=item["name"],
                calories=item["calories"],
                protein=item["protein"],
                fat=item["fat"],
                carbs=item["carbs"],
                category_id=categories.get(item["category"]),
                is_public=True,
            ))
        logger.info("Seeded %s products", len(PRODUCTS_DATA))

    if session.query(ExerciseDefinition).count() == 0:
        session.add_all(ExerciseDefinition(is_public=True, **item) for item in EXERCISES_DATA)
        logger.info("Seeded %s exercise definitions", len(EXERCISES_DATA))

    if session.query(AchievementDefinition).count() == 0:
        session.add_all(AchievementDefinition(**item) for item in ACHIEVEMENTS_DATA)
        logger.info("Seeded %s achievement definitions", len(ACHIEVEMENTS_DATA))

    session.commit()


def init_db():
    """Create all tables and, unless SEED_DATA is off, seed the catalog."""
    Base.metadata.create_all(bind=write_engine)
    if not SEED_DATA:
        return
    session = WriteSessionLocal()
    try:
        seed_reference_data(session)
    finally:
        session.close()


def get_write_session():
    """Yield a write-enabled SQLAlchemy session for the request scope."""
    db = WriteSessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_read_session():
    """Yield a read-only SQLAlchemy session for the request scope.

    Used for read endpoints where routing reads to a replica may be desired.
    """
    db = ReadSessionLocal()
    try:
        yield db
    finally:
        db.close()
