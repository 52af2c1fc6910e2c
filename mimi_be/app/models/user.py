from sqlalchemy import Column, Integer, String, DateTime, create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker, relationship
from datetime import datetime

from app.config import get_settings

DATABASE_URL = get_settings().DATABASE_URL

if not DATABASE_URL:
    raise RuntimeError(
        "DATABASE_URL is not set. Provide a valid Postgres URL (postgres:// or postgresql://)."
    )

# Normalize driver to psycopg (SQLAlchemy 2.x + psycopg3) regardless of incoming scheme
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql+psycopg://", 1)
elif DATABASE_URL.startswith("postgresql://") and "+" not in DATABASE_URL.split("://", 1)[0]:
    DATABASE_URL = DATABASE_URL.replace("postgresql://", "postgresql+psycopg://", 1)

_is_sqlite = DATABASE_URL.startswith("sqlite")
engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    future=True,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)

if _is_sqlite:
    @event.listens_for(engine, "connect")
    def _enable_sqlite_fks(dbapi_connection, connection_record):
        # SQLite ignores FOREIGN KEY clauses unless asked per connection
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True)
    full_name = Column(String(255))
    email = Column(String(255), unique=True, index=True)
    phone_number = Column(String(20))
    role = Column(String(20), default="USER")  # USER, ADMIN
    created_at = Column(DateTime, default=datetime.now)

    products = relationship("Product", back_populates="seller")

# NOTE: Table creation is handled in app.main startup.
