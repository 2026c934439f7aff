from typing import Generator, Optional

from sqlalchemy import create_engine, text, BigInteger, Integer
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from pydantic_settings import BaseSettings


class DatabaseSettings(BaseSettings):
    """Database configuration from environment"""
    database_url: str = "sqlite:///./shortfeed.db"
    database_echo: bool = False
    database_auto_create: bool = False

    class Config:
        env_file = ".env"
        extra = "ignore"


# Base class for models
Base = declarative_base()

# BIGINT autoincrement ids degrade to INTEGER on SQLite so rowid aliasing works
BigIntId = BigInteger().with_variant(Integer, "sqlite")


class Database:
    """Store handle shared by the services.

    Owns the engine and the session factory. Created once per process (or per
    test) and passed explicitly to whoever needs sessions; ``connect`` and
    ``dispose`` bracket its lifetime.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @classmethod
    def from_settings(cls, settings: Optional[DatabaseSettings] = None) -> "Database":
        settings = settings or DatabaseSettings()
        return cls(settings.database_url, echo=settings.database_echo)

    def connect(self) -> "Database":
        if self.engine is not None:
            return self

        if self.database_url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in self.database_url or self.database_url == "sqlite://":
                kwargs["poolclass"] = StaticPool
        else:
            kwargs = {"pool_pre_ping": True, "pool_recycle": 300}

        self.engine = create_engine(self.database_url, echo=self.echo, **kwargs)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        return self

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self._session_factory = None

    def create_all(self) -> None:
        """Create tables directly from metadata (tests and local dev; prod uses alembic)"""
        import core.models  # noqa: F401  registers mappers

        Base.metadata.create_all(self._require_engine())

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not connected")
        return self._session_factory()

    def ping(self) -> bool:
        with self._require_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return True

    def sessions(self) -> Generator[Session, None, None]:
        """Yield a session and close it afterwards"""
        session = self.session()
        try:
            yield session
        finally:
            session.close()

    def _require_engine(self) -> Engine:
        if self.engine is None:
            raise RuntimeError("Database is not connected")
        return self.engine
