# kushalwear/data/database.py
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from kushalwear.utils.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    pass


class Database:
    """
    Pula polaczen (engine) + fabryka sesji.
    Tworzona raz przy starcie aplikacji, zamykana przy stopie,
    do handlerow trafia przez app.state, nie przez globalna zmienna.
    """

    def __init__(self, url: str, **engine_kwargs):
        self.url = url
        if url.startswith("sqlite"):
            engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
            if url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs.setdefault("poolclass", StaticPool)
        else:
            engine_kwargs.setdefault("pool_pre_ping", True)

        self.engine = create_engine(url, **engine_kwargs)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=True)

    def create_all(self) -> None:
        # import modeli rejestruje tabele w Base.metadata
        import kushalwear.data.models  # noqa: F401

        logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database ping failed: {e}")
            return False

    def dispose(self) -> None:
        logger.info("Disposing database engine")
        self.engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request) -> Iterator[Session]:
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
