from contextlib import contextmanager
from typing import Iterator

import structlog
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from order_ledger.errors import TransactionFailure

logger = structlog.get_logger(__name__)

Base = declarative_base()


class Store:
    """Handle on the relational store: one engine plus its session factory."""

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.engine = create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False} if database_url.startswith("sqlite") else {},
        )
        self.SessionLocal = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    def create_all(self) -> None:
        # Models must be registered on Base before tables are created
        import order_ledger.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Commit on success, roll back on any exception.

        Store errors are re-raised as TransactionFailure; every other
        exception propagates unchanged after the rollback.
        """
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error("transaction_failed", error=str(exc))
            raise TransactionFailure(str(exc)) from exc
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
