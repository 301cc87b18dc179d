import logging

from sqlalchemy.orm import sessionmaker

from storefront.database.engine import engine

logger = logging.getLogger(__name__)


def session_factory(bind):
    """Sessions keep loaded orders usable after commit; services refresh explicitly."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=bind,
    )


SessionLocal = session_factory(engine)


def get_db():
    """Request-scoped session; anything left uncommitted by a failed request is rolled back."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        if db.in_transaction():
            logger.warning("Rolling back session left open by a failed request")
            db.rollback()
        raise
    finally:
        db.close()


__all__ = ["SessionLocal", "get_db", "session_factory"]
