from storefront.database.base import Base
from storefront.database.engine import build_engine, engine
from storefront.database.session import SessionLocal, session_factory

__all__ = ["Base", "SessionLocal", "build_engine", "engine", "session_factory"]
