from stockwatch.database.base import Base
from stockwatch.database.engine import build_engine, engine, init_db
from stockwatch.database.session import SessionLocal, get_db

__all__ = ["Base", "SessionLocal", "build_engine", "engine", "get_db", "init_db"]
