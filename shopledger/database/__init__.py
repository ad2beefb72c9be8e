from shopledger.database.base import Base
from shopledger.database.engine import build_engine, engine
from shopledger.database.session import SessionLocal, session_scope

__all__ = ["Base", "SessionLocal", "build_engine", "engine", "session_scope"]
