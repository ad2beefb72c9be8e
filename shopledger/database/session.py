from contextlib import contextmanager

from sqlalchemy.orm import Session, sessionmaker

from shopledger.database.engine import engine

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
    bind=engine,
)


@contextmanager
def session_scope(factory: sessionmaker = SessionLocal):
    """Commit on success, roll back on error, always close."""
    db: Session = factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


__all__ = ["SessionLocal", "session_scope"]
