from supabase import create_client
import logging
import threading
from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.exc import SQLAlchemyError
from config import Config

logger = logging.getLogger(__name__)


def make_engine(db_path):
    """Create an engine for a SQLite file usable from Flask's request threads."""
    return create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )


# Local (on-device) store. Base must exist before the models import it.
engine = make_engine(Config.LOCAL_DB_PATH)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db(bind=None):
    """Create the local tables if they do not exist yet."""
    # Register the models on Base.metadata
    import models  # noqa: F401
    target = bind if bind is not None else engine
    Base.metadata.create_all(bind=target)
    logger.info(f"Local store ready at {target.url}")


# Context manager for SQLAlchemy sessions
@contextmanager
def get_db_session(session_factory=None):
    """Provide a transactional scope around a series of SQLAlchemy operations."""
    db = (session_factory or SessionLocal)()
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"SQLAlchemy Session Error: {e}")
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"General Session Error: {e}")
        raise
    finally:
        db.close()


# --- Remote store (Supabase): Bible content and the annotation mirror ---
_remote_lock = threading.Lock()
_remote = None


class RemoteStore:
    """Lazily created Supabase client. Nothing connects until first use."""

    def __init__(self, url=None, key=None):
        self.url = url or Config.SUPABASE_URL
        self.key = key or Config.SUPABASE_SERVICE_KEY
        self._client = None

    @property
    def client(self):
        if self._client is None:
            if not self.url or not self.key:
                raise ValueError("SUPABASE_URL or SUPABASE_SERVICE_KEY not set")
            logger.info(f"Connecting to Supabase at {self.url}")
            self._client = create_client(self.url, self.key)
        return self._client


def get_supabase():
    """Shared Supabase client for the process."""
    global _remote
    with _remote_lock:
        if _remote is None:
            _remote = RemoteStore()
    return _remote.client
