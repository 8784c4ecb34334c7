import logging
from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()

# Bound by init_db(); every session comes from here
SessionLocal = sessionmaker(autocommit=False, autoflush=False)
engine = None


def init_db(database_url):
    """Create the engine for database_url, bind SessionLocal and create tables."""
    global engine

    # Import models so they are registered with Base
    import models  # noqa: F401

    if engine is not None:
        engine.dispose()

    if database_url.startswith('sqlite'):
        kwargs = {'connect_args': {'check_same_thread': False}}
        if database_url in ('sqlite://', 'sqlite:///:memory:'):
            # One shared connection, otherwise every thread sees its own empty database
            kwargs['poolclass'] = StaticPool
        engine = create_engine(database_url, **kwargs)
    else:
        engine = create_engine(database_url)

    SessionLocal.configure(bind=engine)
    Base.metadata.create_all(bind=engine)
    logger.info(f"Database initialized ({engine.url.get_backend_name()})")
    return engine


@contextmanager
def get_db_session():
    """Provide a transactional scope around a series of SQLAlchemy operations."""
    db = SessionLocal()
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
