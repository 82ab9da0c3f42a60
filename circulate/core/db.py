import logging
from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.exc import DBAPIError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from circulate.configs import DB_URI, DB_TIMEOUT, DEBUG
from circulate.core.exceptions import TransientStoreError

logger = logging.getLogger(__name__)


class CirculateBase:
    @classmethod
    def get_many(cls, session, offset=None, limit=None, **filters):
        return session.query(cls).filter_by(**filters).order_by(cls.id).offset(offset).limit(limit).all()


Base = declarative_base(cls=CirculateBase)


def engine_options(uri, timeout=DB_TIMEOUT):
    """Keyword arguments for `create_engine`. Every wait on the store, be it
    the pool, a connect, a statement or a lock, is bounded by `timeout`
    seconds. SQLite gets a busy timeout so concurrent writers queue on the
    database lock instead of failing immediately.
    """
    engine_kwargs = {'echo': DEBUG}
    if uri.startswith('sqlite'):
        engine_kwargs['connect_args'] = {'check_same_thread': False, 'timeout': timeout}
        # An in-memory database only exists on the connection that created it
        if ':memory:' in uri or uri in ('sqlite://', 'sqlite:///'):
            engine_kwargs['poolclass'] = StaticPool
    else:
        engine_kwargs['client_encoding'] = 'utf8'
        engine_kwargs['pool_timeout'] = timeout
        engine_kwargs['pool_pre_ping'] = True
        millis = int(timeout * 1000)
        engine_kwargs['connect_args'] = {
            'connect_timeout': max(1, int(timeout)),
            'options': f'-c statement_timeout={millis} -c lock_timeout={millis}',
        }
    return engine_kwargs


def make_engine(uri=DB_URI, timeout=DB_TIMEOUT):
    return create_engine(uri, **engine_options(uri, timeout))


def make_sessionmaker(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def init(engine):
    """Create every table registered on `Base`."""
    # Models must be imported so their tables are registered
    from circulate.core import models  # noqa: F401
    Base.metadata.create_all(bind=engine)


def is_transient(error: Exception) -> bool:
    if isinstance(error, (OperationalError, PoolTimeoutError)):
        return True
    return isinstance(error, DBAPIError) and error.connection_invalidated


@contextmanager
def transaction(sessions):
    """Yields a session inside a transaction; commits on success, rolls back
    on any error and always returns the connection to the pool. Store
    outages and timeouts are re-raised as `TransientStoreError`.
    """
    session = sessions()
    try:
        with session.begin():
            yield session
    except (DBAPIError, PoolTimeoutError) as e:
        if is_transient(e):
            logger.warning(f"Store unavailable: {e}")
            raise TransientStoreError("Store unavailable, please retry.") from e
        raise
    finally:
        session.close()
