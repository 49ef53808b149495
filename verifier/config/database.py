"""Database engine and session factory."""
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from verifier.config.settings import settings


def create_engine(
    database_url: str | None = None,
    echo: bool | None = None,
    null_pool: bool = False,
):
    """
    Create the async engine for the ledger store.

    Args:
        database_url: Override for settings.database_url
        echo: Override for settings.database_echo
        null_pool: Open a fresh connection per session (scripts, one-off tasks)
    """
    kwargs = {}
    if null_pool:
        kwargs["poolclass"] = NullPool
    else:
        kwargs["pool_pre_ping"] = True

    return create_async_engine(
        database_url or settings.async_database_url,
        echo=settings.database_echo if echo is None else echo,
        **kwargs,
    )


def create_session_maker(engine=None):
    """Create the session maker bound to the ledger engine."""
    if engine is None:
        engine = create_engine()
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
