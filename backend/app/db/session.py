"""
Configuração da sessão de banco de dados assíncrona.

Uma única engine com pool por processo; as sessões são emprestadas por
requisição em ``get_db`` e a engine é liberada no shutdown da aplicação.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings


def build_engine(database_url: str | None = None) -> AsyncEngine:
    url = database_url or str(settings.DATABASE_URL)
    kwargs: dict[str, Any] = {
        "echo": settings.DEBUG,
        "pool_pre_ping": True,
    }
    if url.startswith("postgresql"):
        kwargs["pool_size"] = settings.DATABASE_POOL_SIZE
        kwargs["max_overflow"] = settings.DATABASE_MAX_OVERFLOW
        if settings.DATABASE_SSL:
            kwargs["connect_args"] = {"ssl": "require"}
    return create_async_engine(url, **kwargs)


engine = build_engine()

# Session factory
async_session_maker = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)
