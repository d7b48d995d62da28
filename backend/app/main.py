"""
Ponto de entrada principal da API Agenda CIN.

Este módulo configura a aplicação FastAPI com todas as rotas,
middlewares e handlers de eventos.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from app.api.router import api_router
from app.core.config import settings
from app.core.logging import setup_logging
from app.core.middleware import RequestContextMiddleware, setup_exception_handlers
from app.db.session import async_session_maker, engine
from app.services.auth_service import AuthService

logger = structlog.get_logger()


async def _garantir_super_admin() -> None:
    if not settings.SUPERADMIN_EMAIL or not settings.SUPERADMIN_PASSWORD:
        return
    try:
        async with async_session_maker() as db:
            await AuthService(db).garantir_super_admin_inicial()
    except SQLAlchemyError as e:
        # Banco ainda sem migrações; a API sobe mesmo assim
        logger.warning("Não foi possível criar o super admin inicial", error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia o ciclo de vida da aplicação."""
    # Startup
    setup_logging()
    logger.info(
        "Iniciando Agenda CIN API",
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
    )
    await _garantir_super_admin()

    yield

    # Shutdown
    await engine.dispose()
    logger.info("Encerrando Agenda CIN API")


def create_application() -> FastAPI:
    """Factory para criar a aplicação FastAPI."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Agendamento da Carteira de Identidade Nacional para prefeituras",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url=f"{settings.API_PREFIX}/docs",
        redoc_url=f"{settings.API_PREFIX}/redoc",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    setup_exception_handlers(app)

    # Rotas
    app.include_router(api_router, prefix=settings.API_PREFIX)

    return app


app = create_application()
