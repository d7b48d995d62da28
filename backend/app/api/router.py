"""
Router principal da API.

Agrega todas as rotas organizadas por domínio.
"""

from fastapi import APIRouter

from app.api.endpoints import (
    agendamentos,
    auth,
    bloqueios,
    config,
    datas_bloqueadas,
    health,
    locais,
    localidades,
    prefeituras,
    usuarios,
)

api_router = APIRouter()

# Health check
api_router.include_router(health.router, prefix="/health", tags=["Health"])

# Autenticação
api_router.include_router(auth.router)

# Plataforma (super admin)
api_router.include_router(prefeituras.router)

# Equipe da prefeitura
api_router.include_router(usuarios.router)

# Cadastros da prefeitura
api_router.include_router(locais.router)
api_router.include_router(localidades.router)
api_router.include_router(localidades.bairros_router)
api_router.include_router(config.router)
api_router.include_router(datas_bloqueadas.router)

# Agendamentos e bloqueios de CPF
api_router.include_router(agendamentos.router)
api_router.include_router(bloqueios.router)
