"""Repositories - Data Access Layer."""

from app.repositories.agenda_repository import (
    DataBloqueadaRepository,
    HorarioConfigRepository,
    LocalAtendimentoRepository,
)
from app.repositories.agendamento_repository import AgendamentoRepository
from app.repositories.base import BaseRepository, MultiTenantRepository
from app.repositories.cpf_bloqueio_repository import (
    CodigoCancelamentoRepository,
    CpfBloqueioRepository,
    CpfCancelamentoRepository,
)
from app.repositories.localidade_repository import BairroRepository, LocalidadeRepository
from app.repositories.prefeitura_repository import PrefeituraRepository
from app.repositories.usuario_repository import SuperAdminRepository, UsuarioRepository

__all__ = [
    # Base
    "BaseRepository",
    "MultiTenantRepository",
    # Entidades
    "PrefeituraRepository",
    "UsuarioRepository",
    "SuperAdminRepository",
    "LocalidadeRepository",
    "BairroRepository",
    "LocalAtendimentoRepository",
    "HorarioConfigRepository",
    "DataBloqueadaRepository",
    "AgendamentoRepository",
    "CpfCancelamentoRepository",
    "CpfBloqueioRepository",
    "CodigoCancelamentoRepository",
]
