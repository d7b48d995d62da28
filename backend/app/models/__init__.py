"""
Modelos SQLAlchemy da Agenda CIN.

Importa todos os modelos para garantir que são registrados no metadata.
"""

from app.models.agenda import DataBloqueada, HorarioConfig, LocalAtendimento, TipoBloqueio
from app.models.agendamento import (
    STATUS_LIBERAM_VAGA,
    Agendamento,
    Prioridade,
    StatusAgendamento,
    TipoCIN,
)
from app.models.cpf_bloqueio import CodigoCancelamento, CpfBloqueio, CpfCancelamento
from app.models.localidade import Bairro, LocalidadeOrigem, TipoLocalidade
from app.models.prefeitura import Prefeitura
from app.models.usuario import PerfilUsuario, SuperAdmin, Usuario

__all__ = [
    # Prefeitura e usuários
    "Prefeitura",
    "Usuario",
    "PerfilUsuario",
    "SuperAdmin",
    # Localidades
    "LocalidadeOrigem",
    "Bairro",
    "TipoLocalidade",
    # Agenda
    "LocalAtendimento",
    "HorarioConfig",
    "DataBloqueada",
    "TipoBloqueio",
    # Agendamento
    "Agendamento",
    "StatusAgendamento",
    "Prioridade",
    "TipoCIN",
    "STATUS_LIBERAM_VAGA",
    # Política de CPF
    "CpfCancelamento",
    "CpfBloqueio",
    "CodigoCancelamento",
]
