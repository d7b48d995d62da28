"""Schemas Pydantic para validação de request/response."""

from app.schemas.agenda import (
    DataBloqueadaCreate,
    DataBloqueadaResponse,
    DisponibilidadeResponse,
    HorarioConfigResponse,
    HorarioConfigUpdate,
    HorarioDisponibilidade,
    LocalAtendimentoCreate,
    LocalAtendimentoResponse,
    LocalAtendimentoUpdate,
)
from app.schemas.agendamento import (
    AgendamentoCidadaoResponse,
    AgendamentoCreate,
    AgendamentoResponse,
    AgendamentoUpdate,
    ConfirmarCancelamentoRequest,
    ConsultaCPFResponse,
    SolicitarCancelamentoResponse,
)
from app.schemas.base import (
    APIResponse,
    BaseSchema,
    ErrorDetail,
    ErrorResponse,
    IDMixin,
    PaginatedResponse,
    TimestampMixin,
)
from app.schemas.cpf_bloqueio import CpfBloqueioResponse, StatusBloqueioResponse
from app.schemas.localidade import (
    BairroCreate,
    BairroResponse,
    BairroUpdate,
    LocalidadeCreate,
    LocalidadeResponse,
    LocalidadeUpdate,
)
from app.schemas.prefeitura import PrefeituraCreate, PrefeituraResponse, PrefeituraUpdate
from app.schemas.usuario import (
    LoginRequest,
    SuperAdminLoginRequest,
    TokenResponse,
    UsuarioCreate,
    UsuarioResponse,
    UsuarioUpdate,
)

__all__ = [
    # Base
    "BaseSchema",
    "IDMixin",
    "TimestampMixin",
    "APIResponse",
    "ErrorDetail",
    "ErrorResponse",
    "PaginatedResponse",
    # Prefeitura e usuários
    "PrefeituraCreate",
    "PrefeituraUpdate",
    "PrefeituraResponse",
    "UsuarioCreate",
    "UsuarioUpdate",
    "UsuarioResponse",
    "LoginRequest",
    "SuperAdminLoginRequest",
    "TokenResponse",
    # Localidades
    "LocalidadeCreate",
    "LocalidadeUpdate",
    "LocalidadeResponse",
    "BairroCreate",
    "BairroUpdate",
    "BairroResponse",
    # Agenda
    "LocalAtendimentoCreate",
    "LocalAtendimentoUpdate",
    "LocalAtendimentoResponse",
    "HorarioConfigUpdate",
    "HorarioConfigResponse",
    "DataBloqueadaCreate",
    "DataBloqueadaResponse",
    "DisponibilidadeResponse",
    "HorarioDisponibilidade",
    # Agendamento
    "AgendamentoCreate",
    "AgendamentoUpdate",
    "AgendamentoResponse",
    "AgendamentoCidadaoResponse",
    "ConsultaCPFResponse",
    "SolicitarCancelamentoResponse",
    "ConfirmarCancelamentoRequest",
    # Bloqueio de CPF
    "StatusBloqueioResponse",
    "CpfBloqueioResponse",
]
