"""
Schemas do Agendamento.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.agendamento import Prioridade, StatusAgendamento, TipoCIN
from app.schemas.base import BaseSchema, Hora, IDMixin, TimestampMixin, somente_digitos


class AgendamentoBase(BaseSchema):
    """Dados informados pelo cidadão no agendamento."""

    local_id: int
    cidadao_nome: str = Field(..., min_length=3, max_length=255)
    cidadao_cpf: str = Field(..., pattern=r"^\d{11}$")
    telefone: str | None = Field(None, max_length=20)
    email: EmailStr | None = None
    genero: str | None = Field(None, max_length=30)
    tipo_cin: TipoCIN = TipoCIN.PRIMEIRA_VIA
    numero_cin: str | None = Field(None, max_length=30)

    endereco_rua: str | None = Field(None, max_length=255)
    endereco_numero: str | None = Field(None, max_length=20)
    regiao_tipo: str | None = Field(None, max_length=20)
    regiao_nome: str | None = Field(None, max_length=150)
    bairro_nome: str | None = Field(None, max_length=150)

    data_agendamento: date
    hora_agendamento: Hora

    @field_validator("cidadao_cpf", mode="before")
    @classmethod
    def normalizar_cpf(cls, v: Any) -> Any:
        """Aceita CPF com ou sem pontuação; guarda só os dígitos."""
        return somente_digitos(v) if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def email_vazio(cls, v: Any) -> Any:
        return v or None


class AgendamentoCreate(AgendamentoBase):
    aceite_termos: bool = Field(..., description="Cidadão precisa aceitar os termos")
    aceite_notificacoes: bool = False

    @field_validator("aceite_termos")
    @classmethod
    def exigir_aceite(cls, v: bool) -> bool:
        if not v:
            raise ValueError("É necessário aceitar os termos de uso")
        return v


class AgendamentoUpdate(BaseSchema):
    """
    Atualização feita pela equipe.

    ``nota`` é acrescentada ao histórico de anotações; mudanças de status
    entram em ``historico_status``.
    """

    status: StatusAgendamento | None = None
    prioridade: Prioridade | None = None
    local_id: int | None = None
    data_agendamento: date | None = None
    hora_agendamento: Hora | None = None

    cidadao_nome: str | None = Field(None, min_length=3, max_length=255)
    telefone: str | None = Field(None, max_length=20)
    email: EmailStr | None = None
    numero_cin: str | None = Field(None, max_length=30)
    endereco_rua: str | None = Field(None, max_length=255)
    endereco_numero: str | None = Field(None, max_length=20)
    bairro_nome: str | None = Field(None, max_length=150)

    nota: str | None = Field(None, min_length=1, max_length=2000)
    motivo_cancelamento: str | None = Field(None, max_length=2000)


class AgendamentoResponse(AgendamentoBase, IDMixin, TimestampMixin):
    """Agendamento completo (visão da equipe)."""

    prefeitura_id: int
    protocolo: str
    status: StatusAgendamento
    prioridade: Prioridade
    aceite_termos: bool
    aceite_notificacoes: bool
    notas: list[dict[str, Any]] = []
    historico_status: list[dict[str, Any]] = []
    cancelado_por: str | None = None
    motivo_cancelamento: str | None = None
    concluido_em: datetime | None = None
    concluido_por: str | None = None


class AgendamentoCidadaoResponse(BaseSchema):
    """Visão reduzida para consultas públicas por CPF."""

    id: int
    protocolo: str
    cidadao_nome: str
    data_agendamento: date
    hora_agendamento: str
    local_id: int
    status: StatusAgendamento
    tipo_cin: TipoCIN
    criado_em: datetime


class ConsultaCPFResponse(BaseModel):
    found: bool
    appointments: list[AgendamentoCidadaoResponse]


class SolicitarCancelamentoResponse(BaseModel):
    enviado: bool
    telefone_mascarado: str
    expira_em_minutos: int
    codigo_desenvolvimento: str | None = Field(
        None, description="Presente apenas fora de produção"
    )


class ConfirmarCancelamentoRequest(BaseModel):
    codigo: str = Field(..., pattern=r"^\d{6}$")
