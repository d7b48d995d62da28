"""
Modelo do Agendamento.

Cada agendamento reserva uma vaga em (local, data, horário) para a
emissão da Carteira de Identidade Nacional (CIN).
"""

import enum
from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKeyConstraint,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import JSONType, MultiTenantBase, PgEnum


class StatusAgendamento(str, enum.Enum):
    """Ciclo de vida do atendimento."""

    PENDENTE = "pendente"
    CONFIRMADO = "confirmado"
    EM_ATENDIMENTO = "em_atendimento"
    AGUARDANDO_EMISSAO = "aguardando_emissao"
    CIN_PRONTA = "cin_pronta"
    CONCLUIDO = "concluido"
    FALTOU = "faltou"
    CANCELADO = "cancelado"


# Status que não ocupam vaga no horário
STATUS_LIBERAM_VAGA = (StatusAgendamento.CANCELADO, StatusAgendamento.FALTOU)


class Prioridade(str, enum.Enum):
    NORMAL = "normal"
    ALTA = "alta"
    URGENTE = "urgente"


class TipoCIN(str, enum.Enum):
    PRIMEIRA_VIA = "primeira_via"
    SEGUNDA_VIA = "segunda_via"


class Agendamento(MultiTenantBase):
    """Agendamento de atendimento de um cidadão."""

    __tablename__ = "agendamentos"
    __table_args__ = (
        UniqueConstraint("prefeitura_id", "protocolo", name="uq_agendamentos_prefeitura_protocolo"),
        ForeignKeyConstraint(
            ["local_id", "prefeitura_id"],
            ["locais_atendimento.id", "locais_atendimento.prefeitura_id"],
            name="fk_agendamentos_local_mesma_prefeitura",
        ),
        # Contagem de ocupação por vaga
        Index("ix_agendamentos_vaga", "prefeitura_id", "local_id", "data_agendamento", "hora_agendamento"),
    )

    local_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    protocolo: Mapped[str] = mapped_column(String(20), nullable=False)

    # Cidadão
    cidadao_nome: Mapped[str] = mapped_column(String(255), nullable=False)
    cidadao_cpf: Mapped[str] = mapped_column(String(11), nullable=False, index=True)
    telefone: Mapped[str | None] = mapped_column(String(20))
    email: Mapped[str | None] = mapped_column(String(255))
    genero: Mapped[str | None] = mapped_column(String(30))
    tipo_cin: Mapped[TipoCIN] = mapped_column(
        PgEnum(TipoCIN, name="tipo_cin", native_enum=False, length=20),
        default=TipoCIN.PRIMEIRA_VIA,
        nullable=False,
    )
    numero_cin: Mapped[str | None] = mapped_column(String(30))

    # Endereço / origem
    endereco_rua: Mapped[str | None] = mapped_column(String(255))
    endereco_numero: Mapped[str | None] = mapped_column(String(20))
    regiao_tipo: Mapped[str | None] = mapped_column(String(20))
    regiao_nome: Mapped[str | None] = mapped_column(String(150))
    bairro_nome: Mapped[str | None] = mapped_column(String(150))

    # Vaga
    data_agendamento: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    hora_agendamento: Mapped[str] = mapped_column(String(5), nullable=False)

    status: Mapped[StatusAgendamento] = mapped_column(
        PgEnum(StatusAgendamento, name="status_agendamento"),
        default=StatusAgendamento.PENDENTE,
        nullable=False,
        index=True,
    )
    prioridade: Mapped[Prioridade] = mapped_column(
        PgEnum(Prioridade, name="prioridade_agendamento", native_enum=False, length=20),
        default=Prioridade.NORMAL,
        nullable=False,
    )

    # Consentimentos
    aceite_termos: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    aceite_notificacoes: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Anotações internas e trilha de status: listas de objetos JSON
    notas: Mapped[list[Any]] = mapped_column(JSONType, nullable=False, default=list)
    historico_status: Mapped[list[Any]] = mapped_column(JSONType, nullable=False, default=list)

    # Cancelamento / conclusão
    cancelado_por: Mapped[str | None] = mapped_column(String(50))
    motivo_cancelamento: Mapped[str | None] = mapped_column(Text)
    concluido_em: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    concluido_por: Mapped[str | None] = mapped_column(String(255))

    @property
    def ocupa_vaga(self) -> bool:
        return self.status not in STATUS_LIBERAM_VAGA

    def __repr__(self) -> str:
        return f"<Agendamento(id={self.id}, protocolo='{self.protocolo}', status={self.status.value})>"
