"""
Configuração da agenda: locais de atendimento, horários e datas bloqueadas.
"""

import enum
from datetime import date
from typing import Any

from sqlalchemy import Boolean, CheckConstraint, Date, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import JSONType, MultiTenantBase, PgEnum


class LocalAtendimento(MultiTenantBase):
    """Posto onde o cidadão é atendido."""

    __tablename__ = "locais_atendimento"
    __table_args__ = (
        UniqueConstraint("id", "prefeitura_id", name="uq_locais_id_prefeitura"),
    )

    nome_local: Mapped[str] = mapped_column(String(255), nullable=False)
    endereco: Mapped[str | None] = mapped_column(Text)
    link_mapa: Mapped[str | None] = mapped_column(String(500))
    ativo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<LocalAtendimento(id={self.id}, nome_local='{self.nome_local}')>"


class HorarioConfig(MultiTenantBase):
    """Grade de horários e capacidade de atendimento da prefeitura."""

    __tablename__ = "horarios_config"
    __table_args__ = (
        UniqueConstraint("prefeitura_id", name="uq_horarios_config_prefeitura"),
    )

    # Lista de "HH:MM"
    horarios_disponiveis: Mapped[list[Any]] = mapped_column(JSONType, nullable=False, default=list)
    max_agendamentos_por_horario: Mapped[int] = mapped_column(Integer, default=2, nullable=False)
    periodo_liberado_dias: Mapped[int] = mapped_column(Integer, default=60, nullable=False)


class TipoBloqueio(str, enum.Enum):
    DIA_INTEIRO = "full-day"
    HORARIOS_ESPECIFICOS = "specific-times"


class DataBloqueada(MultiTenantBase):
    """
    Data indisponível para novos agendamentos.

    Bloqueio de dia inteiro não tem lista de horários; bloqueio parcial
    sempre tem. A regra é garantida por CHECK no banco.
    """

    __tablename__ = "datas_bloqueadas"
    __table_args__ = (
        CheckConstraint(
            "(tipo_bloqueio = 'full-day' AND horarios_bloqueados IS NULL) OR "
            "(tipo_bloqueio = 'specific-times' AND horarios_bloqueados IS NOT NULL)",
            name="ck_datas_bloqueadas_horarios",
        ),
    )

    data: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    motivo: Mapped[str | None] = mapped_column(String(255))
    tipo_bloqueio: Mapped[TipoBloqueio] = mapped_column(
        PgEnum(TipoBloqueio, name="tipo_bloqueio", native_enum=False, length=20),
        default=TipoBloqueio.DIA_INTEIRO,
        nullable=False,
    )
    horarios_bloqueados: Mapped[list[Any] | None] = mapped_column(JSONType, nullable=True)
    criado_por: Mapped[str | None] = mapped_column(String(255))

    @property
    def dia_inteiro(self) -> bool:
        return self.tipo_bloqueio == TipoBloqueio.DIA_INTEIRO

    def __repr__(self) -> str:
        return f"<DataBloqueada(id={self.id}, data={self.data}, tipo={self.tipo_bloqueio.value})>"
