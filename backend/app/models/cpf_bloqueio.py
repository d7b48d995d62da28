"""
Política de cancelamentos por CPF.

Registra cada cancelamento feito pelo cidadão, os bloqueios aplicados a
CPFs reincidentes e os códigos de confirmação enviados por WhatsApp.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import MultiTenantBase, utcnow


class CpfCancelamento(MultiTenantBase):
    """Um cancelamento contabilizado para o CPF."""

    __tablename__ = "cpf_cancelamentos"

    cpf: Mapped[str] = mapped_column(String(11), nullable=False, index=True)
    agendamento_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("agendamentos.id", ondelete="SET NULL"),
    )
    data_cancelamento: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    cancelado_por: Mapped[str] = mapped_column(String(50), default="cidadao", nullable=False)
    motivo: Mapped[str | None] = mapped_column(String(255))


class CpfBloqueio(MultiTenantBase):
    """Bloqueio temporário de novos agendamentos para um CPF."""

    __tablename__ = "cpf_bloqueios"
    __table_args__ = (
        UniqueConstraint("prefeitura_id", "cpf", name="uq_cpf_bloqueios_prefeitura_cpf"),
    )

    cpf: Mapped[str] = mapped_column(String(11), nullable=False)
    data_bloqueio: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    data_desbloqueio: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    motivo: Mapped[str | None] = mapped_column(String(255))
    cancelamentos_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    ativo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<CpfBloqueio(id={self.id}, ativo={self.ativo}, ate={self.data_desbloqueio})>"


class CodigoCancelamento(MultiTenantBase):
    """Código de confirmação vigente para cancelar um agendamento."""

    __tablename__ = "codigos_cancelamento"

    agendamento_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("agendamentos.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    codigo_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    expira_em: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    tentativas: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
