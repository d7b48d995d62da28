"""
Modelo da Prefeitura.

Este é o tenant do sistema - todas as entidades de agenda
pertencem a uma prefeitura específica.
"""

from sqlalchemy import Boolean, CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base

SLUG_PATTERN = r"^[a-z0-9-]+$"


class Prefeitura(Base):
    """Prefeitura (tenant principal)."""

    __tablename__ = "prefeituras"
    __table_args__ = (
        CheckConstraint("char_length(slug) BETWEEN 3 AND 80", name="ck_prefeituras_slug_tamanho").ddl_if(
            dialect="postgresql"
        ),
        CheckConstraint("slug ~ '^[a-z0-9-]+$'", name="ck_prefeituras_slug_formato").ddl_if(
            dialect="postgresql"
        ),
    )

    nome: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(80), unique=True, nullable=False, index=True)
    telefone_contato: Mapped[str | None] = mapped_column(String(20))
    ativo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Último número de protocolo emitido; incrementado atomicamente a cada agendamento
    protocolo_seq: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)

    def __repr__(self) -> str:
        return f"<Prefeitura(id={self.id}, slug='{self.slug}', ativo={self.ativo})>"
