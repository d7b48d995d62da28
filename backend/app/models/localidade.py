"""
Localidades de origem (sede, distritos, povoados) e seus bairros.

O bairro referencia a localidade pela chave composta (id, prefeitura_id),
então não existe bairro apontando para localidade de outra prefeitura.
"""

import enum

from sqlalchemy import ForeignKeyConstraint, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import MultiTenantBase, PgEnum


class TipoLocalidade(str, enum.Enum):
    SEDE = "sede"
    DISTRITO = "distrito"
    POVOADO = "povoado"


class LocalidadeOrigem(MultiTenantBase):
    """Região de onde o cidadão vem (sede do município ou distrito)."""

    __tablename__ = "localidades_origem"
    __table_args__ = (
        UniqueConstraint("prefeitura_id", "nome", name="uq_localidades_prefeitura_nome"),
        UniqueConstraint("id", "prefeitura_id", name="uq_localidades_id_prefeitura"),
    )

    nome: Mapped[str] = mapped_column(String(150), nullable=False)
    tipo: Mapped[TipoLocalidade] = mapped_column(
        PgEnum(TipoLocalidade, name="tipo_localidade"),
        default=TipoLocalidade.DISTRITO,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<LocalidadeOrigem(id={self.id}, nome='{self.nome}')>"


class Bairro(MultiTenantBase):
    """Bairro pertencente a uma localidade da mesma prefeitura."""

    __tablename__ = "bairros"
    __table_args__ = (
        ForeignKeyConstraint(
            ["localidade_id", "prefeitura_id"],
            ["localidades_origem.id", "localidades_origem.prefeitura_id"],
            ondelete="CASCADE",
            name="fk_bairros_localidade_mesma_prefeitura",
        ),
        UniqueConstraint("localidade_id", "nome", name="uq_bairros_localidade_nome"),
    )

    localidade_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    nome: Mapped[str] = mapped_column(String(150), nullable=False)

    def __repr__(self) -> str:
        return f"<Bairro(id={self.id}, nome='{self.nome}', localidade_id={self.localidade_id})>"
