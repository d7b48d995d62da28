"""
Base class para todos os modelos SQLAlchemy.

Define campos comuns e configurações padrão.
"""

from datetime import datetime, timezone
from typing import Any, Type

from sqlalchemy import JSON, DateTime, Enum as SQLEnum, ForeignKey, Integer, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column

# JSONB no PostgreSQL, JSON genérico nos demais dialetos (ex: SQLite nos testes)
JSONType = JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def PgEnum(enum_class: Type, **kwargs: Any) -> SQLEnum:
    """
    Cria um SQLAlchemy Enum que usa os valores (values) em vez dos nomes (names).

    Exemplo:
        class PerfilUsuario(str, enum.Enum):
            ADMIN = "admin"  # Nome: ADMIN, Valor: admin

        # Sem PgEnum: o banco recebe "ADMIN"
        # Com PgEnum: o banco recebe "admin"
    """
    return SQLEnum(enum_class, values_callable=lambda x: [e.value for e in x], **kwargs)


class Base(DeclarativeBase):
    """
    Classe base para todos os modelos.

    Inclui campos padrão: id, criado_em, atualizado_em
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    criado_em: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )

    atualizado_em: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
    )

    @declared_attr.directive
    @classmethod
    def __tablename__(cls) -> str:
        """Gera nome da tabela automaticamente a partir do nome da classe."""
        name = cls.__name__
        return "".join(
            ["_" + c.lower() if c.isupper() else c for c in name]
        ).lstrip("_")

    def to_dict(self) -> dict[str, Any]:
        """Converte modelo para dicionário."""
        return {
            column.name: getattr(self, column.name)
            for column in self.__table__.columns
        }


class MultiTenantBase(Base):
    """
    Base para modelos com multi-tenancy.

    Todos os modelos que herdam desta classe ficam isolados por prefeitura.
    """

    __abstract__ = True

    prefeitura_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("prefeituras.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
