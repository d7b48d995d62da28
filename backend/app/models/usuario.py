"""
Modelos de usuários: equipe da prefeitura e super administradores.
"""

import enum

from sqlalchemy import Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, MultiTenantBase, PgEnum


class PerfilUsuario(str, enum.Enum):
    """Perfis da equipe da prefeitura."""

    ADMIN = "admin"  # Configura agenda, locais e equipe
    SECRETARIA = "secretaria"  # Atendimento e gestão de agendamentos


class Usuario(MultiTenantBase):
    """Usuário da equipe de uma prefeitura."""

    __tablename__ = "usuarios"
    __table_args__ = (
        UniqueConstraint("prefeitura_id", "email", name="uq_usuarios_prefeitura_email"),
    )

    nome: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    cpf: Mapped[str | None] = mapped_column(String(11))
    telefone: Mapped[str | None] = mapped_column(String(20))
    senha_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    perfil: Mapped[PerfilUsuario] = mapped_column(
        PgEnum(PerfilUsuario, name="perfil_usuario"),
        default=PerfilUsuario.SECRETARIA,
        nullable=False,
    )
    ativo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.perfil == PerfilUsuario.ADMIN

    def __repr__(self) -> str:
        return f"<Usuario(id={self.id}, email='{self.email}', perfil={self.perfil.value})>"


class SuperAdmin(Base):
    """Administrador da plataforma, gerencia o cadastro de prefeituras."""

    __tablename__ = "super_admins"

    nome: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    senha_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    ativo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<SuperAdmin(id={self.id}, email='{self.email}')>"
