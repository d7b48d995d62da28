"""
Schemas de usuários e autenticação.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.usuario import PerfilUsuario
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin, somente_digitos


class UsuarioBase(BaseSchema):
    """Campos base do usuário."""

    email: EmailStr
    nome: str = Field(..., min_length=2, max_length=255)
    cpf: str | None = Field(None, pattern=r"^\d{11}$")
    telefone: str | None = Field(None, max_length=20)
    perfil: PerfilUsuario = PerfilUsuario.SECRETARIA

    @field_validator("cpf", mode="before")
    @classmethod
    def normalizar_cpf(cls, v: str | None) -> str | None:
        return somente_digitos(v) or None


class UsuarioCreate(UsuarioBase):
    senha: str = Field(..., min_length=8, description="Senha do usuário")


class UsuarioUpdate(BaseSchema):
    """Schema para atualização parcial de usuário."""

    nome: str | None = Field(None, min_length=2, max_length=255)
    telefone: str | None = Field(None, max_length=20)
    perfil: PerfilUsuario | None = None
    ativo: bool | None = None
    senha: str | None = Field(None, min_length=8)


class UsuarioResponse(UsuarioBase, IDMixin, TimestampMixin):
    prefeitura_id: int
    ativo: bool


class LoginRequest(BaseModel):
    """Login da equipe: ``identifier`` é o email (ou CPF) do usuário."""

    identifier: str = Field(..., min_length=3)
    senha: str = Field(..., min_length=1)


class SuperAdminLoginRequest(BaseModel):
    email: EmailStr
    senha: str = Field(..., min_length=1)


class SuperAdminResponse(BaseSchema, IDMixin):
    nome: str
    email: str


class TokenResponse(BaseModel):
    """Token emitido no login."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    usuario: UsuarioResponse | None = None
    super_admin: SuperAdminResponse | None = None
