"""
Endpoints de Autenticação.

Login da equipe da prefeitura e do super administrador da plataforma.
"""

from fastapi import APIRouter

from app.core.dependencies import DBSession, PrefeituraAtual
from app.schemas.base import APIResponse
from app.schemas.usuario import (
    LoginRequest,
    SuperAdminLoginRequest,
    SuperAdminResponse,
    TokenResponse,
    UsuarioResponse,
)
from app.services.auth_service import AuthService

router = APIRouter(tags=["Autenticação"])


@router.post("/users/login", response_model=APIResponse[TokenResponse])
async def login_usuario(
    request: LoginRequest,
    db: DBSession,
    prefeitura: PrefeituraAtual,
) -> APIResponse[TokenResponse]:
    """
    Login da equipe com email (ou CPF) e senha.

    Retorna token JWT válido apenas para a prefeitura informada no cabeçalho.
    """
    result = await AuthService(db).login_usuario(prefeitura, request.identifier, request.senha)

    return APIResponse(
        success=True,
        data=TokenResponse(
            access_token=result["access_token"],
            token_type=result["token_type"],
            expires_in=result["expires_in"],
            usuario=UsuarioResponse.model_validate(result["usuario"]),
        ),
        message="Login realizado com sucesso",
    )


@router.post("/super-admin/login", response_model=APIResponse[TokenResponse])
async def login_super_admin(
    request: SuperAdminLoginRequest,
    db: DBSession,
) -> APIResponse[TokenResponse]:
    """Login do super admin; não depende de prefeitura."""
    result = await AuthService(db).login_super_admin(request.email, request.senha)

    return APIResponse(
        success=True,
        data=TokenResponse(
            access_token=result["access_token"],
            token_type=result["token_type"],
            expires_in=result["expires_in"],
            super_admin=SuperAdminResponse.model_validate(result["super_admin"]),
        ),
        message="Login realizado com sucesso",
    )
