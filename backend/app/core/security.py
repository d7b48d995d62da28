"""
Módulo de segurança: autenticação JWT e hashing de senhas.

Senhas são guardadas com scrypt (passlib). Hashes legados no formato
``salt:hexkey`` gravados pelo sistema anterior (scrypt com N=16384,
r=8, p=1, chave de 64 bytes) continuam válidos e são migrados no login.
"""

import hashlib
import hmac
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings

pwd_context = CryptContext(schemes=["scrypt"], deprecated="auto")

LEGACY_SCRYPT_N = 16384
LEGACY_SCRYPT_R = 8
LEGACY_SCRYPT_P = 1
LEGACY_SCRYPT_KEYLEN = 64


def create_access_token(
    subject: str | Any,
    expires_delta: timedelta | None = None,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    """
    Cria um token JWT de acesso.

    Args:
        subject: Identificador do usuário (id do usuário ou do super admin)
        expires_delta: Tempo de expiração customizado
        additional_claims: Claims adicionais (ex: prefeitura_id, perfil)

    Returns:
        Token JWT codificado
    """
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode: dict[str, Any] = {
        "sub": str(subject),
        "exp": expire,
        "iat": datetime.now(timezone.utc),
    }

    if additional_claims:
        to_encode.update(additional_claims)

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> dict[str, Any] | None:
    """
    Verifica e decodifica um token JWT.

    Returns:
        Payload do token ou None se inválido
    """
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        return payload
    except JWTError:
        return None


def is_legacy_hash(hashed_password: str) -> bool:
    """Formato ``salt:hexkey`` com chave scrypt de 64 bytes."""
    salt, sep, key = hashed_password.partition(":")
    if not sep or not salt or len(key) != LEGACY_SCRYPT_KEYLEN * 2:
        return False
    try:
        bytes.fromhex(key)
    except ValueError:
        return False
    return True


def _verify_legacy(plain_password: str, hashed_password: str) -> bool:
    salt, _, key = hashed_password.partition(":")
    derived = hashlib.scrypt(
        plain_password.encode(),
        salt=salt.encode(),
        n=LEGACY_SCRYPT_N,
        r=LEGACY_SCRYPT_R,
        p=LEGACY_SCRYPT_P,
        dklen=LEGACY_SCRYPT_KEYLEN,
    )
    return hmac.compare_digest(derived, bytes.fromhex(key))


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """
    Verifica se a senha em texto plano corresponde ao hash.

    Valores que não são hashes reconhecidos (ex: senha gravada em texto
    plano) nunca autenticam.
    """
    if not hashed_password:
        return False
    if is_legacy_hash(hashed_password):
        return _verify_legacy(plain_password, hashed_password)
    if pwd_context.identify(hashed_password) is None:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def needs_rehash(hashed_password: str) -> bool:
    """Indica se o hash deve ser regravado no esquema atual."""
    if is_legacy_hash(hashed_password):
        return True
    return pwd_context.needs_update(hashed_password)


def get_password_hash(password: str) -> str:
    """Gera hash scrypt da senha."""
    return pwd_context.hash(password)
