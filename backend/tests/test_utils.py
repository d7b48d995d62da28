"""
Testes para utilitários e helpers.
"""
import hashlib

import pytest
from jose import jwt
from pydantic import ValidationError

from app.core.cpf import cpf_valido, formatar_cpf, normalizar_cpf
from app.core.logging import mascarar_cpf, mascarar_telefone
from app.core.security import (
    create_access_token,
    get_password_hash,
    is_legacy_hash,
    needs_rehash,
    verify_password,
    verify_token,
)
from app.schemas.agenda import DataBloqueadaCreate, HorarioConfigUpdate
from app.schemas.agendamento import AgendamentoCreate
from app.schemas.base import APIResponse
from app.services.agendamento_service import formatar_protocolo
from app.services.cancelamento_service import gerar_codigo, hash_codigo
from app.services.whatsapp_service import normalizar_telefone


def _hash_legado(senha: str, salt: str = "9f2c4e6a8b0d1f3e") -> str:
    """Hash no formato salt:hexkey do sistema anterior."""
    chave = hashlib.scrypt(senha.encode(), salt=salt.encode(), n=16384, r=8, p=1, dklen=64)
    return f"{salt}:{chave.hex()}"


def test_password_hashing():
    """Testa hash e verificação de senha."""
    password = "my_secure_password"
    hashed = get_password_hash(password)

    assert hashed != password
    assert hashed.startswith("$scrypt$")
    assert verify_password(password, hashed) is True
    assert verify_password("wrong_password", hashed) is False
    assert needs_rehash(hashed) is False


def test_senha_em_texto_plano_nunca_autentica():
    assert verify_password("admin123", "admin123") is False
    assert verify_password("admin123", "") is False
    assert verify_password("admin123", None) is False


def test_hash_legado_valida_e_pede_migracao():
    legado = _hash_legado("senha-antiga")

    assert is_legacy_hash(legado) is True
    assert verify_password("senha-antiga", legado) is True
    assert verify_password("outra-senha", legado) is False
    assert needs_rehash(legado) is True


def test_create_access_token():
    """Testa criação de token JWT."""
    token = create_access_token(subject=42, additional_claims={"prefeitura_id": 7, "perfil": "admin"})

    payload = verify_token(token)
    assert payload is not None
    assert payload["sub"] == "42"
    assert payload["prefeitura_id"] == 7


def test_token_de_outra_chave_invalido():
    token = jwt.encode({"sub": "1"}, "outra-chave", algorithm="HS256")
    assert verify_token(token) is None


def test_api_response_model():
    """Testa modelo de resposta da API."""
    response = APIResponse(success=True, data={"key": "value"}, message="OK")

    assert response.success is True
    assert response.data == {"key": "value"}
    assert response.message == "OK"


@pytest.mark.parametrize(
    "cpf,esperado",
    [
        ("529.982.247-25", True),
        ("11144477735", True),
        ("52998224724", False),
        ("111.111.111-11", False),
        ("123", False),
        ("", False),
    ],
)
def test_cpf_valido(cpf: str, esperado: bool):
    assert cpf_valido(cpf) is esperado


def test_formatacao_cpf():
    assert normalizar_cpf("529.982.247-25") == "52998224725"
    assert formatar_cpf("52998224725") == "529.982.247-25"
    assert mascarar_cpf("52998224725") == "***.982.247-**"


def test_mascara_telefone():
    assert mascarar_telefone("(88) 99999-1234") == "*******1234"
    assert mascarar_telefone(None) is None


def test_normalizar_telefone_com_ddi():
    assert normalizar_telefone("(88) 99999-1234") == "5588999991234"
    assert normalizar_telefone("5588999991234") == "5588999991234"


def test_formato_protocolo():
    assert formatar_protocolo(1) == "AGD-000001"
    assert formatar_protocolo(123456) == "AGD-123456"


def test_codigo_cancelamento():
    codigo = gerar_codigo()
    assert len(codigo) == 6 and codigo.isdigit()
    assert hash_codigo(1, codigo) == hash_codigo(1, codigo)
    assert hash_codigo(1, codigo) != hash_codigo(2, codigo)


def test_bloqueio_dia_inteiro_sem_horarios():
    bloqueio = DataBloqueadaCreate(data="2030-12-25", tipo_bloqueio="full-day", horarios_bloqueados=[])
    assert bloqueio.horarios_bloqueados is None

    with pytest.raises(ValidationError):
        DataBloqueadaCreate(data="2030-12-25", tipo_bloqueio="full-day", horarios_bloqueados=["08:00"])


def test_bloqueio_parcial_exige_horarios():
    with pytest.raises(ValidationError):
        DataBloqueadaCreate(data="2030-12-24", tipo_bloqueio="specific-times")

    bloqueio = DataBloqueadaCreate(
        data="2030-12-24",
        tipo_bloqueio="specific-times",
        horarios_bloqueados=["14:00", "13:00", "14:00"],
    )
    assert bloqueio.horarios_bloqueados == ["13:00", "14:00"]


def test_grade_ordena_horarios():
    grade = HorarioConfigUpdate(horarios_disponiveis=["10:00", "08:00", "10:00"])
    assert grade.horarios_disponiveis == ["08:00", "10:00"]

    with pytest.raises(ValidationError):
        HorarioConfigUpdate(horarios_disponiveis=["8h"])


def test_agendamento_exige_aceite_dos_termos():
    with pytest.raises(ValidationError):
        AgendamentoCreate(
            local_id=1,
            cidadao_nome="Maria do Socorro",
            cidadao_cpf="52998224725",
            data_agendamento="2030-01-10",
            hora_agendamento="09:00",
            aceite_termos=False,
        )
