"""
Utilitários de CPF.
"""


def normalizar_cpf(cpf: str) -> str:
    """Remove pontuação, mantendo só os dígitos."""
    return "".join(filter(str.isdigit, cpf or ""))


def _digito(base: str) -> int:
    peso = len(base) + 1
    soma = sum(int(d) * (peso - i) for i, d in enumerate(base))
    resto = (soma * 10) % 11
    return 0 if resto == 10 else resto


def cpf_valido(cpf: str) -> bool:
    """
    Confere tamanho e dígitos verificadores.

    Sequências repetidas (000.000.000-00, 111...) passam no cálculo mas
    não são CPFs emitidos.
    """
    numeros = normalizar_cpf(cpf)
    if len(numeros) != 11 or numeros == numeros[0] * 11:
        return False
    return _digito(numeros[:9]) == int(numeros[9]) and _digito(numeros[:10]) == int(numeros[10])


def formatar_cpf(cpf: str) -> str:
    n = normalizar_cpf(cpf)
    if len(n) != 11:
        return cpf
    return f"{n[:3]}.{n[3:6]}.{n[6:9]}-{n[9:]}"
