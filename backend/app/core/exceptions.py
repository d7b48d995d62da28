"""
Exceções customizadas da aplicação.

Define hierarquia de exceções para tratamento consistente de erros.
"""

from datetime import date, datetime
from typing import Any


class AgendaException(Exception):
    """Exceção base da Agenda CIN."""

    # Quando True, `details` vai na resposta mesmo fora do modo DEBUG
    expose_details: bool = False

    def __init__(
        self,
        message: str,
        code: str = "AGENDA_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


# === Exceções de Autenticação ===

class AuthenticationError(AgendaException):
    """Erro de autenticação."""

    def __init__(self, message: str = "Credenciais inválidas"):
        super().__init__(message, code="AUTH_ERROR")


class TokenExpiredError(AuthenticationError):
    """Token JWT expirado."""

    def __init__(self):
        super().__init__("Token expirado")
        self.code = "TOKEN_EXPIRED"


class InvalidTokenError(AuthenticationError):
    """Token JWT inválido."""

    def __init__(self):
        super().__init__("Token inválido")
        self.code = "INVALID_TOKEN"


# === Exceções de Autorização ===

class AuthorizationError(AgendaException):
    """Erro de autorização/permissão."""

    def __init__(self, message: str = "Acesso negado"):
        super().__init__(message, code="AUTHORIZATION_ERROR")


class InsufficientPermissionsError(AuthorizationError):
    """Usuário não tem permissão para a ação."""

    def __init__(self, action: str):
        super().__init__(f"Permissão insuficiente para: {action}")
        self.code = "INSUFFICIENT_PERMISSIONS"


class TenantAccessError(AuthorizationError):
    """Token emitido para outra prefeitura."""

    def __init__(self):
        super().__init__("Acesso não permitido a esta prefeitura")
        self.code = "TENANT_ACCESS_DENIED"


class TenantInactiveError(AuthorizationError):
    """Prefeitura desativada: nenhuma leitura ou escrita é permitida."""

    def __init__(self, slug: str):
        super().__init__("Prefeitura inativa")
        self.code = "TENANT_INACTIVE"
        self.details = {"slug": slug}


class UserInactiveError(AuthorizationError):
    def __init__(self):
        super().__init__("Usuário inativo")
        self.code = "USER_INACTIVE"


class CPFBloqueadoError(AuthorizationError):
    """CPF impedido de agendar por excesso de cancelamentos."""

    expose_details = True

    def __init__(self, data_desbloqueio: datetime, motivo: str | None = None):
        super().__init__(
            "CPF bloqueado para novos agendamentos até "
            f"{data_desbloqueio.strftime('%d/%m/%Y %H:%M')}"
        )
        self.code = "CPF_BLOQUEADO"
        self.details = {
            "data_desbloqueio": data_desbloqueio.isoformat(),
            "motivo": motivo,
        }


# === Exceções de Recursos ===

class ResourceNotFoundError(AgendaException):
    """Recurso não encontrado."""

    def __init__(
        self,
        resource_type: str,
        resource_id: int | str | None = None,
    ):
        message = f"{resource_type} não encontrado"
        if resource_id is not None:
            message = f"{resource_type} com ID {resource_id} não encontrado"
        super().__init__(message, code="NOT_FOUND")
        self.resource_type = resource_type
        self.resource_id = resource_id


class TenantNotFoundError(ResourceNotFoundError):
    def __init__(self, identificador: str):
        super().__init__("Prefeitura")
        self.message = "Prefeitura não encontrada"
        self.code = "TENANT_NOT_FOUND"
        self.details = {"identificador": identificador}


class ResourceAlreadyExistsError(AgendaException):
    """Recurso já existe (conflito)."""

    def __init__(
        self,
        resource_type: str,
        field: str,
        value: str,
    ):
        message = f"{resource_type} com {field}='{value}' já existe"
        super().__init__(message, code="ALREADY_EXISTS")
        self.resource_type = resource_type
        self.field = field
        self.value = value


class SlotConflictError(AgendaException):
    """Horário sem vagas para o local e data solicitados."""

    def __init__(self, data: date, hora: str):
        super().__init__(
            f"Horário {hora} de {data.strftime('%d/%m/%Y')} está lotado",
            code="HORARIO_LOTADO",
        )


# === Exceções de Validação ===

class ValidationError(AgendaException):
    """Erro de validação de dados."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field
        self.errors = errors or []


class InvalidCPFError(ValidationError):
    """CPF inválido."""

    def __init__(self, cpf: str):
        super().__init__(f"CPF inválido: {cpf}", field="cpf")
        self.code = "INVALID_CPF"


# === Exceções de Negócio ===

class BusinessRuleError(AgendaException):
    """Violação de regra de negócio."""

    def __init__(self, message: str, rule: str | None = None):
        super().__init__(message, code=rule or "BUSINESS_RULE_VIOLATION")
        self.rule = rule


class TenantNotIdentifiedError(BusinessRuleError):
    """Requisição sem cabeçalho de prefeitura."""

    def __init__(self):
        super().__init__("Prefeitura não identificada", rule="TENANT_NOT_IDENTIFIED")


class DataBloqueadaError(BusinessRuleError):
    """Data (ou horário) bloqueado pela administração."""

    def __init__(self, data: date, motivo: str | None = None, hora: str | None = None):
        alvo = f"{data.strftime('%d/%m/%Y')} às {hora}" if hora else data.strftime("%d/%m/%Y")
        message = f"Agendamentos indisponíveis em {alvo}"
        if motivo:
            message = f"{message}: {motivo}"
        super().__init__(message, rule="DATA_BLOQUEADA")


class ForaDoPeriodoError(BusinessRuleError):
    def __init__(self, message: str):
        super().__init__(message, rule="FORA_DO_PERIODO")


class HorarioInvalidoError(BusinessRuleError):
    def __init__(self, hora: str):
        super().__init__(f"Horário {hora} não está disponível para agendamento", rule="HORARIO_INVALIDO")


class LocalIndisponivelError(BusinessRuleError):
    def __init__(self, nome_local: str):
        super().__init__(f"Local de atendimento '{nome_local}' está desativado", rule="LOCAL_INATIVO")


class RecursoEmUsoError(BusinessRuleError):
    """Exclusão recusada porque outros registros dependem do recurso."""

    def __init__(self, message: str):
        super().__init__(message, rule="RECURSO_EM_USO")


class CancelamentoNaoPermitidoError(BusinessRuleError):
    def __init__(self, message: str = "Apenas agendamentos pendentes podem ser cancelados"):
        super().__init__(message, rule="CANCELAMENTO_NAO_PERMITIDO")


class CodigoCancelamentoInvalidoError(BusinessRuleError):
    def __init__(self, message: str = "Código inválido ou expirado"):
        super().__init__(message, rule="CODIGO_INVALIDO")


# === Exceções de Integração ===

class ExternalServiceError(AgendaException):
    """Erro em serviço externo."""

    def __init__(self, service: str, message: str):
        super().__init__(f"Erro no serviço {service}: {message}", code="EXTERNAL_SERVICE_ERROR")
        self.service = service


class MessagingError(ExternalServiceError):
    """Falha ao entregar mensagem ao cidadão."""

    def __init__(self, message: str):
        super().__init__("whatsapp", message)
        self.code = "MESSAGING_UNAVAILABLE"


class DatabaseUnavailableError(ExternalServiceError):
    def __init__(self, message: str):
        super().__init__("database", message)
        self.code = "DATABASE_UNAVAILABLE"
